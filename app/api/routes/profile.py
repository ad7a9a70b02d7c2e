"""Rotas protegidas por token."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.database import get_db
from app.core.dependencies import get_current_claims, get_current_user
from app.models.user import User
from app.schemas.user import UserListResponse, UserResponse
from app.services.auth_service import AuthService

router = APIRouter(prefix="/api", tags=["Perfil"])


@router.get(
    "/profile",
    response_model=UserResponse,
    summary="Obter perfil",
    description="Retorna os dados do usuário autenticado. Exige token Bearer.",
)
async def get_profile(
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserResponse:
    """Retorna dados do usuário autenticado."""
    return UserResponse.model_validate(current_user)


@router.get(
    "/users",
    response_model=UserListResponse,
    summary="Listar usuários",
    description="Lista os dados públicos de todos os usuários. Exige token Bearer.",
    dependencies=[Depends(get_current_claims)],
)
async def list_users(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserListResponse:
    return await AuthService.list_users(db)
