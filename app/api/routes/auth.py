"""Rotas de autenticação."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.database import get_db
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.user import UserCreate, UserResponse
from app.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["Autenticação"])


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar novo usuário",
    description="Cria uma nova conta com a senha armazenada como hash bcrypt.",
)
async def register(
    user_data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    """
    Registra um novo usuário.

    Args:
        user_data: Dados do usuário a ser criado.
        db: Sessão do banco de dados.

    Returns:
        UserResponse: Dados públicos do usuário criado.
    """
    return await AuthService.register_user(user_data, db)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Fazer login",
    description="Autentica um usuário e retorna um token JWT.",
)
async def login(
    login_data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """
    Autentica um usuário.

    Args:
        login_data: Credenciais de login (email e senha).
        db: Sessão do banco de dados.

    Returns:
        TokenResponse: Token JWT, expiração e dados do usuário.
    """
    return await AuthService.authenticate_user(login_data, db)
