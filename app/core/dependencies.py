"""Dependências FastAPI para autenticação."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.database import get_db
from app.core.security import decode_access_token
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.auth import TokenClaims
from app.utils.errors import InvalidOrExpiredTokenError, MalformedCredentialError

BEARER_SCHEME = "bearer"


def extract_bearer_token(authorization: str | None) -> str:
    """
    Extrai o token do header Authorization.

    O header deve ter exatamente dois segmentos: o esquema "Bearer"
    (sem diferenciar maiúsculas) e um token não vazio.

    Raises:
        MalformedCredentialError: Header ausente, esquema errado, token
            vazio ou segmentos extras.
    """
    if authorization is None or not authorization.strip():
        raise MalformedCredentialError("Token não encontrado")

    parts = authorization.split(" ")
    if len(parts) != 2:
        raise MalformedCredentialError()

    scheme, token = parts
    if scheme.lower() != BEARER_SCHEME or not token:
        raise MalformedCredentialError()

    return token


async def get_current_claims(
    request: Request,
    authorization: Annotated[str | None, Header(include_in_schema=False)] = None,
) -> TokenClaims:
    """
    Dependency que protege rotas com token Bearer.

    Extrai e valida o token; em caso de sucesso os claims ficam em
    request.state.claims. Qualquer falha encerra a requisição com 401.

    Returns:
        TokenClaims: Claims do token válido.
    """
    try:
        token = extract_bearer_token(authorization)
        claims = decode_access_token(token)
    except (MalformedCredentialError, InvalidOrExpiredTokenError) as e:
        print(f"⛔ [AUTH] Acesso negado a {request.url.path}: {e.code}")
        raise

    request.state.claims = claims
    return claims


async def get_current_user(
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Dependency para obter o usuário atual a partir do token JWT.

    Raises:
        InvalidOrExpiredTokenError: Se o sub não for um ID válido ou o
            usuário não existir mais.
    """
    try:
        user_id = UUID(claims.sub)
    except ValueError:
        raise InvalidOrExpiredTokenError("Token inválido") from None

    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise InvalidOrExpiredTokenError("Token inválido")

    return user
