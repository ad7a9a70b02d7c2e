"""Service layer para autenticação."""

import asyncio
from functools import lru_cache

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import settings
from app.core.security import (
    create_access_token,
    get_password_hash,
    hash_needs_update,
    verify_password,
)
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.user import UserCreate, UserListResponse, UserResponse
from app.utils.errors import DuplicateAccountError, InvalidCredentialsError, UnexpectedFailure


def normalize_email(email: str) -> str:
    """Normaliza o login (trim + minúsculas)."""
    return email.strip().lower()


@lru_cache
def _dummy_password_hash() -> str:
    """Hash usado quando o usuário não existe, para igualar o tempo de resposta."""
    return get_password_hash("dummy-password-for-timing")


def _verify_against_dummy(password: str) -> bool:
    return verify_password(password, _dummy_password_hash())


async def _run_blocking(func, *args):
    """Executa o bcrypt fora do event loop."""
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(None, func, *args)


class AuthService:
    """Service para operações de autenticação."""

    @staticmethod
    async def register_user(user_data: UserCreate, db: AsyncSession) -> UserResponse:
        """
        Registra um novo usuário no sistema.

        Args:
            user_data: Dados do usuário a ser criado.
            db: Sessão do banco de dados.

        Returns:
            UserResponse: Usuário criado (sem o hash da senha).

        Raises:
            DuplicateAccountError: Se já existir conta com o email.
        """
        email = normalize_email(user_data.email)

        try:
            existing_user = await UserRepository.find_by_email(db, email)
        except SQLAlchemyError as e:
            print(f"❌ [AUTH] Erro ao consultar usuário no registro: {e}")
            raise UnexpectedFailure() from e

        if existing_user:
            print(f"⚠️ [AUTH] Registro recusado, conta já existe: {email}")
            raise DuplicateAccountError()

        new_user = User(
            name=user_data.name,
            email=email,
            hashed_password=await _run_blocking(get_password_hash, user_data.password),
        )

        try:
            await UserRepository.insert(db, new_user)
        except IntegrityError:
            # Outro registro com o mesmo email entrou entre a busca e o insert
            await db.rollback()
            print(f"⚠️ [AUTH] Registro recusado, conta já existe: {email}")
            raise DuplicateAccountError() from None
        except SQLAlchemyError as e:
            await db.rollback()
            print(f"❌ [AUTH] Erro ao salvar usuário: {e}")
            raise UnexpectedFailure() from e

        print(f"✅ [AUTH] Usuário registrado: {new_user.id}")
        return UserResponse.model_validate(new_user)

    @staticmethod
    async def authenticate_user(login_data: LoginRequest, db: AsyncSession) -> TokenResponse:
        """
        Autentica um usuário e retorna um token JWT.

        Conta inexistente e senha errada produzem o mesmo erro.

        Args:
            login_data: Credenciais de login.
            db: Sessão do banco de dados.

        Returns:
            TokenResponse: Token JWT, expiração e dados públicos do usuário.

        Raises:
            InvalidCredentialsError: Se as credenciais forem inválidas.
        """
        email = normalize_email(login_data.email)

        try:
            user = await UserRepository.find_by_email(db, email)
        except SQLAlchemyError as e:
            print(f"❌ [AUTH] Erro ao consultar usuário no login: {e}")
            raise UnexpectedFailure() from e

        if user is None:
            await _run_blocking(_verify_against_dummy, login_data.password)
            print(f"⚠️ [AUTH] Login recusado: {email}")
            raise InvalidCredentialsError()

        if not await _run_blocking(verify_password, login_data.password, user.hashed_password):
            print(f"⚠️ [AUTH] Login recusado: {email}")
            raise InvalidCredentialsError()

        if hash_needs_update(user.hashed_password):
            user.hashed_password = await _run_blocking(get_password_hash, login_data.password)
            await db.commit()
            print(f"🔄 [AUTH] Hash atualizado para o custo atual: {user.id}")

        issued = create_access_token(data={"sub": str(user.id), "email": user.email})
        print(f"✅ [AUTH] Login realizado: {user.id}")

        return TokenResponse(
            access_token=issued.token,
            token_type="bearer",
            expires_at=issued.expires_at,
            expires_in=settings.access_token_ttl_seconds,
            user=UserResponse.model_validate(user),
        )

    @staticmethod
    async def list_users(db: AsyncSession) -> UserListResponse:
        """Lista os dados públicos de todos os usuários."""
        users, total = await UserRepository.list_all(db)
        return UserListResponse(
            users=[UserResponse.model_validate(user) for user in users],
            total=total,
        )
