"""Repositório de usuários sobre SQLAlchemy."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User


class UserRepository:
    """Consultas e escrita de registros de usuário."""

    @staticmethod
    async def find_by_email(db: AsyncSession, email: str) -> User | None:
        """
        Busca usuário pelo email já normalizado.

        Returns:
            User | None: Usuário encontrado ou None.
        """
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: UUID) -> User | None:
        """Busca usuário pelo ID."""
        return await db.get(User, user_id)

    @staticmethod
    async def insert(db: AsyncSession, user: User) -> UUID:
        """
        Persiste um novo usuário.

        Raises:
            sqlalchemy.exc.IntegrityError: Se o email já existir.
        """
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user.id

    @staticmethod
    async def list_all(db: AsyncSession) -> tuple[list[User], int]:
        """Lista todos os usuários ordenados por criação."""
        total = await db.scalar(select(func.count()).select_from(User))
        result = await db.execute(select(User).order_by(User.created_at, User.email))
        return list(result.scalars().all()), total or 0
