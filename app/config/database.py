"""Configuração do banco de dados com SQLAlchemy assíncrono."""

from typing import Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from .settings import settings


def _engine_options(url: str) -> dict[str, Any]:
    """
    Opções do engine conforme o dialeto.

    SQLite (usado em testes e desenvolvimento local) não aceita as opções
    de pool do PostgreSQL; em memória precisa de uma única conexão
    compartilhada para que as tabelas sejam visíveis entre sessões.
    """
    if url.startswith("sqlite"):
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
    }


# Engine assíncrono do SQLAlchemy
engine = create_async_engine(
    settings.async_database_url,
    echo=settings.debug,
    **_engine_options(settings.async_database_url),
)

# Session factory assíncrona
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Classe base para todos os models SQLAlchemy."""

    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency para obter sessão do banco de dados.

    Yields:
        AsyncSession: Sessão do banco de dados.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Verifica a conexão e cria as tabelas que ainda não existem."""
    # Importa os models para registrá-los no metadata
    from app import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))
        print("✅ [DB] Conexão com banco de dados estabelecida")
        await conn.run_sync(Base.metadata.create_all)
        print("✅ [DB] Tabelas verificadas")


async def drop_db() -> None:
    """Remove todas as tabelas. Usado apenas em testes."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def close_db() -> None:
    """Fecha as conexões do banco de dados."""
    await engine.dispose()
