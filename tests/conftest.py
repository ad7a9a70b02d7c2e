"""Configuração de fixtures para testes."""

import os

# Configuração de teste precisa existir antes de importar a aplicação
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ACCESS_TOKEN_TTL", "1h")

from typing import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from app.config.database import AsyncSessionLocal, drop_db  # noqa: E402
from app.main import app, lifespan  # noqa: E402


@pytest.fixture(scope="function")
async def client() -> AsyncGenerator[AsyncClient, None]:
    """
    Cria um cliente HTTP para testes.

    Executa o lifespan da aplicação (cria as tabelas no SQLite em memória)
    e remove tudo ao final.
    """
    async with lifespan(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
        await drop_db()


@pytest.fixture(scope="function")
async def db_session(client: AsyncClient) -> AsyncGenerator[AsyncSession, None]:
    """Sessão de banco ligada ao mesmo banco usado pelo client."""
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
def user_data() -> dict:
    """Dados padrão de registro."""
    return {
        "name": "alice",
        "email": "alice@x.com",
        "password": "Secret123!",
    }
