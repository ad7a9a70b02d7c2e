"""Entry point da aplicação FastAPI."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config.database import close_db, init_db
from app.config.settings import settings
from app.utils.errors import (
    AppError,
    InvalidOrExpiredTokenError,
    MalformedCredentialError,
    SigningError,
)

# Flag global para indicar se a aplicação está pronta
_app_ready = False

DB_INIT_MAX_RETRIES = 5
DB_INIT_RETRY_DELAY = 2


def check_security_settings() -> None:
    """
    Valida a configuração de segurança no startup.

    Raises:
        SigningError: Se SECRET_KEY não estiver definida.
    """
    if not settings.secret_key:
        raise SigningError("SECRET_KEY não configurada; a aplicação não pode emitir tokens")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Gerencia o ciclo de vida da aplicação.

    Inicializa recursos no startup e limpa no shutdown.
    """
    global _app_ready
    _app_ready = False

    # Startup
    check_security_settings()

    for attempt in range(DB_INIT_MAX_RETRIES):
        try:
            await init_db()
            break
        except Exception as e:
            if attempt < DB_INIT_MAX_RETRIES - 1:
                print(f"⚠️ [STARTUP] Erro ao inicializar banco (tentativa {attempt + 1}/{DB_INIT_MAX_RETRIES}): {e}")
                await asyncio.sleep(DB_INIT_RETRY_DELAY)
            else:
                print(f"❌ [STARTUP] Erro ao inicializar banco após {DB_INIT_MAX_RETRIES} tentativas: {e}")
                raise

    _app_ready = True
    print(f"✅ [STARTUP] {settings.app_name} pronta (token TTL: {settings.access_token_ttl_seconds}s)")

    yield
    # Shutdown
    _app_ready = False
    await close_db()


def create_application() -> FastAPI:
    """Factory para criar a aplicação FastAPI."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Middleware para logar todas as requisições."""
        client = request.client.host if request.client else "unknown"
        print(f"🌐 [MIDDLEWARE] {request.method} {request.url.path} - Client: {client}")
        response = await call_next(request)
        print(f"✅ [MIDDLEWARE] {request.method} {request.url.path} - Status: {response.status_code}")
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    register_exception_handlers(app)

    return app


def _not_ready_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "starting",
            "message": "Aplicação ainda está iniciando",
        },
    )


def register_routes(app: FastAPI) -> None:
    """Registra todas as rotas da aplicação."""

    @app.get("/", tags=["Root"])
    async def root() -> dict:
        """
        Endpoint raiz da aplicação.

        Retorna status 200 quando a aplicação está pronta, 503 se ainda estiver iniciando.
        """
        if not _app_ready:
            return _not_ready_response()

        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.app_version,
            "message": "API de autenticação funcionando!",
        }

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        """Health check; 503 enquanto a aplicação inicia."""
        if not _app_ready:
            return _not_ready_response()

        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.app_version,
        }

    from app.api.routes import auth, profile

    app.include_router(auth.router)
    app.include_router(profile.router)


def register_exception_handlers(app: FastAPI) -> None:
    """Mapeia os erros da aplicação para respostas HTTP."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Handler para erros customizados da aplicação."""
        headers = None
        if isinstance(exc, (MalformedCredentialError, InvalidOrExpiredTokenError)):
            headers = {"WWW-Authenticate": "Bearer"}
        if exc.status_code >= 500:
            print(f"❌ [ERROR] {request.method} {request.url.path}: {exc.code} - {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
            headers=headers,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handler global de exceções."""
        print(f"❌ [ERROR] {request.method} {request.url.path}: {type(exc).__name__}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": "Erro interno do servidor",
                "code": "UNEXPECTED_FAILURE",
                "detail": str(exc) if settings.debug else None,
            },
        )


# Criar aplicação
app = create_application()
