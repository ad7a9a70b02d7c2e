"""Schemas Pydantic para autenticação."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .user import UserResponse


class TokenClaims(BaseModel):
    """Claims extraídos de um token JWT válido."""

    model_config = ConfigDict(extra="allow")

    sub: str = Field(..., min_length=1, description="ID do usuário")
    iat: int | None = Field(None, description="Emitido em (UNIX timestamp)")
    exp: int = Field(..., description="Expira em (UNIX timestamp)")

    @property
    def extra_claims(self) -> dict[str, Any]:
        """Claims adicionais além de sub/iat/exp."""
        return dict(self.model_extra or {})


class LoginRequest(BaseModel):
    """Schema para requisição de login."""

    email: str = Field(..., min_length=1, max_length=255, description="Email do usuário")
    password: str = Field(..., min_length=1, description="Senha do usuário")


class TokenResponse(BaseModel):
    """Schema de resposta do login."""

    access_token: str = Field(..., description="Access token JWT")
    token_type: str = Field(default="bearer", description="Tipo do token")
    expires_at: datetime = Field(..., description="Instante de expiração do token")
    expires_in: int = Field(..., description="Segundos até a expiração")
    user: UserResponse
