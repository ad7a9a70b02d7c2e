"""Schemas Pydantic para User."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator


class UserBase(BaseModel):
    """Schema base de usuário."""

    name: str = Field(..., min_length=3, max_length=255, description="Nome do usuário")
    email: EmailStr = Field(..., description="Email do usuário")


class UserCreate(UserBase):
    """Schema para criação de usuário."""

    password: str = Field(
        ...,
        min_length=8,
        max_length=72,
        description="Senha (mínimo 8 caracteres)",
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Remove espaços nas pontas do nome."""
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Nome deve ter ao menos 3 caracteres")
        return v

    @field_validator("password")
    @classmethod
    def check_password_bytes(cls, v: str) -> str:
        """bcrypt só considera os primeiros 72 bytes."""
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Senha deve ter no máximo 72 bytes")
        return v


class UserResponse(UserBase):
    """Schema de resposta pública de usuário (nunca inclui o hash)."""

    id: UUID
    created_at: datetime

    model_config = {"from_attributes": True}


class UserListResponse(BaseModel):
    """Lista de usuários."""

    users: list[UserResponse]
    total: int
