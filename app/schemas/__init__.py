"""Pydantic schemas para validação."""

from .auth import LoginRequest, TokenClaims, TokenResponse
from .user import UserCreate, UserListResponse, UserResponse

__all__ = [
    "UserCreate",
    "UserResponse",
    "UserListResponse",
    "LoginRequest",
    "TokenClaims",
    "TokenResponse",
]
