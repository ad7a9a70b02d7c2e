"""Camada de acesso a dados."""

from .user_repository import UserRepository

__all__ = ["UserRepository"]
