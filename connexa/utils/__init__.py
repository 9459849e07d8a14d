"""Utility helpers for the Connexa backend."""

from .security import (
    AuthenticationError,
    TokenExpiredError,
    TokenPayload,
    create_access_token,
    decode_access_token,
    hash_password,
    refresh_access_token,
    verify_password,
)

__all__ = [
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_access_token",
    "refresh_access_token",
    "AuthenticationError",
    "TokenExpiredError",
    "TokenPayload",
]
