"""Password hashing and JWT helpers for the auth boundary."""

from __future__ import annotations

import base64
import hashlib
import hmac
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel, ValidationError

from connexa.config.settings import settings
from connexa.models.user import User

_SALT_BYTES = 16
_ITERATIONS = 120_000


def hash_password(password: str) -> str:
    """Return a salted PBKDF2 hash for the supplied password."""

    salt = os.urandom(_SALT_BYTES)
    derived = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        _ITERATIONS,
    )
    return base64.b64encode(salt + derived).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check whether the provided password matches the stored hash."""

    try:
        decoded = base64.b64decode(hashed.encode("utf-8"), validate=True)
    except (ValueError, TypeError):
        return False

    if len(decoded) <= _SALT_BYTES:
        return False

    salt, stored = decoded[:_SALT_BYTES], decoded[_SALT_BYTES:]
    candidate = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        _ITERATIONS,
    )
    return hmac.compare_digest(candidate, stored)


class AuthenticationError(Exception):
    """Raised when a JWT cannot be decoded or is otherwise invalid."""


class TokenExpiredError(AuthenticationError):
    """Raised when a JWT was valid but its ``exp`` has passed."""


class TokenPayload(BaseModel):
    """Claims embedded in Connexa access tokens."""

    sub: str
    exp: datetime
    iat: datetime | None = None
    email: str | None = None
    course_id: int | None = None

    @property
    def user_id(self) -> int:
        return int(self.sub)


def create_access_token(
    subject: str,
    user: User | None = None,
    expires_delta: Optional[timedelta] = None,
    claims: Optional[dict[str, Any]] = None,
) -> str:
    """Generate a signed JWT access token for the provided subject."""

    now = datetime.now(timezone.utc)
    expires_delta = expires_delta or timedelta(
        minutes=settings.security.access_token_expires_minutes
    )
    to_encode: dict[str, Any] = {
        "sub": subject,
        "exp": now + expires_delta,
        "iat": now,
        "iss": settings.security.jwt_issuer,
        "aud": settings.security.jwt_audience,
    }

    if user is not None:
        to_encode["email"] = user.institutional_email
        to_encode["course_id"] = user.course_id
    if claims:
        to_encode.update(claims)

    secret = settings.security.jwt_secret_key.get_secret_value()
    return jwt.encode(
        to_encode,
        secret,
        algorithm=settings.security.jwt_algorithm,
    )


def decode_access_token(token: str) -> TokenPayload:
    """Decode and validate a JWT access token, returning its payload."""

    secret = settings.security.jwt_secret_key.get_secret_value()
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.security.jwt_algorithm],
            audience=settings.security.jwt_audience,
            issuer=settings.security.jwt_issuer,
        )
        return TokenPayload.model_validate(payload)
    except ExpiredSignatureError as exc:
        raise TokenExpiredError("Authentication token expired") from exc
    except (JWTError, ValidationError) as exc:
        raise AuthenticationError("Invalid authentication token") from exc


def refresh_access_token(token: str) -> str:
    """Issue a new token carrying the identity of a still-valid one."""

    payload = decode_access_token(token)
    return create_access_token(
        subject=payload.sub,
        claims={"email": payload.email, "course_id": payload.course_id},
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
