"""Security helpers for password hashing, JWT access tokens and reset tokens."""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import Settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(slots=True)
class GeneratedToken:
    """Represents a generated JWT token with associated metadata."""

    token: str
    expires_at: datetime
    jti: str


@dataclass(slots=True)
class ResetToken:
    """A freshly issued password reset token.

    ``token`` is the raw value mailed to the user; only ``digest`` is persisted.
    """

    token: str
    digest: str
    expires_at: datetime


def get_password_hash(password: str) -> str:
    """Return a hashed representation of ``password``."""

    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hashed counterpart."""

    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    *,
    subject: str | int,
    email: str,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> GeneratedToken:
    """Create a signed JWT access token carrying the user id and email."""

    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    expire = now + expires_delta
    payload: dict[str, Any] = {
        "sub": str(subject),
        "email": email,
        "iat": now,
        "exp": expire,
        "jti": uuid4().hex,
    }
    token = jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return GeneratedToken(token=token, expires_at=expire, jti=payload["jti"])


def decode_token(*, token: str, secret: str, algorithm: str) -> dict[str, Any]:
    """Decode a JWT token and return its payload."""

    return jwt.decode(token, secret, algorithms=[algorithm])


def hash_reset_token(raw: str) -> str:
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def generate_reset_token(settings: Settings, *, now: datetime | None = None) -> ResetToken:
    """Issue a random, URL-safe password reset token and its expiry."""

    issued_at = now or datetime.now(timezone.utc)
    raw = secrets.token_urlsafe(32)
    return ResetToken(
        token=raw,
        digest=hash_reset_token(raw),
        expires_at=issued_at + timedelta(minutes=settings.password_reset_expire_minutes),
    )


__all__ = [
    "GeneratedToken",
    "JWTError",
    "ResetToken",
    "create_access_token",
    "decode_token",
    "generate_reset_token",
    "get_password_hash",
    "hash_reset_token",
    "verify_password",
]
