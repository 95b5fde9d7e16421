"""Account workflows: registration, login, profile and password recovery."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.config import Settings
from ..core.security import (
    GeneratedToken,
    create_access_token,
    generate_reset_token,
    get_password_hash,
    hash_reset_token,
    pwd_context,
    verify_password,
)
from ..db import unit_of_work
from ..errors import NotFoundError, UnauthenticatedError, ValidationError
from ..models import DEFAULT_LIST_TITLE, User
from ..models.common import ensure_aware, utcnow
from ..repositories import ListRepository, UserRepository
from ..schemas.user import ProfileUpdateRequest, RegistrationRequest, ResetPasswordRequest
from .common import coerce_payload
from .mailer import Mailer, render_email

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Incorrect email or password."
INVALID_RESET_TOKEN = "Invalid or expired token."
USER_NOT_FOUND = "User not found."


class AccountService:
    """High-level account operations for the authenticated (or anonymous) caller."""

    def __init__(self, session: AsyncSession, settings: Settings, mailer: Mailer) -> None:
        self._session = session
        self._settings = settings
        self._mailer = mailer
        self._users = UserRepository(session)
        self._lists = ListRepository(session)

    async def register(self, payload: RegistrationRequest | Mapping[str, Any]) -> User:
        """Create a user together with its default list, atomically."""
        request = coerce_payload(RegistrationRequest, payload)
        async with unit_of_work(self._session):
            user = await self._users.create(
                {
                    "first_name": request.first_name,
                    "last_name": request.last_name,
                    "age": request.age,
                    "email": request.email,
                    "hashed_password": get_password_hash(request.password),
                }
            )
            await self._lists.create({"title": DEFAULT_LIST_TITLE, "user_id": user.id})
        logger.info("Registered user %s", user.id)
        return user

    async def login(self, email: str, password: str) -> GeneratedToken:
        """Exchange credentials for an access token.

        Unknown emails and wrong passwords produce the same error.
        """
        if not email or not password:
            raise ValidationError("Email and password are required.")
        user = await self._users.find_by_email(email)
        if user is None:
            pwd_context.dummy_verify()
            logger.info("Rejected login attempt")
            raise UnauthenticatedError(INVALID_CREDENTIALS)
        if not verify_password(password, user.hashed_password):
            logger.info("Rejected login attempt")
            raise UnauthenticatedError(INVALID_CREDENTIALS)
        return create_access_token(subject=user.id, email=user.email, settings=self._settings)

    async def get_profile(self, user_id: int) -> User:
        user = await self._users.read(user_id)
        if user is None:
            raise NotFoundError(USER_NOT_FOUND)
        return user

    async def update_profile(
        self,
        user_id: int,
        payload: ProfileUpdateRequest | Mapping[str, Any],
    ) -> User:
        """Apply a partial profile update, re-hashing a new password."""
        request = coerce_payload(ProfileUpdateRequest, payload)
        changes = request.model_dump(exclude_unset=True, exclude={"password", "confirm_password"})
        if request.password is not None:
            changes["hashed_password"] = get_password_hash(request.password)
        async with unit_of_work(self._session):
            user = await self.get_profile(user_id)
            if changes:
                user = await self._users.update(user_id, changes)
        logger.info("Updated profile of user %s", user_id)
        return user

    async def delete_account(self, user_id: int) -> None:
        """Remove the user with every list and task it owns."""
        async with unit_of_work(self._session):
            removed = await self._users.delete(user_id)
            if removed is None:
                raise NotFoundError(USER_NOT_FOUND)
        logger.info("Deleted user %s", user_id)

    async def forgot_password(self, email: str) -> None:
        """Issue a reset token and mail the reset link to the user."""
        if not email or not email.strip():
            raise ValidationError("Email is required.")
        user = await self._users.find_by_email(email)
        if user is None:
            raise NotFoundError(USER_NOT_FOUND)
        reset = generate_reset_token(self._settings)
        async with unit_of_work(self._session):
            await self._users.update(
                user.id,
                {
                    "reset_password_token": reset.digest,
                    "reset_password_expires": reset.expires_at,
                },
            )
        logger.info("Issued password reset token for user %s", user.id)
        html = render_email(
            "password_reset_request.html",
            first_name=user.first_name,
            reset_link=self.build_reset_link(reset.token),
            valid_minutes=self._settings.password_reset_expire_minutes,
        )
        await self._send(user.email, "Reset your password", html)

    async def reset_password(
        self,
        token: str,
        payload: ResetPasswordRequest | Mapping[str, Any],
    ) -> None:
        """Set a new password for the holder of a valid, unexpired reset token."""
        request = coerce_payload(ResetPasswordRequest, payload)
        user = await self._users.find_by_reset_token(hash_reset_token(token)) if token else None
        if (
            user is None
            or user.reset_password_expires is None
            or ensure_aware(user.reset_password_expires) <= utcnow()
        ):
            logger.info("Rejected password reset attempt")
            raise ValidationError(INVALID_RESET_TOKEN)
        async with unit_of_work(self._session):
            await self._users.update(
                user.id,
                {
                    "hashed_password": get_password_hash(request.password),
                    "reset_password_token": None,
                    "reset_password_expires": None,
                },
            )
        logger.info("Password reset completed for user %s", user.id)
        html = render_email("password_reset_done.html", first_name=user.first_name)
        await self._send(user.email, "Your password has been changed", html)

    def build_reset_link(self, token: str) -> str:
        return f"{self._settings.frontend_base_url}/reset-password/?token={quote(token)}"

    async def _send(self, recipient: str, subject: str, html_body: str) -> None:
        try:
            await self._mailer.send(recipient, subject, html_body)
        except Exception:
            logger.exception("Could not deliver email %r", subject)
            raise


__all__ = ["AccountService", "INVALID_CREDENTIALS", "INVALID_RESET_TOKEN"]
