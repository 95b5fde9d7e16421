from __future__ import annotations

from datetime import timedelta

import pytest
from sqlmodel import select

from lumo_tasks.core.security import verify_password
from lumo_tasks.errors import NotFoundError, UnauthenticatedError, ValidationError
from lumo_tasks.models import DEFAULT_LIST_TITLE, Task, TaskList, User
from lumo_tasks.models.common import utcnow
from lumo_tasks.repositories import ListRepository, UserRepository
from lumo_tasks.services import AccountService, TaskService
from lumo_tasks.services.accounts import INVALID_CREDENTIALS, INVALID_RESET_TOKEN

pytestmark = pytest.mark.asyncio

NEW_PASSWORD = "N3w!Password"


def _registration(email: str = "ana@example.com", password: str = "Str0ng!Pass") -> dict:
    return {
        "first_name": "Ana",
        "last_name": "Lopez",
        "age": 24,
        "email": email,
        "password": password,
        "confirm_password": password,
    }


async def test_register_creates_user_with_default_list(account_service: AccountService, session) -> None:
    user = await account_service.register(_registration())

    assert user.hashed_password != "Str0ng!Pass"
    assert verify_password("Str0ng!Pass", user.hashed_password)
    lists = await ListRepository(session).list_for_user(user.id)
    assert [task_list.title for task_list in lists] == [DEFAULT_LIST_TITLE]


async def test_register_is_atomic_when_default_list_fails(
    account_service: AccountService,
    session,
    monkeypatch,
) -> None:
    async def _explode(self, data):
        raise RuntimeError("list store unavailable")

    monkeypatch.setattr(ListRepository, "create", _explode)

    with pytest.raises(RuntimeError):
        await account_service.register(_registration())

    assert await UserRepository(session).find_by_email("ana@example.com") is None
    assert (await session.exec(select(TaskList))).all() == []


async def test_register_rejects_mismatched_confirmation(account_service: AccountService) -> None:
    payload = _registration()
    payload["confirm_password"] = "Different!1"
    with pytest.raises(ValidationError) as exc_info:
        await account_service.register(payload)
    assert exc_info.value.message == "Passwords do not match."


async def test_login_failures_share_one_message(account_service: AccountService) -> None:
    await account_service.register(_registration())

    with pytest.raises(UnauthenticatedError) as unknown_email:
        await account_service.login("nobody@example.com", "Str0ng!Pass")
    with pytest.raises(UnauthenticatedError) as wrong_password:
        await account_service.login("ana@example.com", "Wr0ng!Pass")

    assert unknown_email.value.message == wrong_password.value.message == INVALID_CREDENTIALS
    assert unknown_email.value.status_code == wrong_password.value.status_code == 401


async def test_login_requires_both_fields(account_service: AccountService) -> None:
    with pytest.raises(ValidationError):
        await account_service.login("", "Str0ng!Pass")


async def test_update_profile_rehashes_password(account_service: AccountService) -> None:
    user = await account_service.register(_registration())
    updated = await account_service.update_profile(
        user.id,
        {"first_name": "Ann", "password": NEW_PASSWORD, "confirm_password": NEW_PASSWORD},
    )

    assert updated.first_name == "Ann"
    assert updated.last_name == "Lopez"
    assert verify_password(NEW_PASSWORD, updated.hashed_password)
    token = await account_service.login("ana@example.com", NEW_PASSWORD)
    assert token.token


async def test_delete_account_removes_everything_owned(account_service: AccountService, session) -> None:
    user = await account_service.register(_registration())
    user_id = user.id
    default_list = (await ListRepository(session).list_for_user(user_id))[0]
    await TaskService(session).create_task(user_id, {"title": "Pack", "list_id": default_list.id})

    await account_service.delete_account(user_id)

    assert await UserRepository(session).read(user_id) is None
    assert (await session.exec(select(TaskList).where(TaskList.user_id == user_id))).all() == []
    assert (await session.exec(select(Task).where(Task.user_id == user_id))).all() == []
    with pytest.raises(NotFoundError):
        await account_service.delete_account(user_id)


async def test_forgot_password_stores_only_a_digest(account_service: AccountService, mailer, session) -> None:
    user = await account_service.register(_registration())

    await account_service.forgot_password("ANA@example.com")

    raw_token = mailer.last_reset_token()
    stored = await session.get(User, user.id)
    assert stored.reset_password_token is not None
    assert stored.reset_password_token != raw_token
    assert stored.reset_password_expires is not None
    assert mailer.sent[-1].recipient == "ana@example.com"
    assert "https://front.example.com/reset-password/?token=" in mailer.sent[-1].html_body


async def test_forgot_password_for_unknown_email(account_service: AccountService, mailer) -> None:
    with pytest.raises(NotFoundError):
        await account_service.forgot_password("ghost@example.com")
    assert mailer.sent == []


async def test_reset_password_consumes_the_token(account_service: AccountService, mailer, session) -> None:
    user = await account_service.register(_registration())
    await account_service.forgot_password("ana@example.com")
    raw_token = mailer.last_reset_token()

    await account_service.reset_password(
        raw_token,
        {"password": NEW_PASSWORD, "confirm_password": NEW_PASSWORD},
    )

    stored = await session.get(User, user.id)
    assert stored.reset_password_token is None
    assert stored.reset_password_expires is None
    assert verify_password(NEW_PASSWORD, stored.hashed_password)
    assert mailer.sent[-1].subject == "Your password has been changed"

    with pytest.raises(ValidationError) as exc_info:
        await account_service.reset_password(
            raw_token,
            {"password": "An0ther!Pass", "confirm_password": "An0ther!Pass"},
        )
    assert exc_info.value.message == INVALID_RESET_TOKEN


async def test_reset_with_expired_token_keeps_password(account_service: AccountService, mailer, session) -> None:
    user = await account_service.register(_registration())
    await account_service.forgot_password("ana@example.com")
    raw_token = mailer.last_reset_token()

    stored = await session.get(User, user.id)
    stored.reset_password_expires = utcnow() - timedelta(minutes=1)
    await session.commit()

    with pytest.raises(ValidationError) as exc_info:
        await account_service.reset_password(
            raw_token,
            {"password": NEW_PASSWORD, "confirm_password": NEW_PASSWORD},
        )

    assert exc_info.value.message == INVALID_RESET_TOKEN
    await session.refresh(stored)
    assert verify_password("Str0ng!Pass", stored.hashed_password)
    assert not verify_password(NEW_PASSWORD, stored.hashed_password)


async def test_reset_mismatch_fails_before_token_lookup(account_service: AccountService) -> None:
    with pytest.raises(ValidationError) as exc_info:
        await account_service.reset_password(
            "unknown-token",
            {"password": NEW_PASSWORD, "confirm_password": "Other!Pass1"},
        )
    assert exc_info.value.message == "Passwords do not match."


async def test_mail_failure_is_reported(account_service: AccountService, mailer) -> None:
    await account_service.register(_registration())
    mailer.fail_with = ConnectionError("smtp down")

    with pytest.raises(ConnectionError):
        await account_service.forgot_password("ana@example.com")
