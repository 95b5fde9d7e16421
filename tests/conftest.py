from __future__ import annotations

import re
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass, field
from itertools import count
from urllib.parse import unquote

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel.ext.asyncio.session import AsyncSession

from lumo_tasks.core.config import Settings, get_settings
from lumo_tasks.db import init_db
from lumo_tasks.deps import get_db_session, get_mailer
from lumo_tasks.main import create_app
from lumo_tasks.repositories import ListRepository
from lumo_tasks.services import AccountService

DEFAULT_PASSWORD = "Str0ng!Pass"

_TOKEN_PATTERN = re.compile(r"token=([^\"&<\s]+)")


@dataclass(slots=True)
class SentEmail:
    recipient: str
    subject: str
    html_body: str


@dataclass(slots=True)
class RecordingMailer:
    """Mailer double that keeps every message in memory."""

    sent: list[SentEmail] = field(default_factory=list)
    fail_with: Exception | None = None

    async def send(self, recipient: str, subject: str, html_body: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(SentEmail(recipient, subject, html_body))

    def last_reset_token(self) -> str:
        match = _TOKEN_PATTERN.search(self.sent[-1].html_body)
        assert match is not None, "reset link missing from email"
        return unquote(match.group(1))


@dataclass(slots=True)
class RegisteredUser:
    id: int
    email: str
    password: str
    token: str
    default_list_id: int

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="test",
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret_key="test-secret-key",
        frontend_base_url="https://front.example.com/",
    )


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    engine: AsyncEngine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_db(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def account_service(session: AsyncSession, settings: Settings, mailer: RecordingMailer) -> AccountService:
    return AccountService(session, settings, mailer)


@pytest_asyncio.fixture
async def app(
    session: AsyncSession,
    settings: Settings,
    mailer: RecordingMailer,
) -> AsyncIterator[FastAPI]:
    application = create_app(settings)

    async def _override_db_session() -> AsyncIterator[AsyncSession]:
        yield session

    application.dependency_overrides[get_db_session] = _override_db_session
    application.dependency_overrides[get_settings] = lambda: settings
    application.dependency_overrides[get_mailer] = lambda: mailer
    try:
        yield application
    finally:
        application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as http_client:
        yield http_client


@pytest_asyncio.fixture
async def register_user(
    session: AsyncSession,
    account_service: AccountService,
) -> Callable[..., Awaitable[RegisteredUser]]:
    counter = count()

    async def _factory(*, email: str | None = None, password: str = DEFAULT_PASSWORD) -> RegisteredUser:
        actual_email = email or f"user-{next(counter)}@example.com"
        user = await account_service.register(
            {
                "first_name": "Ana",
                "last_name": "Lopez",
                "age": 30,
                "email": actual_email,
                "password": password,
                "confirm_password": password,
            }
        )
        user_id = user.id
        generated = await account_service.login(actual_email, password)
        default_list = (await ListRepository(session).list_for_user(user_id))[0]
        return RegisteredUser(
            id=user_id,
            email=actual_email,
            password=password,
            token=generated.token,
            default_list_id=default_list.id,
        )

    return _factory

