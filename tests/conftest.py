"""
Shared fixtures: in-memory SQLite database, memory store and an HTTP client.
"""
import itertools
import os
import re
from datetime import datetime, timezone
from typing import List, Tuple

os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["STORE_BACKEND"] = "memory"
os.environ["ADMIN_SECRET_KEY"] = "test-admin-secret"

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from api.main import create_app
from config import Settings
from database.connection import Base
from database.kv_store import MemoryStore
from database.models import User
from waitlist.referral_codes import generate_referral_code
from waitlist.roles import Role
from waitlist.services import ReferralService, SmsSender

ADMIN_TOKEN = "test-admin-secret"
LAUNCH_AT = datetime(2026, 1, 15, tzinfo=timezone.utc)


class RecordingSmsSender(SmsSender):
    """Keeps sent messages instead of delivering them."""

    def __init__(self):
        self.sent: List[Tuple[str, str]] = []

    async def send(self, phone: str, message: str) -> None:
        self.sent.append((phone, message))

    def last_code(self) -> str:
        return re.search(r"\b(\d{6})\b", self.sent[-1][1]).group(1)


@pytest.fixture
def app_settings() -> Settings:
    return Settings(
        _env_file=None,
        admin_secret_key=ADMIN_TOKEN,
        launch_at=LAUNCH_AT,
        signup_rate_limit=100,
    )


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def sms_sender() -> RecordingSmsSender:
    return RecordingSmsSender()


@pytest.fixture
def referral_service(session_maker, app_settings) -> ReferralService:
    return ReferralService(session_maker, app_settings)


@pytest.fixture
def create_user(session_maker):
    """Insert a user directly, bypassing signup validation."""
    sequence = itertools.count(1)

    async def _create(**fields) -> User:
        n = next(sequence)
        values = {
            "email": f"user{n}@example.com",
            "first_name": f"User{n}",
            "role": Role.CLIENT,
            "referral_code": generate_referral_code(),
        }
        values.update(fields)
        async with session_maker() as session:
            user = User(**values)
            session.add(user)
            await session.commit()
            await session.refresh(user)
        return user

    return _create


@pytest.fixture
def get_user(session_maker):
    async def _get(user_id: int) -> User:
        async with session_maker() as session:
            return await session.get(User, user_id)

    return _get


@pytest.fixture
def app(app_settings, store, session_maker, sms_sender):
    return create_app(
        app_settings=app_settings,
        store=store,
        session_maker=session_maker,
        sms_sender=sms_sender,
    )


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}
