"""Shared test fixtures for the pitch deck API test suite."""

import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("APP_ENV", "test")

import uuid  # noqa: E402
from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from pitchdeck.core.database import Base, get_db  # noqa: E402
from pitchdeck.core.security import create_access_token, hash_password  # noqa: E402
from pitchdeck.main import app  # noqa: E402
from pitchdeck.models.core import User  # noqa: E402
from pitchdeck.models.decks import Deck  # noqa: E402
from pitchdeck.models.enums import DeckStatus, UserRole  # noqa: E402
from pitchdeck.services.content_generator import (  # noqa: E402
    ContentGenerationError,
    get_content_generator,
)

SAMPLE_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
OTHER_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")
SAMPLE_DECK_ID = uuid.UUID("00000000-0000-0000-0000-000000000010")
SAMPLE_PASSWORD = "s3cret-pass"


class FakeContentGenerator:
    """Returns queued replies in order; raises when a queued reply is an exception."""

    def __init__(self) -> None:
        self.replies: list[str | Exception] = []
        self.calls: list[dict] = []

    async def generate(
        self,
        prompt: str,
        *,
        system: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> str:
        self.calls.append(
            {
                "prompt": prompt,
                "system": system,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if not self.replies:
            raise ContentGenerationError("no reply queued")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """In-memory SQLite shared across sessions via a single static connection."""
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Session for seeding fixtures. Request handlers get their own sessions."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_generator() -> FakeContentGenerator:
    return FakeContentGenerator()


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    fake_generator: FakeContentGenerator,
) -> AsyncGenerator[AsyncClient]:
    async def _get_db() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_content_generator] = lambda: fake_generator
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


# ── Sample data fixtures ──────────────────────────────────────────────────


def make_user(user_id: uuid.UUID, email: str) -> User:
    return User(
        id=user_id,
        first_name="Ada",
        last_name="Founder",
        email=email,
        password_hash=hash_password(SAMPLE_PASSWORD),
        company_name="Acme Analytics",
        role=UserRole.FOUNDER,
        is_active=True,
    )


def auth_headers(user_id: uuid.UUID) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
async def sample_user(db: AsyncSession) -> User:
    user = make_user(SAMPLE_USER_ID, "founder@example.com")
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def other_user(db: AsyncSession) -> User:
    user = make_user(OTHER_USER_ID, "someone-else@example.com")
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
def headers(sample_user: User) -> dict[str, str]:
    return auth_headers(sample_user.id)


@pytest.fixture
def other_headers(other_user: User) -> dict[str, str]:
    return auth_headers(other_user.id)


@pytest.fixture
async def sample_deck(db: AsyncSession, sample_user: User) -> Deck:
    deck = Deck(
        id=SAMPLE_DECK_ID,
        user_id=sample_user.id,
        title="Acme Seed Round",
        description="Our seed deck",
        startup_info={"name": "Acme", "industry": "SaaS", "stage": "seed"},
        slides=[
            {
                "type": "problem",
                "title": "The Problem",
                "content": {"headline": "Analytics is slow", "keyPoints": ["Manual reports"]},
                "order": 1,
            },
            {
                "type": "solution",
                "title": "Our Solution",
                "content": {"headline": "Instant dashboards", "keyPoints": []},
                "order": 2,
            },
            {
                "type": "ask",
                "title": "The Ask",
                "content": {"headline": "Raising $1M"},
                "order": 3,
            },
        ],
        status=DeckStatus.DRAFT,
    )
    db.add(deck)
    await db.commit()
    return deck
