"""
Pytest configuration and fixtures for PyComments tests.
"""

import os

# Settings are read at import time, so the test environment must be in
# place before anything from pycomments is imported.
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SITE_URL"] = "https://example.com"
os.environ["SECRET_KEY"] = "test-secret-key-for-nonces"

from collections.abc import AsyncGenerator, Awaitable, Callable, Mapping
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pycomments.api.deps import get_content_store
from pycomments.core.config import settings
from pycomments.core.sanitize import get_sanitizers
from pycomments.core.security import create_access_token, get_nonce_manager
from pycomments.db.base import Base
from pycomments.db.session import get_db
from pycomments.main import app
from pycomments.models.content_item import ContentItem
from pycomments.schemas.comment import CommentSubmission
from pycomments.services.comment import CommentIntakeService
from pycomments.services.content_store import ContentStore

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeContentStore(ContentStore):
    """In-memory content store that records every call made to it."""

    def __init__(self) -> None:
        self.permalinks: dict[int, str] = {42: "https://example.com/p/42"}
        self.closed: set[int] = set()
        self.fail_insert = False
        self.calls: list[tuple[str, Any]] = []
        self.inserted: list[tuple[int, CommentSubmission]] = []
        self._next_id = 100

    async def content_item_exists(self, content_item_id: int) -> bool:
        self.calls.append(("content_item_exists", content_item_id))
        return content_item_id in self.permalinks

    async def comments_open(self, content_item_id: int) -> bool:
        self.calls.append(("comments_open", content_item_id))
        return content_item_id not in self.closed

    async def get_permalink(self, content_item_id: int) -> str:
        self.calls.append(("get_permalink", content_item_id))
        return self.permalinks[content_item_id]

    async def insert_comment(self, submission: CommentSubmission) -> int | None:
        self.calls.append(("insert_comment", submission))
        if self.fail_insert:
            return None
        self._next_id += 1
        self.inserted.append((self._next_id, submission))
        return self._next_id


def make_nonce(user_id: int | None = None, action: str | None = None) -> str:
    """Issue a nonce the way the nonce endpoint does."""
    return get_nonce_manager().create(action or settings.comment_form_action, user_id)


def form_reader(fields: Mapping[str, Any]) -> Callable[[], Awaitable[Mapping[str, Any]]]:
    """Wrap a dict as the coroutine function the intake service reads forms with."""

    async def read_form() -> Mapping[str, Any]:
        return fields

    return read_form


@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory test database per test function."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client backed by the test database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def fake_store() -> FakeContentStore:
    """A fresh in-memory content store with content item 42."""
    return FakeContentStore()


@pytest_asyncio.fixture
async def fake_client(
    client: AsyncClient,
    fake_store: FakeContentStore,
) -> AsyncClient:
    """HTTP client whose comment handler uses the in-memory content store."""
    app.dependency_overrides[get_content_store] = lambda: fake_store
    return client


@pytest.fixture
def intake_service(fake_store: FakeContentStore) -> CommentIntakeService:
    """Comment intake service wired to the in-memory content store."""
    return CommentIntakeService(
        store=fake_store,
        nonces=get_nonce_manager(),
        sanitizers=get_sanitizers(),
    )


@pytest_asyncio.fixture
async def content_item(db_session: AsyncSession) -> ContentItem:
    """Create content item 42."""
    item = ContentItem(id=42, slug="hello-world", title="Hello world")
    db_session.add(item)
    await db_session.commit()
    await db_session.refresh(item)
    return item


@pytest.fixture
def user_headers() -> dict[str, str]:
    """Authentication headers for user 7."""
    return {"Authorization": f"Bearer {create_access_token(7)}"}


@pytest.fixture
def nonce_for() -> Callable[..., str]:
    """Issue nonces: ``nonce_for(user_id=None, action=None)``."""
    return make_nonce


@pytest.fixture
def as_form() -> Callable[[Mapping[str, Any]], Callable[[], Awaitable[Mapping[str, Any]]]]:
    """Wrap a dict as a form reader for the intake service."""
    return form_reader
