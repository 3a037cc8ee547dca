"""
Unit tests for SQLAlchemyContentStore.
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pycomments.models.comment import Comment, ModerationState
from pycomments.models.content_item import ContentItem
from pycomments.schemas.comment import CommentSubmission
from pycomments.services.content_store import SQLAlchemyContentStore


@pytest.fixture
def store(db_session: AsyncSession) -> SQLAlchemyContentStore:
    return SQLAlchemyContentStore(db_session, site_url="https://example.com")


@pytest.mark.asyncio
async def test_content_item_exists(store, content_item):
    assert await store.content_item_exists(42) is True
    assert await store.content_item_exists(43) is False


@pytest.mark.asyncio
async def test_deleted_content_item_treated_as_missing(
    store, db_session: AsyncSession, content_item: ContentItem
):
    content_item.soft_delete()
    await db_session.commit()

    assert await store.content_item_exists(42) is False
    assert await store.comments_open(42) is False


@pytest.mark.asyncio
async def test_comments_open_flag(store, db_session: AsyncSession, content_item: ContentItem):
    assert await store.comments_open(42) is True

    content_item.comments_open = False
    await db_session.commit()

    assert await store.comments_open(42) is False


@pytest.mark.asyncio
async def test_default_permalink(store, content_item):
    assert await store.get_permalink(42) == "https://example.com/p/42"


@pytest.mark.asyncio
async def test_permalink_template_with_slug(db_session: AsyncSession, content_item):
    store = SQLAlchemyContentStore(
        db_session,
        site_url="https://blog.example.com",
        permalink_template="{site_url}/{id}/{slug}/",
    )
    assert await store.get_permalink(42) == "https://blog.example.com/42/hello-world/"


@pytest.mark.asyncio
async def test_insert_comment_stores_pending_row(
    store, db_session: AsyncSession, content_item
):
    submission = CommentSubmission(
        content_item_id=42,
        author_name="Jane",
        author_email="jane@example.com",
        author_url="https://jane.example.com",
        body="<b>hello</b>",
        submitter_user_id=7,
        author_ip="203.0.113.9",
        user_agent="pytest",
    )

    comment_id = await store.insert_comment(submission)

    assert comment_id is not None
    comment = await db_session.get(Comment, comment_id)
    assert comment is not None
    assert comment.content_item_id == 42
    assert comment.author_name == "Jane"
    assert comment.author_email == "jane@example.com"
    assert comment.author_url == "https://jane.example.com"
    assert comment.content == "<b>hello</b>"
    assert comment.user_id == 7
    assert comment.parent_id == 0
    assert comment.comment_type == "comment"
    assert comment.author_ip == "203.0.113.9"
    assert comment.moderation_state == ModerationState.PENDING.value


@pytest.mark.asyncio
async def test_insert_failure_returns_none_and_leaves_nothing(
    store, db_session: AsyncSession, content_item, monkeypatch
):
    async def failing_commit() -> None:
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(db_session, "commit", failing_commit)

    submission = CommentSubmission(content_item_id=42, body="hello")
    assert await store.insert_comment(submission) is None

    monkeypatch.undo()
    total = await db_session.scalar(select(func.count()).select_from(Comment))
    assert total == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("content_item_id", [0, -1, 2**31, 2**63])
async def test_out_of_range_ids_treated_as_missing(store, content_item, content_item_id):
    """IDs the integer column can't hold never reach the database."""
    assert await store.content_item_exists(content_item_id) is False
    assert await store.comments_open(content_item_id) is False
