"""Content store: the persistence collaborator of the comment handler."""

from abc import ABC, abstractmethod

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pycomments.core.config import settings
from pycomments.core.logging import get_logger
from pycomments.db.base import MAX_INTEGER_ID
from pycomments.models.comment import Comment
from pycomments.models.content_item import ContentItem
from pycomments.schemas.comment import CommentSubmission

logger = get_logger(__name__)


class ContentStore(ABC):
    """Looks up content items and stores new comments."""

    @abstractmethod
    async def content_item_exists(self, content_item_id: int) -> bool:
        """Return True if the content item exists and is not deleted."""

    @abstractmethod
    async def comments_open(self, content_item_id: int) -> bool:
        """Return True if the content item accepts new comments."""

    @abstractmethod
    async def get_permalink(self, content_item_id: int) -> str:
        """Return the canonical URL of the content item."""

    @abstractmethod
    async def insert_comment(self, submission: CommentSubmission) -> int | None:
        """
        Store one comment in a single write.

        Returns the new comment ID, or None if nothing was stored.
        """


class SQLAlchemyContentStore(ContentStore):
    """Content store backed by the ``content_items`` and ``comments`` tables."""

    def __init__(
        self,
        db: AsyncSession,
        site_url: str | None = None,
        permalink_template: str | None = None,
    ) -> None:
        self.db = db
        self.site_url = site_url if site_url is not None else settings.site_url
        self.permalink_template = permalink_template or settings.permalink_template

    async def _get_content_item(self, content_item_id: int) -> ContentItem | None:
        # IDs outside the column range can never match a row
        if not 0 < content_item_id <= MAX_INTEGER_ID:
            return None
        item = await self.db.get(ContentItem, content_item_id)
        if item is None or item.is_deleted:
            return None
        return item

    async def content_item_exists(self, content_item_id: int) -> bool:
        return await self._get_content_item(content_item_id) is not None

    async def comments_open(self, content_item_id: int) -> bool:
        item = await self._get_content_item(content_item_id)
        return item is not None and item.comments_open

    async def get_permalink(self, content_item_id: int) -> str:
        item = await self._get_content_item(content_item_id)
        slug = item.slug if item is not None else ""
        return self.permalink_template.format(
            site_url=self.site_url,
            id=content_item_id,
            slug=slug,
        )

    async def insert_comment(self, submission: CommentSubmission) -> int | None:
        comment = Comment(
            content_item_id=submission.content_item_id,
            author_name=submission.author_name,
            author_email=submission.author_email,
            author_url=submission.author_url,
            author_ip=submission.author_ip,
            user_agent=submission.user_agent,
            content=submission.body,
            comment_type=submission.comment_type,
            parent_id=submission.parent_comment_id,
            user_id=submission.submitter_user_id,
            moderation_state=submission.moderation_state.value,
        )
        self.db.add(comment)
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(
                "Failed to store comment",
                extra={"content_item_id": submission.content_item_id},
            )
            return None

        return comment.id
