"""
Comment model - stores comments on content items.

New comments are held for moderation until an external workflow
approves them.
"""

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pycomments.db.base import BaseModel

if TYPE_CHECKING:
    from pycomments.models.content_item import ContentItem


class ModerationState(str, Enum):
    """Whether a comment is publicly visible."""

    PENDING = "pending"
    APPROVED = "approved"
    SPAM = "spam"
    TRASH = "trash"


class Comment(BaseModel):
    """
    Comment model - a comment on a content item.

    Author fields are stored already sanitized. ``user_id`` is the
    submitter's session user, or NULL for anonymous visitors.
    """

    __tablename__ = "comments"

    content_item_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("content_items.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Author
    author_name: Mapped[str] = mapped_column(String(245), nullable=False, default="")
    author_email: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    author_url: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    author_ip: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    user_agent: Mapped[str] = mapped_column(String(254), nullable=False, default="")

    content: Mapped[str] = mapped_column(Text, nullable=False)

    comment_type: Mapped[str] = mapped_column(String(20), nullable=False, default="comment")
    parent_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    user_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    moderation_state: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ModerationState.PENDING.value,
    )

    content_item: Mapped["ContentItem"] = relationship(
        "ContentItem",
        back_populates="comments",
    )

    __table_args__ = (
        Index("ix_comments_content_item", "content_item_id"),
        Index("ix_comments_moderation_state", "moderation_state"),
        Index("ix_comments_content_item_created", "content_item_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Comment {self.id} on content item {self.content_item_id} ({self.moderation_state})>"
