"""
Content item model - the addressable resource comments attach to.

Content items are owned by the host platform. This service only reads
them to check existence and build permalinks.
"""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pycomments.db.base import SoftDeleteModel

if TYPE_CHECKING:
    from pycomments.models.comment import Comment


class ContentItem(SoftDeleteModel):
    """
    Content item model - an article, post or page.

    Soft-deleted items are treated as missing.
    """

    __tablename__ = "content_items"

    slug: Mapped[str] = mapped_column(String(200), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    comments_open: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    comments: Mapped[list["Comment"]] = relationship(
        "Comment",
        back_populates="content_item",
    )

    __table_args__ = (Index("ix_content_items_slug", "slug"),)

    def __repr__(self) -> str:
        return f"<ContentItem {self.id} {self.slug!r}>"
