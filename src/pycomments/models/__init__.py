"""SQLAlchemy models for PyComments."""

from pycomments.models.comment import Comment, ModerationState
from pycomments.models.content_item import ContentItem

__all__ = [
    "Comment",
    "ContentItem",
    "ModerationState",
]
