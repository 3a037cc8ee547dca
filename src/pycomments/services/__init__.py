"""Service layer modules."""

from pycomments.services.comment import CommentIntakeService
from pycomments.services.content_store import ContentStore, SQLAlchemyContentStore

__all__ = [
    "CommentIntakeService",
    "ContentStore",
    "SQLAlchemyContentStore",
]
