"""Database layer for PyComments."""

from pycomments.db.base import Base
from pycomments.db.session import (
    AsyncSessionLocal,
    engine,
    get_db,
    init_db,
)

__all__ = [
    "Base",
    "AsyncSessionLocal",
    "engine",
    "get_db",
    "init_db",
]
