"""Core configuration and utilities for PyComments."""

from pycomments.core.config import settings
from pycomments.core.logging import setup_logging

__all__ = ["settings", "setup_logging"]
