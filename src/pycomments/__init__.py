"""
PyComments - comment intake service.

Accepts comment form submissions for content items, sanitizes them and
stores them as pending comments awaiting moderation.
"""

__version__ = "0.1.0"
__author__ = "PyComments Team"
__license__ = "MIT"

from pycomments.main import app

__all__ = ["app", "__version__"]
