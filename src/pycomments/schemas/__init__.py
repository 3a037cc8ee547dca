"""Schemas for PyComments."""

from pycomments.schemas.comment import CommentSubmission
from pycomments.schemas.nonce import NonceResponse

__all__ = ["CommentSubmission", "NonceResponse"]
