"""Comment schemas for the intake handler."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from pycomments.models.comment import ModerationState


class CommentSubmission(BaseModel):
    """
    A sanitized comment ready to hand to the content store.

    Built once per request and never mutated. Moderation state and
    parent are fixed: intake never approves or threads a comment.
    """

    model_config = ConfigDict(frozen=True)

    content_item_id: int = Field(..., gt=0, description="Content item the comment is on")
    author_name: str = Field(default="", description="Sanitized author name")
    author_email: str = Field(default="", description="Valid author email or empty")
    author_url: str = Field(default="", description="Absolute author URL or empty")
    body: str = Field(..., min_length=1, description="Comment body, allow-listed HTML")
    parent_comment_id: Literal[0] = Field(default=0, description="Threading is not supported")
    submitter_user_id: int | None = Field(
        default=None, description="Session user, never taken from the request body"
    )
    moderation_state: Literal[ModerationState.PENDING] = ModerationState.PENDING
    comment_type: str = Field(default="comment")
    author_ip: str = Field(default="", description="Client address")
    user_agent: str = Field(default="", description="Client User-Agent, truncated")
