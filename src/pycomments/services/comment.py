"""Comment intake service: turns a posted comment form into a pending comment."""

import re
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pycomments.core.config import settings
from pycomments.core.exceptions import (
    CommentPersistenceError,
    CommentsClosedError,
    CommentTooLongError,
    ContentItemNotFoundError,
    EmptyCommentError,
    InvalidNonceError,
    MethodNotAllowedError,
)
from pycomments.core.logging import get_logger
from pycomments.core.sanitize import Sanitizers
from pycomments.core.security import NonceVerifier
from pycomments.core.session import SessionContext
from pycomments.schemas.comment import CommentSubmission
from pycomments.services.content_store import ContentStore

logger = get_logger(__name__)

FormReader = Callable[[], Awaitable[Mapping[str, Any]]]

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")

USER_AGENT_MAX_LENGTH = 254


def parse_content_item_id(value: Any) -> int:
    """
    Coerce a posted ID to an int the lenient way form handlers do.

    Leading digits are used ("42abc" -> 42); anything without them is 0.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if not isinstance(value, str):
        return 0
    match = _LEADING_INT_RE.match(value)
    return int(match.group(1)) if match else 0


def _form_text(form: Mapping[str, Any], name: str) -> str:
    # File uploads and missing fields read as empty
    value = form.get(name)
    return value if isinstance(value, str) else ""


class CommentIntakeService:
    """
    Service for accepting comment form submissions.

    Every rejection raises a PyComments exception before anything is
    written; a successful submission writes exactly one pending comment.
    """

    def __init__(
        self,
        store: ContentStore,
        nonces: NonceVerifier,
        sanitizers: Sanitizers,
        form_action: str | None = None,
        nonce_field: str | None = None,
    ) -> None:
        self.store = store
        self.nonces = nonces
        self.sanitizers = sanitizers
        self.form_action = form_action or settings.comment_form_action
        self.nonce_field = nonce_field or settings.nonce_field_name
        self.max_lengths = {
            "author": settings.comment_author_max_length,
            "email": settings.comment_email_max_length,
            "url": settings.comment_url_max_length,
            "comment": settings.comment_body_max_length,
        }

    async def handle(
        self,
        method: str,
        read_form: FormReader,
        session: SessionContext,
    ) -> str:
        """
        Handle one request to the comment form endpoint.

        The form body is only read once the method has been accepted.

        Args:
            method: HTTP method of the request
            read_form: Coroutine function returning the parsed form body
            session: Session context of the caller

        Returns:
            URL to redirect the browser to

        Raises:
            MethodNotAllowedError: If the method is not POST
            InvalidNonceError: If the anti-forgery token is missing or wrong
            ContentItemNotFoundError: If the content item doesn't exist
            CommentsClosedError: If the content item doesn't accept comments
            EmptyCommentError: If the comment body is empty
            CommentTooLongError: If a field is over its length limit
            CommentPersistenceError: If the store didn't save the comment

        """
        if method.upper() != "POST":
            logger.info("Rejected comment request", extra={"reason": "method", "method": method})
            raise MethodNotAllowedError(method)

        form = await read_form()
        return await self.submit(form, session)

    async def submit(self, form: Mapping[str, Any], session: SessionContext) -> str:
        """
        Validate, sanitize and store a posted comment form.

        Args:
            form: Parsed form fields
            session: Session context of the caller

        Returns:
            Permalink of the content item with a fragment for the new comment

        """
        token = _form_text(form, self.nonce_field)
        if not self.nonces.verify(self.form_action, token, session.user_id):
            logger.warning(
                "Rejected comment with invalid nonce",
                extra={"client_ip": session.client_ip, "has_token": bool(token)},
            )
            raise InvalidNonceError(self.form_action)

        content_item_id = parse_content_item_id(form.get("comment_post_ID"))
        if content_item_id <= 0 or not await self.store.content_item_exists(content_item_id):
            logger.info(
                "Rejected comment on missing content item",
                extra={"content_item_id": content_item_id},
            )
            raise ContentItemNotFoundError(content_item_id)

        if not await self.store.comments_open(content_item_id):
            logger.info(
                "Rejected comment on closed content item",
                extra={"content_item_id": content_item_id},
            )
            raise CommentsClosedError(content_item_id)

        author_name = self.sanitizers.text(_form_text(form, "author"))
        author_email = self.sanitizers.email(_form_text(form, "email"))
        author_url = self.sanitizers.url(_form_text(form, "url"))
        body = self.sanitizers.restricted_html(_form_text(form, "comment").strip()).strip()

        if not body:
            logger.info(
                "Rejected empty comment",
                extra={"content_item_id": content_item_id},
            )
            raise EmptyCommentError()

        self._check_lengths(
            {
                "author": author_name,
                "email": author_email,
                "url": author_url,
                "comment": body,
            }
        )

        submission = CommentSubmission(
            content_item_id=content_item_id,
            author_name=author_name,
            author_email=author_email,
            author_url=author_url,
            body=body,
            submitter_user_id=session.user_id,
            author_ip=session.client_ip,
            user_agent=session.user_agent[:USER_AGENT_MAX_LENGTH],
        )

        comment_id = await self.store.insert_comment(submission)
        if not comment_id:
            raise CommentPersistenceError()

        logger.info(
            "Comment held for moderation",
            extra={
                "comment_id": comment_id,
                "content_item_id": content_item_id,
                "authenticated": session.is_authenticated,
            },
        )

        permalink = await self.store.get_permalink(content_item_id)
        return f"{permalink}#comment-{comment_id}"

    def _check_lengths(self, fields: dict[str, str]) -> None:
        for name, value in fields.items():
            max_length = self.max_lengths[name]
            if len(value) > max_length:
                logger.info(
                    "Rejected oversized comment field",
                    extra={"field": name, "length": len(value)},
                )
                raise CommentTooLongError(name, max_length)
