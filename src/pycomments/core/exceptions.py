"""
Custom exceptions for PyComments.

Provides a hierarchy of exceptions that map to HTTP status codes
and include structured error information.
"""

from typing import Any


class PyCommentsException(Exception):
    """
    Base exception for all PyComments errors.

    All custom exceptions should inherit from this class.
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
            details: Additional error details
        """
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


# =============================================================================
# HTTP 400 - Bad Request Errors
# =============================================================================


class BadRequestError(PyCommentsException):
    """Invalid request parameters or payload."""

    status_code = 400


class ValidationError(BadRequestError):
    """Request validation failed."""

    def __init__(
        self,
        message: str = "Validation error",
        code: str = "VALIDATION_ERROR",
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details={"errors": errors or []},
        )


class EmptyCommentError(ValidationError):
    """Comment body is empty after sanitization."""

    def __init__(self) -> None:
        super().__init__(
            message="Your comment cannot be empty.",
            code="EMPTY_COMMENT",
            errors=[{"field": "comment", "message": "Comment is empty"}],
        )


class CommentTooLongError(ValidationError):
    """A submitted field exceeds its maximum length."""

    def __init__(self, field_name: str, max_length: int) -> None:
        super().__init__(
            message=f"Your {field_name} is too long.",
            code="COMMENT_TOO_LONG",
            errors=[
                {
                    "field": field_name,
                    "message": f"Must be at most {max_length} characters",
                }
            ],
        )


# =============================================================================
# HTTP 403 - Authorization Errors
# =============================================================================


class AuthorizationError(PyCommentsException):
    """Authorization failed - request is not permitted."""

    status_code = 403

    def __init__(
        self,
        message: str = "You don't have permission to perform this action",
        code: str = "FORBIDDEN",
        action: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details={"action": action},
        )


class InvalidNonceError(AuthorizationError):
    """Anti-forgery token is missing, expired, or issued for another action."""

    def __init__(self, action: str) -> None:
        super().__init__(
            message="The link you followed has expired. Please reload the page and try again.",
            code="INVALID_NONCE",
            action=action,
        )


class CommentsClosedError(AuthorizationError):
    """Content item does not accept new comments."""

    def __init__(self, content_item_id: int) -> None:
        super().__init__(
            message="Comments are closed for this item.",
            code="COMMENTS_CLOSED",
        )
        self.details["content_item_id"] = content_item_id


# =============================================================================
# HTTP 404 - Not Found Errors
# =============================================================================


class NotFoundError(PyCommentsException):
    """Requested resource not found."""

    status_code = 404

    def __init__(
        self,
        resource: str,
        identifier: str | None = None,
    ) -> None:
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} with ID '{identifier}' not found"

        super().__init__(
            message=message,
            code="NOT_FOUND",
            details={"resource": resource, "identifier": identifier},
        )


class ContentItemNotFoundError(NotFoundError):
    """
    Content item does not exist or has been deleted.

    Answered with 403, the same status as other rejected form posts.
    """

    status_code = 403

    def __init__(self, content_item_id: int | None = None) -> None:
        super().__init__(
            resource="Content item",
            identifier=str(content_item_id) if content_item_id else None,
        )
        self.message = "Invalid content item. It may have been deleted."


# =============================================================================
# HTTP 405 - Method Not Allowed
# =============================================================================


class MethodNotAllowedError(PyCommentsException):
    """HTTP method is not accepted by this endpoint."""

    status_code = 405

    def __init__(self, method: str, allowed: tuple[str, ...] = ("POST",)) -> None:
        super().__init__(
            message=f"This page only accepts {', '.join(allowed)} requests.",
            code="METHOD_NOT_ALLOWED",
            details={"method": method, "allowed": list(allowed)},
        )
        self.allowed = allowed


# =============================================================================
# HTTP 500 - Internal Server Errors
# =============================================================================


class InternalError(PyCommentsException):
    """Internal server error."""

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="INTERNAL_ERROR",
        )
        self.original_error = original_error


class CommentPersistenceError(InternalError):
    """Content store did not return an identifier for the new comment."""

    def __init__(self) -> None:
        super().__init__(message="Unable to submit comment. Please try again.")
        self.code = "COMMENT_NOT_SAVED"
