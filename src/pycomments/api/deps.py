"""
FastAPI dependency injection functions.

Provides the collaborators of the comment handler: session context,
content store, nonce verifier and sanitizers.
"""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from pycomments.core.config import settings
from pycomments.core.sanitize import Sanitizers, get_sanitizers
from pycomments.core.security import NonceVerifier, get_nonce_manager, user_id_from_token
from pycomments.core.session import SessionContext
from pycomments.db.session import get_db
from pycomments.services.comment import CommentIntakeService
from pycomments.services.content_store import ContentStore, SQLAlchemyContentStore

# HTTP Bearer token security scheme
bearer_scheme = HTTPBearer(auto_error=False)


def get_client_ip(request: Request) -> str:
    """
    Get the client address of the request.

    X-Forwarded-For is only honoured when the app runs behind a trusted proxy.
    """
    if settings.trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else ""


async def get_session_context(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> SessionContext:
    """
    Build the session context for the current request.

    The user comes from a Bearer access token, or failing that from the
    session cookie. Anything the client puts in the request body is ignored.
    """
    token = credentials.credentials if credentials else request.cookies.get(
        settings.session_cookie_name
    )
    return SessionContext(
        user_id=user_id_from_token(token),
        client_ip=get_client_ip(request),
        user_agent=request.headers.get("user-agent", ""),
    )


def get_content_store(db: Annotated[AsyncSession, Depends(get_db)]) -> ContentStore:
    """Get the content store for this request."""
    return SQLAlchemyContentStore(db)


def get_nonce_verifier() -> NonceVerifier:
    """Get the anti-forgery nonce verifier."""
    return get_nonce_manager()


def get_comment_sanitizers() -> Sanitizers:
    """Get the comment field sanitizers."""
    return get_sanitizers()


def get_comment_service(
    store: Annotated[ContentStore, Depends(get_content_store)],
    nonces: Annotated[NonceVerifier, Depends(get_nonce_verifier)],
    sanitizers: Annotated[Sanitizers, Depends(get_comment_sanitizers)],
) -> CommentIntakeService:
    """Get comment intake service instance."""
    return CommentIntakeService(store=store, nonces=nonces, sanitizers=sanitizers)


# Type aliases for cleaner dependency injection
CurrentSession = Annotated[SessionContext, Depends(get_session_context)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
Nonces = Annotated[NonceVerifier, Depends(get_nonce_verifier)]
CommentService = Annotated[CommentIntakeService, Depends(get_comment_service)]
