"""
Nonce endpoints.

Host pages fetch a nonce here and embed it in the comment form.
"""

from typing import Annotated

from fastapi import APIRouter, Path

from pycomments.api.deps import CurrentSession, Nonces
from pycomments.core.config import settings
from pycomments.schemas.nonce import NonceResponse

router = APIRouter()


@router.get("/{action}", response_model=NonceResponse)
async def issue_nonce(
    action: Annotated[
        str,
        Path(
            pattern=r"^[a-z0-9_-]{1,64}$",
            description="Action the nonce will be valid for",
        ),
    ],
    session: CurrentSession,
    nonces: Nonces,
) -> NonceResponse:
    """
    Issue an anti-forgery nonce for the current session.

    The nonce is bound to the session user, so it must be fetched with the
    same credentials the form will later be posted with.
    """
    return NonceResponse(
        action=action,
        token=nonces.create(action, session.user_id),
        field_name=settings.nonce_field_name,
        expires_in=settings.nonce_lifetime_minutes * 60,
    )
