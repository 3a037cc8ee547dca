"""
Comment form endpoint.

Browsers post the comment form here. Only POST is accepted; the route is
registered for every method so that other methods get the same error
page as any other rejection.
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse

from pycomments.api.deps import CommentService, CurrentSession
from pycomments.core.config import settings

router = APIRouter()

ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route(settings.comment_post_path, methods=ROUTED_METHODS, include_in_schema=False)
async def post_comment(
    request: Request,
    session: CurrentSession,
    comment_service: CommentService,
) -> RedirectResponse:
    """
    Accept a comment form submission.

    Stores the comment as pending and redirects back to the content
    item, anchored at the new comment.
    """
    redirect_url = await comment_service.handle(
        method=request.method,
        read_form=request.form,
        session=session,
    )
    return RedirectResponse(redirect_url, status_code=status.HTTP_302_FOUND)
