"""
PyComments FastAPI Application Entry Point.

This module creates and configures the FastAPI application instance.
"""

from contextlib import asynccontextmanager
from html import escape
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, Response

from pycomments.api import comment_form
from pycomments.api.v1 import router as v1_router
from pycomments.core.config import settings
from pycomments.core.exceptions import MethodNotAllowedError, PyCommentsException
from pycomments.core.logging import get_logger, setup_logging
from pycomments.db.session import close_db, init_db

logger = get_logger(__name__)

ERROR_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="robots" content="noindex,follow">
<title>{title}</title>
</head>
<body>
<h1>{title}</h1>
<p>{message}</p>
<p><a href="javascript:history.back()">&laquo; Back</a></p>
</body>
</html>
"""


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.

    Handles startup and shutdown events.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    await init_db()

    yield

    logger.info("Shutting down...")
    await close_db()


def wants_json(request: Request) -> bool:
    """Check whether the client asked for JSON rather than a page."""
    accept = request.headers.get("accept", "")
    return "application/json" in accept and "text/html" not in accept


def render_error_page(title: str, message: str, status_code: int) -> HTMLResponse:
    """Render the terminal error page shown to browsers."""
    return HTMLResponse(
        ERROR_PAGE.format(title=escape(title), message=escape(message)),
        status_code=status_code,
    )


def error_response(
    request: Request,
    status_code: int,
    content: dict,
    headers: dict[str, str] | None = None,
) -> Response:
    """Write an error as JSON or as an HTML page, depending on the client."""
    if wants_json(request):
        response: Response = JSONResponse(status_code=status_code, content=content)
    else:
        response = render_error_page(
            title=f"{settings.app_name} › Error",
            message=content["error"]["message"],
            status_code=status_code,
        )
    if headers:
        response.headers.update(headers)
    return response


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    setup_logging(
        log_level=settings.log_level,
        json_logs=settings.environment == "production",
    )

    app = FastAPI(
        title=settings.app_name,
        description="Comment intake service",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    app.include_router(comment_form.router, tags=["comments"])
    app.include_router(v1_router, prefix=settings.api_v1_prefix)

    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Register the handlers that turn exceptions into error responses."""

    @app.exception_handler(PyCommentsException)
    async def pycomments_exception_handler(
        request: Request,
        exc: PyCommentsException,
    ) -> Response:
        """Handle PyComments custom exceptions."""
        headers = None
        if isinstance(exc, MethodNotAllowedError):
            headers = {"Allow": ", ".join(exc.allowed)}
        return error_response(request, exc.status_code, exc.to_dict(), headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> Response:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            errors.append(
                {
                    "field": ".".join(str(loc) for loc in error["loc"]),
                    "message": error["msg"],
                    "type": error["type"],
                }
            )

        return error_response(
            request,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            {
                "error": {
                    "code": "VALIDATION_ERROR",
                    "message": "Request validation failed",
                    "details": {"errors": errors},
                }
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> Response:
        """Handle unexpected exceptions."""
        logger.exception(f"Unexpected error: {exc}")

        if settings.environment == "production":
            message = "An unexpected error occurred"
        else:
            message = str(exc)

        return error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            {
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": message,
                }
            },
        )


# Create the application instance
app = create_app()
