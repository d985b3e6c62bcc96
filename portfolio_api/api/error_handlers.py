"""Error Handlers — global exception handlers for the Portfolio API.

Invariants:
    - PortfolioError → envelope with success=False at the error's own status
    - RequestValidationError → 400 "Validation failed" with errors {field: message}
    - HTTPException (unknown route, wrong method) → envelope with the same status
    - Exception (catch-all) → 500 generic envelope, traceback only in the logs

Design Decisions:
    - Four-layer handler: domain, validation, framework HTTP, catch-all
    - Extracted from main.py to keep the entry point small
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio_api.core import envelope
from portfolio_api.core.errors import ErrorSeverity, PortfolioError
from portfolio_api.schemas.common import field_errors

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_portfolio_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_portfolio_error_handler(app: FastAPI) -> None:

    @app.exception_handler(PortfolioError)
    async def portfolio_error_handler(request: Request, exc: PortfolioError):
        """Handle all Portfolio domain/infrastructure errors."""
        log = logger.error if exc.severity == ErrorSeverity.CRITICAL else logger.warning
        log(
            f"PortfolioError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "resource": exc.context.resource,
                "resource_id": exc.context.resource_id,
                "operation": exc.context.operation,
            },
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Handle FastAPI request validation errors (query, path, JSON body)."""
        logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=envelope.error("Validation failed", field_errors(exc.errors())),
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
            message = f"Route {request.method} {request.url.path} not found"
        return JSONResponse(
            status_code=exc.status_code,
            content=envelope.error(message),
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=envelope.error("Internal server error"),
        )
