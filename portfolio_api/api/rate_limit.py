"""Rate Limiting — per-client request ceiling over a fixed window for every /api route.

Invariants:
    - At most RATE_LIMIT_MAX_REQUESTS per client address per RATE_LIMIT_WINDOW_SECONDS
    - A limited request gets 429 with the standard error envelope and never reaches a route
    - Health probes are exempt
    - Unmatched paths (404s) are not counted
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from portfolio_api.config import Settings
from portfolio_api.core import envelope

logger = logging.getLogger(__name__)

TOO_MANY_REQUESTS = "Too many requests from this IP, please try again later"


def limit_expression(settings: Settings) -> str:
    """slowapi/limits notation, e.g. "100 per 900 seconds"."""
    return f"{settings.rate_limit_max_requests} per {settings.rate_limit_window_seconds} seconds"


def build_limiter(settings: Settings) -> Limiter:
    return Limiter(
        key_func=get_remote_address,
        default_limits=[limit_expression(settings)],
        enabled=settings.rate_limit_enabled,
    )


def rate_limit_exceeded(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    # Must stay sync: SlowAPIMiddleware returns the handler result without awaiting it
    logger.warning(
        f"Rate limit exceeded for {get_remote_address(request)}",
        extra={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=envelope.error(TOO_MANY_REQUESTS),
    )


def install_rate_limit(app: FastAPI, settings: Settings, exempt=()) -> Limiter:
    """Attach the limiter, its middleware and the 429 handler to the app."""
    limiter = build_limiter(settings)
    for endpoint in exempt:
        limiter.exempt(endpoint)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded)
    app.add_middleware(SlowAPIMiddleware)
    return limiter
