"""Portfolio API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map PortfolioError → response envelope
    - CORS configured from settings (not hardcoded)
    - Every matched /api route except the health probes is rate limited per client address
    - Database initialized on startup and disposed on shutdown via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portfolio_api.api.error_handlers import register_error_handlers
from portfolio_api.api.rate_limit import install_rate_limit
from portfolio_api.api.routes import certifications, health, journey, projects
from portfolio_api.config import get_settings
from portfolio_api.core import envelope
from portfolio_api.infrastructure import database
from portfolio_api.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    if database.db_manager is None:
        database.init_db(settings)
    logger.info("Portfolio API started")
    yield
    logger.info("Portfolio API shutting down")
    if database.db_manager is not None:
        await database.db_manager.dispose()


app = FastAPI(title="Portfolio API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
# Added before CORS so 429 responses still carry CORS headers
install_rate_limit(app, settings, exempt=(health.health_check, health.readiness_check))
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(projects.router)
app.include_router(certifications.router)
app.include_router(journey.router)

register_error_handlers(app)


@app.get("/api")
async def api_info():
    return envelope.success(
        {
            "name": "Portfolio API",
            "version": app.version,
            "endpoints": {
                "projects": "/api/projects",
                "certifications": "/api/certifications",
                "journey": "/api/journey",
                "health": "/api/health/",
            },
        },
        "Portfolio API",
    )
