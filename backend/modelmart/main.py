"""ModelMart API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map MarketplaceError → structured JSON responses
    - CORS restricted to the configured allow-list, credentials allowed
    - Store managers and identity verifier created on startup via lifespan;
      stores connect lazily through ensure_connected() on first use

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Lazy store connect: a store that is down at boot does not block liveness,
      readiness reports it instead
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from modelmart.api.dependencies import close_identity, init_identity
from modelmart.api.error_handlers import register_error_handlers
from modelmart.api.routes import health, models, purchases
from modelmart.config import get_settings
from modelmart.infrastructure.database import dispose_stores, init_stores
from modelmart.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_stores(
        settings.database_url,
        settings.ledger_database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    init_identity(
        settings.firebase_project_id,
        settings.firebase_certs_url,
        settings.identity_timeout_seconds,
    )
    logger.info("ModelMart API started")
    yield
    await close_identity()
    await dispose_stores()
    logger.info("ModelMart API shutting down")


app = FastAPI(
    title="ModelMart API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(models.router)
app.include_router(purchases.router)

register_error_handlers(app)
