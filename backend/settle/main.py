"""settle register API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map SettleError → structured JSON responses
    - Issuer, unique-violation classifier, mailer and email template are built once
      in the lifespan and shared through app.state

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Classifier chosen from the engine dialect, so the same code serves PostgreSQL and SQLite
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from settle.api.error_handlers import register_error_handlers
from settle.api.routes import health, users
from settle.config import get_settings
from settle.core.render_email import build_credentials_template
from settle.infrastructure.credential_issuer import CredentialIssuer
from settle.infrastructure.database import init_db
from settle.infrastructure.mailer import LogMailer
from settle.infrastructure.observability import setup_logging
from settle.infrastructure.unique_violation import classifier_for_dialect

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    app.state.issuer = CredentialIssuer(settings.kdf_max_concurrency)
    app.state.unique_classifier = classifier_for_dialect(manager.dialect_name)
    app.state.email_template = build_credentials_template()
    if not hasattr(app.state, "mailer"):
        app.state.mailer = LogMailer()
    logger.info("settle register API started")
    yield
    await manager.dispose()
    logger.info("settle register API shutting down")


app = FastAPI(
    title="settle register API", version="0.1.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(users.router)

register_error_handlers(app)
