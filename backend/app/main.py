"""Users API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery — ExMA anti-pattern)
    - Global error handlers map UsersApiError → HTTP responses (api/error_handlers.py)
    - CORS configured from settings (not hardcoded)
    - Pool handle constructed on startup, stored on app.state, disposed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Schema creation is opt-out via settings: replaces a table-setup script,
      not a migration tool
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from app.api.error_handlers import register_error_handlers
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.observability import setup_logging
from app.config import get_settings
from app.api.routes import health, users

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db_manager = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_create_schema:
        await db_manager.create_schema()
    app.state.db_manager = db_manager
    logger.info("Users API started")
    try:
        yield
    finally:
        logger.info("Users API shutting down")
        await db_manager.dispose()
        app.state.db_manager = None


app = FastAPI(
    title="Users API", version="1.0.0", lifespan=lifespan,
)

# CORS — configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — explicit registration (ExMA: no convention-over-config)
app.include_router(health.router)
app.include_router(users.router)

register_error_handlers(app)


@app.get("/api", response_class=PlainTextResponse)
async def api_root():
    return "API is running..."
