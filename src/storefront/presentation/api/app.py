"""FastAPI application factory.

Creates and configures the FastAPI application with the sessions router,
middleware, and exception handlers. Interactive documentation is served
at /apidocs.
"""

import logging
import sys
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from storefront.infrastructure.persistence.sqlalchemy import Base
from storefront.presentation.api.dependencies import get_engine
from storefront.presentation.api.exception_handlers import setup_exception_handlers
from storefront.presentation.api.routers import sessions_router
from storefront_config.settings import Settings, get_settings


@lru_cache(maxsize=1)
def _configure_logging(level: str) -> None:
    """Configure application logging.

    Console output with timestamps and module names, the storefront
    loggers at the configured level, noisy third-party loggers at WARNING.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,  # Override any existing config
    )

    logging.getLogger("storefront").setLevel(log_level)
    logging.getLogger("storefront_auth").setLevel(log_level)

    # Quiet down noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"
SESSIONS_PREFIX = "/api/sessions"

OPENAPI_TAGS = [
    {
        "name": "Sessions",
        "description": """Customer sessions for the storefront.

**Sessions:**
- Register and log in with email/password, or log in with GitHub
- The identity token travels in the signed HttpOnly `token` cookie
- `current` returns the session user, `logout` clears the cookie

**Passwords:**
- `restore` emails a time-limited reset link
- `resetpassword` sets a new password (8+ characters with upper and
  lower case letters, a number and one of `@$!%*?&`)

**Roles:**
- `premium/{uid}` toggles a user between `user` and `premium`
""",
    },
    {
        "name": "Health",
        "description": "Service health monitoring endpoints.",
    },
]


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("Starting Storefront API v%s...", API_VERSION)
    engine = get_engine()
    await _init_database_schema(engine)
    yield
    # Shutdown - dispose the shared engine and its connection pool
    logger.info("Shutting down Storefront API...")
    await engine.dispose()


async def _init_database_schema(engine: AsyncEngine) -> None:
    """Create missing tables and verify connectivity."""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except ConnectionRefusedError:
        logger.critical("Could not connect to the database.")
        raise SystemExit(1) from None
    logger.info("Database schema initialized successfully")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    settings
        Optional settings override for testing.

    Returns
    -------
    Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    # Configure logging on first app creation (not on module import)
    _configure_logging(settings.log_level)

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Session and authentication endpoints of the e-commerce API.",
        version=API_VERSION,
        docs_url="/apidocs",
        redoc_url=None,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(sessions_router, prefix=SESSIONS_PREFIX, tags=["Sessions"])

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy", "version": API_VERSION}

    return app
