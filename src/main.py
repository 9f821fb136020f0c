"""FastAPI application entry point."""

import logging
import logging.config
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

import ledger.models  # noqa: F401  (registers every table on Base.metadata)
from ledger.api.routes import accounts, catalogs, health
from ledger.core.cache import close_cache, init_cache, invalidate_catalog_cache
from ledger.core.config import settings
from ledger.core.exceptions import AppException, app_exception_handler
from ledger.core.middleware import RequestLoggingMiddleware
from ledger.core.rate_limit import limiter, rate_limit_exceeded_handler
from ledger.db.base import Base
from ledger.db.session import engine

# Configure logging
logging.config.dictConfig(settings.LOGGING_CONFIG)
logger = logging.getLogger("ledger.main")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan events."""
    logger.info(f"Starting {settings.APP_NAME} ({settings.ENVIRONMENT})")

    async with engine.begin() as conn:
        # Create tables (use Alembic in production)
        if settings.ENVIRONMENT == "development":
            await conn.run_sync(Base.metadata.create_all)

    # Process-wide catalog cache handle; None when Redis is unavailable
    app.state.redis = await init_cache()
    await invalidate_catalog_cache(app.state.redis)

    yield

    logger.info(f"Shutting down {settings.APP_NAME}")
    await close_cache(app.state.redis)
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=settings.CORS_ORIGIN_REGEX,
    allow_credentials=settings.CORS_CREDENTIALS,
    allow_methods=settings.CORS_METHODS,
    allow_headers=settings.CORS_HEADERS,
    expose_headers=["X-Request-ID", "X-Process-Time"],
)

# Middleware is applied in reverse order, so this is the outermost layer
app.add_middleware(RequestLoggingMiddleware)

# Register exception handlers
app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]

# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(catalogs.router, tags=["catalogs"])
app.include_router(accounts.router, tags=["accounts"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
