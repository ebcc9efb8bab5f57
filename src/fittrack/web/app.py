"""FastAPI application for the fittrack JSON API."""

from collections.abc import Callable
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI

from .. import __version__
from ..db import DocumentStore, init_db
from ..services import AnalyticsCache, AnalyticsService
from .errors import register_exception_handlers
from .routers import analytics, hierarchy


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - runs on startup and shutdown."""
    # Schema creation is idempotent
    await init_db(app.state.store.db_path)
    yield


def create_app(
    store: DocumentStore | None = None,
    clock: Callable[[], datetime] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="fittrack",
        description="Training log API with cascade deletes and analytics",
        version=__version__,
        lifespan=lifespan,
    )

    store = store if store is not None else DocumentStore()
    cache = AnalyticsCache(clock=clock)
    app.state.store = store
    app.state.cache = cache
    app.state.analytics = AnalyticsService(store, cache=cache, clock=clock)

    register_exception_handlers(app)

    app.include_router(hierarchy.router)
    app.include_router(analytics.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app

