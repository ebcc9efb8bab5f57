"""Request dependencies."""

from fastapi import Request

from ..db import DocumentStore
from ..services import AnalyticsService, CascadeCountEngine, CascadeDeleteExecutor


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_analytics(request: Request) -> AnalyticsService:
    return request.app.state.analytics


def get_count_engine(request: Request) -> CascadeCountEngine:
    return CascadeCountEngine(request.app.state.store)


def get_delete_executor(request: Request) -> CascadeDeleteExecutor:
    """Executor that clears the user's cached analytics after deleting."""
    return CascadeDeleteExecutor(request.app.state.store, cache=request.app.state.cache)
