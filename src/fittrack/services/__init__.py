"""Cascade and analytics services."""

from .analytics import AnalyticsService, compute_workout_analytics
from .cache import AnalyticsCache, CacheKey
from .cascade import CascadeCountEngine, CascadeDeleteExecutor, chunk_operations

__all__ = [
    "AnalyticsCache",
    "AnalyticsService",
    "CacheKey",
    "CascadeCountEngine",
    "CascadeDeleteExecutor",
    "chunk_operations",
    "compute_workout_analytics",
]
