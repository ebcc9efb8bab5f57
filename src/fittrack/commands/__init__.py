"""CLI commands for fittrack."""

from .analytics import analytics
from .delete import delete
from .init import init
from .programs import programs
from .seed import seed
from .serve import serve

__all__ = [
    "analytics",
    "delete",
    "init",
    "programs",
    "seed",
    "serve",
]
