"""Database layer for fittrack."""

from .engine import get_db_path, init_db
from .repositories import (
    ExerciseRepository,
    ProgramRepository,
    SetRepository,
    WeekRepository,
    WorkoutRepository,
)
from .seed import seed_demo_program
from .store import Document, DocumentStore, Filter, StoreGateway, WriteBatch

__all__ = [
    "Document",
    "DocumentStore",
    "ExerciseRepository",
    "Filter",
    "get_db_path",
    "init_db",
    "ProgramRepository",
    "seed_demo_program",
    "SetRepository",
    "StoreGateway",
    "WeekRepository",
    "WorkoutRepository",
    "WriteBatch",
]
