"""Data models for fittrack."""

from .analytics import (
    ActivityHeatmapData,
    DateRange,
    HeatmapDay,
    HeatmapIntensity,
    PersonalRecord,
    PRType,
    WorkoutAnalytics,
)
from .cascade import CascadeDeleteCounts, CascadeDeleteResult
from .training import (
    SET_FIELD_REQUIREMENTS,
    Exercise,
    ExerciseSet,
    ExerciseType,
    Program,
    Week,
    Workout,
)

__all__ = [
    "ActivityHeatmapData",
    "CascadeDeleteCounts",
    "CascadeDeleteResult",
    "DateRange",
    "Exercise",
    "ExerciseSet",
    "ExerciseType",
    "HeatmapDay",
    "HeatmapIntensity",
    "PersonalRecord",
    "PRType",
    "Program",
    "SET_FIELD_REQUIREMENTS",
    "Week",
    "Workout",
    "WorkoutAnalytics",
]
