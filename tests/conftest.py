"""Pytest configuration and fixtures."""

import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from fittrack.db import (
    DocumentStore,
    ExerciseRepository,
    ProgramRepository,
    SetRepository,
    WeekRepository,
    WorkoutRepository,
    init_db,
)
from fittrack.models import Exercise, ExerciseSet, ExerciseType, Program, Week, Workout


class FakeClock:
    """Settable wall clock."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@dataclass
class SeededWeek:
    """Ids of a generated week subtree."""

    user_id: str
    program_id: str
    week_id: str
    workout_ids: list[str] = field(default_factory=list)
    # (workout_id, exercise_id) pairs
    exercise_ids: list[tuple[str, str]] = field(default_factory=list)
    set_ids: list[str] = field(default_factory=list)


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
async def store(temp_db_path):
    """An initialized document store."""
    await init_db(temp_db_path)
    return DocumentStore(temp_db_path)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 6, 15, 12, 0))


@pytest.fixture
def seed_week(store):
    """Factory that builds a week with W workouts, E exercises each and S sets each."""

    async def _seed(
        user_id: str = "u1",
        program_id: str | None = None,
        workouts: int = 2,
        exercises: int = 2,
        sets: int = 3,
        exercise_type: ExerciseType = ExerciseType.STRENGTH,
        created_at: datetime | None = None,
        checked: bool = True,
        weight: float | None = 100.0,
        reps: int | None = 5,
        duration: int | None = None,
    ) -> SeededWeek:
        if program_id is None:
            program_id = await ProgramRepository(store).create(
                Program(name="Test Program", user_id=user_id)
            )
        week_id = await WeekRepository(store).create(
            Week(name="Week 1", order=1, program_id=program_id, user_id=user_id)
        )
        seeded = SeededWeek(user_id=user_id, program_id=program_id, week_id=week_id)

        for w in range(workouts):
            workout_id = await WorkoutRepository(store).create(
                Workout(
                    name=f"Workout {w + 1}",
                    week_id=week_id,
                    program_id=program_id,
                    user_id=user_id,
                    order_index=w,
                ),
                created_at=created_at,
            )
            seeded.workout_ids.append(workout_id)
            for e in range(exercises):
                exercise_id = await ExerciseRepository(store).create(
                    Exercise(
                        name=f"Exercise {e + 1}",
                        exercise_type=exercise_type,
                        workout_id=workout_id,
                        week_id=week_id,
                        program_id=program_id,
                        user_id=user_id,
                        order_index=e,
                    ),
                    created_at=created_at,
                )
                seeded.exercise_ids.append((workout_id, exercise_id))
                for s in range(sets):
                    set_id = await SetRepository(store).create(
                        ExerciseSet(
                            set_number=s + 1,
                            exercise_id=exercise_id,
                            workout_id=workout_id,
                            week_id=week_id,
                            program_id=program_id,
                            user_id=user_id,
                            checked=checked,
                            weight=weight,
                            reps=reps,
                            duration=duration,
                        ),
                        created_at=created_at,
                    )
                    seeded.set_ids.append(set_id)
        return seeded

    return _seed
