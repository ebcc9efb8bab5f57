"""Tests for the hierarchy repositories."""

import pytest

from fittrack.db import (
    ExerciseRepository,
    ProgramRepository,
    SetRepository,
    WeekRepository,
    WorkoutRepository,
)
from fittrack.errors import NotFoundError, OwnershipError, ValidationError
from fittrack.models import Exercise, ExerciseSet, ExerciseType, Program, Week, Workout


class TestProgramRepository:
    """Tests for ProgramRepository."""

    async def test_create_and_get(self, store):
        """Test a program round-trips through the store."""
        repo = ProgramRepository(store)
        program_id = await repo.create(Program(name="Strength", user_id="u1", description="5x5"))

        program = await repo.get("u1", program_id)
        assert program.name == "Strength"
        assert program.description == "5x5"
        assert program.is_archived is False
        assert program.created_at is not None

    async def test_programs_are_per_user(self, store):
        """Test another user's programs are invisible."""
        repo = ProgramRepository(store)
        program_id = await repo.create(Program(name="Mine", user_id="u1"))

        assert await repo.get("u2", program_id) is None
        assert await repo.list_all("u2") == []

    async def test_archive_hides_from_active(self, store):
        """Test archived programs drop out of active listings."""
        repo = ProgramRepository(store)
        kept = await repo.create(Program(name="Kept", user_id="u1"))
        archived = await repo.create(Program(name="Old", user_id="u1"))

        await repo.archive("u1", archived)

        assert [p.id for p in await repo.list_active("u1")] == [kept]
        assert {p.id for p in await repo.list_all("u1")} == {kept, archived}
        assert (await repo.get("u1", archived)).is_archived

    async def test_list_newest_first(self, store):
        """Test programs are listed newest first."""
        repo = ProgramRepository(store)
        first = await repo.create(Program(name="First", user_id="u1"))
        second = await repo.create(Program(name="Second", user_id="u1"))

        assert [p.id for p in await repo.list_all("u1")] == [second, first]

    async def test_invalid_name(self, store):
        """Test blank names are rejected."""
        with pytest.raises(ValidationError):
            await ProgramRepository(store).create(Program(name="  ", user_id="u1"))

    async def test_update_other_users_program(self, store):
        """Test writing an entity owned by someone else is refused."""
        repo = ProgramRepository(store)
        program_id = await repo.create(Program(name="Mine", user_id="u1"))
        program = await repo.get("u1", program_id)

        with pytest.raises(OwnershipError):
            await repo.update("u2", program)


class TestChildRepositories:
    """Tests for week, workout, exercise and set repositories."""

    async def test_week_requires_program(self, store):
        """Test children cannot be created under a missing parent."""
        with pytest.raises(NotFoundError):
            await WeekRepository(store).create(
                Week(name="Week 1", order=1, program_id="missing", user_id="u1")
            )

    async def test_weeks_ordered(self, store):
        """Test weeks are listed by order."""
        program_id = await ProgramRepository(store).create(Program(name="P", user_id="u1"))
        repo = WeekRepository(store)
        await repo.create(Week(name="Second", order=2, program_id=program_id, user_id="u1"))
        await repo.create(Week(name="First", order=1, program_id=program_id, user_id="u1"))

        assert [w.name for w in await repo.list("u1", program_id)] == ["First", "Second"]

    async def test_workout_day_of_week_validated(self, seed_week, store):
        """Test day_of_week must be 0-6."""
        seeded = await seed_week(workouts=0)
        with pytest.raises(ValidationError):
            await WorkoutRepository(store).create(
                Workout(
                    name="Bad",
                    week_id=seeded.week_id,
                    program_id=seeded.program_id,
                    user_id="u1",
                    day_of_week=7,
                )
            )

    async def test_set_validated_against_exercise_type(self, seed_week, store):
        """Test a set must carry the metrics its exercise type requires."""
        seeded = await seed_week(workouts=1, exercises=0)
        workout_id = seeded.workout_ids[0]
        exercise_id = await ExerciseRepository(store).create(
            Exercise(
                name="Row",
                exercise_type=ExerciseType.CARDIO,
                workout_id=workout_id,
                week_id=seeded.week_id,
                program_id=seeded.program_id,
                user_id="u1",
            )
        )
        base = dict(
            set_number=1,
            exercise_id=exercise_id,
            workout_id=workout_id,
            week_id=seeded.week_id,
            program_id=seeded.program_id,
            user_id="u1",
        )
        repo = SetRepository(store)

        with pytest.raises(ValidationError):
            await repo.create(ExerciseSet(reps=10, **base))

        await repo.create(ExerciseSet(duration=600, distance=2000.0, **base))
        sets = await repo.list("u1", seeded.program_id, seeded.week_id, workout_id, exercise_id)
        assert len(sets) == 1
        assert sets[0].duration == 600

    async def test_set_checked(self, seed_week, store):
        """Test toggling a set's completion."""
        seeded = await seed_week(workouts=1, exercises=1, sets=1, checked=False)
        workout_id, exercise_id = seeded.exercise_ids[0]
        repo = SetRepository(store)
        (exercise_set,) = await repo.list(
            "u1", seeded.program_id, seeded.week_id, workout_id, exercise_id
        )

        await repo.set_checked("u1", exercise_set, True)

        (reloaded,) = await repo.list(
            "u1", seeded.program_id, seeded.week_id, workout_id, exercise_id
        )
        assert reloaded.checked is True
