"""Tests for analytics aggregation."""

from datetime import date, datetime

from fittrack.db import ExerciseRepository, ProgramRepository, SetRepository
from fittrack.models import (
    DateRange,
    Exercise,
    ExerciseSet,
    ExerciseType,
    PRType,
    Program,
    Workout,
)
from fittrack.services import AnalyticsService, compute_workout_analytics

JUNE = DateRange.for_month(2024, 6)
IN_JUNE = datetime(2024, 6, 10, 18, 0)


def workout(workout_id: str, created_at: datetime) -> Workout:
    return Workout(
        id=workout_id,
        name=workout_id,
        week_id="w1",
        program_id="p1",
        user_id="u1",
        created_at=created_at,
    )


def exercise(exercise_id: str, workout_id: str, exercise_type=ExerciseType.STRENGTH) -> Exercise:
    return Exercise(
        id=exercise_id,
        name=exercise_id,
        exercise_type=exercise_type,
        workout_id=workout_id,
        week_id="w1",
        program_id="p1",
        user_id="u1",
    )


def exercise_set(exercise_id: str, **metrics) -> ExerciseSet:
    return ExerciseSet(
        set_number=1,
        exercise_id=exercise_id,
        workout_id="o1",
        week_id="w1",
        program_id="p1",
        user_id="u1",
        **metrics,
    )


class TestComputeWorkoutAnalytics:
    """Tests for the pure aggregator."""

    def test_empty_input(self):
        """Test no data gives a zeroed rollup."""
        result = compute_workout_analytics("u1", JUNE, [], [], [])

        assert result.total_workouts == 0
        assert result.total_sets == 0
        assert result.total_volume == 0
        assert result.total_duration == 0
        assert result.exercise_type_breakdown == {}
        assert result.average_sets_per_workout == 0

    def test_volume_needs_weight_and_reps(self):
        """Test sets missing weight or reps add no volume."""
        result = compute_workout_analytics(
            "u1",
            JUNE,
            [workout("o1", IN_JUNE)],
            [exercise("e1", "o1")],
            [
                exercise_set("e1", weight=100.0, reps=5),
                exercise_set("e1", reps=10),
                exercise_set("e1", weight=50.0),
            ],
        )
        assert result.total_sets == 3
        assert result.total_volume == 500.0

    def test_only_in_range_workouts(self):
        """Test workouts outside the range and their children are excluded."""
        result = compute_workout_analytics(
            "u1",
            JUNE,
            [workout("o1", IN_JUNE), workout("o2", datetime(2024, 7, 1))],
            [exercise("e1", "o1"), exercise("e2", "o2", ExerciseType.CARDIO)],
            [exercise_set("e1", weight=10.0, reps=10), exercise_set("e2", duration=600)],
        )
        assert result.total_workouts == 1
        assert result.completed_workout_ids == {"o1"}
        assert result.total_sets == 1
        assert result.total_duration == 0
        assert result.exercise_type_breakdown == {ExerciseType.STRENGTH: 1}

    def test_breakdown_and_duration(self):
        """Test exercise types are counted and durations summed."""
        result = compute_workout_analytics(
            "u1",
            JUNE,
            [workout("o1", IN_JUNE)],
            [
                exercise("e1", "o1", ExerciseType.CARDIO),
                exercise("e2", "o1", ExerciseType.CARDIO),
                exercise("e3", "o1"),
            ],
            [exercise_set("e1", duration=1200), exercise_set("e2", duration=600)],
        )
        assert result.exercise_type_breakdown == {ExerciseType.CARDIO: 2, ExerciseType.STRENGTH: 1}
        assert result.most_used_exercise_type == ExerciseType.CARDIO
        assert result.total_duration == 1800
        assert result.average_workout_duration == 30.0


class TestAnalyticsService:
    """Tests for store-backed analytics."""

    async def test_compute_workout_analytics(self, store, seed_week, clock):
        """Test the service reads the hierarchy and aggregates it."""
        await seed_week(workouts=2, exercises=2, sets=3, created_at=IN_JUNE)
        result = await AnalyticsService(store, clock=clock).compute_workout_analytics("u1", JUNE)

        assert result.total_workouts == 2
        assert result.total_sets == 12
        assert result.total_volume == 12 * 500.0
        assert result.exercise_type_breakdown == {ExerciseType.STRENGTH: 4}

    async def test_program_scope(self, store, seed_week, clock):
        """Test a program id limits the rollup to that program."""
        first = await seed_week(workouts=1, exercises=1, sets=2, created_at=IN_JUNE)
        await seed_week(workouts=1, exercises=1, sets=5, created_at=IN_JUNE)
        service = AnalyticsService(store, clock=clock)

        scoped = await service.compute_workout_analytics("u1", JUNE, program_id=first.program_id)
        everything = await service.compute_workout_analytics("u1", JUNE)

        assert scoped.total_sets == 2
        assert scoped.program_id == first.program_id
        assert everything.total_sets == 7

    async def test_archived_programs_excluded_from_all(self, store, seed_week, clock):
        """Test analytics across programs skip archived ones."""
        await seed_week(workouts=1, exercises=1, sets=2, created_at=IN_JUNE)
        archived = await seed_week(workouts=1, exercises=1, sets=5, created_at=IN_JUNE)
        await ProgramRepository(store).archive("u1", archived.program_id)

        service = AnalyticsService(store, clock=clock)
        assert (await service.compute_workout_analytics("u1", JUNE)).total_sets == 2
        scoped = await service.compute_workout_analytics(
            "u1", JUNE, program_id=archived.program_id
        )
        assert scoped.total_sets == 5

    async def test_users_are_isolated(self, store, seed_week, clock):
        """Test one user's data never shows up for another."""
        await seed_week(user_id="u2", created_at=IN_JUNE)
        result = await AnalyticsService(store, clock=clock).compute_workout_analytics("u1", JUNE)
        assert result.total_workouts == 0

    async def test_key_statistics(self, store, seed_week, clock):
        """Test dashboard figures."""
        await seed_week(workouts=2, exercises=1, sets=2, created_at=IN_JUNE)
        await seed_week(workouts=1, exercises=1, sets=2, created_at=IN_JUNE, checked=False)

        stats = await AnalyticsService(store, clock=clock).compute_key_statistics("u1", JUNE)

        assert stats["total_workouts"] == 3
        assert stats["total_sets"] == 6
        assert stats["completion_percentage"] == 4 / 6 * 100
        assert stats["most_used_exercise_type"] == "Strength"
        assert stats["workouts_per_week"] == 3 / (30 / 7)
        assert stats["new_prs"] > 0

    async def test_key_statistics_empty(self, store, clock):
        """Test dashboard figures without data."""
        stats = await AnalyticsService(store, clock=clock).compute_key_statistics("u1", JUNE)
        assert stats["most_used_exercise_type"] == "None"
        assert stats["completion_percentage"] == 0.0
        assert stats["new_prs"] == 0

    async def test_set_heatmap_counts_checked_sets(self, store, seed_week, clock):
        """Test heatmaps count checked sets on the day they were logged."""
        await seed_week(workouts=1, exercises=2, sets=3, created_at=IN_JUNE)
        await seed_week(workouts=1, exercises=1, sets=4, created_at=IN_JUNE, checked=False)

        data = await AnalyticsService(store, clock=clock).get_month_heatmap_data("u1", 2024, 6)

        assert data.total_sets == 6
        assert data.get_set_count_for_day(10) == 6
        assert data.current_streak == 0
        assert data.longest_streak == 1
        assert data.fetched_at == clock.now

    async def test_workout_heatmap(self, store, seed_week, clock):
        """Test the year heatmap counts workouts."""
        await seed_week(workouts=3, exercises=0, created_at=IN_JUNE)
        data = await AnalyticsService(store, clock=clock).generate_heatmap_data("u1", 2024)
        assert data.get_set_count_for_date(date(2024, 6, 10)) == 3

    async def test_personal_records_newest_first(self, store, seed_week, clock):
        """Test records are detected across weeks and sorted newest first."""
        first = await seed_week(workouts=1, exercises=1, sets=1, created_at=IN_JUNE, weight=100.0)
        await seed_week(
            program_id=first.program_id,
            workouts=1,
            exercises=1,
            sets=1,
            created_at=datetime(2024, 6, 17, 18, 0),
            weight=105.0,
        )
        service = AnalyticsService(store, clock=clock)

        records = await service.get_personal_records("u1")
        # Each week has its own exercise document, so each is a first record
        assert records[0].achieved_at == datetime(2024, 6, 17, 18, 0)
        assert len(await service.get_personal_records("u1", limit=1)) == 1
        assert await service.get_personal_records("u1", exercise_type=ExerciseType.CARDIO) == []

    async def test_check_for_new_pr(self, store, seed_week, clock):
        """Test a new set is compared against its exercise's history."""
        seeded = await seed_week(workouts=1, exercises=1, sets=2, created_at=IN_JUNE)
        workout_id, exercise_id = seeded.exercise_ids[0]
        ex = await ExerciseRepository(store).get(
            "u1", seeded.program_id, seeded.week_id, workout_id, exercise_id
        )
        heavier = ExerciseSet(
            set_number=3,
            exercise_id=exercise_id,
            workout_id=workout_id,
            week_id=seeded.week_id,
            program_id=seeded.program_id,
            user_id="u1",
            reps=5,
            weight=110.0,
        )
        heavier.id = await SetRepository(store).create(heavier)

        record = await AnalyticsService(store, clock=clock).check_for_new_pr(heavier, ex)
        assert record.pr_type == PRType.MAX_WEIGHT
        assert record.improvement_string == "+10"

    async def test_results_are_cached(self, store, seed_week, clock):
        """Test repeat requests are served from the cache."""
        service = AnalyticsService(store, clock=clock)
        first = await service.compute_workout_analytics("u1", JUNE)
        await seed_week(created_at=IN_JUNE)

        assert await service.compute_workout_analytics("u1", JUNE) is first
        service.clear_cache()
        assert (await service.compute_workout_analytics("u1", JUNE)).total_workouts == 2

    async def test_programs_only_for_user(self, store, clock):
        """Test an unrelated program with no data changes nothing."""
        await ProgramRepository(store).create(Program(name="Empty", user_id="u1"))
        result = await AnalyticsService(store, clock=clock).compute_workout_analytics("u1", JUNE)
        assert result.total_workouts == 0
