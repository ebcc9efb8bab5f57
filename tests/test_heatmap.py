"""Tests for heatmap generation."""

from datetime import date, datetime

from fittrack.models import DateRange, ExerciseSet, HeatmapIntensity, Workout
from fittrack.services.heatmap import (
    calculate_streaks,
    generate_heatmap_from_workouts,
    generate_month_heatmap,
    generate_set_based_heatmap,
)


def make_set(created_at: datetime, checked: bool = True) -> ExerciseSet:
    return ExerciseSet(
        set_number=1,
        exercise_id="e1",
        workout_id="o1",
        week_id="w1",
        program_id="p1",
        user_id="u1",
        reps=5,
        checked=checked,
        created_at=created_at,
    )


class TestCalculateStreaks:
    """Tests for calculate_streaks."""

    def test_no_activity(self):
        """Test empty input has no streaks."""
        assert calculate_streaks([], date(2024, 6, 15)) == (0, 0)

    def test_current_streak_ends_today(self):
        """Test the current streak counts back from today."""
        days = [date(2024, 6, 13), date(2024, 6, 14), date(2024, 6, 15)]
        assert calculate_streaks(days, date(2024, 6, 15)) == (3, 3)

    def test_no_activity_today_resets_current(self):
        """Test a gap today means no current streak."""
        days = [date(2024, 6, 13), date(2024, 6, 14)]
        assert calculate_streaks(days, date(2024, 6, 15)) == (0, 2)

    def test_longest_run(self):
        """Test the longest run is found among several."""
        days = [
            date(2024, 1, 30),
            date(2024, 1, 31),
            date(2024, 2, 1),
            date(2024, 2, 2),
            date(2024, 2, 10),
            date(2024, 2, 11),
        ]
        assert calculate_streaks(days, date(2024, 2, 11)) == (2, 4)


class TestSetBasedHeatmap:
    """Tests for generate_set_based_heatmap."""

    def test_unchecked_sets_ignored(self):
        """Test only checked sets count."""
        sets = [
            make_set(datetime(2024, 6, 1, 9)),
            make_set(datetime(2024, 6, 1, 10), checked=False),
        ]
        data = generate_set_based_heatmap(
            "u1", DateRange.for_month(2024, 6), sets, today=date(2024, 6, 30)
        )
        assert data.total_sets == 1
        assert data.get_set_count_for_date(date(2024, 6, 1)) == 1

    def test_range_bounds_exact(self):
        """Test sets at the edges of the range land on their own day."""
        sets = [
            make_set(datetime(2024, 5, 31, 23, 59, 59)),
            make_set(datetime(2024, 6, 1, 0, 0)),
            make_set(datetime(2024, 6, 30, 23, 59, 59)),
            make_set(datetime(2024, 7, 1, 0, 0)),
        ]
        data = generate_set_based_heatmap(
            "u1", DateRange.for_month(2024, 6), sets, today=date(2024, 7, 15)
        )
        assert data.total_sets == 2
        assert set(data.daily_set_counts) == {date(2024, 6, 1), date(2024, 6, 30)}

    def test_intensity_per_day(self):
        """Test daily counts map onto intensity bands."""
        sets = (
            [make_set(datetime(2024, 6, 1, 9))]
            + [make_set(datetime(2024, 6, 2, 9))] * 8
            + [make_set(datetime(2024, 6, 3, 9))] * 20
            + [make_set(datetime(2024, 6, 4, 9))] * 30
        )
        data = generate_set_based_heatmap(
            "u1", DateRange.for_month(2024, 6), sets, today=date(2024, 6, 4)
        )
        assert [data.get_intensity_for_date(date(2024, 6, d)) for d in range(1, 6)] == [
            HeatmapIntensity.LOW,
            HeatmapIntensity.MEDIUM,
            HeatmapIntensity.HIGH,
            HeatmapIntensity.VERY_HIGH,
            HeatmapIntensity.NONE,
        ]
        assert data.current_streak == 4
        assert data.longest_streak == 4

    def test_stamps_fetched_at(self):
        """Test the heatmap carries its fetch time."""
        fetched = datetime(2024, 6, 15, 12, 0)
        data = generate_set_based_heatmap(
            "u1", DateRange.for_month(2024, 6), [], fetched_at=fetched, program_id="p1"
        )
        assert data.fetched_at == fetched
        assert data.program_id == "p1"


class TestMonthHeatmap:
    """Tests for generate_month_heatmap."""

    def test_february_non_leap(self):
        """Test February 2023 has 28 days and day 29 reads zero."""
        data = generate_month_heatmap(
            "u1", 2023, 2, [make_set(datetime(2023, 2, 28, 18))], today=date(2023, 3, 1)
        )
        assert data.month == 2
        assert data.days_in_month == 28
        assert data.get_set_count_for_day(28) == 1
        assert data.get_set_count_for_day(29) == 0
        assert len(data.get_heatmap_days()) == 28

    def test_april_has_thirty_days(self):
        """Test day 31 of April reads zero."""
        data = generate_month_heatmap("u1", 2024, 4, [], today=date(2024, 4, 30))
        assert data.days_in_month == 30
        assert data.get_set_count_for_day(31) == 0


class TestWorkoutHeatmap:
    """Tests for generate_heatmap_from_workouts."""

    def test_counts_workouts_in_year(self):
        """Test workouts are counted per day of the year only."""
        workouts = [
            Workout(
                name="A", week_id="w1", program_id="p1", user_id="u1",
                created_at=datetime(2024, 3, 5, 18),
            ),
            Workout(
                name="B", week_id="w1", program_id="p1", user_id="u1",
                created_at=datetime(2024, 3, 5, 19),
            ),
            Workout(
                name="C", week_id="w1", program_id="p1", user_id="u1",
                created_at=datetime(2023, 12, 31, 18),
            ),
        ]
        data = generate_heatmap_from_workouts("u1", 2024, workouts, today=date(2024, 3, 5))

        assert data.total_sets == 2
        assert data.get_intensity_for_date(date(2024, 3, 5)) == HeatmapIntensity.MEDIUM
        assert data.current_streak == 1
        assert len(data.get_heatmap_days()) == 366
