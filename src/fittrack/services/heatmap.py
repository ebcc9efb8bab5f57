"""Heatmap generation: per-day activity counts and streaks."""

from collections import Counter
from collections.abc import Iterable
from datetime import date, datetime, timedelta

from ..models.analytics import ActivityHeatmapData, DateRange
from ..models.training import ExerciseSet, Workout


def calculate_streaks(days: Iterable[date], today: date) -> tuple[int, int]:
    """Return (current, longest) runs of consecutive active days.

    The current streak is the run ending exactly on ``today``; it is 0 when
    today has no activity, even if yesterday did.
    """
    active = set(days)
    if not active:
        return 0, 0

    longest = 0
    run = 0
    previous: date | None = None
    for day in sorted(active):
        if previous is not None and day - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day

    current = 0
    day = today
    while day in active:
        current += 1
        day -= timedelta(days=1)

    return current, longest


def _build(
    user_id: str,
    year: int,
    counts: Counter,
    today: date | None,
    fetched_at: datetime | None,
    **scope,
) -> ActivityHeatmapData:
    daily = dict(counts)
    current, longest = calculate_streaks(daily, today or date.today())
    return ActivityHeatmapData(
        user_id=user_id,
        year=year,
        daily_set_counts=daily,
        total_sets=sum(daily.values()),
        current_streak=current,
        longest_streak=longest,
        fetched_at=fetched_at or datetime.now(),
        **scope,
    )


def generate_heatmap_from_workouts(
    user_id: str,
    year: int,
    workouts: Iterable[Workout],
    program_id: str | None = None,
    today: date | None = None,
    fetched_at: datetime | None = None,
) -> ActivityHeatmapData:
    """Year heatmap counting workouts created on each day."""
    counts: Counter = Counter(
        w.created_at.date()
        for w in workouts
        if w.created_at is not None and w.created_at.year == year
    )
    return _build(user_id, year, counts, today, fetched_at, program_id=program_id)


def generate_set_based_heatmap(
    user_id: str,
    date_range: DateRange,
    sets: Iterable[ExerciseSet],
    program_id: str | None = None,
    today: date | None = None,
    fetched_at: datetime | None = None,
    month: int | None = None,
) -> ActivityHeatmapData:
    """Heatmap counting checked sets per calendar day of ``date_range``.

    Unchecked sets are planned work, not activity, and are never counted.
    """
    counts: Counter = Counter(
        s.created_at.date()
        for s in sets
        if s.checked and s.created_at is not None and date_range.contains(s.created_at)
    )
    return _build(
        user_id,
        date_range.start.year,
        counts,
        today,
        fetched_at,
        month=month,
        date_range=date_range,
        program_id=program_id,
    )


def generate_month_heatmap(
    user_id: str,
    year: int,
    month: int,
    sets: Iterable[ExerciseSet],
    program_id: str | None = None,
    today: date | None = None,
    fetched_at: datetime | None = None,
) -> ActivityHeatmapData:
    return generate_set_based_heatmap(
        user_id,
        DateRange.for_month(year, month),
        sets,
        program_id=program_id,
        today=today,
        fetched_at=fetched_at,
        month=month,
    )
