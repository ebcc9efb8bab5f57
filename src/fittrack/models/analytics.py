"""Analytics value types: date ranges, rollups, heatmaps and personal records."""

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum

from .training import ExerciseType, format_number

# How long fetched analytics stay fresh
CACHE_VALID_DURATION = timedelta(minutes=5)


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


@dataclass(frozen=True)
class DateRange:
    """An inclusive [start, end] interval of instants."""

    start: datetime
    end: datetime

    @classmethod
    def this_week(cls, now: datetime | None = None) -> "DateRange":
        """Monday 00:00 through the end of Sunday of the current week."""
        now = now or datetime.now()
        week_start = now.date() - timedelta(days=now.weekday())
        week_end = week_start + timedelta(days=6)
        return cls(
            start=datetime.combine(week_start, time.min),
            end=datetime.combine(week_end, time.max),
        )

    @classmethod
    def this_month(cls, now: datetime | None = None) -> "DateRange":
        now = now or datetime.now()
        return cls.for_month(now.year, now.month)

    @classmethod
    def this_year(cls, now: datetime | None = None) -> "DateRange":
        now = now or datetime.now()
        return cls.for_year(now.year)

    @classmethod
    def last_30_days(cls, now: datetime | None = None) -> "DateRange":
        """Thirty calendar days ending today, today included."""
        now = now or datetime.now()
        end = datetime.combine(now.date(), time.max)
        start = datetime.combine(now.date() - timedelta(days=29), time.min)
        return cls(start=start, end=end)

    @classmethod
    def for_month(cls, year: int, month: int) -> "DateRange":
        """First instant to last microsecond of a calendar month."""
        last_day = calendar.monthrange(year, month)[1]
        return cls(
            start=datetime(year, month, 1),
            end=datetime.combine(date(year, month, last_day), time.max),
        )

    @classmethod
    def for_year(cls, year: int) -> "DateRange":
        return cls(
            start=datetime(year, 1, 1),
            end=datetime.combine(date(year, 12, 31), time.max),
        )

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    def contains_date(self, day: date) -> bool:
        return self.start.date() <= day <= self.end.date()

    @property
    def duration_in_days(self) -> int:
        return (self.end.date() - self.start.date()).days + 1

    def iter_days(self):
        """Yield every calendar date covered by the range."""
        current = self.start.date()
        last = self.end.date()
        while current <= last:
            yield current
            current += timedelta(days=1)

    def to_dict(self) -> dict:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass
class WorkoutAnalytics:
    """Rollup of training activity over a date range."""

    user_id: str
    date_range: DateRange
    total_workouts: int = 0
    total_sets: int = 0
    total_volume: float = 0.0  # sum of weight * reps
    total_duration: int = 0  # seconds
    exercise_type_breakdown: dict[ExerciseType, int] = field(default_factory=dict)
    completed_workout_ids: set[str] = field(default_factory=set)
    program_id: str | None = None

    @property
    def average_sets_per_workout(self) -> float:
        if self.total_workouts == 0:
            return 0.0
        return self.total_sets / self.total_workouts

    @property
    def average_workout_duration(self) -> float:
        """Average duration in minutes."""
        if self.total_workouts == 0:
            return 0.0
        return self.total_duration / self.total_workouts / 60.0

    @property
    def most_used_exercise_type(self) -> ExerciseType | None:
        """Type with the most exercises; ties go to the earlier declared type."""
        best = None
        best_count = 0
        for exercise_type in ExerciseType:
            count = self.exercise_type_breakdown.get(exercise_type, 0)
            if count > best_count:
                best, best_count = exercise_type, count
        return best

    def to_dict(self) -> dict:
        most_used = self.most_used_exercise_type
        return {
            "user_id": self.user_id,
            "program_id": self.program_id,
            "date_range": self.date_range.to_dict(),
            "total_workouts": self.total_workouts,
            "total_sets": self.total_sets,
            "total_volume": self.total_volume,
            "total_duration": self.total_duration,
            "average_sets_per_workout": self.average_sets_per_workout,
            "average_workout_duration": self.average_workout_duration,
            "exercise_type_breakdown": {
                t.value: count for t, count in self.exercise_type_breakdown.items()
            },
            "most_used_exercise_type": most_used.value if most_used else None,
            "completed_workout_ids": sorted(self.completed_workout_ids),
        }


class HeatmapIntensity(str, Enum):
    """Activity level of a single day.

    Bands by count: 0 none, 1 low, 2-19 medium, 20-29 high, 30+ very high.
    """

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very_high"

    @classmethod
    def from_count(cls, count: int) -> "HeatmapIntensity":
        if count <= 0:
            return cls.NONE
        if count == 1:
            return cls.LOW
        if count < 20:
            return cls.MEDIUM
        if count < 30:
            return cls.HIGH
        return cls.VERY_HIGH

    @property
    def display_name(self) -> str:
        return {
            HeatmapIntensity.NONE: "No activity",
            HeatmapIntensity.LOW: "Light activity",
            HeatmapIntensity.MEDIUM: "Moderate activity",
            HeatmapIntensity.HIGH: "High activity",
            HeatmapIntensity.VERY_HIGH: "Very high activity",
        }[self]


@dataclass(frozen=True)
class HeatmapDay:
    """One cell of a heatmap."""

    date: date
    count: int
    intensity: HeatmapIntensity


@dataclass
class ActivityHeatmapData:
    """Per-day activity counts with streaks.

    Scope is a whole year, a single month (``month`` set) or an explicit
    ``date_range``. Counts are checked sets for set-based heatmaps and
    workouts for the legacy workout heatmap.
    """

    user_id: str
    year: int
    daily_set_counts: dict[date, int]
    total_sets: int
    current_streak: int = 0
    longest_streak: int = 0
    month: int | None = None
    date_range: DateRange | None = None
    program_id: str | None = None
    fetched_at: datetime = field(default_factory=datetime.now)

    @property
    def days_in_month(self) -> int:
        if self.month is None:
            raise ValueError("Heatmap is not scoped to a month")
        return calendar.monthrange(self.year, self.month)[1]

    def get_set_count_for_date(self, day: date | datetime) -> int:
        return self.daily_set_counts.get(_as_date(day), 0)

    def get_intensity_for_date(self, day: date | datetime) -> HeatmapIntensity:
        return HeatmapIntensity.from_count(self.get_set_count_for_date(day))

    def get_set_count_for_day(self, day: int) -> int:
        """Count for a day of the scoped month; days the month lacks read 0."""
        if not 1 <= day <= self.days_in_month:
            return 0
        return self.get_set_count_for_date(date(self.year, self.month, day))

    def get_heatmap_days(self) -> list[HeatmapDay]:
        """Every day in scope, including days without activity."""
        if self.date_range is not None:
            scope = self.date_range
        elif self.month is not None:
            scope = DateRange.for_month(self.year, self.month)
        else:
            scope = DateRange.for_year(self.year)
        return [
            HeatmapDay(
                date=day,
                count=self.get_set_count_for_date(day),
                intensity=self.get_intensity_for_date(day),
            )
            for day in scope.iter_days()
        ]

    def is_cache_valid(
        self, now: datetime | None = None, ttl: timedelta = CACHE_VALID_DURATION
    ) -> bool:
        now = now or datetime.now()
        return now - self.fetched_at < ttl

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "year": self.year,
            "month": self.month,
            "program_id": self.program_id,
            "date_range": self.date_range.to_dict() if self.date_range else None,
            "daily_set_counts": {
                day.isoformat(): count
                for day, count in sorted(self.daily_set_counts.items())
            },
            "total_sets": self.total_sets,
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "fetched_at": self.fetched_at.isoformat(),
        }


class PRType(str, Enum):
    """Kinds of personal record."""

    ONE_REP_MAX = "one_rep_max"
    MAX_WEIGHT = "max_weight"
    MAX_REPS = "max_reps"
    MAX_VOLUME = "max_volume"
    MAX_DURATION = "max_duration"
    MAX_DISTANCE = "max_distance"

    @property
    def display_name(self) -> str:
        return {
            PRType.ONE_REP_MAX: "1RM",
            PRType.MAX_WEIGHT: "Max Weight",
            PRType.MAX_REPS: "Max Reps",
            PRType.MAX_VOLUME: "Volume PR",
            PRType.MAX_DURATION: "Max Duration",
            PRType.MAX_DISTANCE: "Max Distance",
        }[self]


@dataclass
class PersonalRecord:
    """A set that beat the previous best for one metric of an exercise."""

    id: str
    user_id: str
    exercise_id: str
    exercise_name: str
    exercise_type: ExerciseType
    pr_type: PRType
    value: float
    achieved_at: datetime
    workout_id: str
    set_id: str
    previous_value: float | None = None

    @property
    def improvement(self) -> float:
        """value - previous_value; the value itself for a first record."""
        if self.previous_value is None:
            return self.value
        return self.value - self.previous_value

    @property
    def improvement_string(self) -> str:
        if self.previous_value is None:
            return "New PR!"
        diff = self.improvement
        prefix = "+" if diff > 0 else ""
        return f"{prefix}{format_number(diff)}"

    @property
    def display_value(self) -> str:
        value = self.value
        if self.pr_type == PRType.MAX_WEIGHT:
            return f"{format_number(value)}kg"
        if self.pr_type == PRType.MAX_REPS:
            return f"{int(value)} reps"
        if self.pr_type == PRType.MAX_DURATION:
            # Under two minutes reads better in seconds
            if value < 120:
                return f"{int(value)}s"
            minutes, seconds = divmod(int(value), 60)
            return f"{minutes}m" if seconds == 0 else f"{minutes}m {seconds}s"
        if self.pr_type == PRType.MAX_DISTANCE:
            return f"{value / 1000:.2f}km" if value >= 1000 else f"{value:.0f}m"
        if self.pr_type == PRType.MAX_VOLUME:
            return f"{value:.0f} vol"
        return f"{value:.0f}kg (1RM)"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "exercise_id": self.exercise_id,
            "exercise_name": self.exercise_name,
            "exercise_type": self.exercise_type.value,
            "pr_type": self.pr_type.value,
            "value": self.value,
            "previous_value": self.previous_value,
            "improvement": self.improvement,
            "improvement_string": self.improvement_string,
            "display_value": self.display_value,
            "achieved_at": self.achieved_at.isoformat(),
            "workout_id": self.workout_id,
            "set_id": self.set_id,
        }
