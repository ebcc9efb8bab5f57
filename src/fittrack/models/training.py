"""Training hierarchy models: Program > Week > Workout > Exercise > Set."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ExerciseType(str, Enum):
    """Exercise categories.

    Declaration order is significant: it breaks ties when picking the most
    used exercise type.
    """

    STRENGTH = "strength"
    CARDIO = "cardio"
    BODYWEIGHT = "bodyweight"
    CUSTOM = "custom"
    TIME_BASED = "time_based"

    @property
    def display_name(self) -> str:
        return _EXERCISE_TYPE_NAMES[self]

    @classmethod
    def from_string(cls, value: str) -> "ExerciseType":
        """Parse a stored value, accepting legacy spellings of time-based."""
        normalized = value.strip().lower().replace("-", "_")
        if normalized in ("timebased", "time_based"):
            return cls.TIME_BASED
        try:
            return cls(normalized)
        except ValueError:
            return cls.CUSTOM


_EXERCISE_TYPE_NAMES = {
    ExerciseType.STRENGTH: "Strength",
    ExerciseType.CARDIO: "Cardio",
    ExerciseType.BODYWEIGHT: "Bodyweight",
    ExerciseType.CUSTOM: "Custom",
    ExerciseType.TIME_BASED: "Time-based",
}

SET_METRIC_FIELDS = ("reps", "weight", "duration", "distance", "rest_time")

# exercise type -> (required set fields, optional set fields)
SET_FIELD_REQUIREMENTS: dict[ExerciseType, tuple[tuple[str, ...], tuple[str, ...]]] = {
    ExerciseType.STRENGTH: (("reps",), ("weight", "rest_time")),
    ExerciseType.CARDIO: (("duration",), ("distance",)),
    ExerciseType.TIME_BASED: (("duration",), ("distance",)),
    ExerciseType.BODYWEIGHT: (("reps",), ("rest_time",)),
    ExerciseType.CUSTOM: ((), SET_METRIC_FIELDS),
}


def _parse_dt(value) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _valid_name(name: str, max_length: int) -> bool:
    stripped = name.strip()
    return 0 < len(stripped) <= max_length


@dataclass
class Program:
    """A training program. Programs are archived, never hard-deleted."""

    name: str
    user_id: str
    description: str | None = None
    is_archived: bool = False
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_valid_name(self) -> bool:
        return _valid_name(self.name, 100)

    @property
    def is_valid_description(self) -> bool:
        return self.description is None or len(self.description) <= 500

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "name": self.name,
            "description": self.description,
            "is_archived": self.is_archived,
            "user_id": self.user_id,
        }

    @classmethod
    def from_dict(
        cls,
        data: dict,
        id: str | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> "Program":
        """Create from dictionary."""
        return cls(
            id=id,
            name=data["name"],
            description=data.get("description"),
            is_archived=data.get("is_archived", False),
            user_id=data["user_id"],
            created_at=_parse_dt(created_at),
            updated_at=_parse_dt(updated_at),
        )


@dataclass
class Week:
    """A week within a program."""

    name: str
    order: int
    program_id: str
    user_id: str
    notes: str | None = None
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_valid_name(self) -> bool:
        return _valid_name(self.name, 200)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "order": self.order,
            "notes": self.notes,
            "program_id": self.program_id,
            "user_id": self.user_id,
        }

    @classmethod
    def from_dict(
        cls,
        data: dict,
        id: str | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> "Week":
        return cls(
            id=id,
            name=data["name"],
            order=data.get("order", 0),
            notes=data.get("notes"),
            program_id=data["program_id"],
            user_id=data["user_id"],
            created_at=_parse_dt(created_at),
            updated_at=_parse_dt(updated_at),
        )


@dataclass
class Workout:
    """A workout (training day) within a week."""

    name: str
    week_id: str
    program_id: str
    user_id: str
    day_of_week: int | None = None  # 0 = Monday ... 6 = Sunday
    order_index: int = 0
    notes: str | None = None
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_valid_name(self) -> bool:
        return _valid_name(self.name, 200)

    @property
    def is_valid_day_of_week(self) -> bool:
        return self.day_of_week is None or 0 <= self.day_of_week <= 6

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "day_of_week": self.day_of_week,
            "order_index": self.order_index,
            "notes": self.notes,
            "week_id": self.week_id,
            "program_id": self.program_id,
            "user_id": self.user_id,
        }

    @classmethod
    def from_dict(
        cls,
        data: dict,
        id: str | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> "Workout":
        return cls(
            id=id,
            name=data["name"],
            day_of_week=data.get("day_of_week"),
            order_index=data.get("order_index", 0),
            notes=data.get("notes"),
            week_id=data["week_id"],
            program_id=data["program_id"],
            user_id=data["user_id"],
            created_at=_parse_dt(created_at),
            updated_at=_parse_dt(updated_at),
        )


@dataclass
class Exercise:
    """An exercise within a workout."""

    name: str
    exercise_type: ExerciseType
    workout_id: str
    week_id: str
    program_id: str
    user_id: str
    order_index: int = 0
    notes: str | None = None
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_valid_name(self) -> bool:
        return _valid_name(self.name, 200)

    @property
    def required_set_fields(self) -> tuple[str, ...]:
        return SET_FIELD_REQUIREMENTS[self.exercise_type][0]

    @property
    def optional_set_fields(self) -> tuple[str, ...]:
        return SET_FIELD_REQUIREMENTS[self.exercise_type][1]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "exercise_type": self.exercise_type.value,
            "order_index": self.order_index,
            "notes": self.notes,
            "workout_id": self.workout_id,
            "week_id": self.week_id,
            "program_id": self.program_id,
            "user_id": self.user_id,
        }

    @classmethod
    def from_dict(
        cls,
        data: dict,
        id: str | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> "Exercise":
        return cls(
            id=id,
            name=data["name"],
            exercise_type=ExerciseType.from_string(data.get("exercise_type", "custom")),
            order_index=data.get("order_index", 0),
            notes=data.get("notes"),
            workout_id=data["workout_id"],
            week_id=data["week_id"],
            program_id=data["program_id"],
            user_id=data["user_id"],
            created_at=_parse_dt(created_at),
            updated_at=_parse_dt(updated_at),
        )


@dataclass
class ExerciseSet:
    """A single set of an exercise.

    Which metrics are meaningful depends on the parent exercise type, see
    SET_FIELD_REQUIREMENTS.
    """

    set_number: int
    exercise_id: str
    workout_id: str
    week_id: str
    program_id: str
    user_id: str
    checked: bool = False
    reps: int | None = None
    weight: float | None = None  # kg
    duration: int | None = None  # seconds
    distance: float | None = None  # meters
    rest_time: int | None = None  # seconds
    notes: str | None = None
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def volume(self) -> float | None:
        """weight x reps, or None unless both are recorded."""
        if self.weight is None or self.reps is None:
            return None
        return self.weight * self.reps

    @property
    def has_at_least_one_metric(self) -> bool:
        return any(
            value is not None and value > 0
            for value in (self.reps, self.duration, self.distance)
        )

    @property
    def has_valid_numeric_values(self) -> bool:
        return all(
            getattr(self, name) is None or getattr(self, name) >= 0
            for name in SET_METRIC_FIELDS
        )

    def is_valid_for_exercise_type(self, exercise_type: ExerciseType) -> bool:
        """Check that every metric required by the exercise type is positive."""
        required, _ = SET_FIELD_REQUIREMENTS[exercise_type]
        if not required:
            return self.has_at_least_one_metric
        for name in required:
            value = getattr(self, name)
            if value is None or value <= 0:
                return False
        return True

    def is_valid(self, exercise_type: ExerciseType) -> bool:
        return (
            self.has_valid_numeric_values
            and self.set_number > 0
            and self.is_valid_for_exercise_type(exercise_type)
        )

    def get_display_string(self) -> str:
        """Human-readable summary, e.g. "12 reps x 100kg"."""
        parts = []
        if self.reps is not None:
            parts.append(f"{self.reps} reps")
        if self.weight is not None:
            parts.append(f"{format_number(self.weight)}kg")
        if self.duration is not None:
            minutes, seconds = divmod(self.duration, 60)
            parts.append(f"{minutes}m {seconds}s" if minutes else f"{seconds}s")
        if self.distance is not None:
            if self.distance >= 1000:
                parts.append(f"{self.distance / 1000:.2f}km")
            else:
                parts.append(f"{self.distance:.0f}m")
        if self.rest_time is not None:
            parts.append(f"rest: {self.rest_time}s")
        return " x ".join(parts) if parts else "Empty set"

    def to_dict(self) -> dict:
        return {
            "set_number": self.set_number,
            "checked": self.checked,
            "reps": self.reps,
            "weight": self.weight,
            "duration": self.duration,
            "distance": self.distance,
            "rest_time": self.rest_time,
            "notes": self.notes,
            "exercise_id": self.exercise_id,
            "workout_id": self.workout_id,
            "week_id": self.week_id,
            "program_id": self.program_id,
            "user_id": self.user_id,
        }

    @classmethod
    def from_dict(
        cls,
        data: dict,
        id: str | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> "ExerciseSet":
        return cls(
            id=id,
            set_number=data.get("set_number", 1),
            checked=bool(data.get("checked", False)),
            reps=data.get("reps"),
            weight=data.get("weight"),
            duration=data.get("duration"),
            distance=data.get("distance"),
            rest_time=data.get("rest_time"),
            notes=data.get("notes"),
            exercise_id=data["exercise_id"],
            workout_id=data["workout_id"],
            week_id=data["week_id"],
            program_id=data["program_id"],
            user_id=data["user_id"],
            created_at=_parse_dt(created_at),
            updated_at=_parse_dt(updated_at),
        )


def format_number(value: float) -> str:
    """Drop the decimal for whole numbers, keep one place otherwise."""
    return f"{value:.0f}" if value == round(value) else f"{value:.1f}"
