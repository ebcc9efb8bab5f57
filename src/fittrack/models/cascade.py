"""Cascade delete value types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CascadeDeleteCounts:
    """Descendants that a cascade delete would remove.

    Used to tell the user the scope of a delete before they confirm it.
    The deleted node itself is never counted.
    """

    workouts: int = 0
    exercises: int = 0
    sets: int = 0

    @property
    def total_items(self) -> int:
        return self.workouts + self.exercises + self.sets

    @property
    def has_items(self) -> bool:
        return self.total_items > 0

    def get_summary(self) -> str:
        """Comma-separated summary, e.g. "3 workouts, 9 exercises, 27 sets".

        Zero-valued categories are omitted; returns "" when nothing would be
        deleted.
        """
        parts = []
        for count, noun in (
            (self.workouts, "workout"),
            (self.exercises, "exercise"),
            (self.sets, "set"),
        ):
            if count > 0:
                parts.append(f"{count} {noun}{'s' if count > 1 else ''}")
        return ", ".join(parts)

    def to_dict(self) -> dict:
        return {
            "workouts": self.workouts,
            "exercises": self.exercises,
            "sets": self.sets,
            "total_items": self.total_items,
            "summary": self.get_summary(),
        }


@dataclass(frozen=True)
class CascadeDeleteResult:
    """Outcome of a completed cascade delete."""

    target: str
    deleted_documents: int
    batches: int

    def to_dict(self) -> dict:
        return {
            "target": self.target,
            "deleted_documents": self.deleted_documents,
            "batches": self.batches,
        }
