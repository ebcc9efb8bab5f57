"""Data access layer for the training hierarchy."""

from ..errors import NotFoundError, OwnershipError, ValidationError
from ..models.training import Exercise, ExerciseSet, Program, Week, Workout
from . import paths
from .store import Document, DocumentStore, Filter


def document_to_entity(doc: Document, entity_cls):
    """Build a model instance from a stored document."""
    return entity_cls.from_dict(
        doc.data, id=doc.id, created_at=doc.created_at, updated_at=doc.updated_at
    )


class _Repository:
    def __init__(self, store: DocumentStore | None = None):
        self.store = store if store is not None else DocumentStore()

    @staticmethod
    def _check_owner(user_id: str, entity) -> None:
        if entity.user_id != user_id:
            raise OwnershipError(
                f"{type(entity).__name__} belongs to {entity.user_id!r}, not {user_id!r}"
            )

    async def _ensure_exists(self, path: str) -> Document:
        doc = await self.store.get(path)
        if doc is None:
            raise NotFoundError(f"No document at {path}")
        return doc

    @staticmethod
    def _check_name(entity) -> None:
        if not entity.is_valid_name:
            raise ValidationError(f"Invalid {type(entity).__name__.lower()} name: {entity.name!r}")


class ProgramRepository(_Repository):
    """Repository for programs."""

    async def create(self, program: Program) -> str:
        """Create a new program."""
        self._check_name(program)
        if not program.is_valid_description:
            raise ValidationError("Program description is longer than 500 characters")
        return await self.store.add(paths.programs_path(program.user_id), program.to_dict())

    async def get(self, user_id: str, program_id: str) -> Program | None:
        doc = await self.store.get(paths.program_path(user_id, program_id))
        return document_to_entity(doc, Program) if doc else None

    async def list_all(self, user_id: str) -> list[Program]:
        """List all programs, newest first, archived included."""
        docs = await self.store.list_documents(paths.programs_path(user_id))
        return [document_to_entity(d, Program) for d in reversed(docs)]

    async def list_active(self, user_id: str) -> list[Program]:
        """List programs that are not archived, newest first."""
        docs = await self.store.list_documents(
            paths.programs_path(user_id),
            filters=[Filter("is_archived", "==", False)],
        )
        return [document_to_entity(d, Program) for d in reversed(docs)]

    async def update(self, user_id: str, program: Program) -> None:
        if program.id is None:
            raise ValueError("Program must have an ID to update")
        self._check_owner(user_id, program)
        self._check_name(program)
        await self.store.update(paths.program_path(user_id, program.id), program.to_dict())

    async def archive(self, user_id: str, program_id: str) -> None:
        """Soft-delete a program. Its weeks and workouts are left in place."""
        await self.store.update(
            paths.program_path(user_id, program_id), {"is_archived": True}
        )


class WeekRepository(_Repository):
    """Repository for weeks."""

    async def create(self, week: Week) -> str:
        self._check_name(week)
        await self._ensure_exists(paths.program_path(week.user_id, week.program_id))
        return await self.store.add(
            paths.weeks_path(week.user_id, week.program_id), week.to_dict()
        )

    async def get(self, user_id: str, program_id: str, week_id: str) -> Week | None:
        doc = await self.store.get(paths.week_path(user_id, program_id, week_id))
        return document_to_entity(doc, Week) if doc else None

    async def list(self, user_id: str, program_id: str) -> list[Week]:
        docs = await self.store.list_documents(
            paths.weeks_path(user_id, program_id), order_by="order"
        )
        return [document_to_entity(d, Week) for d in docs]

    async def update(self, user_id: str, week: Week) -> None:
        if week.id is None:
            raise ValueError("Week must have an ID to update")
        self._check_owner(user_id, week)
        await self.store.update(
            paths.week_path(user_id, week.program_id, week.id), week.to_dict()
        )


class WorkoutRepository(_Repository):
    """Repository for workouts."""

    async def create(self, workout: Workout, created_at=None) -> str:
        self._check_name(workout)
        if not workout.is_valid_day_of_week:
            raise ValidationError(f"day_of_week must be 0-6, got {workout.day_of_week}")
        await self._ensure_exists(
            paths.week_path(workout.user_id, workout.program_id, workout.week_id)
        )
        return await self.store.add(
            paths.workouts_path(workout.user_id, workout.program_id, workout.week_id),
            workout.to_dict(),
            created_at=created_at,
        )

    async def get(
        self, user_id: str, program_id: str, week_id: str, workout_id: str
    ) -> Workout | None:
        doc = await self.store.get(paths.workout_path(user_id, program_id, week_id, workout_id))
        return document_to_entity(doc, Workout) if doc else None

    async def list(self, user_id: str, program_id: str, week_id: str) -> list[Workout]:
        docs = await self.store.list_documents(
            paths.workouts_path(user_id, program_id, week_id), order_by="order_index"
        )
        return [document_to_entity(d, Workout) for d in docs]

    async def update(self, user_id: str, workout: Workout) -> None:
        if workout.id is None:
            raise ValueError("Workout must have an ID to update")
        self._check_owner(user_id, workout)
        await self.store.update(
            paths.workout_path(user_id, workout.program_id, workout.week_id, workout.id),
            workout.to_dict(),
        )


class ExerciseRepository(_Repository):
    """Repository for exercises."""

    async def create(self, exercise: Exercise, created_at=None) -> str:
        self._check_name(exercise)
        await self._ensure_exists(
            paths.workout_path(
                exercise.user_id, exercise.program_id, exercise.week_id, exercise.workout_id
            )
        )
        return await self.store.add(
            paths.exercises_path(
                exercise.user_id, exercise.program_id, exercise.week_id, exercise.workout_id
            ),
            exercise.to_dict(),
            created_at=created_at,
        )

    async def get(
        self, user_id: str, program_id: str, week_id: str, workout_id: str, exercise_id: str
    ) -> Exercise | None:
        doc = await self.store.get(
            paths.exercise_path(user_id, program_id, week_id, workout_id, exercise_id)
        )
        return document_to_entity(doc, Exercise) if doc else None

    async def list(
        self, user_id: str, program_id: str, week_id: str, workout_id: str
    ) -> list[Exercise]:
        docs = await self.store.list_documents(
            paths.exercises_path(user_id, program_id, week_id, workout_id),
            order_by="order_index",
        )
        return [document_to_entity(d, Exercise) for d in docs]

    async def update(self, user_id: str, exercise: Exercise) -> None:
        if exercise.id is None:
            raise ValueError("Exercise must have an ID to update")
        self._check_owner(user_id, exercise)
        await self.store.update(
            paths.exercise_path(
                user_id, exercise.program_id, exercise.week_id, exercise.workout_id, exercise.id
            ),
            exercise.to_dict(),
        )


class SetRepository(_Repository):
    """Repository for exercise sets."""

    async def create(self, exercise_set: ExerciseSet, created_at=None) -> str:
        """Create a set after validating it against its exercise type."""
        s = exercise_set
        parent = await self._ensure_exists(
            paths.exercise_path(s.user_id, s.program_id, s.week_id, s.workout_id, s.exercise_id)
        )
        exercise = document_to_entity(parent, Exercise)
        if not s.is_valid(exercise.exercise_type):
            raise ValidationError(
                f"Set is missing metrics required for {exercise.exercise_type.value} "
                f"exercises: {', '.join(exercise.required_set_fields) or 'any metric'}"
            )
        return await self.store.add(
            paths.sets_path(s.user_id, s.program_id, s.week_id, s.workout_id, s.exercise_id),
            s.to_dict(),
            created_at=created_at,
        )

    async def list(
        self, user_id: str, program_id: str, week_id: str, workout_id: str, exercise_id: str
    ) -> list[ExerciseSet]:
        docs = await self.store.list_documents(
            paths.sets_path(user_id, program_id, week_id, workout_id, exercise_id),
            order_by="set_number",
        )
        return [document_to_entity(d, ExerciseSet) for d in docs]

    async def update(self, user_id: str, exercise_set: ExerciseSet) -> None:
        s = exercise_set
        if s.id is None:
            raise ValueError("Set must have an ID to update")
        self._check_owner(user_id, s)
        await self.store.update(
            paths.set_path(user_id, s.program_id, s.week_id, s.workout_id, s.exercise_id, s.id),
            s.to_dict(),
        )

    async def set_checked(self, user_id: str, exercise_set: ExerciseSet, checked: bool) -> None:
        """Mark a set completed or not."""
        s = exercise_set
        await self.store.update(
            paths.set_path(user_id, s.program_id, s.week_id, s.workout_id, s.exercise_id, s.id),
            {"checked": checked},
        )
        s.checked = checked
