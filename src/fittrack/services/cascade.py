"""Cascade delete accounting and execution.

Counts tell the user how much a delete will remove before they confirm it.
The executor then removes the target and every descendant, deepest first, in
write batches that stay below the store's per-batch operation limit.

Each batch is atomic but the cascade as a whole is not: when a batch fails
after earlier ones committed, the subtree is left partially deleted and
``PartialCascadeDeleteError`` is raised. No rollback is attempted.
"""

import logging
from collections.abc import Sequence
from typing import TypeVar

from ..config import settings
from ..db import paths
from ..db.repositories import ProgramRepository
from ..db.store import StoreGateway
from ..errors import PartialCascadeDeleteError, StoreError
from ..models.cascade import CascadeDeleteCounts, CascadeDeleteResult
from .cache import AnalyticsCache

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Collections beneath each deletable level, deepest first
_WEEK_DESCENDANTS = (paths.SETS, paths.EXERCISES, paths.WORKOUTS)
_WORKOUT_DESCENDANTS = (paths.SETS, paths.EXERCISES)
_EXERCISE_DESCENDANTS = (paths.SETS,)


def chunk_operations(operations: Sequence[T], ceiling: int) -> list[list[T]]:
    """Split operations into consecutive chunks of at most ``ceiling`` items."""
    if ceiling < 1:
        raise ValueError(f"Batch ceiling must be positive, got {ceiling}")

    batches: list[list[T]] = []
    current: list[T] = []
    for op in operations:
        current.append(op)
        if len(current) == ceiling:
            batches.append(current)
            current = []
    if current:
        batches.append(current)
    return batches


class CascadeCountEngine:
    """Counts the descendants a delete would remove.

    Counting is done with server-side count queries, so the cost does not
    grow with the number of descendants. A missing target simply has no
    descendants; only store failures raise.
    """

    def __init__(self, store: StoreGateway):
        self.store = store

    async def get_cascade_delete_counts(
        self,
        user_id: str,
        program_id: str,
        week_id: str,
        workout_id: str | None = None,
        exercise_id: str | None = None,
    ) -> CascadeDeleteCounts:
        """Count what deleting the deepest given level would remove.

        Args:
            user_id: Owner of the hierarchy
            program_id: Program containing the target
            week_id: Week to delete, or the week containing the target
            workout_id: Workout to delete, or the workout containing the target
            exercise_id: Exercise to delete

        Returns:
            Counts of workouts, exercises and sets beneath the target
        """
        if exercise_id is not None:
            if workout_id is None:
                raise ValueError("exercise_id requires workout_id")
            target = paths.exercise_path(user_id, program_id, week_id, workout_id, exercise_id)
            sets = await self.store.count_descendants(target, paths.SETS)
            return CascadeDeleteCounts(sets=sets)

        if workout_id is not None:
            target = paths.workout_path(user_id, program_id, week_id, workout_id)
            return CascadeDeleteCounts(
                exercises=await self.store.count_descendants(target, paths.EXERCISES),
                sets=await self.store.count_descendants(target, paths.SETS),
            )

        target = paths.week_path(user_id, program_id, week_id)
        return CascadeDeleteCounts(
            workouts=await self.store.count_descendants(target, paths.WORKOUTS),
            exercises=await self.store.count_descendants(target, paths.EXERCISES),
            sets=await self.store.count_descendants(target, paths.SETS),
        )


class CascadeDeleteExecutor:
    """Deletes a node and its whole subtree in bounded batches."""

    def __init__(
        self,
        store: StoreGateway,
        batch_ceiling: int | None = None,
        cache: AnalyticsCache | None = None,
    ):
        """Initialize the executor.

        Args:
            store: Document store to delete from
            batch_ceiling: Maximum deletes per batch (defaults to settings)
            cache: Analytics cache to invalidate for the user after a delete
        """
        self.store = store
        self.batch_ceiling = (
            batch_ceiling if batch_ceiling is not None else settings.cascade_batch_ceiling
        )
        if self.batch_ceiling < 1:
            raise ValueError(f"Batch ceiling must be positive, got {self.batch_ceiling}")
        if self.batch_ceiling > store.max_batch_operations:
            raise ValueError(
                f"Batch ceiling {self.batch_ceiling} exceeds the store limit "
                f"of {store.max_batch_operations}"
            )
        self.cache = cache

    async def delete_week(
        self, user_id: str, program_id: str, week_id: str
    ) -> CascadeDeleteResult:
        """Delete a week with all of its workouts, exercises and sets."""
        target = paths.week_path(user_id, program_id, week_id)
        return await self._cascade(user_id, target, _WEEK_DESCENDANTS)

    async def delete_workout(
        self, user_id: str, program_id: str, week_id: str, workout_id: str
    ) -> CascadeDeleteResult:
        """Delete a workout with all of its exercises and sets."""
        target = paths.workout_path(user_id, program_id, week_id, workout_id)
        return await self._cascade(user_id, target, _WORKOUT_DESCENDANTS)

    async def delete_exercise(
        self,
        user_id: str,
        program_id: str,
        week_id: str,
        workout_id: str,
        exercise_id: str,
    ) -> CascadeDeleteResult:
        """Delete an exercise with all of its sets."""
        target = paths.exercise_path(user_id, program_id, week_id, workout_id, exercise_id)
        return await self._cascade(user_id, target, _EXERCISE_DESCENDANTS)

    async def delete_set(
        self,
        user_id: str,
        program_id: str,
        week_id: str,
        workout_id: str,
        exercise_id: str,
        set_id: str,
    ) -> CascadeDeleteResult:
        target = paths.set_path(user_id, program_id, week_id, workout_id, exercise_id, set_id)
        return await self._cascade(user_id, target, ())

    async def archive_program(self, user_id: str, program_id: str) -> None:
        """Programs are never hard-deleted; they are archived in place."""
        repo = ProgramRepository(self.store)
        await repo.archive(user_id, program_id)
        logger.info("Archived program %s for user %s", program_id, user_id)
        self._invalidate(user_id)

    async def _collect_paths(self, target: str, collections: Sequence[str]) -> list[str]:
        """Document paths to delete, deepest level first, target last."""
        doc_paths: list[str] = []
        for collection in collections:
            docs = await self.store.list_descendants(target, collection)
            doc_paths.extend(doc.path for doc in docs)
        if doc_paths or await self.store.get(target) is not None:
            doc_paths.append(target)
        return doc_paths

    async def _cascade(
        self, user_id: str, target: str, collections: Sequence[str]
    ) -> CascadeDeleteResult:
        doc_paths = await self._collect_paths(target, collections)
        batches = chunk_operations(doc_paths, self.batch_ceiling)
        logger.info(
            "Deleting %s: %d documents in %d batches", target, len(doc_paths), len(batches)
        )

        deleted = 0
        try:
            for index, chunk in enumerate(batches):
                batch = self.store.batch()
                for path in chunk:
                    batch.delete(path)
                try:
                    await batch.commit()
                except StoreError as e:
                    if index == 0:
                        raise
                    logger.error(
                        "Cascade delete of %s stopped after %d of %d batches: %s",
                        target,
                        index,
                        len(batches),
                        e,
                    )
                    raise PartialCascadeDeleteError(
                        target=target,
                        committed_batches=index,
                        total_batches=len(batches),
                        deleted_documents=deleted,
                    ) from e
                deleted += len(chunk)
        finally:
            if deleted:
                self._invalidate(user_id)

        return CascadeDeleteResult(target=target, deleted_documents=deleted, batches=len(batches))

    def _invalidate(self, user_id: str) -> None:
        if self.cache is not None:
            self.cache.invalidate_user(user_id)
