"""Analytics aggregation over the training hierarchy.

``compute_workout_analytics`` is a pure function over already-fetched
entities. ``AnalyticsService`` fetches from the store, aggregates and caches.
"""

import asyncio
import logging
from collections import Counter, defaultdict
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from ..db import paths
from ..db.repositories import ProgramRepository, document_to_entity
from ..db.store import Filter, StoreGateway
from ..models.analytics import ActivityHeatmapData, DateRange, PersonalRecord, WorkoutAnalytics
from ..models.training import Exercise, ExerciseSet, ExerciseType, Workout
from . import records
from .cache import AnalyticsCache, CacheKey
from .heatmap import generate_heatmap_from_workouts, generate_month_heatmap, generate_set_based_heatmap

logger = logging.getLogger(__name__)


def compute_workout_analytics(
    user_id: str,
    date_range: DateRange,
    workouts: Iterable[Workout],
    exercises: Iterable[Exercise],
    sets: Iterable[ExerciseSet],
    program_id: str | None = None,
) -> WorkoutAnalytics:
    """Roll up workouts created within ``date_range``.

    Only exercises of in-range workouts and sets of those exercises count.
    Missing metrics contribute nothing: volume needs both weight and reps.
    """
    in_range = [
        w for w in workouts if w.created_at is not None and date_range.contains(w.created_at)
    ]
    workout_ids = {w.id for w in in_range}
    scoped_exercises = [e for e in exercises if e.workout_id in workout_ids]
    exercise_ids = {e.id for e in scoped_exercises}
    scoped_sets = [s for s in sets if s.exercise_id in exercise_ids]

    total_volume = 0.0
    total_duration = 0
    for s in scoped_sets:
        if s.volume is not None:
            total_volume += s.volume
        if s.duration is not None:
            total_duration += s.duration

    return WorkoutAnalytics(
        user_id=user_id,
        date_range=date_range,
        program_id=program_id,
        total_workouts=len(in_range),
        total_sets=len(scoped_sets),
        total_volume=total_volume,
        total_duration=total_duration,
        exercise_type_breakdown=dict(Counter(e.exercise_type for e in scoped_exercises)),
        completed_workout_ids=workout_ids,
    )


class AnalyticsService:
    """Store-backed analytics with a short-lived cache."""

    def __init__(
        self,
        store: StoreGateway,
        cache: AnalyticsCache | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the service.

        Args:
            store: Document store to read the hierarchy from
            cache: Cache for computed results (a private one by default)
            clock: Wall clock, used for fetched_at stamps and streak anchoring
        """
        self.store = store
        self._clock = clock or datetime.now
        self.cache = cache if cache is not None else AnalyticsCache(clock=self._clock)
        self._background_tasks: set[asyncio.Task] = set()

    # Fetching

    async def _program_scopes(self, user_id: str, program_id: str | None) -> list[str]:
        """Program paths to read: one program, or every active one."""
        if program_id is not None:
            return [paths.program_path(user_id, program_id)]
        programs = await ProgramRepository(self.store).list_active(user_id)
        return [paths.program_path(user_id, p.id) for p in programs]

    async def _fetch(
        self,
        user_id: str,
        program_id: str | None,
        collection: str,
        entity_cls,
        filters: list[Filter] | None = None,
    ) -> list:
        entities = []
        for scope in await self._program_scopes(user_id, program_id):
            docs = await self.store.list_descendants(scope, collection, filters=filters)
            entities.extend(document_to_entity(d, entity_cls) for d in docs)
        return entities

    @staticmethod
    def _created_within(date_range: DateRange) -> list[Filter]:
        return [
            Filter("created_at", ">=", date_range.start),
            Filter("created_at", "<=", date_range.end),
        ]

    async def _fetch_workout_data(
        self, user_id: str, date_range: DateRange, program_id: str | None
    ) -> tuple[list[Workout], list[Exercise], list[ExerciseSet]]:
        workouts = await self._fetch(
            user_id, program_id, paths.WORKOUTS, Workout, self._created_within(date_range)
        )
        workout_ids = {w.id for w in workouts}
        exercises = [
            e
            for e in await self._fetch(user_id, program_id, paths.EXERCISES, Exercise)
            if e.workout_id in workout_ids
        ]
        exercise_ids = {e.id for e in exercises}
        sets = [
            s
            for s in await self._fetch(user_id, program_id, paths.SETS, ExerciseSet)
            if s.exercise_id in exercise_ids
        ]
        return workouts, exercises, sets

    async def _fetch_checked_sets(
        self, user_id: str, date_range: DateRange, program_id: str | None
    ) -> list[ExerciseSet]:
        filters = [Filter("checked", "==", True), *self._created_within(date_range)]
        return await self._fetch(user_id, program_id, paths.SETS, ExerciseSet, filters)

    # Rollups

    async def compute_workout_analytics(
        self, user_id: str, date_range: DateRange, program_id: str | None = None
    ) -> WorkoutAnalytics:
        key = CacheKey.for_range(
            "analytics", user_id, date_range.start, date_range.end, program_id
        )

        async def compute() -> WorkoutAnalytics:
            workouts, exercises, sets = await self._fetch_workout_data(
                user_id, date_range, program_id
            )
            return compute_workout_analytics(
                user_id, date_range, workouts, exercises, sets, program_id=program_id
            )

        return await self.cache.get_or_compute(key, compute)

    async def compute_key_statistics(
        self, user_id: str, date_range: DateRange, program_id: str | None = None
    ) -> dict[str, Any]:
        """Dashboard figures for a period.

        Reads the hierarchy once per cache lifetime; the rollup and the
        completion rate come from the same fetch.
        """
        key = CacheKey.for_range(
            "key_statistics", user_id, date_range.start, date_range.end, program_id
        )

        async def compute() -> dict[str, Any]:
            workouts, exercises, sets = await self._fetch_workout_data(
                user_id, date_range, program_id
            )
            analytics = compute_workout_analytics(
                user_id, date_range, workouts, exercises, sets, program_id=program_id
            )
            prs = await self.get_personal_records(user_id, program_id=program_id)

            completed = sum(1 for s in sets if s.checked)
            completion = completed / len(sets) * 100 if sets else 0.0
            weeks = date_range.duration_in_days / 7
            most_used = analytics.most_used_exercise_type

            return {
                "total_workouts": analytics.total_workouts,
                "total_sets": analytics.total_sets,
                "total_volume": analytics.total_volume,
                "average_duration": analytics.average_workout_duration,
                "new_prs": sum(1 for pr in prs if date_range.contains(pr.achieved_at)),
                "most_used_exercise_type": most_used.display_name if most_used else "None",
                "completion_percentage": completion,
                "workouts_per_week": analytics.total_workouts / weeks if weeks > 0 else 0.0,
            }

        return dict(await self.cache.get_or_compute(key, compute))

    # Heatmaps

    async def generate_heatmap_data(
        self, user_id: str, year: int, program_id: str | None = None
    ) -> ActivityHeatmapData:
        """Year heatmap of workouts created per day."""
        key = CacheKey.for_year("workout_heatmap", user_id, year, program_id)

        async def compute() -> ActivityHeatmapData:
            workouts = await self._fetch(
                user_id,
                program_id,
                paths.WORKOUTS,
                Workout,
                self._created_within(DateRange.for_year(year)),
            )
            now = self._clock()
            return generate_heatmap_from_workouts(
                user_id, year, workouts, program_id=program_id, today=now.date(), fetched_at=now
            )

        return await self.cache.get_or_compute(key, compute)

    async def generate_set_based_heatmap_data(
        self, user_id: str, date_range: DateRange, program_id: str | None = None
    ) -> ActivityHeatmapData:
        """Heatmap of checked sets per day within ``date_range``."""
        key = CacheKey.for_range(
            "set_heatmap", user_id, date_range.start, date_range.end, program_id
        )

        async def compute() -> ActivityHeatmapData:
            sets = await self._fetch_checked_sets(user_id, date_range, program_id)
            now = self._clock()
            return generate_set_based_heatmap(
                user_id, date_range, sets, program_id=program_id, today=now.date(), fetched_at=now
            )

        return await self.cache.get_or_compute(key, compute)

    async def get_month_heatmap_data(
        self, user_id: str, year: int, month: int, program_id: str | None = None
    ) -> ActivityHeatmapData:
        """Heatmap of checked sets for one calendar month."""
        if not 1 <= month <= 12:
            raise ValueError(f"month must be 1-12, got {month}")
        key = CacheKey.for_month("set_heatmap", user_id, year, month, program_id)

        async def compute() -> ActivityHeatmapData:
            sets = await self._fetch_checked_sets(
                user_id, DateRange.for_month(year, month), program_id
            )
            now = self._clock()
            return generate_month_heatmap(
                user_id, year, month, sets, program_id=program_id, today=now.date(), fetched_at=now
            )

        return await self.cache.get_or_compute(key, compute)

    def prefetch_adjacent_months(
        self, user_id: str, year: int, month: int, program_id: str | None = None
    ) -> list[asyncio.Task]:
        """Warm the cache for the months either side of year/month.

        Must be called from a running event loop. The lookups run in the
        background; their results only land in the cache and their failures
        are logged. The returned tasks may be awaited but never need to be.
        """
        previous = (year - 1, 12) if month == 1 else (year, month - 1)
        following = (year + 1, 1) if month == 12 else (year, month + 1)

        tasks = []
        for y, m in (previous, following):
            task = asyncio.create_task(self._prefetch_month(user_id, y, m, program_id))
            self._background_tasks.add(task)
            task.add_done_callback(self._background_tasks.discard)
            tasks.append(task)
        return tasks

    async def _prefetch_month(
        self, user_id: str, year: int, month: int, program_id: str | None
    ) -> None:
        try:
            await self.get_month_heatmap_data(user_id, year, month, program_id)
        except Exception as e:
            logger.warning("Prefetch of %04d-%02d for %s failed: %s", year, month, user_id, e)

    # Personal records

    async def get_personal_records(
        self,
        user_id: str,
        limit: int | None = None,
        exercise_type: ExerciseType | None = None,
        program_id: str | None = None,
    ) -> list[PersonalRecord]:
        """Every record progression, newest first."""
        exercises = await self._fetch(user_id, program_id, paths.EXERCISES, Exercise)
        if exercise_type is not None:
            exercises = [e for e in exercises if e.exercise_type == exercise_type]

        sets_by_exercise: dict[str, list[ExerciseSet]] = defaultdict(list)
        for s in await self._fetch(user_id, program_id, paths.SETS, ExerciseSet):
            sets_by_exercise[s.exercise_id].append(s)

        prs: list[PersonalRecord] = []
        for exercise in exercises:
            prs.extend(records.find_personal_records(exercise, sets_by_exercise[exercise.id]))

        prs.sort(key=lambda pr: pr.achieved_at, reverse=True)
        if limit is not None and limit > 0:
            prs = prs[:limit]
        return prs

    async def check_for_new_pr(
        self, exercise_set: ExerciseSet, exercise: Exercise
    ) -> PersonalRecord | None:
        """Check a set against the rest of its exercise's history."""
        docs = await self.store.list_documents(
            paths.sets_path(
                exercise.user_id,
                exercise.program_id,
                exercise.week_id,
                exercise.workout_id,
                exercise.id,
            )
        )
        history = [document_to_entity(d, ExerciseSet) for d in docs]
        return records.check_for_new_pr(exercise_set, exercise, history)

    def clear_cache(self) -> None:
        self.cache.clear()
