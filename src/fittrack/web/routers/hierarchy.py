"""Training hierarchy routes: create, list, count and cascade delete."""

from fastapi import APIRouter, Depends, status

from ...db import (
    DocumentStore,
    ExerciseRepository,
    ProgramRepository,
    SetRepository,
    WeekRepository,
    WorkoutRepository,
    paths,
)
from ...db.repositories import document_to_entity
from ...errors import NotFoundError
from ...models import Exercise, ExerciseSet, Program, Week, Workout
from ...services import AnalyticsService, CascadeCountEngine, CascadeDeleteExecutor
from ..deps import get_analytics, get_count_engine, get_delete_executor, get_store
from ..schemas import (
    ExerciseCreate,
    ProgramCreate,
    SetChecked,
    SetCreate,
    WeekCreate,
    WorkoutCreate,
)

router = APIRouter(prefix="/users/{user_id}/programs", tags=["hierarchy"])

WEEK = "/{program_id}/weeks/{week_id}"
WORKOUT = WEEK + "/workouts/{workout_id}"
EXERCISE = WORKOUT + "/exercises/{exercise_id}"


def _out(entity) -> dict:
    data = entity.to_dict()
    data["id"] = entity.id
    data["created_at"] = entity.created_at.isoformat() if entity.created_at else None
    data["updated_at"] = entity.updated_at.isoformat() if entity.updated_at else None
    return data


async def _created(store: DocumentStore, path: str, entity_cls) -> dict:
    doc = await store.get(path)
    return _out(document_to_entity(doc, entity_cls))


# Programs


@router.get("")
async def list_programs(
    user_id: str, include_archived: bool = False, store: DocumentStore = Depends(get_store)
):
    repo = ProgramRepository(store)
    found = await (repo.list_all(user_id) if include_archived else repo.list_active(user_id))
    return [_out(p) for p in found]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_program(
    user_id: str, body: ProgramCreate, store: DocumentStore = Depends(get_store)
):
    program = Program(name=body.name, description=body.description, user_id=user_id)
    program_id = await ProgramRepository(store).create(program)
    return await _created(store, paths.program_path(user_id, program_id), Program)


@router.get("/{program_id}")
async def get_program(user_id: str, program_id: str, store: DocumentStore = Depends(get_store)):
    program = await ProgramRepository(store).get(user_id, program_id)
    if program is None:
        raise NotFoundError(f"Program {program_id} not found")
    return _out(program)


@router.post("/{program_id}/archive")
@router.delete("/{program_id}")
async def archive_program(
    user_id: str,
    program_id: str,
    executor: CascadeDeleteExecutor = Depends(get_delete_executor),
):
    """Programs are archived rather than deleted."""
    await executor.archive_program(user_id, program_id)
    return {"program_id": program_id, "archived": True}


# Weeks


@router.get("/{program_id}/weeks")
async def list_weeks(user_id: str, program_id: str, store: DocumentStore = Depends(get_store)):
    return [_out(w) for w in await WeekRepository(store).list(user_id, program_id)]


@router.post("/{program_id}/weeks", status_code=status.HTTP_201_CREATED)
async def create_week(
    user_id: str, program_id: str, body: WeekCreate, store: DocumentStore = Depends(get_store)
):
    week = Week(program_id=program_id, user_id=user_id, **body.model_dump())
    week_id = await WeekRepository(store).create(week)
    return await _created(store, paths.week_path(user_id, program_id, week_id), Week)


@router.get(WEEK + "/delete-counts")
async def week_delete_counts(
    user_id: str,
    program_id: str,
    week_id: str,
    engine: CascadeCountEngine = Depends(get_count_engine),
):
    counts = await engine.get_cascade_delete_counts(user_id, program_id, week_id)
    return counts.to_dict()


@router.delete(WEEK)
async def delete_week(
    user_id: str,
    program_id: str,
    week_id: str,
    executor: CascadeDeleteExecutor = Depends(get_delete_executor),
):
    result = await executor.delete_week(user_id, program_id, week_id)
    return result.to_dict()


# Workouts


@router.get(WEEK + "/workouts")
async def list_workouts(
    user_id: str, program_id: str, week_id: str, store: DocumentStore = Depends(get_store)
):
    return [_out(w) for w in await WorkoutRepository(store).list(user_id, program_id, week_id)]


@router.post(WEEK + "/workouts", status_code=status.HTTP_201_CREATED)
async def create_workout(
    user_id: str,
    program_id: str,
    week_id: str,
    body: WorkoutCreate,
    store: DocumentStore = Depends(get_store),
    analytics: AnalyticsService = Depends(get_analytics),
):
    workout = Workout(week_id=week_id, program_id=program_id, user_id=user_id, **body.model_dump())
    workout_id = await WorkoutRepository(store).create(workout)
    analytics.cache.invalidate_user(user_id)
    return await _created(
        store, paths.workout_path(user_id, program_id, week_id, workout_id), Workout
    )


@router.get(WORKOUT + "/delete-counts")
async def workout_delete_counts(
    user_id: str,
    program_id: str,
    week_id: str,
    workout_id: str,
    engine: CascadeCountEngine = Depends(get_count_engine),
):
    counts = await engine.get_cascade_delete_counts(
        user_id, program_id, week_id, workout_id=workout_id
    )
    return counts.to_dict()


@router.delete(WORKOUT)
async def delete_workout(
    user_id: str,
    program_id: str,
    week_id: str,
    workout_id: str,
    executor: CascadeDeleteExecutor = Depends(get_delete_executor),
):
    result = await executor.delete_workout(user_id, program_id, week_id, workout_id)
    return result.to_dict()


# Exercises


@router.get(WORKOUT + "/exercises")
async def list_exercises(
    user_id: str,
    program_id: str,
    week_id: str,
    workout_id: str,
    store: DocumentStore = Depends(get_store),
):
    found = await ExerciseRepository(store).list(user_id, program_id, week_id, workout_id)
    return [_out(e) for e in found]


@router.post(WORKOUT + "/exercises", status_code=status.HTTP_201_CREATED)
async def create_exercise(
    user_id: str,
    program_id: str,
    week_id: str,
    workout_id: str,
    body: ExerciseCreate,
    store: DocumentStore = Depends(get_store),
    analytics: AnalyticsService = Depends(get_analytics),
):
    exercise = Exercise(
        workout_id=workout_id,
        week_id=week_id,
        program_id=program_id,
        user_id=user_id,
        **body.model_dump(),
    )
    exercise_id = await ExerciseRepository(store).create(exercise)
    analytics.cache.invalidate_user(user_id)
    return await _created(
        store,
        paths.exercise_path(user_id, program_id, week_id, workout_id, exercise_id),
        Exercise,
    )


@router.get(EXERCISE + "/delete-counts")
async def exercise_delete_counts(
    user_id: str,
    program_id: str,
    week_id: str,
    workout_id: str,
    exercise_id: str,
    engine: CascadeCountEngine = Depends(get_count_engine),
):
    counts = await engine.get_cascade_delete_counts(
        user_id, program_id, week_id, workout_id=workout_id, exercise_id=exercise_id
    )
    return counts.to_dict()


@router.delete(EXERCISE)
async def delete_exercise(
    user_id: str,
    program_id: str,
    week_id: str,
    workout_id: str,
    exercise_id: str,
    executor: CascadeDeleteExecutor = Depends(get_delete_executor),
):
    result = await executor.delete_exercise(
        user_id, program_id, week_id, workout_id, exercise_id
    )
    return result.to_dict()


# Sets


@router.get(EXERCISE + "/sets")
async def list_sets(
    user_id: str,
    program_id: str,
    week_id: str,
    workout_id: str,
    exercise_id: str,
    store: DocumentStore = Depends(get_store),
):
    found = await SetRepository(store).list(user_id, program_id, week_id, workout_id, exercise_id)
    return [_out(s) for s in found]


@router.post(EXERCISE + "/sets", status_code=status.HTTP_201_CREATED)
async def create_set(
    user_id: str,
    program_id: str,
    week_id: str,
    workout_id: str,
    exercise_id: str,
    body: SetCreate,
    store: DocumentStore = Depends(get_store),
    analytics: AnalyticsService = Depends(get_analytics),
):
    exercise_set = ExerciseSet(
        exercise_id=exercise_id,
        workout_id=workout_id,
        week_id=week_id,
        program_id=program_id,
        user_id=user_id,
        **body.model_dump(),
    )
    set_id = await SetRepository(store).create(exercise_set)
    analytics.cache.invalidate_user(user_id)
    return await _created(
        store,
        paths.set_path(user_id, program_id, week_id, workout_id, exercise_id, set_id),
        ExerciseSet,
    )


@router.post(EXERCISE + "/sets/{set_id}/check")
async def check_set(
    user_id: str,
    program_id: str,
    week_id: str,
    workout_id: str,
    exercise_id: str,
    set_id: str,
    body: SetChecked,
    store: DocumentStore = Depends(get_store),
    analytics: AnalyticsService = Depends(get_analytics),
):
    """Mark a set done (or not); a completed set is checked for a new record."""
    exercise = await ExerciseRepository(store).get(
        user_id, program_id, week_id, workout_id, exercise_id
    )
    set_doc = await store.get(
        paths.set_path(user_id, program_id, week_id, workout_id, exercise_id, set_id)
    )
    if exercise is None or set_doc is None:
        raise NotFoundError(f"Set {set_id} not found")

    exercise_set = document_to_entity(set_doc, ExerciseSet)
    await SetRepository(store).set_checked(user_id, exercise_set, body.checked)
    analytics.cache.invalidate_user(user_id)

    record = None
    if body.checked:
        record = await analytics.check_for_new_pr(exercise_set, exercise)
    return {"set": _out(exercise_set), "personal_record": record.to_dict() if record else None}


@router.delete(EXERCISE + "/sets/{set_id}")
async def delete_set(
    user_id: str,
    program_id: str,
    week_id: str,
    workout_id: str,
    exercise_id: str,
    set_id: str,
    executor: CascadeDeleteExecutor = Depends(get_delete_executor),
):
    result = await executor.delete_set(
        user_id, program_id, week_id, workout_id, exercise_id, set_id
    )
    return result.to_dict()
