"""Personal record detection.

Comparisons are strict: matching a previous best is not a record. The
detector reports ``improvement`` as candidate minus previous and leaves any
further gating to callers.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime

from ..models.analytics import PersonalRecord, PRType
from ..models.training import Exercise, ExerciseSet, ExerciseType

_DURATION_TYPES = (ExerciseType.CARDIO, ExerciseType.TIME_BASED)

# Order in which a single set's progressions are reported
_SCAN_ORDER = (
    PRType.MAX_WEIGHT,
    PRType.MAX_REPS,
    PRType.MAX_VOLUME,
    PRType.MAX_DURATION,
    PRType.MAX_DISTANCE,
)

_ID_SUFFIX = {
    PRType.MAX_WEIGHT: "weight",
    PRType.MAX_REPS: "reps",
    PRType.MAX_VOLUME: "volume",
    PRType.MAX_DURATION: "duration",
    PRType.MAX_DISTANCE: "distance",
    PRType.ONE_REP_MAX: "1rm",
}


def metric_value(exercise_set: ExerciseSet, pr_type: PRType) -> float | None:
    """The set's value for a record type, or None when not recorded."""
    if pr_type == PRType.MAX_WEIGHT:
        return exercise_set.weight
    if pr_type == PRType.MAX_REPS:
        return float(exercise_set.reps) if exercise_set.reps is not None else None
    if pr_type == PRType.MAX_VOLUME:
        return exercise_set.volume
    if pr_type == PRType.MAX_DURATION:
        return float(exercise_set.duration) if exercise_set.duration is not None else None
    if pr_type == PRType.MAX_DISTANCE:
        return exercise_set.distance
    # Epley estimate
    if exercise_set.weight is None or not exercise_set.reps:
        return None
    if exercise_set.reps == 1:
        return exercise_set.weight
    return exercise_set.weight * (1 + exercise_set.reps / 30)


def _beats(candidate: float | None, previous: float | None) -> bool:
    if candidate is None:
        return False
    return previous is None or candidate > previous


def is_weight_pr(candidate: ExerciseSet, previous: ExerciseSet | None) -> bool:
    previous_weight = previous.weight if previous is not None else None
    return _beats(candidate.weight, previous_weight)


def is_volume_pr(candidate: ExerciseSet, previous: ExerciseSet | None) -> bool:
    """weight x reps beats the previous set's, whatever the weights alone do."""
    previous_volume = previous.volume if previous is not None else None
    return _beats(candidate.volume, previous_volume)


def is_duration_pr(
    candidate: ExerciseSet, previous: ExerciseSet | None, exercise_type: ExerciseType
) -> bool:
    """Duration records only exist for cardio and time-based exercises."""
    if exercise_type not in _DURATION_TYPES:
        return False
    previous_duration = previous.duration if previous is not None else None
    return _beats(candidate.duration, previous_duration)


def best_prior_value(history: Iterable[ExerciseSet], pr_type: PRType) -> float | None:
    values = [v for v in (metric_value(s, pr_type) for s in history) if v is not None]
    return max(values) if values else None


def build_personal_record(
    candidate: ExerciseSet,
    exercise: Exercise,
    pr_type: PRType,
    previous_value: float | None,
) -> PersonalRecord:
    value = metric_value(candidate, pr_type)
    if value is None:
        raise ValueError(f"Set has no value for {pr_type.value}")
    return PersonalRecord(
        id=f"{candidate.id}_{_ID_SUFFIX[pr_type]}",
        user_id=candidate.user_id,
        exercise_id=exercise.id,
        exercise_name=exercise.name,
        exercise_type=exercise.exercise_type,
        pr_type=pr_type,
        value=value,
        previous_value=previous_value,
        achieved_at=candidate.created_at or datetime.now(),
        workout_id=candidate.workout_id,
        set_id=candidate.id,
    )


def check_for_new_pr(
    candidate: ExerciseSet, exercise: Exercise, history: Iterable[ExerciseSet]
) -> PersonalRecord | None:
    """Check one set against an exercise's history.

    The metric depends on the exercise type: strength checks weight and
    falls back to volume, bodyweight checks reps, cardio and time-based
    check duration, custom checks volume.
    """
    history = [s for s in history if s.id != candidate.id]

    if exercise.exercise_type == ExerciseType.STRENGTH:
        candidates = (PRType.MAX_WEIGHT, PRType.MAX_VOLUME)
    elif exercise.exercise_type == ExerciseType.BODYWEIGHT:
        candidates = (PRType.MAX_REPS,)
    elif exercise.exercise_type in _DURATION_TYPES:
        candidates = (PRType.MAX_DURATION,)
    else:
        candidates = (PRType.MAX_VOLUME,)

    for pr_type in candidates:
        previous = best_prior_value(history, pr_type)
        if _beats(metric_value(candidate, pr_type), previous):
            return build_personal_record(candidate, exercise, pr_type, previous)
    return None


def find_personal_records(
    exercise: Exercise, sets: Iterable[ExerciseSet]
) -> list[PersonalRecord]:
    """Every progression in an exercise's history, oldest first.

    Walks the sets chronologically and emits a record each time a set beats
    the running best for weight, reps, volume, duration or distance.
    """
    ordered = sorted(
        (s for s in sets if s.exercise_id == exercise.id),
        key=lambda s: (s.created_at or datetime.min, s.set_number),
    )
    best: dict[PRType, float | None] = defaultdict(lambda: None)
    records = []
    for exercise_set in ordered:
        for pr_type in _SCAN_ORDER:
            value = metric_value(exercise_set, pr_type)
            if _beats(value, best[pr_type]):
                records.append(
                    build_personal_record(exercise_set, exercise, pr_type, best[pr_type])
                )
                best[pr_type] = value
    return records
