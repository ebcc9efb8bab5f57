"""Demo data for trying out the CLI and web API."""

from datetime import date, datetime, time, timedelta

from ..models.training import Exercise, ExerciseSet, ExerciseType, Program, Week, Workout
from .repositories import (
    ExerciseRepository,
    ProgramRepository,
    SetRepository,
    WeekRepository,
    WorkoutRepository,
)
from .store import DocumentStore

# (workout name, day of week, [(exercise name, type, set template)])
DEMO_WORKOUTS = [
    (
        "Upper A",
        0,
        [
            ("Bench Press", ExerciseType.STRENGTH, {"reps": 5, "weight": 80.0}),
            ("Barbell Row", ExerciseType.STRENGTH, {"reps": 8, "weight": 60.0}),
            ("Push Up", ExerciseType.BODYWEIGHT, {"reps": 15}),
        ],
    ),
    (
        "Lower A",
        2,
        [
            ("Back Squat", ExerciseType.STRENGTH, {"reps": 5, "weight": 100.0}),
            ("Plank", ExerciseType.TIME_BASED, {"duration": 60}),
        ],
    ),
    (
        "Conditioning",
        4,
        [
            ("Rowing Machine", ExerciseType.CARDIO, {"duration": 600, "distance": 2000.0}),
            ("Farmer Carry", ExerciseType.CUSTOM, {"reps": 4, "weight": 32.0, "distance": 40.0}),
        ],
    ),
]

SETS_PER_EXERCISE = 3


def _progress(template: dict, week: int) -> dict:
    """Add a little load each week so records show up."""
    values = dict(template)
    if "weight" in values:
        values["weight"] += 2.5 * week
    elif "reps" in values:
        values["reps"] += week
    elif "duration" in values:
        values["duration"] += 15 * week
    return values


async def seed_demo_program(
    store: DocumentStore,
    user_id: str,
    weeks: int = 4,
    today: date | None = None,
) -> str:
    """Create a demo program ending in the current week.

    Workouts and sets are backdated to the day they would have been done.
    Sets on past days are checked; later ones are left as planned.

    Returns:
        The id of the new program
    """
    today = today or date.today()
    first_monday = today - timedelta(days=today.weekday()) - timedelta(weeks=weeks - 1)

    program_id = await ProgramRepository(store).create(
        Program(name="Demo Program", user_id=user_id, description="Seeded demo data")
    )
    week_repo = WeekRepository(store)
    workout_repo = WorkoutRepository(store)
    exercise_repo = ExerciseRepository(store)
    set_repo = SetRepository(store)

    for week_number in range(weeks):
        week_id = await week_repo.create(
            Week(
                name=f"Week {week_number + 1}",
                order=week_number + 1,
                program_id=program_id,
                user_id=user_id,
            )
        )
        for order, (workout_name, day, exercises) in enumerate(DEMO_WORKOUTS):
            day_date = first_monday + timedelta(weeks=week_number, days=day)
            started = datetime.combine(day_date, time(18, 0))
            workout_id = await workout_repo.create(
                Workout(
                    name=workout_name,
                    week_id=week_id,
                    program_id=program_id,
                    user_id=user_id,
                    day_of_week=day,
                    order_index=order,
                ),
                created_at=started,
            )
            for index, (exercise_name, exercise_type, template) in enumerate(exercises):
                exercise_id = await exercise_repo.create(
                    Exercise(
                        name=exercise_name,
                        exercise_type=exercise_type,
                        workout_id=workout_id,
                        week_id=week_id,
                        program_id=program_id,
                        user_id=user_id,
                        order_index=index,
                    ),
                    created_at=started,
                )
                for set_number in range(1, SETS_PER_EXERCISE + 1):
                    await set_repo.create(
                        ExerciseSet(
                            set_number=set_number,
                            exercise_id=exercise_id,
                            workout_id=workout_id,
                            week_id=week_id,
                            program_id=program_id,
                            user_id=user_id,
                            checked=day_date <= today,
                            **_progress(template, week_number),
                        ),
                        created_at=started + timedelta(minutes=5 * (index * 3 + set_number)),
                    )

    return program_id
