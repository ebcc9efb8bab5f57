"""Document paths for the per-user training hierarchy.

users/{u}/programs/{p}/weeks/{w}/workouts/{o}/exercises/{e}/sets/{s}
"""

PROGRAMS = "programs"
WEEKS = "weeks"
WORKOUTS = "workouts"
EXERCISES = "exercises"
SETS = "sets"


def user_path(user_id: str) -> str:
    return f"users/{user_id}"


def programs_path(user_id: str) -> str:
    return f"{user_path(user_id)}/{PROGRAMS}"


def program_path(user_id: str, program_id: str) -> str:
    return f"{programs_path(user_id)}/{program_id}"


def weeks_path(user_id: str, program_id: str) -> str:
    return f"{program_path(user_id, program_id)}/{WEEKS}"


def week_path(user_id: str, program_id: str, week_id: str) -> str:
    return f"{weeks_path(user_id, program_id)}/{week_id}"


def workouts_path(user_id: str, program_id: str, week_id: str) -> str:
    return f"{week_path(user_id, program_id, week_id)}/{WORKOUTS}"


def workout_path(user_id: str, program_id: str, week_id: str, workout_id: str) -> str:
    return f"{workouts_path(user_id, program_id, week_id)}/{workout_id}"


def exercises_path(user_id: str, program_id: str, week_id: str, workout_id: str) -> str:
    return f"{workout_path(user_id, program_id, week_id, workout_id)}/{EXERCISES}"


def exercise_path(
    user_id: str, program_id: str, week_id: str, workout_id: str, exercise_id: str
) -> str:
    return f"{exercises_path(user_id, program_id, week_id, workout_id)}/{exercise_id}"


def sets_path(
    user_id: str, program_id: str, week_id: str, workout_id: str, exercise_id: str
) -> str:
    return f"{exercise_path(user_id, program_id, week_id, workout_id, exercise_id)}/{SETS}"


def set_path(
    user_id: str,
    program_id: str,
    week_id: str,
    workout_id: str,
    exercise_id: str,
    set_id: str,
) -> str:
    return f"{sets_path(user_id, program_id, week_id, workout_id, exercise_id)}/{set_id}"


def split_document_path(path: str) -> tuple[str, str, str]:
    """Split a document path into (parent collection path, collection name, id)."""
    parts = path.strip("/").split("/")
    if len(parts) < 2 or len(parts) % 2 != 0:
        raise ValueError(f"Not a document path: {path}")
    return "/".join(parts[:-1]), parts[-2], parts[-1]


def user_id_from_path(path: str) -> str:
    parts = path.strip("/").split("/")
    if len(parts) < 2 or parts[0] != "users":
        raise ValueError(f"Path is not under users/: {path}")
    return parts[1]
