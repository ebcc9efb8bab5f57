"""Request bodies for the JSON API."""

from pydantic import BaseModel, Field

from ..models import ExerciseType


class ProgramCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)


class WeekCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    order: int = Field(ge=0)
    notes: str | None = None


class WorkoutCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    day_of_week: int | None = Field(default=None, ge=0, le=6)
    order_index: int = Field(default=0, ge=0)
    notes: str | None = None


class ExerciseCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    exercise_type: ExerciseType
    order_index: int = Field(default=0, ge=0)
    notes: str | None = None


class SetCreate(BaseModel):
    set_number: int = Field(gt=0)
    checked: bool = False
    reps: int | None = Field(default=None, ge=0)
    weight: float | None = Field(default=None, ge=0)
    duration: int | None = Field(default=None, ge=0)
    distance: float | None = Field(default=None, ge=0)
    rest_time: int | None = Field(default=None, ge=0)
    notes: str | None = None


class SetChecked(BaseModel):
    checked: bool = True
