# schemas/workout.py
from datetime import datetime
from typing import List

from pydantic import Field

from .base import CamelModel, DatedInput


class ExerciseCreate(CamelModel):
    # 수정 요청에서 기존 id와 일치하지 않는 id(예: "new")는 새 운동으로 취급
    id: str | None = None
    name: str
    sets: int = Field(ge=1)
    reps: int = Field(ge=1)
    weight: float | None = None
    notes: str | None = None


class WorkoutCreate(DatedInput):
    name: str | None = None
    duration: int | None = Field(default=None, ge=0)
    notes: str | None = None
    exercises: List[ExerciseCreate] = Field(default_factory=list)


class Exercise(CamelModel):
    id: str
    workout_id: str
    name: str
    sets: int
    reps: int
    weight: float | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class Workout(CamelModel):
    id: str
    user_id: str
    name: str
    date: datetime
    duration: int | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    exercises: List[Exercise] = Field(default_factory=list)


class WorkoutList(CamelModel):
    workouts: List[Workout]


class WorkoutEnvelope(CamelModel):
    workout: Workout


class WorkoutUpdateResult(CamelModel):
    success: bool = True
    workout: Workout


class ExerciseStat(CamelModel):
    name: str
    avg_weight: float | None = None
    max_weight: float | None = None
    avg_reps: float | None = None


class WorkoutStats(CamelModel):
    count: int
    avg_duration: int
    exercise_stats: List[ExerciseStat]
