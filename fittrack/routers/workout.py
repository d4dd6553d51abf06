# routers/workout.py
from fastapi import APIRouter, Depends, Query, status

from ..core.errors import ValidationError
from ..crud import workout as workout_crud
from ..dependencies import get_current_user, get_owned_workout
from ..schemas.workout import (
    WorkoutCreate, Workout, WorkoutList, WorkoutEnvelope, WorkoutUpdateResult, WorkoutStats,
)
from ..utils import stats
from ..utils.dates import parse_optional_datetime
from ..utils.jwt_handler import AuthContext

router = APIRouter(prefix="/workouts", tags=["workouts"])


def _require_name_and_date(body: WorkoutCreate):
    if not body.name or body.date is None:
        raise ValidationError("Name and date are required")


@router.get("", response_model=WorkoutList)
async def list_workouts(
    date_from: str | None = Query(None, alias="from"),
    date_to: str | None = Query(None, alias="to"),
    name: str | None = None,
    limit: int | None = Query(None, ge=1),
    auth: AuthContext = Depends(get_current_user),
):
    filters = workout_crud.WorkoutFilter(
        date_from=parse_optional_datetime(date_from, "from date"),
        date_to=parse_optional_datetime(date_to, "to date"),
        name=name,
        limit=limit,
    )
    return {"workouts": await workout_crud.list_workouts(auth.user_id, filters)}


@router.post("", response_model=Workout, status_code=status.HTTP_201_CREATED)
async def create_workout(body: WorkoutCreate, auth: AuthContext = Depends(get_current_user)):
    _require_name_and_date(body)
    return await workout_crud.create_workout(auth.user_id, body)


@router.get("/stats", response_model=WorkoutStats)
async def read_workout_stats(
    date_from: str | None = Query(None, alias="from"),
    date_to: str | None = Query(None, alias="to"),
    auth: AuthContext = Depends(get_current_user),
):
    """기간 내 운동 횟수, 평균 운동 시간, 최대 중량 상위 5개 운동."""
    start = parse_optional_datetime(date_from, "from date")
    end = parse_optional_datetime(date_to, "to date")

    workouts = await workout_crud.list_workout_durations(auth.user_id, start, end)
    exercise_rows = await workout_crud.list_exercise_rows(auth.user_id, start, end)
    return {
        **stats.workout_summary(workouts),
        "exercise_stats": stats.exercise_stats(exercise_rows),
    }


@router.get("/{workout_id}", response_model=WorkoutEnvelope)
async def read_workout(workout: dict = Depends(get_owned_workout)):
    return {"workout": workout}


@router.patch("/{workout_id}", response_model=WorkoutUpdateResult)
async def update_workout(body: WorkoutCreate, workout: dict = Depends(get_owned_workout)):
    _require_name_and_date(body)
    return {"success": True, "workout": await workout_crud.update_workout(workout, body)}


@router.delete("/{workout_id}")
async def delete_workout(workout: dict = Depends(get_owned_workout)):
    await workout_crud.delete_workout(workout["id"])
    return {"success": True}


@router.post("/{workout_id}/copy", response_model=Workout, status_code=status.HTTP_201_CREATED)
async def copy_workout(workout: dict = Depends(get_owned_workout), auth: AuthContext = Depends(get_current_user)):
    return await workout_crud.copy_workout(auth.user_id, workout)
