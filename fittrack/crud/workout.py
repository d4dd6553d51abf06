# crud/workout.py
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import select, insert, update, delete

from ..database import database, row_to_dict, new_id
from ..models import Workout, Exercise
from ..schemas.workout import WorkoutCreate, ExerciseCreate
from ..utils.dates import utcnow

logger = logging.getLogger(__name__)

workouts = Workout.__table__
exercises = Exercise.__table__


@dataclass
class WorkoutFilter:
    date_from: datetime | None = None
    date_to: datetime | None = None
    name: str | None = None
    limit: int | None = None


def _exercise_values(workout_id: str, exercise: ExerciseCreate, now: datetime, position: int = 0) -> dict:
    # 같은 요청에서 만든 항목도 생성 순서대로 정렬되도록 created_at을 조금씩 늘린다
    created_at = now + timedelta(microseconds=position)
    return {
        "id": new_id(),
        "workout_id": workout_id,
        "name": exercise.name,
        "sets": exercise.sets,
        "reps": exercise.reps,
        "weight": exercise.weight,
        "notes": exercise.notes or None,
        "created_at": created_at,
        "updated_at": created_at,
    }


def _date_range(query, date_from, date_to):
    if date_from is not None:
        query = query.where(workouts.c.date >= date_from)
    if date_to is not None:
        query = query.where(workouts.c.date <= date_to)
    return query


async def _exercises_for(workout_ids: list[str]) -> dict[str, list[dict]]:
    grouped = {workout_id: [] for workout_id in workout_ids}
    if not workout_ids:
        return grouped
    query = (
        select(exercises)
        .where(exercises.c.workout_id.in_(workout_ids))
        .order_by(exercises.c.created_at, exercises.c.id)
    )
    for row in await database.fetch_all(query):
        exercise = row_to_dict(row, exercises)
        grouped[exercise["workout_id"]].append(exercise)
    return grouped


async def list_workouts(user_id: str, filters: WorkoutFilter) -> list[dict]:
    query = select(workouts).where(workouts.c.user_id == user_id)
    query = _date_range(query, filters.date_from, filters.date_to)
    if filters.name:
        query = query.where(workouts.c.name.ilike(f"%{filters.name}%"))
    query = query.order_by(workouts.c.date.desc())
    if filters.limit:
        query = query.limit(filters.limit)

    results = [row_to_dict(row, workouts) for row in await database.fetch_all(query)]
    by_workout = await _exercises_for([w["id"] for w in results])
    for workout in results:
        workout["exercises"] = by_workout[workout["id"]]
    return results


async def get_workout(workout_id: str) -> dict | None:
    row = await database.fetch_one(select(workouts).where(workouts.c.id == workout_id))
    workout = row_to_dict(row, workouts)
    if workout is not None:
        workout["exercises"] = (await _exercises_for([workout_id]))[workout_id]
    return workout


async def create_workout(user_id: str, data: WorkoutCreate) -> dict:
    """운동과 하위 운동 항목을 하나의 트랜잭션으로 생성합니다."""
    now = utcnow()
    workout_id = new_id()
    async with database.transaction():
        await database.execute(insert(workouts).values(
            id=workout_id,
            user_id=user_id,
            name=data.name,
            date=data.date,
            duration=data.duration,
            notes=data.notes or None,
            created_at=now,
            updated_at=now,
        ))
        for position, exercise in enumerate(data.exercises):
            await database.execute(insert(exercises).values(**_exercise_values(workout_id, exercise, now, position)))
    return await get_workout(workout_id)


async def update_workout(workout: dict, data: WorkoutCreate) -> dict:
    """운동 필드를 수정하고 제출된 운동 항목 목록과 저장된 목록을 맞춥니다.

    - 저장돼 있지만 제출되지 않은 항목은 삭제
    - id가 저장된 항목과 일치하면 그 자리에서 수정
    - 알 수 없는 id(또는 id 없음)는 새 행으로 추가

    전부 하나의 트랜잭션 안에서 실행되므로 중간에 실패하면 이전 상태가 그대로 남는다.
    """
    workout_id = workout["id"]
    existing_ids = {exercise["id"] for exercise in workout["exercises"]}
    submitted_ids = {exercise.id for exercise in data.exercises if exercise.id}
    now = utcnow()

    async with database.transaction():
        await database.execute(
            update(workouts)
            .where(workouts.c.id == workout_id)
            .values(name=data.name, date=data.date, duration=data.duration, notes=data.notes or None, updated_at=now)
        )

        removed = existing_ids - submitted_ids
        if removed:
            await database.execute(
                delete(exercises).where(exercises.c.workout_id == workout_id, exercises.c.id.in_(sorted(removed)))
            )

        for position, exercise in enumerate(data.exercises):
            if exercise.id in existing_ids:
                await database.execute(
                    update(exercises)
                    .where(exercises.c.id == exercise.id)
                    .values(
                        name=exercise.name,
                        sets=exercise.sets,
                        reps=exercise.reps,
                        weight=exercise.weight,
                        notes=exercise.notes or None,
                        updated_at=now,
                    )
                )
            else:
                # 클라이언트가 보낸 임시 id는 재사용하지 않는다
                await database.execute(insert(exercises).values(**_exercise_values(workout_id, exercise, now, position)))

    logger.info("Updated workout %s (%d exercises removed)", workout_id, len(removed))
    return await get_workout(workout_id)


async def delete_workout(workout_id: str):
    async with database.transaction():
        await database.execute(delete(exercises).where(exercises.c.workout_id == workout_id))
        await database.execute(delete(workouts).where(workouts.c.id == workout_id))


async def copy_workout(user_id: str, source: dict) -> dict:
    """운동을 복제합니다. 이름 뒤에 "(Copy)"가 붙고 날짜는 현재 시각, 운동 항목은 새 id로 복제된다."""
    data = WorkoutCreate(
        name=f"{source['name']} (Copy)",
        date=utcnow(),
        duration=source["duration"],
        notes=source["notes"],
        exercises=[
            ExerciseCreate(
                name=exercise["name"],
                sets=exercise["sets"],
                reps=exercise["reps"],
                weight=exercise["weight"],
                notes=exercise["notes"],
            )
            for exercise in source["exercises"]
        ],
    )
    return await create_workout(user_id, data)


async def list_workout_durations(user_id: str, date_from=None, date_to=None) -> list[dict]:
    query = select(workouts.c.id, workouts.c.date, workouts.c.duration).where(workouts.c.user_id == user_id)
    query = _date_range(query, date_from, date_to)
    rows = await database.fetch_all(query)
    return [{"id": row["id"], "date": row["date"], "duration": row["duration"]} for row in rows]


async def list_exercise_rows(user_id: str, date_from=None, date_to=None) -> list[dict]:
    """기간 내 사용자의 모든 운동 항목 (이름, 중량, 반복 횟수)."""
    query = (
        select(exercises.c.name, exercises.c.weight, exercises.c.reps)
        .select_from(exercises.join(workouts, exercises.c.workout_id == workouts.c.id))
        .where(workouts.c.user_id == user_id)
    )
    query = _date_range(query, date_from, date_to)
    rows = await database.fetch_all(query)
    return [{"name": row["name"], "weight": row["weight"], "reps": row["reps"]} for row in rows]
