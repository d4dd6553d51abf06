from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select, insert, update, delete

from ..database import database, row_to_dict, new_id
from ..models import Meal
from ..utils.dates import day_bounds, utcnow

meals = Meal.__table__

MEAL_FIELDS = ("name", "date", "calories", "protein", "carbs", "fat", "notes", "image_url")


@dataclass
class MealFilter:
    date: datetime | None = None  # 하루 전체
    date_from: datetime | None = None
    date_to: datetime | None = None
    limit: int | None = None


async def list_meals(user_id: str, filters: MealFilter) -> list[dict]:
    query = select(meals).where(meals.c.user_id == user_id)
    if filters.date is not None:
        start, end = day_bounds(filters.date)
        query = query.where(meals.c.date >= start, meals.c.date <= end)
    else:
        if filters.date_from is not None:
            query = query.where(meals.c.date >= filters.date_from)
        if filters.date_to is not None:
            query = query.where(meals.c.date <= filters.date_to)
    query = query.order_by(meals.c.date.desc())
    if filters.limit:
        query = query.limit(filters.limit)
    return [row_to_dict(row, meals) for row in await database.fetch_all(query)]


async def get_meal(meal_id: str) -> dict | None:
    row = await database.fetch_one(select(meals).where(meals.c.id == meal_id))
    return row_to_dict(row, meals)


async def create_meal(user_id: str, fields: dict) -> dict:
    now = utcnow()
    values = {key: fields.get(key) for key in MEAL_FIELDS}
    values.update(id=new_id(), user_id=user_id, created_at=now, updated_at=now)
    await database.execute(insert(meals).values(**values))
    return await get_meal(values["id"])


async def update_meal(meal_id: str, fields: dict) -> dict:
    values = {key: fields[key] for key in MEAL_FIELDS if key in fields}
    values["updated_at"] = utcnow()
    await database.execute(update(meals).where(meals.c.id == meal_id).values(**values))
    return await get_meal(meal_id)


async def delete_meal(meal_id: str):
    await database.execute(delete(meals).where(meals.c.id == meal_id))
