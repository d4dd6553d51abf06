# crud/weight.py
from sqlalchemy import select, insert, update, delete

from ..database import database, row_to_dict, new_id
from ..models import WeightEntry
from ..utils.dates import utcnow

weights = WeightEntry.__table__


async def list_weights(user_id: str, date_from=None, date_to=None) -> list[dict]:
    """체중 기록은 차트 입력이므로 날짜 오름차순."""
    query = select(weights).where(weights.c.user_id == user_id)
    if date_from is not None:
        query = query.where(weights.c.date >= date_from)
    if date_to is not None:
        query = query.where(weights.c.date <= date_to)
    query = query.order_by(weights.c.date.asc(), weights.c.created_at.asc())
    return [row_to_dict(row, weights) for row in await database.fetch_all(query)]


async def get_weight(entry_id: str) -> dict | None:
    row = await database.fetch_one(select(weights).where(weights.c.id == entry_id))
    return row_to_dict(row, weights)


async def create_weight(user_id: str, weight: float, date=None, notes: str | None = None) -> dict:
    now = utcnow()
    entry_id = new_id()
    await database.execute(insert(weights).values(
        id=entry_id,
        user_id=user_id,
        weight=weight,
        date=date or now,
        notes=notes or None,
        created_at=now,
        updated_at=now,
    ))
    return await get_weight(entry_id)


async def update_weight(entry_id: str, changes: dict) -> dict:
    values = {key: changes[key] for key in ("weight", "date", "notes") if key in changes}
    values["updated_at"] = utcnow()
    await database.execute(update(weights).where(weights.c.id == entry_id).values(**values))
    return await get_weight(entry_id)


async def delete_weight(entry_id: str):
    await database.execute(delete(weights).where(weights.c.id == entry_id))
