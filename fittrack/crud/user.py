# crud/user.py
import logging

from sqlalchemy import select, insert, update, delete
from starlette.concurrency import run_in_threadpool

from ..database import database, row_to_dict, new_id
from ..models import User, Workout, Exercise, Meal, WeightEntry
from ..core.errors import Conflict, UserNotFound, NoPasswordSet, InvalidCredentials
from ..utils.dates import utcnow
from ..utils.security import get_password_hash, verify_password

logger = logging.getLogger(__name__)

users = User.__table__

PUBLIC_FIELDS = ("id", "email", "name", "image_url")
PROFILE_FIELDS = PUBLIC_FIELDS + ("created_at", "updated_at")


def public_identity(user: dict, fields=PUBLIC_FIELDS) -> dict:
    """비밀번호 해시 등을 제외한 공개 필드만 남깁니다."""
    return {key: user.get(key) for key in fields}


async def get_user(user_id: str) -> dict | None:
    row = await database.fetch_one(select(users).where(users.c.id == user_id))
    return row_to_dict(row, users)


async def get_user_by_email(email: str) -> dict | None:
    # 대소문자를 구분하는 정확한 일치
    row = await database.fetch_one(select(users).where(users.c.email == email))
    return row_to_dict(row, users)


async def create_user(email: str, password: str, name: str | None = None) -> dict:
    # 1. 먼저 동일한 email이 이미 존재하는지 확인
    if await get_user_by_email(email):
        raise Conflict("User with this email already exists")

    # 2. 존재하지 않는다면 새로 INSERT
    hashed_password = await run_in_threadpool(get_password_hash, password)
    now = utcnow()
    values = {
        "id": new_id(),
        "email": email,
        "name": name or None,
        "hashed_password": hashed_password,
        "created_at": now,
        "updated_at": now,
    }
    try:
        await database.execute(insert(users).values(**values))
    except Exception:
        # 동시에 같은 email로 가입하면 unique 인덱스에서 실패한다
        if await get_user_by_email(email):
            raise Conflict("User with this email already exists")
        raise
    logger.info("Registered user %s", values["id"])
    return public_identity(values, ("id", "email", "name"))


async def authenticate_user(email: str, password: str) -> dict:
    """이메일/비밀번호를 검증하고 공개 식별 정보를 반환합니다. 읽기 전용."""
    user = await get_user_by_email(email)
    if user is None:
        raise UserNotFound()
    if not user["hashed_password"]:
        raise NoPasswordSet()
    if not await run_in_threadpool(verify_password, password, user["hashed_password"]):
        raise InvalidCredentials()
    return public_identity(user)


async def check_password(user: dict, password: str) -> bool:
    if not user.get("hashed_password"):
        return False
    return await run_in_threadpool(verify_password, password, user["hashed_password"])


async def update_profile(user_id: str, changes: dict) -> dict:
    values = {key: changes[key] for key in ("name", "image_url", "image_public_id") if key in changes}
    values["updated_at"] = utcnow()
    await database.execute(update(users).where(users.c.id == user_id).values(**values))
    return await get_user(user_id)


async def set_password(user_id: str, new_password: str):
    hashed_password = await run_in_threadpool(get_password_hash, new_password)
    await database.execute(
        update(users)
        .where(users.c.id == user_id)
        .values(hashed_password=hashed_password, updated_at=utcnow())
    )


async def delete_user_cascade(user_id: str):
    """사용자와 그 사용자의 모든 기록을 하나의 트랜잭션에서 삭제합니다 (자식 테이블 먼저)."""
    workouts = Workout.__table__
    owned_workouts = select(workouts.c.id).where(workouts.c.user_id == user_id)
    async with database.transaction():
        await database.execute(delete(Exercise.__table__).where(Exercise.__table__.c.workout_id.in_(owned_workouts)))
        await database.execute(delete(workouts).where(workouts.c.user_id == user_id))
        await database.execute(delete(Meal.__table__).where(Meal.__table__.c.user_id == user_id))
        await database.execute(delete(WeightEntry.__table__).where(WeightEntry.__table__.c.user_id == user_id))
        await database.execute(delete(users).where(users.c.id == user_id))
    logger.info("Deleted user %s and all owned records", user_id)
