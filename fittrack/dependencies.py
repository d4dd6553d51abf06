# fittrack/dependencies.py

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from .core.config import SESSION_COOKIE_NAME
from .core.errors import Forbidden, NotFound, Unauthenticated
from .crud import meal as meal_crud
from .crud import weight as weight_crud
from .crud import workout as workout_crud
from .utils.jwt_handler import AuthContext, decode_session_token

# 헤더가 없으면 쿠키를 확인해야 하므로 auto_error=False
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


async def get_current_user(request: Request, token: str | None = Depends(oauth2_scheme)) -> AuthContext:
    """Authorization 헤더 또는 세션 쿠키의 토큰으로 호출자를 확인합니다. 없으면 401."""
    token = token or request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        raise Unauthenticated()
    return decode_session_token(token)


def ensure_owner(record: dict | None, auth: AuthContext, label: str) -> dict:
    """존재 확인(404) 후 소유자 확인(403). 인증 확인은 이미 끝난 상태여야 한다."""
    if record is None:
        raise NotFound(f"{label} not found")
    if record["user_id"] != auth.user_id:
        raise Forbidden(f"You don't have permission to access this {label.lower()}")
    return record


def ensure_self(user_id: str, auth: AuthContext):
    # 사용자 리소스는 호출자 자신만 접근할 수 있다
    if user_id != auth.user_id:
        raise Forbidden()


async def get_owned_workout(workout_id: str, auth: AuthContext = Depends(get_current_user)) -> dict:
    return ensure_owner(await workout_crud.get_workout(workout_id), auth, "Workout")


async def get_owned_meal(meal_id: str, auth: AuthContext = Depends(get_current_user)) -> dict:
    return ensure_owner(await meal_crud.get_meal(meal_id), auth, "Meal")


async def get_owned_weight(entry_id: str, auth: AuthContext = Depends(get_current_user)) -> dict:
    return ensure_owner(await weight_crud.get_weight(entry_id), auth, "Weight entry")
