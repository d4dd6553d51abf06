# routers/auth.py
import logging

from fastapi import APIRouter, Depends, Response, status

from ..core.config import PASSWORD_MIN_LENGTH, SESSION_COOKIE_NAME
from ..core.errors import AuthenticationError, NotFound, Unauthenticated, ValidationError
from ..crud import user as user_crud
from ..dependencies import get_current_user
from ..schemas.user import UserSignup, UserLogin, SessionInfo, TokenResponse
from ..utils.jwt_handler import AuthContext, SESSION_MAX_AGE, create_session_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _issue_session(response: Response, user: dict) -> dict:
    token = create_session_token(user)
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=int(SESSION_MAX_AGE.total_seconds()),
        httponly=True,
        samesite="lax",
    )
    return {"access_token": token, "token_type": "bearer", "user": user_crud.public_identity(user)}


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: UserSignup):
    if not body.email or not body.password:
        raise ValidationError("Email and password are required")
    if len(body.password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")

    user = await user_crud.create_user(body.email, body.password, body.name)
    return {"message": "User registered successfully", "user": user}


@router.post("/login", response_model=TokenResponse)
async def login(body: UserLogin, response: Response):
    if not body.email or not body.password:
        raise ValidationError("Email and password are required")
    try:
        user = await user_crud.authenticate_user(body.email, body.password)
    except AuthenticationError as exc:
        # 어떤 단계에서 실패했는지는 응답에 드러내지 않는다
        logger.info("Login failed for %s: %s", body.email, exc.reason)
        raise Unauthenticated("Invalid email or password")
    logger.info("User %s logged in", user["id"])
    return _issue_session(response, user)


@router.get("/session", response_model=SessionInfo)
async def read_session(auth: AuthContext = Depends(get_current_user)):
    return {
        "user": {"id": auth.user_id, "name": auth.name, "image_url": auth.image_url},
        "expires": auth.expires,
    }


@router.post("/session/refresh", response_model=TokenResponse)
async def refresh_session(response: Response, auth: AuthContext = Depends(get_current_user)):
    """프로필 수정 후 호출 (trigger = update). 현재 사용자 정보를 다시 읽어 새 토큰을 발급합니다."""
    user = await user_crud.get_user(auth.user_id)
    if user is None:
        raise NotFound("User not found")
    return _issue_session(response, user)


@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie(SESSION_COOKIE_NAME)
    return {"success": True}
