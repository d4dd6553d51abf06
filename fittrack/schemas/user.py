# schemas/user.py
from datetime import datetime

from .base import CamelModel


class UserSignup(CamelModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None


class UserLogin(CamelModel):
    email: str | None = None
    password: str | None = None


class UserPublic(CamelModel):
    """세션/응답에 실어 보내는 최소한의 사용자 정보 (비밀번호 해시 없음)."""
    id: str
    email: str
    name: str | None = None
    image_url: str | None = None


class UserProfile(UserPublic):
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProfileUpdate(CamelModel):
    # 명시적으로 보낸 필드만 수정한다 (model_fields_set 기준)
    name: str | None = None
    image_url: str | None = None
    image_public_id: str | None = None


class PasswordChange(CamelModel):
    current_password: str | None = None
    new_password: str | None = None


class AccountDelete(CamelModel):
    password: str | None = None


class SessionUser(CamelModel):
    id: str
    name: str | None = None
    image_url: str | None = None


class SessionInfo(CamelModel):
    user: SessionUser
    expires: datetime | None = None


class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: UserPublic
