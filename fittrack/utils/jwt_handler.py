# fittrack/utils/jwt_handler.py

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from ..core.config import SECRET_KEY, ALGORITHM, SESSION_MAX_AGE_DAYS
from ..core.errors import Unauthenticated

logger = logging.getLogger(__name__)

_DEV_SECRET_KEY = "fittrack-development-secret"

if not SECRET_KEY:
    logger.warning("SECRET_KEY is not set; using the development signing key")

SESSION_MAX_AGE = timedelta(days=SESSION_MAX_AGE_DAYS)


@dataclass(frozen=True)
class AuthContext:
    """요청마다 명시적으로 전달되는 호출자 정보."""

    user_id: str
    claims: dict = field(default_factory=dict)

    @property
    def name(self):
        return self.claims.get("name")

    @property
    def image_url(self):
        return self.claims.get("picture")

    @property
    def expires(self) -> datetime | None:
        exp = self.claims.get("exp")
        return datetime.fromtimestamp(exp, tz=timezone.utc) if exp is not None else None


def _signing_key() -> str:
    return SECRET_KEY or _DEV_SECRET_KEY


# 토큰 생성 함수
def create_session_token(user: dict, now: datetime | None = None) -> str:
    issued_at = now or datetime.now(timezone.utc)
    to_encode = {
        "sub": user["id"],
        "name": user.get("name"),
        "picture": user.get("image_url"),
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + SESSION_MAX_AGE).timestamp()),
    }
    return jwt.encode(to_encode, _signing_key(), algorithm=ALGORITHM)


# 토큰 검증 함수
def decode_session_token(token: str) -> AuthContext:
    try:
        payload = jwt.decode(token, _signing_key(), algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        logger.info("Rejected expired session token")
        raise Unauthenticated()
    except JWTError as exc:
        logger.info("Rejected malformed session token: %s", exc)
        raise Unauthenticated()

    user_id = payload.get("sub")
    if not user_id:
        raise Unauthenticated()
    return AuthContext(user_id=user_id, claims=payload)
