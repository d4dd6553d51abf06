# fittrack/utils/security.py

from passlib.context import CryptContext

from ..core.config import BCRYPT_ROUNDS

# bcrypt 해시 (느린 해시 함수이므로 호출하는 쪽에서 threadpool로 실행한다)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)
