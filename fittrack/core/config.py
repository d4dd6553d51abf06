from dotenv import load_dotenv
import os

# .env 파일 로드
load_dotenv()

# 데이터베이스
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./fittrack.db")

# 세션 토큰
SECRET_KEY = os.getenv("SECRET_KEY", "")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
SESSION_MAX_AGE_DAYS = int(os.getenv("SESSION_MAX_AGE_DAYS", 30))
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "fittrack_session")

# 비밀번호 정책
PASSWORD_MIN_LENGTH = int(os.getenv("PASSWORD_MIN_LENGTH", 6))
NEW_PASSWORD_MIN_LENGTH = int(os.getenv("NEW_PASSWORD_MIN_LENGTH", 8))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 12))

# 서버
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# 이미지 저장소 (local | s3)
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "local").strip().lower()
UPLOADS_DIR = os.getenv("UPLOADS_DIR", os.path.join(os.getcwd(), "uploads"))
UPLOADS_URL_PREFIX = os.getenv("UPLOADS_URL_PREFIX", "/uploads")
IMAGE_FOLDER = os.getenv("IMAGE_FOLDER", "fit-track/profiles")
AWS_BUCKET_NAME = os.getenv("AWS_BUCKET_NAME")
AWS_REGION = os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION")
AWS_S3_ACL = os.getenv("AWS_S3_ACL", "public-read").strip()
