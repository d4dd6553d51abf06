# database.py

import uuid

from databases import Database
import sqlalchemy
from sqlalchemy.orm import declarative_base

from .core.config import DATABASE_URL

database = Database(DATABASE_URL)

Base = declarative_base()


def _sync_url(url: str) -> str:
    # databases는 비동기 드라이버 URL을 쓰지만 테이블 생성은 동기 엔진으로 한다
    return url.replace("+aiosqlite", "").replace("+asyncpg", "+psycopg2").replace("+aiomysql", "+pymysql")


def create_tables():
    """모델에 정의된 모든 테이블을 (없으면) 생성합니다."""
    from . import models  # noqa: F401  테이블을 metadata에 등록

    engine = sqlalchemy.create_engine(_sync_url(str(database.url)))
    try:
        Base.metadata.create_all(bind=engine)
    finally:
        engine.dispose()


def drop_tables():
    from . import models  # noqa: F401

    engine = sqlalchemy.create_engine(_sync_url(str(database.url)))
    try:
        Base.metadata.drop_all(bind=engine)
    finally:
        engine.dispose()


def row_to_dict(row, table) -> dict | None:
    """databases Record를 테이블 컬럼 이름 기준의 dict로 변환합니다."""
    if row is None:
        return None
    return {column.name: row[column.name] for column in table.columns}


def new_id() -> str:
    return uuid.uuid4().hex
