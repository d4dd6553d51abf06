import os
import tempfile

# 설정은 import 시점에 읽히므로 앱을 불러오기 전에 환경 변수를 지정한다
_TMP_DIR = tempfile.mkdtemp(prefix="fittrack-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["UPLOADS_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["STORAGE_BACKEND"] = "local"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient

from fittrack.database import drop_tables
from fittrack.main import app

DEFAULT_PASSWORD = "secret123"


@pytest.fixture
def client():
    drop_tables()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def lenient_client(client):
    """처리되지 않은 예외를 500 응답으로 돌려받는 클라이언트."""
    return TestClient(app, raise_server_exceptions=False)


def register(client, email, password=DEFAULT_PASSWORD, name=None):
    response = client.post("/auth/register", json={"email": email, "password": password, "name": name})
    assert response.status_code == 201, response.text
    return response.json()["user"]


def login(client, email, password=DEFAULT_PASSWORD):
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    # 쿠키가 남아 있으면 "비로그인" 요청도 인증되므로 헤더로만 인증한다
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}


@pytest.fixture
def make_user(client):
    """등록 + 로그인 후 (user, headers)를 돌려주는 팩토리."""
    def _make_user(email, password=DEFAULT_PASSWORD, name=None):
        user = register(client, email, password, name)
        return user, login(client, email, password)
    return _make_user


@pytest.fixture
def alice(make_user):
    return make_user("alice@example.com", name="Alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob@example.com", name="Bob")
