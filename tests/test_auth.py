from datetime import datetime, timedelta, timezone

from jose import jwt

from fittrack.core.config import SESSION_COOKIE_NAME
from fittrack.crud import user as user_crud


def test_register_rejects_short_password(client):
    response = client.post("/auth/register", json={"email": "a@example.com", "password": "12345"})
    assert response.status_code == 400
    assert response.json() == {"error": "Password must be at least 6 characters long"}


def test_register_returns_public_fields_only(client):
    response = client.post(
        "/auth/register", json={"email": "a@example.com", "password": "123456", "name": "Ann"}
    )
    assert response.status_code == 201
    user = response.json()["user"]
    assert set(user) == {"id", "email", "name"}
    assert user["email"] == "a@example.com"
    assert user["name"] == "Ann"
    assert "hashedPassword" not in response.text


def test_register_requires_email_and_password(client):
    response = client.post("/auth/register", json={"email": "a@example.com"})
    assert response.status_code == 400
    assert response.json()["error"] == "Email and password are required"


def test_register_duplicate_email_conflicts(client):
    payload = {"email": "dup@example.com", "password": "123456"}
    assert client.post("/auth/register", json=payload).status_code == 201
    response = client.post("/auth/register", json=payload)
    assert response.status_code == 409
    assert response.json() == {"error": "User with this email already exists"}


def test_register_race_on_same_email_conflicts(client, monkeypatch):
    payload = {"email": "race@example.com", "password": "123456"}
    assert client.post("/auth/register", json=payload).status_code == 201

    # 두 요청이 동시에 "아직 없음"을 확인한 상황: 첫 조회만 비어 있게 만든다
    real_lookup = user_crud.get_user_by_email
    lookups = []

    async def stale_lookup(email):
        lookups.append(email)
        if len(lookups) == 1:
            return None
        return await real_lookup(email)

    monkeypatch.setattr(user_crud, "get_user_by_email", stale_lookup)
    response = client.post("/auth/register", json=payload)
    assert response.status_code == 409
    assert response.json() == {"error": "User with this email already exists"}


def test_login_issues_token_and_cookie(client):
    client.post("/auth/register", json={"email": "a@example.com", "password": "secret123", "name": "Ann"})

    response = client.post("/auth/login", json={"email": "a@example.com", "password": "secret123"})
    assert response.status_code == 200
    body = response.json()
    assert body["tokenType"] == "bearer"
    assert body["user"]["email"] == "a@example.com"
    assert "hashedPassword" not in body["user"]
    assert SESSION_COOKIE_NAME in response.cookies

    claims = jwt.get_unverified_claims(body["accessToken"])
    assert claims["sub"] == body["user"]["id"]
    assert claims["name"] == "Ann"
    assert claims["exp"] - claims["iat"] == 30 * 24 * 60 * 60


def test_login_failures_are_indistinguishable(client):
    client.post("/auth/register", json={"email": "a@example.com", "password": "secret123"})

    wrong_password = client.post("/auth/login", json={"email": "a@example.com", "password": "nope-nope"})
    unknown_user = client.post("/auth/login", json={"email": "ghost@example.com", "password": "secret123"})
    wrong_case = client.post("/auth/login", json={"email": "A@example.com", "password": "secret123"})

    for response in (wrong_password, unknown_user, wrong_case):
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid email or password"}


def test_session_from_cookie_and_logout(client):
    client.post("/auth/register", json={"email": "a@example.com", "password": "secret123", "name": "Ann"})
    client.post("/auth/login", json={"email": "a@example.com", "password": "secret123"})

    response = client.get("/auth/session")
    assert response.status_code == 200
    assert response.json()["user"]["name"] == "Ann"

    assert client.post("/auth/logout").json() == {"success": True}
    client.cookies.clear()
    assert client.get("/auth/session").status_code == 401


def test_missing_expired_and_malformed_tokens_are_rejected(client, alice):
    user, _ = alice
    assert client.get("/workouts").status_code == 401

    expired = jwt.encode(
        {"sub": user["id"], "exp": int((datetime.now(timezone.utc) - timedelta(minutes=1)).timestamp())},
        "test-secret-key",
        algorithm="HS256",
    )
    response = client.get("/workouts", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401
    assert "error" in response.json()

    forged = jwt.encode({"sub": user["id"]}, "another-key", algorithm="HS256")
    assert client.get("/workouts", headers={"Authorization": f"Bearer {forged}"}).status_code == 401
    assert client.get("/workouts", headers={"Authorization": "Bearer not-a-token"}).status_code == 401


def test_refresh_reissues_token_with_updated_profile(client, alice):
    user, headers = alice
    client.patch(f"/users/{user['id']}", json={"name": "Alicia", "imageUrl": "/uploads/a.png"}, headers=headers)

    response = client.post("/auth/session/refresh", headers=headers)
    assert response.status_code == 200
    claims = jwt.get_unverified_claims(response.json()["accessToken"])
    assert claims["name"] == "Alicia"
    assert claims["picture"] == "/uploads/a.png"
