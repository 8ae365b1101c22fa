import uuid

import pytest


pytestmark = pytest.mark.asyncio


async def signup(client, **overrides):
    suffix = uuid.uuid4().hex[:6]
    payload = {
        "name": f"user_{suffix}",
        "email": f"user_{suffix}@example.com",
        "password": "StrongPass!23",
        "role": "client",
    }
    payload.update(overrides)
    return await client.post("/api/v1/auth/signup", json=payload)


async def login(client, email: str, password: str, role: str):
    return await client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": password, "role": role},
    )


async def test_signup_and_login_flow(client):
    resp = await signup(client, email="Alice@Example.com ")
    body = resp.json()
    assert resp.status_code == 201
    assert body["success"] is True
    user = body["data"]["user"]
    assert user["email"] == "alice@example.com"
    assert user["role"] == "client"
    assert "password" not in user and "passwordHash" not in user
    assert "specialization" not in user
    assert body["data"]["accessToken"]
    assert "accessToken" in resp.cookies

    login_resp = await login(client, "alice@example.com", "StrongPass!23", "client")
    login_body = login_resp.json()
    assert login_resp.status_code == 200
    assert login_body["data"]["user"]["id"] == user["id"]
    assert "accessToken" in login_body["data"]
    assert "accessToken" in login_resp.cookies


async def test_signup_accepts_user_type_alias(client):
    resp = await client.post(
        "/api/v1/auth/signup",
        json={
            "name": "Dr. Lee",
            "email": "lee@example.com",
            "password": "Secret#123",
            "userType": "counselor",
            "specialization": "Trauma",
            "level": "expert",
        },
    )
    assert resp.status_code == 201
    user = resp.json()["data"]["user"]
    assert user["role"] == "counselor"
    assert user["specialization"] == "Trauma"
    assert user["level"] == "expert"
    assert user["rating"] == 0
    assert user["status"] == "offline"


async def test_duplicate_email_rejected_regardless_of_role(client):
    first = await signup(client, email="dup@example.com")
    assert first.status_code == 201

    dup = await signup(
        client,
        email="dup@example.com",
        role="counselor",
        specialization="Grief",
        level="intern",
    )
    assert dup.status_code == 400
    assert dup.json()["detail"]["code"] == "EMAIL_EXISTS"


async def test_counselor_requires_specialization_and_level(client):
    resp = await signup(client, role="counselor", level="expert")
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "VALIDATION_ERROR"

    resp = await signup(client, role="counselor", specialization="Anxiety")
    assert resp.status_code == 400

    resp = await signup(client, role="counselor", specialization="Anxiety", level="guru")
    assert resp.status_code == 400


async def test_signup_validation_errors(client):
    resp = await signup(client, role="superuser")
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "INVALID_ROLE"

    resp = await signup(client, password="123")
    assert resp.status_code == 400

    resp = await signup(client, email="not-an-email")
    assert resp.status_code == 400

    resp = await client.post("/api/v1/auth/signup", json={"email": "x@example.com"})
    assert resp.status_code == 400
    assert resp.json()["detail"]["message"] == "All fields are required"


async def test_login_failures_are_indistinguishable(client, create_user):
    user, password = await create_user(role="client")

    unknown = await login(client, "ghost@example.com", password, "client")
    wrong_password = await login(client, user.email, "wrong-password", "client")
    wrong_role = await login(client, user.email, password, "counselor")

    for resp in (unknown, wrong_password, wrong_role):
        assert resp.status_code == 401
        assert resp.json()["detail"] == {
            "code": "AUTH_INVALID_CREDENTIALS",
            "message": "Invalid credentials",
        }


async def test_profile_requires_token(client, login_as):
    resp = await client.get("/api/v1/auth/profile")
    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "AUTH_REQUIRED"

    resp = await client.get("/api/v1/auth/profile", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "AUTH_INVALID_TOKEN"

    user, headers = await login_as("counselor")
    resp = await client.get("/api/v1/auth/profile", headers=headers)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["id"] == str(user.id)
    assert data["specialization"] == "Anxiety"


async def test_token_for_deleted_user_is_rejected(client, login_as):
    user, headers = await login_as("client")
    await user.delete()

    resp = await client.get("/api/v1/auth/profile", headers=headers)
    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "AUTH_USER_NOT_FOUND"


async def test_logout_clears_cookie(client, login_as):
    _, headers = await login_as("client")
    resp = await client.post("/api/v1/auth/logout", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["success"] is True


async def test_user_role_value_means_client(client):
    resp = await signup(client, email="legacy@example.com", role="user")
    assert resp.status_code == 201
    assert resp.json()["data"]["user"]["role"] == "client"

    resp = await client.post(
        "/api/v1/auth/login",
        json={"email": "legacy@example.com", "password": "StrongPass!23", "userType": "user"},
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["user"]["role"] == "client"
