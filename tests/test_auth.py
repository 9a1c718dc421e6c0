"""Tests for registration, login and bearer-token auth."""

from app.utils.auth import create_access_token


def test_register_login_and_me(client):
    created = client.post(
        "/register", json={"name": "Carla", "email": "carla@example.com", "password": "hunter22"}
    )
    assert created.status_code == 201
    assert "hashed_password" not in created.json()

    login = client.post("/login", json={"email": "carla@example.com", "password": "hunter22"})
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = client.get("/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "carla@example.com"


def test_register_duplicate_email_conflicts(client):
    body = {"name": "Carla", "email": "carla@example.com", "password": "hunter22"}
    client.post("/register", json=body)

    again = client.post("/register", json=body)

    assert again.status_code == 409
    assert again.json() == {"message": "Email already registered"}


def test_login_with_wrong_password_is_unauthorized(client):
    client.post("/register", json={"name": "Carla", "email": "carla@example.com", "password": "hunter22"})

    response = client.post("/login", json={"email": "carla@example.com", "password": "wrong"})

    assert response.status_code == 401


def test_missing_or_bad_token_is_unauthorized(client, seed):
    assert client.get("/account").status_code == 401
    assert client.get("/account", headers={"Authorization": "Bearer nope"}).status_code == 401


def test_expired_token_is_unauthorized(client, seed):
    token = create_access_token({"sub": seed.user.email}, expires_minutes=-1)

    response = client.get("/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_auth_errors_use_the_message_body(client, seed):
    client.post("/register", json={"name": "Carla", "email": "carla@example.com", "password": "hunter22"})

    login = client.post("/login", json={"email": "carla@example.com", "password": "wrong"})
    missing = client.get("/me")

    assert login.json() == {"message": "Invalid credentials"}
    assert missing.json() == {"message": "Invalid or expired token"}
    assert missing.headers["www-authenticate"] == "Bearer"
