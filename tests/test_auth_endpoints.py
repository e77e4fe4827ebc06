"""Endpoint tests for /auth and the session cookie."""

from datetime import timedelta

from app.config import settings
from conftest import TODAY


def _signup(client, email="ada@lovelace.dev", password="analytical-engine"):
    return client.post("/auth/signup", json={"email": email, "name": "Ada", "password": password})


def test_signup_logs_in_and_me_returns_profile(make_client):
    client = make_client()
    resp = _signup(client)

    assert resp.status_code == 201
    assert settings.session_cookie_name in resp.cookies
    profile = resp.json()
    assert profile["email"] == "ada@lovelace.dev"
    assert "passwordHash" not in profile

    me = client.get("/auth/me")
    assert me.status_code == 200
    assert me.json()["id"] == profile["id"]
    assert me.json()["dailyTokensUsed"] == 0


def test_duplicate_signup_conflicts(make_client):
    client = make_client()
    _signup(client)
    resp = _signup(client)
    assert resp.status_code == 409


def test_signup_validation(make_client):
    client = make_client()
    assert _signup(client, email="not-an-email").status_code == 422
    assert _signup(client, password="short").status_code == 422


def test_login_with_wrong_password_is_rejected(make_client):
    _signup(make_client())
    client = make_client()
    resp = client.post("/auth/login", json={"email": "ada@lovelace.dev", "password": "wrong-password"})
    assert resp.status_code == 401
    assert client.get("/auth/me").status_code == 401


def test_login_then_logout(make_client):
    _signup(make_client())
    client = make_client()
    resp = client.post("/auth/login", json={"email": "ada@lovelace.dev", "password": "analytical-engine"})
    assert resp.status_code == 200
    assert client.get("/auth/me").status_code == 200

    client.post("/auth/logout")
    assert client.get("/auth/me").status_code == 401


def test_tampered_cookie_is_rejected(make_client, user):
    client = make_client()
    client.cookies.set(settings.session_cookie_name, f"{user['id']}:9999999999:deadbeef")
    assert client.get("/auth/me").status_code == 401


def test_me_applies_daily_reset(make_client, repo, user):
    repo.users[user["id"]].update(
        total_tokens_used=900,
        daily_tokens_used=400,
        last_token_reset=TODAY - timedelta(days=1),
    )
    body = make_client(user_id=user["id"]).get("/auth/me").json()
    assert body["totalTokensUsed"] == 900
    assert body["dailyTokensUsed"] == 0
    assert repo.users[user["id"]]["last_token_reset"] == TODAY
