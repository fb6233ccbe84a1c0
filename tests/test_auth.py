import pytest
from fastapi.testclient import TestClient

from auth_tokens import decode_token
from main import app
from settings import settings


@pytest.fixture
def client():
    # https base url so the Secure auth cookies are sent back
    return TestClient(app, base_url="https://testserver")


def _login(client, password=None):
    return client.post(
        "/auth/login",
        json={"username": settings.admin_user, "password": password or settings.admin_password},
    )


def test_login_issues_tokens_and_cookies(client):
    r = _login(client)

    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True
    assert body["user"] == settings.admin_user
    assert decode_token(body["access_token"])["type"] == "access"
    assert decode_token(body["refresh_token"])["type"] == "refresh"
    assert "access_token" in r.cookies
    assert "refresh_token" in r.cookies


def test_login_rejects_wrong_password(client):
    r = _login(client, password="definitely-wrong")
    assert r.status_code == 401


def test_me_with_cookie_session(client):
    _login(client)

    r = client.get("/me")

    assert r.status_code == 200
    assert r.json() == {"user": settings.admin_user}


def test_refresh_uses_cookie(client):
    assert client.post("/auth/refresh").status_code == 401

    _login(client)
    r = client.post("/auth/refresh")

    assert r.status_code == 200
    assert decode_token(r.json()["access_token"])["sub"] == settings.admin_user


def test_logout_clears_session(client):
    _login(client)

    assert client.post("/auth/logout").status_code == 200
    assert client.get("/me").status_code == 401
