import pytest
import respx
from fastapi.testclient import TestClient
from httpx import ConnectError, Response

from auth_tokens import create_token
from main import app
from routers import status as status_router
from settings import settings

WORKFLOW_URL = "https://n8n.example.test/webhook/get-blog-data"


class _FakeSession:
    def __init__(self, fail=False):
        self.fail = fail

    async def execute(self, stmt):
        if self.fail:
            raise OSError(f"could not connect to {settings.postgres_dsn}")
        return None


@pytest.mark.asyncio
@respx.mock
async def test_workflow_webhook_connected(monkeypatch):
    monkeypatch.setattr(settings, "workflow_health_url", WORKFLOW_URL)
    monkeypatch.setattr(settings, "workflow_webhook_secret", "test-webhook-secret")

    route = respx.get(WORKFLOW_URL).mock(return_value=Response(200, json={"items": []}))

    result = await status_router.check_workflow_webhook()

    assert result.status == "connected"
    assert result.service == "Workflow Webhook"
    assert result.latency is not None
    req = route.calls[0].request
    assert req.headers.get("X-Api-Key-Blog-Publishing") == "test-webhook-secret"
    assert req.url.params.get("limit") == "1"


@pytest.mark.asyncio
@respx.mock
async def test_workflow_webhook_non_2xx_is_error(monkeypatch):
    monkeypatch.setattr(settings, "workflow_health_url", WORKFLOW_URL)

    respx.get(WORKFLOW_URL).respond(401, json={"message": "unauthorized"})

    result = await status_router.check_workflow_webhook()

    assert result.status == "error"
    assert result.message == "Workflow webhook error: 401"


@pytest.mark.asyncio
@respx.mock
async def test_workflow_webhook_unreachable(monkeypatch):
    monkeypatch.setattr(settings, "workflow_health_url", WORKFLOW_URL)

    respx.get(WORKFLOW_URL).mock(side_effect=ConnectError("connection refused"))

    result = await status_router.check_workflow_webhook()

    assert result.status == "error"
    assert result.message == "Workflow webhook unreachable"


@pytest.mark.asyncio
async def test_workflow_webhook_not_configured(monkeypatch):
    monkeypatch.setattr(settings, "workflow_health_url", None)

    result = await status_router.check_workflow_webhook()

    assert result.status == "error"


@pytest.mark.asyncio
async def test_database_check():
    ok = await status_router.check_database(_FakeSession())
    failed = await status_router.check_database(_FakeSession(fail=True))

    assert ok.status == "connected"
    assert failed.status == "error"
    assert settings.postgres_dsn not in (failed.message or "")


def test_health_is_public():
    r = TestClient(app).get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_status_endpoint(monkeypatch):
    monkeypatch.setattr(settings, "workflow_health_url", None)

    async def _db():
        yield _FakeSession()

    app.dependency_overrides[status_router.get_db] = _db
    try:
        client = TestClient(app)
        assert client.get("/status").status_code == 401

        token = create_token(token_type="access", subject=settings.admin_user, ttl_seconds=60)
        r = client.get("/status", headers={"Authorization": f"Bearer {token}"})
    finally:
        app.dependency_overrides.clear()

    assert r.status_code == 200
    assert [(s["service"], s["status"]) for s in r.json()] == [
        ("Database", "connected"),
        ("Workflow Webhook", "error"),
    ]
