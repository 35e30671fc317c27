"""Tests for the channel API"""

import httpx
import pytest
from fastapi.testclient import TestClient

from pushgate.channels.registry import create_default_registry
from pushgate.main import app
from pushgate.routers.channels import get_registry
from pushgate.transport import HttpTransport
from tests.conftest import RecordingHandler, make_transport

FEISHU_URL = "https://open.feishu.cn/open-apis/bot/v2/hook/abc"


@pytest.fixture
def client(handler):
    registry = create_default_registry(transport=make_transport(handler))
    app.dependency_overrides[get_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestCatalogRoutes:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_list_channels(self, client):
        response = client.get("/v1/channels")

        assert response.status_code == 200
        assert list(response.json()) == ["data"]
        items = {c["type"]: c["label"] for c in response.json()["data"]}
        assert items["feishu"] == "Feishu Group Bot"
        assert set(items) == {"feishu", "dingtalk", "wecom", "slack", "discord"}

    def test_list_templates(self, client):
        response = client.get("/v1/channels/feishu/templates")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["label"] == "Feishu Group Bot"
        assert [t["type"] for t in data["templates"]] == ["text", "post", "interactive"]
        hidden = [f for f in data["templates"][0]["fields"] if f["component"] == "hidden"]
        assert hidden == [
            {
                "key": "msg_type",
                "description": "",
                "required": False,
                "component": "hidden",
                "default_value": "text",
                "placeholder": None,
            }
        ]

    def test_unknown_channel(self, client):
        response = client.get("/v1/channels/fieshu/templates")

        assert response.status_code == 404
        assert "Did you mean 'feishu'" in response.json()["error"]["message"]


class TestSendRoute:
    def test_send(self, client, handler):
        response = client.post(
            "/v1/channels/feishu/messages",
            json={
                "message": {"msg_type": "text", "content": {"text": "hi"}},
                "options": {"endpoint": FEISHU_URL, "secret": "abc"},
            },
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data == {"channel": "feishu", "status_code": 200, "body": {"code": 0, "msg": "success"}}
        assert "sign" in handler.last_body

    def test_missing_endpoint(self, client, handler):
        response = client.post(
            "/v1/channels/feishu/messages",
            json={"message": {"msg_type": "text", "content": {"text": "hi"}}, "options": {}},
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "missing endpoint"
        assert handler.requests == []

    def test_bad_payload(self, client):
        response = client.post(
            "/v1/channels/feishu/messages",
            json={
                "message": {"msg_type": "interactive", "content": {"card": "nope"}},
                "options": {"endpoint": FEISHU_URL},
            },
        )

        assert response.status_code == 422
        assert "content.card" in response.json()["error"]["message"]

    def test_remote_rejection(self):
        handler = RecordingHandler(status_code=400, json_body={"msg": "invalid token"})
        registry = create_default_registry(transport=make_transport(handler))
        app.dependency_overrides[get_registry] = lambda: registry
        try:
            response = TestClient(app).post(
                "/v1/channels/feishu/messages",
                json={
                    "message": {"msg_type": "text", "content": {"text": "hi"}},
                    "options": {"endpoint": FEISHU_URL},
                },
            )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 502
        assert "invalid token" in response.json()["error"]["message"]

    def test_unreachable(self):
        def fail(request):
            raise httpx.ConnectError("boom", request=request)

        registry = create_default_registry(transport=HttpTransport(transport=httpx.MockTransport(fail)))
        app.dependency_overrides[get_registry] = lambda: registry
        try:
            response = TestClient(app).post(
                "/v1/channels/slack/messages",
                json={
                    "message": {"msg_type": "text", "text": "hi"},
                    "options": {"endpoint": "https://hooks.slack.com/services/a/b/c"},
                },
            )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 502
        assert response.json()["error"]["message"] == "Could not reach the webhook endpoint"
