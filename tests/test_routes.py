"""
Tests for the HTTP and WebSocket surface.

The automation container is replaced through dependency_overrides with one
built from fakes: no browser, no database file, no chat backend.
"""

from typing import Generator

import httpx
import pytest
from fastapi.testclient import TestClient

from voicepilot.deps import AutomationContainer, build_container, get_container, set_container
from voicepilot.environments.browser.media import RecordingMediaController
from voicepilot.main import app
from voicepilot.services.chat_relay import ChatRelayClient
from voicepilot.services.kv_store import InMemoryKeyValueStore
from voicepilot.services.websocket_manager import ConnectionManager


@pytest.fixture
def relay_replies():
    """Mutable relay behaviour: a reply string, or an exception to raise."""
    return {"reply": "I'm doing well, thanks for asking!"}


@pytest.fixture
def container(opener, relay_replies) -> AutomationContainer:
    def handler(request: httpx.Request) -> httpx.Response:
        reply = relay_replies["reply"]
        if isinstance(reply, Exception):
            raise reply
        return httpx.Response(200, json={"message": reply})

    return build_container(
        opener=opener,
        store=InMemoryKeyValueStore(),
        media_controller=RecordingMediaController(),
        chat_relay=ChatRelayClient(base_url="http://relay.test/api", transport=httpx.MockTransport(handler)),
        connections=ConnectionManager(),
        poll_interval=3600,
    )


@pytest.fixture
def client(container) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_container] = lambda: container
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestIntentEndpoint:

    def test_automation(self, client):
        response = client.post("/intent", json={"text": "search iPhone on amazon"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["intent_type"] == "shopping"
        assert data["handled_by"] == "automation"
        assert data["action"] == "shopping_opened"
        assert data["window_id"] is not None
        assert data["message"] in data["response"]

    def test_failed_automation_is_reported_in_body(self, client, container):
        container.opener.blocked = True

        response = client.post("/intent", json={"text": "search iPhone on amazon"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["message"].startswith("Failed to execute shopping command: ")

    def test_conversation_is_relayed(self, client, container):
        response = client.post("/intent", json={"text": "hello, how are you"})

        data = response.json()
        assert data["handled_by"] == "conversation"
        assert data["intent_type"] == "conversation"
        assert data["response"] == "I'm doing well, thanks for asking!"
        assert container.statistics.snapshot().total_executions == 0

    def test_relay_down(self, client, relay_replies):
        relay_replies["reply"] = httpx.ConnectError("connection refused")

        data = client.post("/intent", json={"text": "hello, how are you"}).json()

        assert data["success"] is False
        assert data["message"].startswith("Unable to connect to the server.")

    def test_empty_text_rejected(self, client):
        assert client.post("/intent", json={"text": ""}).status_code == 422

    def test_classify_only(self, client, container):
        response = client.post("/intent/classify", json={"text": "call 555-123-4567"})

        assert response.status_code == 200
        intent = response.json()["intent"]
        assert intent["intent_type"] == "phone"
        assert intent["number"] == "5551234567"
        assert container.opener.opened == []


class TestAutomationEndpoints:

    def test_stats(self, client):
        client.post("/intent", json={"text": "search iPhone on amazon"})

        data = client.get("/automation/stats").json()

        assert data["total_executions"] == 1
        assert data["success_rate"] == "100%"
        assert data["today_executions"] == 1

    def test_windows(self, client):
        window_id = client.post("/intent", json={"text": "search iPhone on amazon"}).json()["window_id"]

        data = client.get("/automation/windows").json()

        assert data["total"] == 1
        assert data["active_id"] == window_id
        assert data["windows"][0]["type"] == "shopping"
        assert data["windows"][0]["current"] is True

    def test_close_window(self, client):
        window_id = client.post("/intent", json={"text": "search iPhone on amazon"}).json()["window_id"]

        assert client.delete(f"/automation/windows/{window_id}").status_code == 204
        assert client.delete(f"/automation/windows/{window_id}").status_code == 404

    def test_close_all_windows(self, client):
        client.post("/intent", json={"text": "search iPhone on amazon"})
        client.post("/intent", json={"text": "google weather in Paris"})

        assert client.delete("/automation/windows").json() == {"closed": 2}
        assert client.get("/automation/windows").json()["total"] == 0


def test_routes_unavailable_before_startup():
    set_container(None)

    response = TestClient(app).get("/automation/stats")

    assert response.status_code == 503


class TestUiWebSocket:

    def test_connect_and_heartbeat(self, client):
        with client.websocket_connect("/ws/ui?client_id=ui-1") as websocket:
            assert websocket.receive_json()["client_id"] == "ui-1"

            websocket.send_json({"type": "heartbeat"})

            assert websocket.receive_json()["type"] == "heartbeat_ack"

    def test_socket_joins_container_connections(self, client, container):
        with client.websocket_connect("/ws/ui?client_id=ui-2") as websocket:
            websocket.receive_json()

            assert container.connections.is_connected("ui-2")

        assert not container.connections.is_connected("ui-2")
