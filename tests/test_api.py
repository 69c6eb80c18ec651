"""Tests for the HTTP completion endpoint."""
import pytest
from fastapi.testclient import TestClient

from conftest import FakeLLMProvider
from nightchat.api import create_app
from nightchat.api.config import GENERIC_ERROR, INVALID_MESSAGES_ERROR


@pytest.fixture
def make_client():
    """Build a TestClient around a given provider."""
    def _make(llm):
        return TestClient(create_app(llm), raise_server_exceptions=False)
    return _make


class TestChatEndpoint:
    """Tests for POST /api/chat."""

    def test_streams_plain_text(self, make_client, fake_llm):
        """Test that the body is the concatenated chunks as plain text."""
        with make_client(fake_llm) as client:
            response = client.post("/api/chat", json={
                "messages": [{"role": "user", "content": "Say hello"}],
            })

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Hello, world"

    def test_stream_chunks_arrive_in_order(self, make_client):
        llm = FakeLLMProvider(chunks=["1", "2", "3", "4"])
        with make_client(llm) as client:
            with client.stream("POST", "/api/chat", json={"messages": []}) as response:
                body = "".join(response.iter_text())

        assert body == "1234"

    def test_messages_not_array(self, make_client, fake_llm):
        """Test that a non-array history is a 400 with the exact message."""
        with make_client(fake_llm) as client:
            response = client.post("/api/chat", json={"messages": "not-an-array"})

        assert response.status_code == 400
        assert response.json() == {"error": INVALID_MESSAGES_ERROR}
        assert fake_llm.calls == []

    def test_messages_missing(self, make_client, fake_llm):
        with make_client(fake_llm) as client:
            response = client.post("/api/chat", json={"max_tokens": 5})

        assert response.status_code == 400
        assert response.json()["error"] == INVALID_MESSAGES_ERROR

    def test_body_not_object(self, make_client, fake_llm):
        with make_client(fake_llm) as client:
            response = client.post("/api/chat", json=[1, 2, 3])

        assert response.status_code == 400

    def test_empty_history_uses_defaults(self, make_client, fake_llm):
        """Test that an empty history is forwarded with default parameters."""
        with make_client(fake_llm) as client:
            response = client.post("/api/chat", json={"messages": []})

        assert response.status_code == 200
        call = fake_llm.calls[0]
        assert call["messages"] == []
        assert (call["max_tokens"], call["temperature"], call["top_p"]) == (500, 0.7, 0.9)

    def test_negative_max_tokens_replaced(self, make_client, fake_llm):
        with make_client(fake_llm) as client:
            client.post("/api/chat", json={"messages": [], "max_tokens": -5})

        assert fake_llm.calls[0]["max_tokens"] == 500

    def test_backend_failure_is_generic_500(self, make_client):
        """Test that backend errors never leak details to the client."""
        llm = FakeLLMProvider(fail_on_call=True)
        with make_client(llm) as client:
            response = client.post("/api/chat", json={
                "messages": [{"role": "user", "content": "hi"}],
            })

        assert response.status_code == 500
        assert response.json() == {"error": GENERIC_ERROR}
        assert "secret-host" not in response.text

    def test_invalid_json_is_500(self, make_client, fake_llm):
        """Test that an undecodable body is reported as a server error."""
        with make_client(fake_llm) as client:
            response = client.post(
                "/api/chat",
                content=b"{not json",
                headers={"content-type": "application/json"},
            )

        assert response.status_code == 500
        assert response.json() == {"error": GENERIC_ERROR}
        assert fake_llm.calls == []

    def test_mid_stream_failure_truncates_body(self, make_client):
        llm = FakeLLMProvider(chunks=["partial", " answer", " lost"], fail_after=2)
        with make_client(llm) as client:
            response = client.post("/api/chat", json={"messages": []})

        assert response.status_code == 200
        assert response.text == "partial answer"

    def test_concurrent_requests_are_independent(self, make_client):
        """Test that one pipeline serves repeated requests without shared state."""
        llm = FakeLLMProvider(chunks=["x"])
        with make_client(llm) as client:
            bodies = [client.post("/api/chat", json={"messages": []}).text for _ in range(3)]

        assert bodies == ["x", "x", "x"]
        assert len(llm.calls) == 3


class TestHealthEndpoint:
    """Tests for GET /health."""

    def test_health_reports_provider(self, make_client, fake_llm):
        with make_client(fake_llm) as client:
            response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "provider": "fake", "model": "fake-model"}


class TestLifespan:
    """Tests for application startup and shutdown."""

    def test_provider_closed_on_shutdown(self, make_client, fake_llm):
        with make_client(fake_llm):
            assert not fake_llm.closed

        assert fake_llm.closed

    def test_provider_left_open_when_shared(self, fake_llm):
        app = create_app(fake_llm, close_llm_on_shutdown=False)
        with TestClient(app):
            pass

        assert not fake_llm.closed
