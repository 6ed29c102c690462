import pytest
import requests

from clipchat.client import CompletionClient
from clipchat.errors import NetworkError, ParseError, ServerError
from tests.fakes import FakeResponse, RecordingPost


@pytest.fixture
def client():
    return CompletionClient("http://127.0.0.1:7001/")


def _install(monkeypatch, client, *responses):
    post = RecordingPost(*responses)
    monkeypatch.setattr(client._session, "post", post)
    return post


class TestComplete:
    """Test suite for CompletionClient.complete."""

    def test_request_body(self, monkeypatch, client):
        post = _install(monkeypatch, client, FakeResponse(200, {"content": " A cat."}))

        client.complete("USER: [img-1] Describe.\nASSISTANT:", "aGVsbG8=", temperature=0.5, n_predict=1024)

        call = post.calls[0]
        assert call["url"] == "http://127.0.0.1:7001/completion"
        assert call["timeout"] is None
        assert call["json"] == {
            "prompt": "USER: [img-1] Describe.\nASSISTANT:",
            "temperature": 0.5,
            "n_predict": 1024,
            "cache_prompt": True,
            "image_data": [{"data": "aGVsbG8=", "id": 1}],
            "stop": ["USER:"],
        }

    def test_returns_content_and_ignores_other_fields(self, monkeypatch, client):
        body = {"content": " A cat.", "tokens_predicted": 4, "timings": {"predicted_ms": 12.0}}
        _install(monkeypatch, client, FakeResponse(200, body))
        assert client.complete("p", "img", 0.5, 16) == " A cat."

    def test_timeout_is_forwarded(self, monkeypatch):
        client = CompletionClient("http://127.0.0.1:7001", timeout=30.0)
        post = _install(monkeypatch, client, FakeResponse(200, {"content": ""}))
        client.complete("p", "img", 0.5, 16)
        assert post.calls[0]["timeout"] == 30.0

    def test_connection_failure(self, monkeypatch, client):
        _install(monkeypatch, client, requests.exceptions.ConnectionError("refused"))
        with pytest.raises(NetworkError, match="refused"):
            client.complete("p", "img", 0.5, 16)

    @pytest.mark.parametrize("status", [400, 404, 500, 503])
    def test_non_success_status(self, monkeypatch, client, status):
        _install(monkeypatch, client, FakeResponse(status, text="boom"))
        with pytest.raises(ServerError) as excinfo:
            client.complete("p", "img", 0.5, 16)
        assert excinfo.value.status_code == status

    def test_body_not_json(self, monkeypatch, client):
        _install(monkeypatch, client, FakeResponse(200, None, text="<html>"))
        with pytest.raises(ParseError, match="not JSON"):
            client.complete("p", "img", 0.5, 16)

    @pytest.mark.parametrize("body", [{"text": "x"}, {"content": None}, ["x"]])
    def test_missing_content(self, monkeypatch, client, body):
        _install(monkeypatch, client, FakeResponse(200, body))
        with pytest.raises(ParseError, match="invalid fields"):
            client.complete("p", "img", 0.5, 16)


class TestWaitForServer:
    """Test suite for the /health poll."""

    def test_ready(self, monkeypatch, client):
        urls = []

        def get(url, timeout=None):
            urls.append(url)
            return FakeResponse(200, {"status": "ok"})

        monkeypatch.setattr(client._session, "get", get)
        assert client.wait_for_server(timeout=1, poll_interval=0) is True
        assert urls == ["http://127.0.0.1:7001/health"]

    def test_loading_then_ready(self, monkeypatch, client):
        responses = [FakeResponse(503, {"error": "Loading model"}), FakeResponse(200, {"status": "ok"})]
        monkeypatch.setattr(client._session, "get", lambda url, timeout=None: responses.pop(0))
        assert client.wait_for_server(timeout=5, poll_interval=0) is True
        assert responses == []

    def test_times_out(self, monkeypatch, client):
        def get(url, timeout=None):
            raise requests.exceptions.ConnectionError("refused")

        monkeypatch.setattr(client._session, "get", get)
        assert client.wait_for_server(timeout=0.05, poll_interval=0.01) is False
