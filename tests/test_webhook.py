"""Tests for the webhook transport."""

import json

import httpx
import pytest

from ts3notify.api.webhook import WebhookClient, WebhookError

URL = "https://hooks.example.com/services/T000/B000/XXXX"


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestWebhookClient:
    """Tests for WebhookClient.send."""

    def test_posts_text_payload(self) -> None:
        """Test the message is posted as {"text": ...} JSON."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, text="ok")

        WebhookClient(URL, client=_client(handler)).send("A connected to Lobby\n")

        assert len(requests) == 1
        assert requests[0].method == "POST"
        assert str(requests[0].url) == URL
        assert requests[0].headers["content-type"] == "application/json"
        assert json.loads(requests[0].content) == {"text": "A connected to Lobby\n"}

    def test_error_status_raises(self) -> None:
        """Test non-2xx responses raise WebhookError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, text="no_service")

        with pytest.raises(WebhookError) as excinfo:
            WebhookClient(URL, client=_client(handler)).send("hello")

        assert "404" in str(excinfo.value)
        assert "no_service" in str(excinfo.value)

    def test_transport_failure_raises(self) -> None:
        """Test connection errors raise WebhookError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        with pytest.raises(WebhookError) as excinfo:
            WebhookClient(URL, client=_client(handler)).send("hello")

        assert "Connection refused" in str(excinfo.value)

    def test_default_client_uses_httpx_post(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test without an injected client the module-level httpx.post is used."""
        calls: list[dict] = []

        def fake_post(url: str, **kwargs) -> httpx.Response:
            calls.append({"url": url, **kwargs})
            return httpx.Response(200, request=httpx.Request("POST", url))

        monkeypatch.setattr(httpx, "post", fake_post)
        WebhookClient(URL, timeout=3.0).send("hello")

        assert calls == [{"url": URL, "json": {"text": "hello"}, "timeout": 3.0}]
