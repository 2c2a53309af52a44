"""Incoming-webhook transport for chat notifications.

Posts {"text": "..."} as JSON, the payload accepted by Slack-compatible
incoming webhooks.
"""

import logging

import httpx

logger = logging.getLogger(__name__)

# Request timeout in seconds
REQUEST_TIMEOUT = 10.0


class WebhookError(Exception):
    """Notification could not be delivered."""


class WebhookClient:
    """Send text messages to an incoming webhook.

    Example:
        webhook = WebhookClient("https://hooks.slack.com/services/...")
        webhook.send("alice connected to Lobby\\n")
    """

    def __init__(
        self,
        url: str,
        timeout: float = REQUEST_TIMEOUT,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the webhook client.

        Args:
            url: Webhook URL.
            timeout: Request timeout in seconds.
            client: Optional httpx client (a default one is used per request otherwise).
        """
        self.url = url
        self.timeout = timeout
        self._client = client

    def send(self, text: str) -> None:
        """Post a message.

        Args:
            text: Message body.

        Raises:
            WebhookError: On transport failure or a non-2xx response.
        """
        payload = {"text": text}
        try:
            if self._client is not None:
                response = self._client.post(self.url, json=payload, timeout=self.timeout)
            else:
                response = httpx.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise WebhookError(
                f"Webhook returned HTTP {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise WebhookError(f"Webhook request failed: {e}") from e

        logger.debug("Webhook accepted message (%d chars)", len(text))
