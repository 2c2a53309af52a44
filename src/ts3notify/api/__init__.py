"""Clients for the TeamSpeak ServerQuery interface and the notification webhook."""

from ts3notify.api.query import QueryClient, QueryConnectionError, QueryError
from ts3notify.api.webhook import WebhookClient, WebhookError

__all__ = [
    "QueryClient",
    "QueryConnectionError",
    "QueryError",
    "WebhookClient",
    "WebhookError",
]
