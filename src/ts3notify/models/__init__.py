"""Data models for the observed voice server roster."""

from ts3notify.models.client import Client

__all__ = ["Client"]
