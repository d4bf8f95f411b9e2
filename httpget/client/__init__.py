"""Request engine for the HTTP retriever."""

from httpget.client.config import ClientConfig
from httpget.client.engine import Connector, RedirectEngine, request


__all__ = [
    "ClientConfig",
    "Connector",
    "RedirectEngine",
    "request",
]
