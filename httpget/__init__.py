"""Minimal HTTP/1.1 file retriever.

The engine downloads a resource over a fresh connection per hop, with
optional byte-range resume, redirect following that keeps credentials
from leaking to other hosts, and HTTP Basic authentication.
"""

from httpget.client import ClientConfig, RedirectEngine, request
from httpget.errors import ErrorClass, HttpGetError
from httpget.protocol import RequestInfo, Response
from httpget.url import Url, parse_url


__version__ = "0.1.0"

__all__ = [
    "ClientConfig",
    "ErrorClass",
    "HttpGetError",
    "RedirectEngine",
    "RequestInfo",
    "Response",
    "Url",
    "parse_url",
    "request",
]
