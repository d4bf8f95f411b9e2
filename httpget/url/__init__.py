"""URL model and parser."""

from httpget.url.constants import DEFAULT_PATH, PORT_UNSPECIFIED
from httpget.url.models import Url
from httpget.url.parser import parse_url


__all__ = [
    "DEFAULT_PATH",
    "PORT_UNSPECIFIED",
    "Url",
    "parse_url",
]
