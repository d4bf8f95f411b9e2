"""Parser for `[[scheme://]host[:port]][path]' URLs.

The grammar is deliberately narrower than RFC 3986: no credentials, no
IPv6 literals, and the path (including any query) is taken verbatim.
Parsing runs four ordered stages over the text (scheme, host, port, path),
each consuming a prefix and failing fast.

Examples:
    /path/to/file
    example.com
    http://localhost:80
    http://localhost/index.html
"""

import re
from dataclasses import dataclass

from httpget.errors import UrlParseError
from httpget.url.constants import (
    DEFAULT_PATH,
    PORT_MAX,
    PORT_UNSPECIFIED,
    SCHEME_SEPARATOR,
)
from httpget.url.models import Url


SCHEME_PATTERN = re.compile(r"[A-Za-z0-9+.\-]+(?=://)")
HOST_PATTERN = re.compile(r"[A-Za-z0-9.\-]*")
PORT_PATTERN = re.compile(r":([0-9]*)")


@dataclass
class _ParseState:
    """Scratch state threaded through the parse stages."""

    text: str
    pos: int = 0
    scheme: str | None = None
    host: str | None = None
    port: int = PORT_UNSPECIFIED

    @property
    def rest(self) -> str:
        return self.text[self.pos :]


def _parse_scheme(state: _ParseState) -> None:
    # A scheme is optional; without "://" the text is host and path.
    match = SCHEME_PATTERN.match(state.text, state.pos)
    if match is None:
        return
    state.scheme = match.group(0).lower()
    state.pos = match.end() + len(SCHEME_SEPARATOR)


def _parse_host(state: _ParseState) -> None:
    match = HOST_PATTERN.match(state.text, state.pos)
    host = match.group(0) if match else ""
    if not host:
        if state.scheme is not None:
            raise UrlParseError(state.text, "host name missing")
        return
    state.host = host
    state.pos = match.end()  # type: ignore[union-attr]


def _parse_port(state: _ParseState) -> None:
    match = PORT_PATTERN.match(state.text, state.pos)
    if match is None:
        return
    if state.host is None:
        raise UrlParseError(state.text, "port given without host name")
    digits = match.group(1)
    if not digits or int(digits) > PORT_MAX:
        raise UrlParseError(state.text, "invalid port")
    state.port = int(digits)
    state.pos = match.end()


def _parse_path(state: _ParseState) -> str:
    rest = state.rest
    if not rest and state.host is None:
        raise UrlParseError(state.text, "empty URL")
    if rest in ("", DEFAULT_PATH):
        return DEFAULT_PATH
    if not rest.startswith("/"):
        raise UrlParseError(state.text, "path must start with `/'")
    return rest


def parse_url(text: str) -> Url:
    """Parse URL text.

    Args:
        text: URL in `[[scheme://]host[:port]][path]' form.

    Returns:
        Parsed Url.

    Raises:
        UrlParseError: If any stage rejects the text.
    """
    state = _ParseState(text=text)
    _parse_scheme(state)
    _parse_host(state)
    _parse_port(state)
    path = _parse_path(state)
    return Url(scheme=state.scheme, host=state.host, port=state.port, path=path)
