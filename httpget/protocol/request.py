"""Request serialization over a buffered connection."""

import structlog

from httpget.auth import basic_authorization
from httpget.protocol.constants import COMPONENT_PROTOCOL, CRLF
from httpget.protocol.models import RequestInfo
from httpget.protocol.redact import REDACTED_VALUE, is_sensitive_header
from httpget.transport.connection import Connection
from httpget.transport.constants import HTTP_PORT


logger = structlog.get_logger()


def host_header_value(host: str, port: int) -> str:
    """Build the Host header value, omitting the default port.

    Args:
        host: Server host name.
        port: Server port; negative for default.

    Returns:
        `host' or `host:port'.
    """
    if port < 0 or port == HTTP_PORT:
        return host
    return f"{host}:{port}"


def build_request_headers(info: RequestInfo) -> list[tuple[str, str]]:
    """Build the ordered request header list.

    Args:
        info: Request definition.

    Returns:
        Header (field, value) pairs in wire order.
    """
    headers = [("Host", host_header_value(info.host, info.port))]
    if info.credentials is not None:
        headers.append(("Authorization", basic_authorization(info.credentials)))
    headers.append(("Connection", "close"))
    if info.range_spec is not None:
        headers.append(("Range", info.range_spec))
    return headers


def send_request(conn: Connection, info: RequestInfo) -> None:
    """Serialize a bodiless request and flush it to the server.

    The write side is half-closed afterwards, since no body follows.

    Args:
        conn: Open connection.
        info: Request definition.

    Raises:
        SendError: If the connection fails while sending.
    """
    log = logger.bind(component=COMPONENT_PROTOCOL, host=info.host)

    request_line = f"{info.method} {info.path} HTTP/1.1"
    log.debug("request_line", line=request_line)
    _send_line(conn, request_line)

    for field, value in build_request_headers(info):
        log.debug(
            "request_header",
            field=field,
            value=REDACTED_VALUE if is_sensitive_header(field) else value,
        )
        _send_line(conn, f"{field}: {value}")

    _send_line(conn, "")
    conn.flush()
    conn.shutdown_write()

    log.debug("request_sent", method=info.method, path=info.path)


def _send_line(conn: Connection, line: str) -> None:
    conn.send(f"{line}{CRLF}".encode())
