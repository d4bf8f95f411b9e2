"""Request engine: connect, send, parse, and follow redirects."""

import time
from collections.abc import Callable

import structlog

from httpget.client.config import ClientConfig
from httpget.errors import HttpGetError, RangeMismatchError
from httpget.observability.metrics import TransferMetrics
from httpget.protocol.constants import HTTP_SCHEME
from httpget.protocol.models import RequestInfo
from httpget.protocol.redact import redact_credentials
from httpget.protocol.request import send_request
from httpget.protocol.response import Response, parse_response
from httpget.transport.connection import Connection
from httpget.url.models import Url


logger = structlog.get_logger()

Connector = Callable[[str, int, float | None], Connection]


class RedirectEngine:
    """Synchronous HTTP request engine with redirect following.

    Each hop opens a fresh connection, sends the request, parses the status
    line and headers, verifies any requested byte range, and primes the
    body reader. Failures abort immediately; nothing is retried.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        connector: Connector = Connection.connect,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Engine configuration.
            connector: Callable opening a Connection to (host, port, timeout).
        """
        self._config = config or ClientConfig()
        self._connect = connector
        self._metrics = TransferMetrics.get_instance()
        self._log = logger.bind(component="client")

    def request(self, info: RequestInfo) -> Response:
        """Perform a request, following redirects within the allowed budget.

        The final response is returned when the redirect budget is spent,
        the status is not 3xx, no Location was given, or the Location names
        a scheme other than http.

        Args:
            info: Request definition.

        Returns:
            Final response, positioned at the start of its body. The caller
            must close it.

        Raises:
            HttpGetError: The first transport or protocol failure.
        """
        start_time_ns = time.perf_counter_ns()
        current = info
        remaining = info.max_redirections
        hops = 0

        while True:
            resp = self._attempt(current)

            target = self._redirect_target(resp, remaining)
            if target is None:
                duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
                self._metrics.record_duration(duration_ms)
                self._log.info(
                    "request_complete",
                    host=current.host,
                    path=current.path,
                    status=resp.status,
                    redirects=hops,
                    duration_ms=round(duration_ms, 2),
                )
                return resp

            resp.detach_location()
            resp.close()

            if remaining > 0:
                remaining -= 1
            hops += 1
            current = self._next_hop(current, target)
            self._metrics.record_redirect()

    def _attempt(self, info: RequestInfo) -> Response:
        """Run one connect/send/parse cycle."""
        log = self._log.bind(host=info.host, port=info.port, path=info.path)
        log.debug(
            "request_attempt",
            method=info.method,
            range=info.range_spec,
            credentials=redact_credentials(info.credentials),
        )

        try:
            conn = self._connect(info.host, info.port, self._config.timeout_seconds)
        except HttpGetError as e:
            self._metrics.record_failure(e.error_class)
            raise
        self._metrics.record_connection()

        try:
            send_request(conn, info)
            resp = parse_response(conn)
            if info.want_range and resp.ranged:
                self._verify_range(info, resp)
            resp.open_body()
        except HttpGetError as e:
            conn.close()
            self._metrics.record_failure(e.error_class)
            log.debug("request_failed", **e.to_dict())
            raise

        self._metrics.record_response(resp.status)
        return resp

    def _redirect_target(self, resp: Response, remaining: int) -> Url | None:
        """Return the Location to follow, or None if resp is final."""
        if remaining == 0 or not resp.is_redirect or resp.location is None:
            return None
        if resp.location.scheme not in (None, HTTP_SCHEME):
            return None
        return resp.location

    def _verify_range(self, info: RequestInfo, resp: Response) -> None:
        """Ensure the returned range is exactly the requested one.

        Raises:
            RangeMismatchError: If first or last byte differ.
        """
        expected_last = (
            info.range_last if info.range_last is not None else resp.range_total - 1
        )
        if resp.range_first != info.range_first or resp.range_last != expected_last:
            raise RangeMismatchError(
                info.range_spec or "",
                f"bytes {resp.range_first}-{resp.range_last}/{resp.range_total}",
            )

    def _next_hop(self, current: RequestInfo, location: Url) -> RequestInfo:
        """Derive the next request from a redirect Location.

        A Location without a host keeps the current host and port. Credentials
        follow only to the same host, unless trust_location is set.
        """
        if location.host is None:
            host, port = current.host, current.port
        else:
            host, port = location.host, location.port

        credentials = current.credentials
        if (
            credentials is not None
            and not current.trust_location
            and host.lower() != current.host.lower()
        ):
            credentials = None
            self._log.info("credentials_dropped", from_host=current.host, to_host=host)

        self._log.info(
            "redirect_followed",
            from_host=current.host,
            to_host=host,
            port=port,
            path=location.path,
        )
        return current.model_copy(
            update={
                "host": host,
                "port": port,
                "path": location.path,
                "credentials": credentials,
            }
        )


def request(info: RequestInfo, config: ClientConfig | None = None) -> Response:
    """Perform a request with a default engine.

    Args:
        info: Request definition.
        config: Optional engine configuration.

    Returns:
        Final response; the caller must close it.
    """
    return RedirectEngine(config).request(info)
