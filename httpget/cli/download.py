"""Download flow: URL to request, response to output sink."""

from dataclasses import dataclass

import click
import structlog

from httpget.cli.constants import COMPONENT_CLI
from httpget.cli.output import (
    detect_output_file,
    detect_output_pos,
    open_output,
    write_output,
)
from httpget.cli.progress import ProgressPrinter
from httpget.client.config import ClientConfig
from httpget.client.engine import RedirectEngine
from httpget.errors import UnsupportedRedirectSchemeError
from httpget.observability.metrics import TransferMetrics
from httpget.protocol.constants import HTTP_SCHEME
from httpget.protocol.models import RequestInfo
from httpget.protocol.redact import redact_credentials
from httpget.protocol.response import Response
from httpget.url.parser import parse_url


logger = structlog.get_logger()


class DownloadError(Exception):
    """Raised when a download cannot proceed although the exchange succeeded."""


@dataclass
class DownloadOptions:
    """Options for a single download."""

    url: str
    output_file: str | None
    offset: int | None
    max_redirections: int
    credentials: str | None
    trust_location: bool
    quiet: bool
    read_size: int
    timeout_seconds: float | None = None


def build_request_info(options: DownloadOptions) -> tuple[RequestInfo, str]:
    """Resolve the URL and output target into a request definition.

    Args:
        options: Download options.

    Returns:
        (request, output file name) pair.

    Raises:
        UrlParseError: If the URL cannot be parsed.
        UnsupportedRedirectSchemeError: If the URL scheme is not http.
        DownloadError: If the URL has no host name.
        OutputError: If the resume offset cannot be detected.
    """
    url = parse_url(options.url)
    if url.scheme is not None and url.scheme != HTTP_SCHEME:
        raise UnsupportedRedirectSchemeError(url.scheme)
    if url.host is None:
        msg = "Invalid URL: host name missing"
        raise DownloadError(msg)

    output_file = detect_output_file(options.output_file, url)
    pos = detect_output_pos(options.offset, output_file)

    info = RequestInfo(
        host=url.host,
        port=url.port,
        path=url.path,
        range_first=pos if pos > 0 else None,
        credentials=options.credentials,
        trust_location=options.trust_location,
        max_redirections=options.max_redirections,
    )
    return info, output_file


def check_final_response(info: RequestInfo, resp: Response) -> None:
    """Reject final responses that cannot be saved.

    Raises:
        UnsupportedRedirectSchemeError: For a redirect to another scheme.
        DownloadError: For a non-2xx status, or an unranged answer to a
            resume request.
    """
    if not resp.is_ok:
        location = resp.location
        if (
            resp.is_redirect
            and location is not None
            and location.scheme not in (None, HTTP_SCHEME)
        ):
            raise UnsupportedRedirectSchemeError(location.scheme)
        msg = f"Error {resp.status}: {resp.reason}"
        raise DownloadError(msg)

    if info.want_range and not resp.ranged:
        msg = "HTTP server does not seem to support byte ranges. Cannot resume."
        raise DownloadError(msg)


def download(options: DownloadOptions, engine: RedirectEngine | None = None) -> int:
    """Download a URL to the output sink.

    The output file is opened only after the server accepted the request,
    and a partially written file is never removed.

    Args:
        options: Download options.
        engine: Request engine; a default one is built if None.

    Returns:
        Number of body bytes written.

    Raises:
        HttpGetError: On transport or protocol failure.
        DownloadError: If the final response cannot be saved.
        OutputError: If the output sink fails.
    """
    info, output_file = build_request_info(options)
    engine = engine or RedirectEngine(
        ClientConfig(timeout_seconds=options.timeout_seconds)
    )
    log = logger.bind(component=COMPONENT_CLI, host=info.host, path=info.path)
    log.info(
        "download_started",
        output_file=output_file,
        offset=info.range_first or 0,
        credentials=redact_credentials(info.credentials),
    )

    progress = ProgressPrinter(quiet=options.quiet)

    with engine.request(info) as resp:
        check_final_response(info, resp)
        pos = info.range_first or 0

        with open_output(output_file, pos) as sink:
            if not options.quiet:
                click.echo(f"Saving to: `{output_file}`", err=True)
                if pos > 0:
                    click.echo(f"Resuming transfer at {pos}", err=True)

            try:
                for data in resp.iter_bytes(options.read_size):
                    progress.update(resp.body_read, resp.body_size)
                    write_output(sink, data)
            finally:
                progress.update(resp.body_read, resp.body_size, done=True)

        log.info(
            "transfer_complete",
            bytes=resp.body_read,
            metrics=TransferMetrics.get_instance().to_dict(),
        )
        return resp.body_read
