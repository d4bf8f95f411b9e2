"""Command-line entry point for the HTTP file retriever."""

import logging
import sys
import uuid

import click
import structlog

from httpget.cli.constants import (
    AUTO_OFFSET_MARKER,
    COMPONENT_CLI,
    EXIT_FAILURE,
    PROG_NAME,
)
from httpget.cli.download import DownloadError, DownloadOptions, download
from httpget.cli.output import OutputError
from httpget.errors import HttpGetError
from httpget.observability.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
)
from httpget.settings import get_settings


logger = structlog.get_logger()


def _parse_offset(
    ctx: click.Context,  # noqa: ARG001
    param: click.Parameter,  # noqa: ARG001
    value: str,
) -> int | None:
    """Parse -c OFFSET: a non-negative integer, or `-' for auto detection."""
    if value == AUTO_OFFSET_MARKER:
        return None
    try:
        offset = int(value, 10)
    except ValueError:
        offset = -1
    if offset < 0:
        msg = "invalid OFFSET"
        raise click.BadParameter(msg)
    return offset


@click.command(
    name=PROG_NAME,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version="0.1.0", prog_name=PROG_NAME)
@click.argument("url")
@click.option(
    "-o",
    "output_file",
    metavar="FILE",
    default=None,
    help="Write document to FILE (use `-' for standard output).",
)
@click.option(
    "-c",
    "offset",
    metavar="OFFSET",
    default="0",
    callback=_parse_offset,
    help="Resume transfer at OFFSET (use `-' for auto detection).",
)
@click.option(
    "-r",
    "max_redirections",
    metavar="MAX_REDIR",
    type=click.IntRange(min=-1),
    default=None,
    help="Max number of redirections (-1 for unlimited, default is 10).",
)
@click.option(
    "-u",
    "credentials",
    metavar="USER:PASS",
    default=None,
    help="Server user and password.",
)
@click.option(
    "-L",
    "trust_location",
    is_flag=True,
    help="Trust redirect location (send credentials to other hosts).",
)
@click.option("-q", "quiet", is_flag=True, help="Quiet (no output).")
@click.option(
    "-v",
    "verbose",
    is_flag=True,
    help="Dump the request and response headers (useful for debugging).",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=None,
    help="Use JSON format for logs.",
)
def cli(  # noqa: PLR0913
    url: str,
    output_file: str | None,
    offset: int | None,
    max_redirections: int | None,
    credentials: str | None,
    trust_location: bool,
    quiet: bool,
    verbose: bool,
    json_logs: bool | None,
) -> None:
    """HTTP file retriever: download URL over HTTP/1.1."""
    settings = get_settings()

    configure_logging(
        level=logging.DEBUG if verbose else logging.WARNING,
        output=click.get_text_stream("stderr"),
        json_format=settings.json_logs if json_logs is None else json_logs,
    )
    bind_request_context(str(uuid.uuid4()))
    log = logger.bind(component=COMPONENT_CLI)

    options = DownloadOptions(
        url=url,
        output_file=output_file,
        offset=offset,
        max_redirections=(
            settings.max_redirections if max_redirections is None else max_redirections
        ),
        credentials=credentials,
        trust_location=trust_location,
        quiet=quiet,
        read_size=settings.read_size,
        timeout_seconds=settings.timeout_seconds,
    )

    try:
        download(options)
    except (HttpGetError, DownloadError, OutputError) as e:
        log.debug("download_failed", error=str(e))
        click.echo(str(e), err=True)
        sys.exit(EXIT_FAILURE)
    finally:
        clear_request_context()


if __name__ == "__main__":
    cli()
