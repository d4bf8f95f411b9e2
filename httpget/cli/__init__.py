"""Command-line interface for the HTTP file retriever."""

from httpget.cli.download import DownloadError, DownloadOptions, download
from httpget.cli.main import cli


__all__ = [
    "DownloadError",
    "DownloadOptions",
    "cli",
    "download",
]
