"""Allow running the retriever with `python -m httpget`."""

from httpget.cli.main import cli


cli()
