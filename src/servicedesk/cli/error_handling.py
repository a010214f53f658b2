"""CLI error handling helpers."""

import logging
from typing import Callable, TypeVar

import click

from servicedesk.domain.errors import DomainError, RemoteError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def fetch_or_empty(fetch: Callable[[], list[T]], what: str) -> list[T]:
    """Run a read for a list view, falling back to an empty list on storage errors."""
    try:
        return fetch()
    except RemoteError as exc:
        logger.error("Could not load %s: %s", what, exc)
        return []
