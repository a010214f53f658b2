"""CLI helpers for resolving names or IDs typed by the user."""

from __future__ import annotations

from typing import Callable, Iterable, Optional

import click

from servicedesk.domain.errors import DomainError
from servicedesk.utils.resolver import resolve_reference


def resolve_or_exit(
    ctx: click.Context,
    candidates: Iterable,
    reference: str | int,
    entity: str,
    name_of: Optional[Callable] = None,
) -> int:
    """Resolve a name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        if name_of is None:
            return resolve_reference(candidates, reference, entity)
        return resolve_reference(candidates, reference, entity, name_of=name_of)
    except DomainError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_optional_or_exit(
    ctx: click.Context,
    candidates: Iterable,
    reference: Optional[str],
    entity: str,
    name_of: Optional[Callable] = None,
) -> Optional[int]:
    """Like resolve_or_exit, but None and "" resolve to None."""
    if reference is None or reference.strip() == "":
        return None
    return resolve_or_exit(ctx, candidates, reference, entity, name_of=name_of)
