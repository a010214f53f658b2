"""Utility for resolving names or IDs typed on the command line to row IDs."""

from typing import Callable, Iterable, TypeVar

from servicedesk.domain.errors import NotFoundError, ValidationError

T = TypeVar("T")


def resolve_reference(
    candidates: Iterable[T],
    reference: str | int,
    entity: str,
    name_of: Callable[[T], str] = lambda row: row.name,
) -> int:
    """Resolve a name or ID to the ID of one of ``candidates``.

    Numeric references are treated as IDs. Names are matched exactly first,
    then case-insensitively.

    Args:
        candidates: Rows of the current company, each with an ``id``
        reference: Name (str) or ID (int or string representation of int)
        entity: Label used in error messages (e.g. "Client")
        name_of: Returns the display name of a row

    Returns:
        Row ID

    Raises:
        NotFoundError: If nothing matches
        ValidationError: If a name matches more than one row
    """
    rows = list(candidates)

    try:
        row_id = int(reference)
    except (ValueError, TypeError):
        row_id = None

    if row_id is not None:
        if any(row.id == row_id for row in rows):
            return row_id
        raise NotFoundError(f"{entity} ID {row_id} not found")

    text = str(reference).strip()
    exact = [row for row in rows if name_of(row) == text]
    if not exact:
        exact = [row for row in rows if name_of(row).lower() == text.lower()]

    if len(exact) == 1:
        return exact[0].id
    if len(exact) > 1:
        ids = ", ".join(str(row.id) for row in exact)
        raise ValidationError(f"{entity} '{text}' is ambiguous (IDs: {ids}); use the ID instead")
    raise NotFoundError(f"{entity} '{text}' not found")
