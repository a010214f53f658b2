"""Substring search used by list views."""

from typing import Optional


def matches_search(term: Optional[str], *fields: Optional[str]) -> bool:
    """Case-insensitive substring match of ``term`` against any field.

    An empty or blank term matches everything; ``None`` fields never match.
    """
    if term is None or not term.strip():
        return True
    needle = term.strip().lower()
    return any(field is not None and needle in field.lower() for field in fields)
