"""Utility functions for servicedesk."""

from servicedesk.utils.date_parser import parse_date
from servicedesk.utils.amount_parser import parse_amount
from servicedesk.utils.search import matches_search
from servicedesk.utils.resolver import resolve_reference

__all__ = ["parse_date", "parse_amount", "matches_search", "resolve_reference"]
