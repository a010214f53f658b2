"""Financial entry domain service."""

import logging
from datetime import date
from typing import TYPE_CHECKING, Optional

from servicedesk.domain.entities import FinancialEntry, FinancialEntryDraft
from servicedesk.domain.validation import optional_text, require_date, require_money
from servicedesk.utils.search import matches_search

if TYPE_CHECKING:
    from servicedesk.database.base import Database

logger = logging.getLogger(__name__)


class FinancialEntryService:
    """Service for managing revenue entries."""

    def __init__(self, db: "Database", company_id: int):
        """Initialize financial entry service.

        Args:
            db: Database instance
            company_id: Company every read and write is scoped to
        """
        self.db = db
        self.company_id = company_id

    def _clean(self, draft: FinancialEntryDraft) -> FinancialEntryDraft:
        return FinancialEntryDraft(
            entry_date=require_date(draft.entry_date, "entry_date", "Date"),
            value=require_money(draft.value, "value", "Value"),
            client_id=draft.client_id,
            service_id=draft.service_id,
            notes=optional_text(draft.notes),
        )

    def create_entry(self, draft: FinancialEntryDraft) -> int:
        """Create a financial entry.

        Args:
            draft: Date, value and optional client/service references

        Returns:
            Financial entry ID

        Raises:
            ValidationError: If the date is missing or the value is negative
            RemoteError: If a reference belongs to another company
        """
        entry_id = self.db.create_financial_entry(self.company_id, self._clean(draft))
        logger.info("Created financial entry %s for company %s", entry_id, self.company_id)
        return entry_id

    def get_entry(self, entry_id: int) -> Optional[FinancialEntry]:
        return self.db.get_financial_entry(self.company_id, entry_id)

    def list_entries(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        client_id: Optional[int] = None,
    ) -> list[FinancialEntry]:
        """List entries in an optional date range, newest first."""
        return self.db.list_financial_entries(
            self.company_id, start_date=start_date, end_date=end_date, client_id=client_id
        )

    def search_entries(
        self,
        term: Optional[str],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        client_id: Optional[int] = None,
    ) -> list[FinancialEntry]:
        """Filter entries by client name, notes or service type."""
        return [
            entry
            for entry in self.list_entries(start_date, end_date, client_id)
            if matches_search(term, entry.client_name, entry.notes, entry.service_type)
        ]

    def update_entry(self, entry_id: int, draft: FinancialEntryDraft) -> None:
        """Overwrite every field of an entry."""
        self.db.update_financial_entry(self.company_id, entry_id, self._clean(draft))
        logger.info("Updated financial entry %s", entry_id)

    def delete_entry(self, entry_id: int) -> None:
        self.db.delete_financial_entry(self.company_id, entry_id)
        logger.info("Deleted financial entry %s", entry_id)
