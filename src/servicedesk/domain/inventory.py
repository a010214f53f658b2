"""Inventory domain service."""

import logging
from typing import TYPE_CHECKING, Optional

from servicedesk.domain.entities import InventoryItem, InventoryItemDraft
from servicedesk.domain.validation import require_money, require_text
from servicedesk.utils.search import matches_search

if TYPE_CHECKING:
    from servicedesk.database.base import Database

logger = logging.getLogger(__name__)


class InventoryService:
    """Service for managing billable materials and parts."""

    def __init__(self, db: "Database", company_id: int):
        """Initialize inventory service.

        Args:
            db: Database instance
            company_id: Company every read and write is scoped to
        """
        self.db = db
        self.company_id = company_id

    def _clean(self, draft: InventoryItemDraft) -> InventoryItemDraft:
        return InventoryItemDraft(
            name=require_text(draft.name, "name", "Name"),
            value=require_money(draft.value, "value", "Value"),
            category_id=draft.category_id,
        )

    def create_item(self, draft: InventoryItemDraft) -> int:
        """Create an inventory item.

        Args:
            draft: Name, unit value and optional category

        Returns:
            Inventory item ID

        Raises:
            ValidationError: If the name is empty or the value is negative
            RemoteError: If the category belongs to another company
        """
        item_id = self.db.create_inventory_item(self.company_id, self._clean(draft))
        logger.info("Created inventory item %s for company %s", item_id, self.company_id)
        return item_id

    def get_item(self, item_id: int) -> Optional[InventoryItem]:
        return self.db.get_inventory_item(self.company_id, item_id)

    def list_items(self, category_id: Optional[int] = None) -> list[InventoryItem]:
        """List inventory items ordered by name."""
        return self.db.list_inventory_items(self.company_id, category_id=category_id)

    def search_items(self, term: Optional[str], category_id: Optional[int] = None) -> list[InventoryItem]:
        """Filter inventory items by name within an optional category."""
        return [i for i in self.list_items(category_id) if matches_search(term, i.name)]

    def update_item(self, item_id: int, draft: InventoryItemDraft) -> None:
        """Overwrite name, value and category.

        Stored service lines keep the price they were saved with.
        """
        self.db.update_inventory_item(self.company_id, item_id, self._clean(draft))
        logger.info("Updated inventory item %s", item_id)

    def delete_item(self, item_id: int) -> None:
        """Delete an inventory item. Service lines referencing it keep their price."""
        self.db.delete_inventory_item(self.company_id, item_id)
        logger.info("Deleted inventory item %s", item_id)
