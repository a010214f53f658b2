"""Category domain service."""

import logging
from typing import TYPE_CHECKING, Optional

from servicedesk.domain.entities import Category, CategoryDraft, CategoryType
from servicedesk.domain.errors import NotFoundError, ValidationError, not_found
from servicedesk.domain.validation import require_text
from servicedesk.utils.search import matches_search

if TYPE_CHECKING:
    from servicedesk.database.base import Database

logger = logging.getLogger(__name__)


def parse_category_type(value: CategoryType | str) -> CategoryType:
    """Convert "product"/"service" to a CategoryType.

    Raises:
        ValidationError: For any other value
    """
    if isinstance(value, CategoryType):
        return value
    try:
        return CategoryType((value or "").strip().lower())
    except ValueError:
        raise ValidationError(
            f"Category type must be 'product' or 'service', got '{value}'", field="type"
        )


class CategoryService:
    """Service for managing product and service categories."""

    def __init__(self, db: "Database", company_id: int):
        """Initialize category service.

        Args:
            db: Database instance
            company_id: Company every read and write is scoped to
        """
        self.db = db
        self.company_id = company_id

    def create_category(self, draft: CategoryDraft) -> int:
        """Create a category.

        Args:
            draft: Name and type

        Returns:
            Category ID

        Raises:
            ValidationError: If the name is empty or the type is unknown
        """
        name = require_text(draft.name, "name", "Name")
        category_type = parse_category_type(draft.category_type)
        category_id = self.db.create_category(
            self.company_id, CategoryDraft(name=name, category_type=category_type)
        )
        logger.info("Created %s category %s (%s)", category_type.value, category_id, name)
        return category_id

    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID.

        Args:
            category_id: Category ID

        Returns:
            Category entity or None if not found
        """
        return self.db.get_category(self.company_id, category_id)

    def list_categories(self, category_type: Optional[CategoryType | str] = None) -> list[Category]:
        """List categories, optionally only one type.

        Args:
            category_type: "product", "service" or None for both

        Returns:
            List of category entities ordered by name
        """
        if category_type is not None:
            category_type = parse_category_type(category_type)
        return self.db.list_categories(self.company_id, category_type=category_type)

    def search_categories(
        self, term: Optional[str], category_type: Optional[CategoryType | str] = None
    ) -> list[Category]:
        """Filter categories by name within an optional type tab."""
        return [c for c in self.list_categories(category_type) if matches_search(term, c.name)]

    def update_category(self, category_id: int, draft: CategoryDraft) -> None:
        """Rename a category.

        The type is fixed at creation; a draft carrying a different type is
        rejected rather than silently ignored.

        Raises:
            ValidationError: If the name is empty or the type differs
            NotFoundError: If the category does not exist
        """
        name = require_text(draft.name, "name", "Name")
        category = self.get_category(category_id)
        if category is None:
            raise NotFoundError(not_found("Category", category_id))
        if parse_category_type(draft.category_type) != category.category_type:
            raise ValidationError("The type of a category cannot be changed", field="type")
        self.db.rename_category(self.company_id, category_id, name)
        logger.info("Renamed category %s to %s", category_id, name)

    def delete_category(self, category_id: int) -> None:
        """Delete a category. Inventory items keep existing uncategorized."""
        self.db.delete_category(self.company_id, category_id)
        logger.info("Deleted category %s", category_id)
