"""Inventory picker and line-item accumulator for a service ticket."""

from decimal import Decimal
from typing import Iterable, Iterator, Optional, Sequence

from servicedesk.domain.entities import InventoryItem, LineItem, ServiceItem
from servicedesk.domain.errors import ValidationError, line_index_out_of_range
from servicedesk.domain.validation import require_money

REMOVED_ITEM_NAME = "(removed item)"


class LineItemAccumulator:
    """Ordered lines of the ticket being edited.

    The catalog is loaded once by the caller and searched in memory. Lines
    are kept in the order they were added; at most one line exists per
    inventory item added through ``add_item``.
    """

    def __init__(self, catalog: Sequence[InventoryItem], lines: Iterable[LineItem] = ()):
        self._catalog = tuple(catalog)
        self._lines = [
            LineItem(
                inventory_item_id=line.inventory_item_id,
                name=line.name,
                quantity=line.quantity,
                price=line.price,
                service_item_id=line.service_item_id,
            )
            for line in lines
        ]

    @classmethod
    def from_service_items(
        cls, catalog: Sequence[InventoryItem], items: Iterable[ServiceItem]
    ) -> "LineItemAccumulator":
        """Rebuild the lines of a stored ticket, keeping the stored prices."""
        lines = [
            LineItem(
                inventory_item_id=item.inventory_item_id,
                name=item.item_name or REMOVED_ITEM_NAME,
                quantity=item.quantity,
                price=item.price,
                service_item_id=item.id,
            )
            for item in items
        ]
        return cls(catalog, lines)

    @property
    def catalog(self) -> tuple[InventoryItem, ...]:
        return self._catalog

    @property
    def lines(self) -> tuple[LineItem, ...]:
        return tuple(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[LineItem]:
        return iter(self.lines)

    def search(self, term: Optional[str]) -> list[InventoryItem]:
        """Catalog items whose name contains ``term``, ignoring case.

        An empty term returns nothing.
        """
        if term is None or not term.strip():
            return []
        needle = term.strip().lower()
        return [item for item in self._catalog if needle in item.name.lower()]

    def find_item(self, inventory_item_id: int) -> Optional[InventoryItem]:
        for item in self._catalog:
            if item.id == inventory_item_id:
                return item
        return None

    def add_item(self, item: InventoryItem) -> LineItem:
        """Add one unit of ``item``.

        Increments the existing line for the item, or appends a new line
        priced at the item's current catalog value.

        Returns:
            The affected line
        """
        for line in self._lines:
            if line.inventory_item_id == item.id:
                line.quantity += 1
                return line

        line = LineItem(inventory_item_id=item.id, name=item.name, quantity=1, price=item.value)
        self._lines.append(line)
        return line

    def remove_item(self, index: int) -> LineItem:
        """Remove and return the line at ``index``.

        Raises:
            ValidationError: If there is no line at that position
        """
        self._check_index(index)
        return self._lines.pop(index)

    def set_quantity(self, index: int, quantity: int) -> bool:
        """Overwrite the quantity of a line.

        Quantities below 1 are ignored and the line keeps its quantity.

        Returns:
            True if the quantity was applied, False if it was ignored

        Raises:
            ValidationError: If there is no line at that position or the
                quantity is not a whole number
        """
        self._check_index(index)
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValidationError("Quantity must be a whole number", field="quantity")
        if quantity < 1:
            return False
        self._lines[index].quantity = quantity
        return True

    def set_price(self, index: int, price: Decimal) -> None:
        """Overwrite the price snapshot of one line."""
        self._check_index(index)
        self._lines[index].price = require_money(price, "price", "Price")

    def total(self) -> Decimal:
        """Sum of price * quantity over all lines."""
        return sum((line.subtotal for line in self._lines), Decimal("0"))

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._lines):
            raise ValidationError(line_index_out_of_range(index, len(self._lines)), field="index")
