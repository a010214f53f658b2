"""Service ticket domain service.

Saving a ticket writes three tables: the ``services`` row, its
``service_items`` lines and, when the ticket has a client, one
``financial_entries`` row. All writes of one submission run in a single
database transaction.
"""

import logging
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional

from servicedesk.domain.entities import (
    CategoryType,
    Client,
    FinancialEntryDraft,
    LineItem,
    Service,
    ServiceDetail,
    ServiceDraft,
    ServiceItem,
    TicketSubmission,
)
from servicedesk.domain.errors import (
    NotFoundError,
    RemoteError,
    ValidationError,
    not_found,
    reference_outside_company,
)
from servicedesk.domain.line_items import LineItemAccumulator
from servicedesk.domain.validation import (
    optional_text,
    require_date,
    require_money,
    require_quantity,
    require_text,
)
from servicedesk.utils.search import matches_search

if TYPE_CHECKING:
    from servicedesk.database.base import Database

logger = logging.getLogger(__name__)


class FinancialEntryPolicy(str, Enum):
    """What saving a ticket does to its financial entry.

    UPSERT updates the entry already linked to the service (inserting one
    when there is none) and deletes it once the ticket loses its client.
    APPEND inserts a new entry on every save.
    """

    UPSERT = "upsert"
    APPEND = "append"


def entry_notes(service_type: str, client_name: str) -> str:
    """Notes of the financial entry generated for a ticket."""
    return f"{service_type} - {client_name}"


class ServiceTicketService:
    """Service for composing, saving and browsing service tickets."""

    def __init__(
        self,
        db: "Database",
        company_id: int,
        entry_policy: FinancialEntryPolicy = FinancialEntryPolicy.UPSERT,
    ):
        """Initialize service ticket service.

        Args:
            db: Database instance
            company_id: Company every read and write is scoped to
            entry_policy: Financial entry behaviour when editing a ticket
        """
        self.db = db
        self.company_id = company_id
        self.entry_policy = FinancialEntryPolicy(entry_policy)

    def list_service_types(self) -> list[str]:
        """Names of the company's service categories, for the type selector."""
        return [
            category.name
            for category in self.db.list_categories(self.company_id, CategoryType.SERVICE)
        ]

    def start_ticket(self, service_id: Optional[int] = None) -> LineItemAccumulator:
        """Load the catalog and the lines of the ticket to edit.

        Args:
            service_id: Stored ticket to edit, or None for a new one

        Returns:
            Accumulator holding the stored lines (with their stored prices)

        Raises:
            NotFoundError: If the service does not exist
        """
        catalog = self.db.list_inventory_items(self.company_id)
        if service_id is None:
            return LineItemAccumulator(catalog)

        if self.db.get_service(self.company_id, service_id) is None:
            raise NotFoundError(not_found("Service", service_id))
        items = self.db.list_service_items(self.company_id, service_id)
        return LineItemAccumulator.from_service_items(catalog, items)

    def submit(
        self,
        header: ServiceDraft,
        lines: LineItemAccumulator | Iterable[LineItem],
        existing_service_id: Optional[int] = None,
    ) -> TicketSubmission:
        """Save a ticket with its lines and financial entry.

        Creates a service when ``existing_service_id`` is None, otherwise
        updates it and patches its stored lines so they match ``lines``:
        changed lines are updated, missing ones deleted and new ones
        inserted. Either everything is written or nothing is.

        Args:
            header: Service date, type, client, collaborator and notes
            lines: Lines to store, in order
            existing_service_id: ID of the ticket being edited

        Returns:
            TicketSubmission with the IDs that were written

        Raises:
            ValidationError: If the header or a line is invalid
            NotFoundError: If the ticket being edited does not exist
            RemoteError: If storage rejects a write
        """
        draft = self._clean_header(header)
        clean_lines = self._clean_lines(lines)
        total = sum((line.subtotal for line in clean_lines), Decimal("0"))

        with self.db.transaction():
            client = self._load_client(draft.client_id)

            if existing_service_id is None:
                service_id = self.db.create_service(self.company_id, draft, total)
                item_ids = (
                    self.db.add_service_items(self.company_id, service_id, clean_lines)
                    if clean_lines
                    else []
                )
                created = True
            else:
                service_id = existing_service_id
                if self.db.get_service(self.company_id, service_id) is None:
                    raise NotFoundError(not_found("Service", service_id))
                self.db.update_service(self.company_id, service_id, draft, total)
                item_ids = self._patch_lines(service_id, clean_lines)
                created = False

            entry_id = None
            if client is not None:
                entry_id = self._record_entry(service_id, draft, client, total, created)
            elif not created and self.entry_policy is FinancialEntryPolicy.UPSERT:
                self._drop_entry(service_id)

        logger.info(
            "%s service %s with %d line(s), total %s",
            "Created" if created else "Updated",
            service_id,
            len(item_ids),
            total,
        )
        return TicketSubmission(
            service_id=service_id,
            total_value=total,
            service_item_ids=tuple(item_ids),
            financial_entry_id=entry_id,
            created=created,
        )

    def _clean_header(self, header: ServiceDraft) -> ServiceDraft:
        return ServiceDraft(
            service_date=require_date(header.service_date, "service_date", "Service date"),
            service_type=require_text(header.service_type, "service_type", "Service type"),
            client_id=header.client_id,
            collaborator_id=header.collaborator_id,
            notes=optional_text(header.notes),
        )

    def _clean_lines(self, lines: LineItemAccumulator | Iterable[LineItem]) -> list[LineItem]:
        if isinstance(lines, LineItemAccumulator):
            lines = lines.lines

        clean = []
        for position, line in enumerate(lines):
            if line.inventory_item_id is None and line.service_item_id is None:
                raise ValidationError(
                    f"Line {position + 1} has no inventory item", field="inventory_item_id"
                )
            clean.append(
                LineItem(
                    inventory_item_id=line.inventory_item_id,
                    name=line.name,
                    quantity=require_quantity(line.quantity),
                    price=require_money(line.price, "price", "Price"),
                    service_item_id=line.service_item_id,
                )
            )
        return clean

    def _load_client(self, client_id: Optional[int]) -> Optional[Client]:
        if client_id is None:
            return None
        client = self.db.get_client(self.company_id, client_id)
        if client is None:
            raise RemoteError(reference_outside_company("services", "client_id", client_id))
        return client

    def _patch_lines(self, service_id: int, lines: list[LineItem]) -> list[int]:
        """Make the stored lines of a service equal ``lines``. Returns IDs in line order."""
        stored = {item.id: item for item in self.db.list_service_items(self.company_id, service_id)}

        # A stored row is reused by at most one line, and only for the same item
        matched: dict[int, ServiceItem] = {}
        kept_ids: set[int] = set()
        for position, line in enumerate(lines):
            item = stored.get(line.service_item_id)
            if (
                item is not None
                and item.id not in kept_ids
                and item.inventory_item_id == line.inventory_item_id
            ):
                matched[position] = item
                kept_ids.add(item.id)

        removed_ids = [item_id for item_id in stored if item_id not in kept_ids]
        if removed_ids:
            self.db.delete_service_items(self.company_id, service_id, removed_ids)

        for position, item in matched.items():
            line = lines[position]
            if item.quantity != line.quantity or item.price != line.price:
                self.db.update_service_item(self.company_id, item.id, line.quantity, line.price)

        new_lines = [line for position, line in enumerate(lines) if position not in matched]
        new_ids = iter(
            self.db.add_service_items(self.company_id, service_id, new_lines) if new_lines else []
        )

        logger.debug(
            "Service %s lines: %d kept, %d removed, %d added",
            service_id,
            len(matched),
            len(removed_ids),
            len(new_lines),
        )
        return [
            matched[position].id if position in matched else next(new_ids)
            for position in range(len(lines))
        ]

    def _record_entry(
        self, service_id: int, draft: ServiceDraft, client: Client, total: Decimal, created: bool
    ) -> int:
        entry = FinancialEntryDraft(
            entry_date=draft.service_date,
            value=total,
            client_id=client.id,
            service_id=service_id,
            notes=entry_notes(draft.service_type, client.full_name),
        )

        if not created and self.entry_policy is FinancialEntryPolicy.UPSERT:
            existing = self.db.find_financial_entry_for_service(self.company_id, service_id)
            if existing is not None:
                self.db.update_financial_entry(self.company_id, existing.id, entry)
                return existing.id

        return self.db.create_financial_entry(self.company_id, entry)

    def _drop_entry(self, service_id: int) -> None:
        """Remove the entry of a ticket that no longer has a client."""
        existing = self.db.find_financial_entry_for_service(self.company_id, service_id)
        if existing is not None:
            self.db.delete_financial_entry(self.company_id, existing.id)
            logger.info("Deleted financial entry %s of service %s", existing.id, service_id)

    def get_service(self, service_id: int) -> Optional[Service]:
        return self.db.get_service(self.company_id, service_id)

    def list_services(self, client_id: Optional[int] = None) -> list[Service]:
        """List services, newest service date first."""
        return self.db.list_services(self.company_id, client_id=client_id)

    def search_services(self, term: Optional[str], client_id: Optional[int] = None) -> list[Service]:
        """Filter services by client name, service type or collaborator name."""
        return [
            service
            for service in self.list_services(client_id)
            if matches_search(term, service.client_name, service.service_type, service.collaborator_name)
        ]

    def get_detail(self, service_id: int) -> ServiceDetail:
        """Get a service with its lines, client and collaborator.

        Raises:
            NotFoundError: If the service does not exist
        """
        service = self.get_service(service_id)
        if service is None:
            raise NotFoundError(not_found("Service", service_id))

        items = self.db.list_service_items(self.company_id, service_id)
        client = (
            self.db.get_client(self.company_id, service.client_id)
            if service.client_id is not None
            else None
        )
        collaborator = (
            self.db.get_collaborator(self.company_id, service.collaborator_id)
            if service.collaborator_id is not None
            else None
        )
        return ServiceDetail(
            service=service, items=tuple(items), client=client, collaborator=collaborator
        )

    def delete_service(self, service_id: int) -> None:
        """Delete a service and its lines.

        Financial entries generated for it stay, unlinked from the service.
        """
        self.db.delete_service(self.company_id, service_id)
        logger.info("Deleted service %s", service_id)
