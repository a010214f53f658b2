"""Abstract database interface.

Every business-row operation takes the caller's ``company_id``; an
implementation must only return and modify rows of that company and must
reject writes that reference rows of another company.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Sequence
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from servicedesk.domain.entities import (
    Company,
    User,
    AuthSession,
    SessionKind,
    Client,
    ClientDraft,
    Collaborator,
    CollaboratorDraft,
    Category,
    CategoryDraft,
    CategoryType,
    InventoryItem,
    InventoryItemDraft,
    Service,
    ServiceDraft,
    ServiceItem,
    LineItem,
    FinancialEntry,
    FinancialEntryDraft,
    SentMessage,
    ScheduledMessage,
)


class Database(ABC):
    """Abstract database interface for servicedesk."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Group writes so they commit together or not at all.

        Nested blocks join the outermost one.
        """
        pass

    # Company and identity operations
    @abstractmethod
    def create_company(self, name: str) -> int:
        """Create a company. Returns company ID."""
        pass

    @abstractmethod
    def get_company(self, company_id: int) -> Optional[Company]:
        """Get company by ID."""
        pass

    @abstractmethod
    def create_user(self, email: str, password_hash: str, company_id: int) -> int:
        """Create a user. Returns user ID."""
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email (case-insensitive)."""
        pass

    @abstractmethod
    def get_password_hash(self, user_id: int) -> Optional[str]:
        """Get the stored password hash of a user."""
        pass

    @abstractmethod
    def update_user_password(self, user_id: int, password_hash: str) -> None:
        """Replace a user's password hash."""
        pass

    @abstractmethod
    def create_auth_session(self, token: str, user_id: int, kind: SessionKind) -> None:
        """Store an issued session token."""
        pass

    @abstractmethod
    def get_auth_session(self, token: str) -> Optional[AuthSession]:
        """Get a session by token, revoked or not."""
        pass

    @abstractmethod
    def revoke_auth_session(self, token: str) -> None:
        """Mark a session as revoked."""
        pass

    # Client operations
    @abstractmethod
    def create_client(self, company_id: int, draft: ClientDraft) -> int:
        """Create a client. Returns client ID."""
        pass

    @abstractmethod
    def get_client(self, company_id: int, client_id: int) -> Optional[Client]:
        """Get client by ID."""
        pass

    @abstractmethod
    def list_clients(self, company_id: int) -> list[Client]:
        """List clients ordered by full name."""
        pass

    @abstractmethod
    def update_client(self, company_id: int, client_id: int, draft: ClientDraft) -> None:
        """Overwrite client fields."""
        pass

    @abstractmethod
    def delete_client(self, company_id: int, client_id: int) -> None:
        """Delete a client."""
        pass

    # Collaborator operations
    @abstractmethod
    def create_collaborator(self, company_id: int, draft: CollaboratorDraft) -> int:
        """Create a collaborator. Returns collaborator ID."""
        pass

    @abstractmethod
    def get_collaborator(self, company_id: int, collaborator_id: int) -> Optional[Collaborator]:
        """Get collaborator by ID."""
        pass

    @abstractmethod
    def list_collaborators(self, company_id: int) -> list[Collaborator]:
        """List collaborators ordered by name."""
        pass

    @abstractmethod
    def update_collaborator(
        self, company_id: int, collaborator_id: int, draft: CollaboratorDraft
    ) -> None:
        """Overwrite collaborator fields."""
        pass

    @abstractmethod
    def delete_collaborator(self, company_id: int, collaborator_id: int) -> None:
        """Delete a collaborator."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, company_id: int, draft: CategoryDraft) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, company_id: int, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def list_categories(
        self, company_id: int, category_type: Optional[CategoryType] = None
    ) -> list[Category]:
        """List categories ordered by name, optionally filtered by type."""
        pass

    @abstractmethod
    def rename_category(self, company_id: int, category_id: int, name: str) -> None:
        """Rename a category. The type of a category never changes."""
        pass

    @abstractmethod
    def delete_category(self, company_id: int, category_id: int) -> None:
        """Delete a category."""
        pass

    # Inventory operations
    @abstractmethod
    def create_inventory_item(self, company_id: int, draft: InventoryItemDraft) -> int:
        """Create an inventory item. Returns item ID."""
        pass

    @abstractmethod
    def get_inventory_item(self, company_id: int, item_id: int) -> Optional[InventoryItem]:
        """Get inventory item by ID."""
        pass

    @abstractmethod
    def list_inventory_items(
        self, company_id: int, category_id: Optional[int] = None
    ) -> list[InventoryItem]:
        """List inventory items ordered by name, optionally filtered by category."""
        pass

    @abstractmethod
    def update_inventory_item(
        self, company_id: int, item_id: int, draft: InventoryItemDraft
    ) -> None:
        """Overwrite inventory item fields."""
        pass

    @abstractmethod
    def delete_inventory_item(self, company_id: int, item_id: int) -> None:
        """Delete an inventory item."""
        pass

    # Service operations
    @abstractmethod
    def create_service(self, company_id: int, draft: ServiceDraft, total_value: Decimal) -> int:
        """Create a service ticket. Returns service ID."""
        pass

    @abstractmethod
    def get_service(self, company_id: int, service_id: int) -> Optional[Service]:
        """Get service by ID, with client and collaborator names."""
        pass

    @abstractmethod
    def list_services(self, company_id: int, client_id: Optional[int] = None) -> list[Service]:
        """List services, newest service date first, optionally for one client."""
        pass

    @abstractmethod
    def update_service(
        self, company_id: int, service_id: int, draft: ServiceDraft, total_value: Decimal
    ) -> None:
        """Overwrite service header fields and total."""
        pass

    @abstractmethod
    def delete_service(self, company_id: int, service_id: int) -> None:
        """Delete a service and its line items."""
        pass

    # Service item operations
    @abstractmethod
    def list_service_items(self, company_id: int, service_id: int) -> list[ServiceItem]:
        """List the stored lines of a service in insertion order."""
        pass

    @abstractmethod
    def add_service_items(
        self, company_id: int, service_id: int, lines: Sequence[LineItem]
    ) -> list[int]:
        """Insert one row per line. Returns the new IDs in line order."""
        pass

    @abstractmethod
    def update_service_item(
        self, company_id: int, service_item_id: int, quantity: int, price: Decimal
    ) -> None:
        """Change quantity and price of a stored line."""
        pass

    @abstractmethod
    def delete_service_items(
        self, company_id: int, service_id: int, service_item_ids: Optional[Sequence[int]] = None
    ) -> int:
        """Delete lines of a service (all of them when no IDs are given).

        Returns the number of deleted rows.
        """
        pass

    # Financial entry operations
    @abstractmethod
    def create_financial_entry(self, company_id: int, draft: FinancialEntryDraft) -> int:
        """Create a financial entry. Returns entry ID."""
        pass

    @abstractmethod
    def get_financial_entry(self, company_id: int, entry_id: int) -> Optional[FinancialEntry]:
        """Get financial entry by ID."""
        pass

    @abstractmethod
    def find_financial_entry_for_service(
        self, company_id: int, service_id: int
    ) -> Optional[FinancialEntry]:
        """Get the oldest financial entry linked to a service."""
        pass

    @abstractmethod
    def list_financial_entries(
        self,
        company_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        client_id: Optional[int] = None,
        service_id: Optional[int] = None,
    ) -> list[FinancialEntry]:
        """List financial entries, newest first, with client name and service type."""
        pass

    @abstractmethod
    def update_financial_entry(
        self, company_id: int, entry_id: int, draft: FinancialEntryDraft
    ) -> None:
        """Overwrite financial entry fields."""
        pass

    @abstractmethod
    def delete_financial_entry(self, company_id: int, entry_id: int) -> None:
        """Delete a financial entry."""
        pass

    # Message operations
    @abstractmethod
    def create_sent_message(
        self, company_id: int, client_id: int, message_type: str, content: str, status: str
    ) -> int:
        """Record a delivered message. Returns message ID."""
        pass

    @abstractmethod
    def create_scheduled_message(
        self,
        company_id: int,
        client_id: int,
        message_type: str,
        content: str,
        scheduled_date: date,
        template_id: Optional[int] = None,
    ) -> int:
        """Queue a message. Returns message ID."""
        pass

    @abstractmethod
    def list_sent_messages(self, company_id: int, client_id: Optional[int] = None) -> list[SentMessage]:
        """List delivered messages, newest first."""
        pass

    @abstractmethod
    def list_scheduled_messages(
        self, company_id: int, client_id: Optional[int] = None
    ) -> list[ScheduledMessage]:
        """List queued messages by scheduled date."""
        pass
