"""Domain model entities for servicedesk.

These are pure data classes representing business concepts, independent of
database schema. Rows read from storage are frozen entities; input records
written by the domain services are the ``*Draft`` classes, validated before
any write.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class CategoryType(str, Enum):
    """Kind of catalog a category classifies."""

    PRODUCT = "product"
    SERVICE = "service"


class AuthEvent(str, Enum):
    """Session state changes broadcast to subscribers."""

    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"
    USER_UPDATED = "USER_UPDATED"


class SessionKind(str, Enum):
    """How an auth session was obtained."""

    PASSWORD = "password"
    RECOVERY = "recovery"


@dataclass(frozen=True)
class Company:
    """Tenant that owns every business row."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class User:
    """Authenticated operator of a company."""

    id: int
    email: str
    company_id: int
    created_at: datetime


@dataclass(frozen=True)
class AuthSession:
    """Issued session token."""

    token: str
    user_id: int
    kind: SessionKind
    created_at: datetime
    revoked_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.revoked_at is None


@dataclass(frozen=True)
class Client:
    """Client domain entity."""

    id: int
    company_id: int
    full_name: str
    formal_name: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    district: Optional[str]
    city: Optional[str]
    notes: Optional[str]
    send_maintenance_reminders: bool
    send_welcome_message: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Collaborator:
    """Collaborator (technician) domain entity."""

    id: int
    company_id: int
    name: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: int
    company_id: int
    name: str
    category_type: CategoryType
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class InventoryItem:
    """Billable material or part."""

    id: int
    company_id: int
    name: str
    value: Decimal
    category_id: Optional[int]
    created_at: datetime
    updated_at: datetime
    category_name: Optional[str] = None


@dataclass(frozen=True)
class Service:
    """Service ticket domain entity.

    ``total_value`` is derived from the ticket's line items at write time.
    """

    id: int
    company_id: int
    service_date: date
    service_type: str
    client_id: Optional[int]
    collaborator_id: Optional[int]
    notes: Optional[str]
    total_value: Decimal
    created_at: datetime
    updated_at: datetime
    client_name: Optional[str] = None
    collaborator_name: Optional[str] = None


@dataclass(frozen=True)
class ServiceItem:
    """Stored line of a service ticket with its price snapshot."""

    id: int
    service_id: int
    inventory_item_id: Optional[int]
    quantity: int
    price: Decimal
    created_at: datetime
    item_name: Optional[str] = None

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True)
class FinancialEntry:
    """Revenue entry domain entity."""

    id: int
    company_id: int
    entry_date: date
    value: Decimal
    client_id: Optional[int]
    service_id: Optional[int]
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime
    client_name: Optional[str] = None
    service_type: Optional[str] = None


@dataclass(frozen=True)
class SentMessage:
    """Loyalty or maintenance message already delivered to a client."""

    id: int
    company_id: int
    client_id: int
    message_type: str
    content: str
    status: str
    sent_at: datetime


@dataclass(frozen=True)
class ScheduledMessage:
    """Loyalty or maintenance message queued for a client."""

    id: int
    company_id: int
    client_id: int
    message_type: str
    content: str
    status: str
    scheduled_date: date
    template_id: Optional[int]
    created_at: datetime


# Input records


@dataclass(frozen=True)
class ClientDraft:
    """Client fields as entered on the client form."""

    full_name: str
    formal_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    district: Optional[str] = None
    city: Optional[str] = None
    notes: Optional[str] = None
    send_maintenance_reminders: bool = False
    send_welcome_message: bool = False


@dataclass(frozen=True)
class CollaboratorDraft:
    name: str


@dataclass(frozen=True)
class CategoryDraft:
    name: str
    category_type: CategoryType


@dataclass(frozen=True)
class InventoryItemDraft:
    name: str
    value: Decimal
    category_id: Optional[int] = None


@dataclass(frozen=True)
class ServiceDraft:
    """Header fields of a service ticket."""

    service_date: date
    service_type: str
    client_id: Optional[int] = None
    collaborator_id: Optional[int] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class FinancialEntryDraft:
    entry_date: date
    value: Decimal
    client_id: Optional[int] = None
    service_id: Optional[int] = None
    notes: Optional[str] = None


@dataclass
class LineItem:
    """One (inventory item, quantity, price) line being edited on a ticket.

    ``service_item_id`` is set when the line was loaded from a stored
    ServiceItem.
    """

    inventory_item_id: Optional[int]
    name: str
    quantity: int
    price: Decimal
    service_item_id: Optional[int] = None

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


# Read models


@dataclass(frozen=True)
class ClientDetail:
    client: Client
    services: tuple[Service, ...]
    sent_messages: tuple[SentMessage, ...]


@dataclass(frozen=True)
class ServiceDetail:
    service: Service
    items: tuple[ServiceItem, ...]
    client: Optional[Client]
    collaborator: Optional[Collaborator]


@dataclass(frozen=True)
class TicketSubmission:
    """Outcome of saving a service ticket."""

    service_id: int
    total_value: Decimal
    service_item_ids: tuple[int, ...]
    financial_entry_id: Optional[int]
    created: bool


@dataclass(frozen=True)
class MonthlyTotal:
    """Revenue of one calendar month."""

    year: int
    month: int
    value: Decimal

    @property
    def period_key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def label(self) -> str:
        return date(self.year, self.month, 1).strftime("%b %Y")


@dataclass(frozen=True)
class CategoryTotal:
    """Revenue attributed to one service type."""

    name: str
    value: Decimal


@dataclass(frozen=True)
class DashboardReport:
    """Aggregated figures for a date range."""

    start_date: date
    end_date: date
    total_revenue: Decimal
    entry_count: int
    client_count: int
    service_count: int
    monthly: tuple[MonthlyTotal, ...] = field(default_factory=tuple)
    by_category: tuple[CategoryTotal, ...] = field(default_factory=tuple)
