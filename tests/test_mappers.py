"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from servicedesk.database.models import (
    AuthSession as ORMAuthSession,
    Category as ORMCategory,
    Client as ORMClient,
    FinancialEntry as ORMFinancialEntry,
    InventoryItem as ORMInventoryItem,
    Service as ORMService,
    ServiceItem as ORMServiceItem,
)
from servicedesk.database.mappers import (
    auth_session_to_domain,
    category_to_domain,
    financial_entry_to_domain,
    inventory_item_to_domain,
    service_item_to_domain,
    service_to_domain,
)
from servicedesk.domain.entities import (
    AuthSession,
    Category,
    CategoryType,
    FinancialEntry,
    InventoryItem,
    Service,
    ServiceItem,
    SessionKind,
)


def _client(name="Ana Silva"):
    now = datetime.now(UTC)
    return ORMClient(
        id=3,
        company_id=1,
        full_name=name,
        send_maintenance_reminders=False,
        send_welcome_message=False,
        created_at=now,
        updated_at=now,
    )


class TestCategoryMapper:
    def test_category_to_domain(self):
        """Test converting ORM Category to domain Category."""
        now = datetime.now(UTC)
        orm_category = ORMCategory(
            id=1, company_id=1, name="cleaning", type="service", created_at=now, updated_at=now
        )

        category = category_to_domain(orm_category)

        assert isinstance(category, Category)
        assert category.category_type is CategoryType.SERVICE
        assert category.name == "cleaning"


class TestInventoryItemMapper:
    def test_with_category(self):
        now = datetime.now(UTC)
        orm_item = ORMInventoryItem(
            id=5,
            company_id=1,
            name="Filter",
            value=Decimal("10.00"),
            category_id=2,
            created_at=now,
            updated_at=now,
        )
        orm_item.category = ORMCategory(id=2, company_id=1, name="Parts", type="product")

        item = inventory_item_to_domain(orm_item)

        assert isinstance(item, InventoryItem)
        assert item.category_name == "Parts"

    def test_without_category(self):
        now = datetime.now(UTC)
        orm_item = ORMInventoryItem(
            id=5, company_id=1, name="Filter", value=Decimal("10.00"), created_at=now, updated_at=now
        )

        assert inventory_item_to_domain(orm_item).category_name is None


class TestServiceMapper:
    def test_service_to_domain(self):
        now = datetime.now(UTC)
        orm_service = ORMService(
            id=9,
            company_id=1,
            service_date=date(2024, 3, 10),
            service_type="maintenance",
            client_id=3,
            notes=None,
            total_value=Decimal("25.00"),
            created_at=now,
            updated_at=now,
        )
        orm_service.client = _client()

        service = service_to_domain(orm_service)

        assert isinstance(service, Service)
        assert service.client_name == "Ana Silva"
        assert service.collaborator_name is None
        assert service.total_value == Decimal("25.00")

    def test_service_item_to_domain(self):
        orm_item = ORMServiceItem(
            id=1,
            service_id=9,
            inventory_item_id=None,
            quantity=2,
            price=Decimal("7.50"),
            created_at=datetime.now(UTC),
        )

        item = service_item_to_domain(orm_item)

        assert isinstance(item, ServiceItem)
        assert item.item_name is None
        assert item.subtotal == Decimal("15.00")


class TestFinancialEntryMapper:
    def test_entry_with_service_and_client(self):
        now = datetime.now(UTC)
        orm_entry = ORMFinancialEntry(
            id=4,
            company_id=1,
            entry_date=date(2024, 3, 10),
            value=Decimal("25.00"),
            client_id=3,
            service_id=9,
            notes="maintenance - Ana Silva",
            created_at=now,
            updated_at=now,
        )
        orm_entry.client = _client()
        orm_entry.service = ORMService(id=9, company_id=1, service_type="maintenance")

        entry = financial_entry_to_domain(orm_entry)

        assert isinstance(entry, FinancialEntry)
        assert entry.client_name == "Ana Silva"
        assert entry.service_type == "maintenance"


class TestAuthSessionMapper:
    def test_kind_is_enum(self):
        orm_session = ORMAuthSession(
            token="abc", user_id=1, kind="recovery", created_at=datetime.now(UTC), revoked_at=None
        )

        session = auth_session_to_domain(orm_session)

        assert isinstance(session, AuthSession)
        assert session.kind is SessionKind.RECOVERY
        assert session.is_active
