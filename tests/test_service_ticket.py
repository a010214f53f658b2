"""Tests for saving and browsing service tickets."""

from datetime import date
from decimal import Decimal

import pytest

from servicedesk.database.factories import create_sqlite_database
from servicedesk.domain.entities import (
    ClientDraft,
    InventoryItemDraft,
    LineItem,
    ServiceDraft,
)
from servicedesk.domain.errors import NotFoundError, RemoteError, ValidationError
from servicedesk.domain.inventory import InventoryService
from servicedesk.domain.service_ticket import FinancialEntryPolicy, ServiceTicketService


def _header(client=None, service_type="maintenance", service_date=date(2024, 3, 10), **kwargs):
    return ServiceDraft(
        service_date=service_date,
        service_type=service_type,
        client_id=client.id if client is not None else None,
        **kwargs,
    )


@pytest.fixture
def ana_ticket(ticket_service, sample_client, sample_catalog):
    """Ticket for Ana Silva: 2 x Filter (10.00) + 1 x Gas (5.00)."""
    ticket = ticket_service.start_ticket()
    ticket.add_item(sample_catalog["filter"])
    ticket.add_item(sample_catalog["filter"])
    ticket.add_item(sample_catalog["gas"])
    return ticket_service.submit(_header(sample_client), ticket)


class TestCreateTicket:
    def test_writes_service_lines_and_entry(self, temp_db, company_id, ana_ticket, sample_catalog):
        assert ana_ticket.created is True
        assert ana_ticket.total_value == Decimal("25.00")
        assert len(ana_ticket.service_item_ids) == 2

        service = temp_db.get_service(company_id, ana_ticket.service_id)
        assert service.total_value == Decimal("25.00")
        assert service.client_name == "Ana Silva"

        items = temp_db.list_service_items(company_id, ana_ticket.service_id)
        assert [(i.inventory_item_id, i.quantity, i.price) for i in items] == [
            (sample_catalog["filter"].id, 2, Decimal("10.00")),
            (sample_catalog["gas"].id, 1, Decimal("5.00")),
        ]

        entries = temp_db.list_financial_entries(company_id)
        assert len(entries) == 1
        entry = entries[0]
        assert entry.id == ana_ticket.financial_entry_id
        assert entry.value == Decimal("25.00")
        assert entry.entry_date == date(2024, 3, 10)
        assert entry.service_id == ana_ticket.service_id
        assert "maintenance" in entry.notes
        assert "Ana Silva" in entry.notes

    def test_zero_lines_total_zero(self, temp_db, company_id, ticket_service, sample_client):
        result = ticket_service.submit(_header(sample_client), [])

        assert result.total_value == Decimal("0")
        assert result.service_item_ids == ()
        assert temp_db.list_service_items(company_id, result.service_id) == []
        assert temp_db.get_service(company_id, result.service_id).total_value == Decimal("0")

    def test_without_client_no_entry(self, temp_db, company_id, ticket_service, sample_catalog):
        ticket = ticket_service.start_ticket()
        ticket.add_item(sample_catalog["gas"])

        result = ticket_service.submit(_header(), ticket)

        assert result.financial_entry_id is None
        assert temp_db.list_financial_entries(company_id) == []

    def test_collaborator_and_notes_are_stored(
        self, ticket_service, sample_client, sample_collaborator
    ):
        result = ticket_service.submit(
            _header(sample_client, collaborator_id=sample_collaborator.id, notes="  split unit  "), []
        )

        service = ticket_service.get_service(result.service_id)
        assert service.collaborator_name == "Bruno"
        assert service.notes == "split unit"

    def test_accepts_plain_line_list(self, ticket_service, sample_catalog):
        lines = [
            LineItem(
                inventory_item_id=sample_catalog["filter"].id,
                name="Filter",
                quantity=3,
                price=Decimal("9.00"),
            )
        ]

        result = ticket_service.submit(_header(), lines)

        assert result.total_value == Decimal("27.00")


class TestValidation:
    def test_missing_service_type(self, temp_db, company_id, ticket_service):
        with pytest.raises(ValidationError) as excinfo:
            ticket_service.submit(_header(service_type="  "), [])

        assert excinfo.value.field == "service_type"
        assert temp_db.list_services(company_id) == []

    def test_missing_date(self, ticket_service):
        with pytest.raises(ValidationError) as excinfo:
            ticket_service.submit(_header(service_date=None), [])

        assert excinfo.value.field == "service_date"

    def test_line_without_item(self, ticket_service):
        lines = [LineItem(inventory_item_id=None, name="?", quantity=1, price=Decimal("1.00"))]

        with pytest.raises(ValidationError):
            ticket_service.submit(_header(), lines)

    def test_zero_quantity_line(self, ticket_service, sample_catalog):
        lines = [
            LineItem(
                inventory_item_id=sample_catalog["gas"].id, name="Gas", quantity=0, price=Decimal("5.00")
            )
        ]

        with pytest.raises(ValidationError, match="at least 1"):
            ticket_service.submit(_header(), lines)


class TestAtomicity:
    def test_failed_line_insert_rolls_back_service(
        self, temp_db, company_id, other_company_id, ticket_service, sample_client
    ):
        foreign_item_id = InventoryService(temp_db, other_company_id).create_item(
            InventoryItemDraft(name="Foreign", value=Decimal("1.00"))
        )
        lines = [
            LineItem(inventory_item_id=foreign_item_id, name="Foreign", quantity=1, price=Decimal("1.00"))
        ]

        with pytest.raises(RemoteError, match="row-level security"):
            ticket_service.submit(_header(sample_client), lines)

        assert temp_db.list_services(company_id) == []
        assert temp_db.list_financial_entries(company_id) == []

    def test_client_of_other_company_is_rejected(
        self, temp_db, other_company_id, sample_client
    ):
        foreign = ServiceTicketService(temp_db, other_company_id)

        with pytest.raises(RemoteError):
            foreign.submit(_header(sample_client), [])

        assert temp_db.list_services(other_company_id) == []

    def test_database_usable_after_rollback(self, temp_db, company_id, ticket_service, sample_client):
        with pytest.raises(ValidationError):
            ticket_service.submit(_header(sample_client, service_type=""), [])

        result = ticket_service.submit(_header(sample_client), [])
        assert temp_db.get_service(company_id, result.service_id) is not None


class TestEditTicket:
    def test_start_ticket_loads_stored_lines(self, ticket_service, ana_ticket):
        ticket = ticket_service.start_ticket(ana_ticket.service_id)

        assert [line.service_item_id for line in ticket] == list(ana_ticket.service_item_ids)
        assert ticket.total() == Decimal("25.00")

    def test_start_ticket_unknown_service(self, ticket_service):
        with pytest.raises(NotFoundError):
            ticket_service.start_ticket(999)

    def test_diff_and_patch_lines(
        self, temp_db, company_id, ticket_service, ana_ticket, sample_client
    ):
        filter_line_id, gas_line_id = ana_ticket.service_item_ids
        copper_id = InventoryService(temp_db, company_id).create_item(
            InventoryItemDraft(name="Copper pipe", value=Decimal("30.00"))
        )
        copper = temp_db.get_inventory_item(company_id, copper_id)

        ticket = ticket_service.start_ticket(ana_ticket.service_id)
        ticket.set_quantity(0, 3)
        ticket.remove_item(1)
        ticket.add_item(copper)

        result = ticket_service.submit(_header(sample_client), ticket, ana_ticket.service_id)

        assert result.created is False
        assert result.service_id == ana_ticket.service_id
        assert result.total_value == Decimal("60.00")
        assert result.service_item_ids[0] == filter_line_id
        assert gas_line_id not in result.service_item_ids

        items = temp_db.list_service_items(company_id, ana_ticket.service_id)
        assert [(i.id, i.quantity) for i in items] == [
            (filter_line_id, 3),
            (result.service_item_ids[1], 1),
        ]
        assert temp_db.get_service(company_id, ana_ticket.service_id).total_value == Decimal("60.00")

    def test_edit_keeps_stored_price_after_catalog_change(
        self, temp_db, company_id, ticket_service, inventory_service, ana_ticket, sample_catalog, sample_client
    ):
        inventory_service.update_item(
            sample_catalog["filter"].id, InventoryItemDraft(name="Filter", value=Decimal("99.00"))
        )

        ticket = ticket_service.start_ticket(ana_ticket.service_id)
        result = ticket_service.submit(_header(sample_client), ticket, ana_ticket.service_id)

        assert result.total_value == Decimal("25.00")

    def test_unknown_service_is_not_found(self, ticket_service):
        with pytest.raises(NotFoundError):
            ticket_service.submit(_header(), [], existing_service_id=999)

    def test_upsert_updates_existing_entry(
        self, temp_db, company_id, ticket_service, ana_ticket, sample_client
    ):
        ticket = ticket_service.start_ticket(ana_ticket.service_id)
        ticket.set_quantity(1, 3)

        result = ticket_service.submit(
            _header(sample_client, service_type="cleaning"), ticket, ana_ticket.service_id
        )

        entries = temp_db.list_financial_entries(company_id)
        assert len(entries) == 1
        assert result.financial_entry_id == ana_ticket.financial_entry_id
        assert entries[0].value == Decimal("35.00")
        assert entries[0].notes == "cleaning - Ana Silva"

    def test_append_adds_entry_per_save(self, temp_db, company_id, ana_ticket, sample_client):
        appending = ServiceTicketService(temp_db, company_id, entry_policy=FinancialEntryPolicy.APPEND)
        ticket = appending.start_ticket(ana_ticket.service_id)

        result = appending.submit(_header(sample_client), ticket, ana_ticket.service_id)

        entries = temp_db.list_financial_entries(company_id)
        assert len(entries) == 2
        assert result.financial_entry_id != ana_ticket.financial_entry_id

    def test_upsert_removes_entry_when_client_cleared(
        self, temp_db, company_id, ticket_service, sample_client, sample_catalog
    ):
        ticket = ticket_service.start_ticket()
        ticket.add_item(sample_catalog["filter"])
        created = ticket_service.submit(_header(sample_client), ticket)
        assert len(temp_db.list_financial_entries(company_id)) == 1

        ticket = ticket_service.start_ticket(created.service_id)
        ticket.add_item(sample_catalog["gas"])
        result = ticket_service.submit(_header(), ticket, created.service_id)

        assert result.financial_entry_id is None
        assert result.total_value == Decimal("15.00")
        assert temp_db.list_financial_entries(company_id) == []
        assert temp_db.find_financial_entry_for_service(company_id, created.service_id) is None

    def test_append_keeps_entries_when_client_cleared(self, temp_db, company_id, ana_ticket):
        appending = ServiceTicketService(temp_db, company_id, entry_policy=FinancialEntryPolicy.APPEND)
        ticket = appending.start_ticket(ana_ticket.service_id)

        appending.submit(_header(), ticket, ana_ticket.service_id)

        entries = temp_db.list_financial_entries(company_id)
        assert [e.id for e in entries] == [ana_ticket.financial_entry_id]

    def test_upsert_inserts_when_no_entry_linked(
        self, temp_db, company_id, ticket_service, sample_client
    ):
        created = ticket_service.submit(_header(), [])
        assert created.financial_entry_id is None

        result = ticket_service.submit(_header(sample_client), [], created.service_id)

        assert result.financial_entry_id is not None
        assert len(temp_db.list_financial_entries(company_id)) == 1


class TestBrowse:
    def test_list_service_types(self, ticket_service, sample_catalog):
        assert ticket_service.list_service_types() == ["cleaning", "maintenance"]

    def test_list_services_newest_first(self, ticket_service):
        older = ticket_service.submit(_header(service_date=date(2024, 1, 5)), [])
        newer = ticket_service.submit(_header(service_date=date(2024, 2, 5)), [])

        assert [s.id for s in ticket_service.list_services()] == [newer.service_id, older.service_id]

    def test_search_services(self, ticket_service, client_service, sample_client):
        other_id = client_service.create_client(ClientDraft(full_name="Carlos Souza"))
        ticket_service.submit(_header(sample_client), [])
        ticket_service.submit(
            _header(client_service.get_client(other_id), service_type="installation"), []
        )

        assert [s.client_name for s in ticket_service.search_services("ana")] == ["Ana Silva"]
        assert [s.service_type for s in ticket_service.search_services("INSTALL")] == ["installation"]
        assert len(ticket_service.search_services("")) == 2
        assert ticket_service.search_services("", client_id=other_id)[0].client_name == "Carlos Souza"

    def test_get_detail(self, ticket_service, ana_ticket):
        detail = ticket_service.get_detail(ana_ticket.service_id)

        assert detail.service.id == ana_ticket.service_id
        assert detail.client.full_name == "Ana Silva"
        assert detail.collaborator is None
        assert [item.item_name for item in detail.items] == ["Filter", "Gas"]

    def test_get_detail_unknown(self, ticket_service):
        with pytest.raises(NotFoundError):
            ticket_service.get_detail(42)

    def test_other_company_cannot_see_ticket(self, temp_db, other_company_id, ana_ticket):
        foreign = ServiceTicketService(temp_db, other_company_id)

        assert foreign.get_service(ana_ticket.service_id) is None
        assert foreign.list_services() == []

    def test_delete_service_keeps_entry(self, temp_db, company_id, ticket_service, ana_ticket):
        ticket_service.delete_service(ana_ticket.service_id)

        assert ticket_service.get_service(ana_ticket.service_id) is None
        entry = temp_db.get_financial_entry(company_id, ana_ticket.financial_entry_id)
        assert entry is not None
        assert entry.service_id is None


@pytest.fixture
def second_db(temp_db):
    """Another gateway on the same database file, as a second operator."""
    db = create_sqlite_database(database_path=temp_db.database_path)
    db.connect()
    yield db
    db.disconnect()


class TestConcurrentEdits:
    def test_stale_edit_replaces_lines_without_orphans(
        self, temp_db, second_db, company_id, ticket_service, ana_ticket, sample_client, sample_catalog
    ):
        other_operator = ServiceTicketService(second_db, company_id)
        stale = ticket_service.start_ticket(ana_ticket.service_id)

        fresh = other_operator.start_ticket(ana_ticket.service_id)
        fresh.remove_item(1)
        other_operator.submit(_header(sample_client), fresh, ana_ticket.service_id)
        assert len(temp_db.list_service_items(company_id, ana_ticket.service_id)) == 1

        result = ticket_service.submit(_header(sample_client), stale, ana_ticket.service_id)

        items = second_db.list_service_items(company_id, ana_ticket.service_id)
        assert [(i.inventory_item_id, i.quantity, i.price) for i in items] == [
            (sample_catalog["filter"].id, 2, Decimal("10.00")),
            (sample_catalog["gas"].id, 1, Decimal("5.00")),
        ]
        assert [i.id for i in items] == list(result.service_item_ids)
        assert second_db.get_service(company_id, ana_ticket.service_id).total_value == Decimal("25.00")
        assert len(second_db.list_financial_entries(company_id)) == 1
