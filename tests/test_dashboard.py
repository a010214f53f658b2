"""Tests for dashboard aggregation."""

from datetime import date, datetime, UTC
from decimal import Decimal

import pytest

from servicedesk.domain.dashboard import (
    OTHER_CATEGORY,
    DashboardService,
    category_series,
    monthly_series,
)
from servicedesk.domain.entities import ClientDraft, FinancialEntry, FinancialEntryDraft, ServiceDraft
from servicedesk.domain.errors import ValidationError
from servicedesk.domain.financial import FinancialEntryService


def _entry(entry_date, value, service_type=None, entry_id=1):
    now = datetime.now(UTC)
    return FinancialEntry(
        id=entry_id,
        company_id=1,
        entry_date=entry_date,
        value=Decimal(value),
        client_id=None,
        service_id=None,
        notes=None,
        created_at=now,
        updated_at=now,
        service_type=service_type,
    )


class TestMonthlySeries:
    def test_six_buckets_oldest_first(self, today):
        series = monthly_series([], today=today)

        assert [m.period_key for m in series] == [
            "2024-01",
            "2024-02",
            "2024-03",
            "2024-04",
            "2024-05",
            "2024-06",
        ]
        assert all(m.value == Decimal("0") for m in series)

    def test_entries_in_current_month_and_two_months_back(self, today):
        entries = [
            _entry(date(2024, 6, 2), "100.00"),
            _entry(date(2024, 6, 20), "50.00"),
            _entry(date(2024, 4, 30), "80.00"),
        ]

        values = {m.period_key: m.value for m in monthly_series(entries, today=today)}

        assert values["2024-06"] == Decimal("150.00")
        assert values["2024-05"] == Decimal("0")
        assert values["2024-04"] == Decimal("80.00")

    def test_entries_outside_window_are_ignored(self, today):
        entries = [_entry(date(2023, 12, 31), "10.00"), _entry(date(2024, 7, 1), "10.00")]

        assert sum(m.value for m in monthly_series(entries, today=today)) == Decimal("0")

    def test_window_crosses_year_boundary(self):
        series = monthly_series([], today=date(2024, 2, 29), months=3)

        assert [m.period_key for m in series] == ["2023-12", "2024-01", "2024-02"]
        assert series[0].label == "Dec 2023"

    def test_months_must_be_positive(self, today):
        with pytest.raises(ValueError):
            monthly_series([], today=today, months=0)


class TestCategorySeries:
    def test_groups_by_service_type_with_other_bucket(self):
        entries = [
            _entry(date(2024, 6, 1), "120.00", service_type="cleaning"),
            _entry(date(2024, 6, 2), "30.00", service_type="cleaning"),
            _entry(date(2024, 6, 3), "40.00"),
        ]

        series = category_series(entries)

        assert [(c.name, c.value) for c in series] == [
            ("cleaning", Decimal("150.00")),
            ("other", Decimal("40.00")),
        ]

    def test_sorted_by_value_descending(self):
        entries = [
            _entry(date(2024, 6, 1), "10.00", service_type="cleaning"),
            _entry(date(2024, 6, 1), "90.00", service_type="installation"),
            _entry(date(2024, 6, 1), "50.00", service_type="maintenance"),
        ]

        assert [c.name for c in category_series(entries)] == ["installation", "maintenance", "cleaning"]

    def test_custom_other_label(self):
        series = category_series([_entry(date(2024, 6, 1), "5.00")], other_label="Outros")

        assert series[0].name == "Outros"

    def test_no_entries(self):
        assert category_series([]) == []


class TestDashboardService:
    @pytest.fixture
    def dashboard(self, temp_db, company_id):
        return DashboardService(temp_db, company_id)

    def test_report_for_default_range(
        self, dashboard, ticket_service, entry_service, client_service, sample_catalog, today
    ):
        client_id = client_service.create_client(ClientDraft(full_name="Ana Silva"))
        client_service.create_client(ClientDraft(full_name="Carlos Souza"))
        ticket = ticket_service.start_ticket()
        ticket.add_item(sample_catalog["filter"])
        ticket.set_quantity(0, 12)
        ticket_service.submit(
            ServiceDraft(service_date=date(2024, 6, 3), service_type="cleaning", client_id=client_id),
            ticket,
        )
        entry_service.create_entry(FinancialEntryDraft(entry_date=date(2024, 4, 10), value=Decimal("80.00")))
        entry_service.create_entry(FinancialEntryDraft(entry_date=date(2023, 11, 10), value=Decimal("999.00")))

        report = dashboard.build_report(today=today)

        assert report.start_date == date(2024, 1, 1)
        assert report.end_date == date(2024, 6, 30)
        assert report.total_revenue == Decimal("200.00")
        assert report.entry_count == 2
        assert report.client_count == 2
        assert report.service_count == 1
        assert len(report.monthly) == 6
        values = {m.period_key: m.value for m in report.monthly}
        assert values["2024-06"] == Decimal("120.00")
        assert values["2024-05"] == Decimal("0")
        assert values["2024-04"] == Decimal("80.00")
        assert [(c.name, c.value) for c in report.by_category] == [
            ("cleaning", Decimal("120.00")),
            (OTHER_CATEGORY, Decimal("80.00")),
        ]

    def test_explicit_range(self, dashboard, entry_service, today):
        entry_service.create_entry(FinancialEntryDraft(entry_date=date(2024, 2, 10), value=Decimal("10.00")))
        entry_service.create_entry(FinancialEntryDraft(entry_date=date(2024, 3, 10), value=Decimal("20.00")))

        report = dashboard.build_report(start_date=date(2024, 3, 1), end_date=date(2024, 3, 31), today=today)

        assert report.total_revenue == Decimal("20.00")
        assert report.monthly[-1].period_key == "2024-03"

    def test_empty_company(self, dashboard, today):
        report = dashboard.build_report(today=today)

        assert report.total_revenue == Decimal("0")
        assert report.client_count == 0
        assert report.by_category == ()

    def test_start_after_end(self, dashboard):
        with pytest.raises(ValidationError):
            dashboard.build_report(start_date=date(2024, 5, 1), end_date=date(2024, 4, 1))

    def test_other_company_entries_are_excluded(
        self, temp_db, other_company_id, dashboard, today
    ):
        FinancialEntryService(temp_db, other_company_id).create_entry(
            FinancialEntryDraft(entry_date=date(2024, 6, 1), value=Decimal("500.00"))
        )

        assert dashboard.build_report(today=today).total_revenue == Decimal("0")
