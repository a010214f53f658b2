"""Tests for domain entities."""

import pytest
from dataclasses import FrozenInstanceError
from datetime import datetime, date, UTC
from decimal import Decimal

from servicedesk.domain.entities import (
    AuthSession,
    CategoryType,
    Client,
    LineItem,
    MonthlyTotal,
    ServiceItem,
    SessionKind,
)


def _client(**overrides):
    now = datetime.now(UTC)
    fields = dict(
        id=1,
        company_id=1,
        full_name="Ana Silva",
        formal_name=None,
        phone=None,
        address=None,
        district=None,
        city=None,
        notes=None,
        send_maintenance_reminders=False,
        send_welcome_message=False,
        created_at=now,
        updated_at=now,
    )
    fields.update(overrides)
    return Client(**fields)


class TestClient:
    def test_immutability(self):
        client = _client()
        with pytest.raises(FrozenInstanceError):
            client.full_name = "Other"

    def test_equality(self):
        created_at = datetime.now(UTC)
        assert _client(created_at=created_at, updated_at=created_at) == _client(
            created_at=created_at, updated_at=created_at
        )
        assert _client(created_at=created_at) != _client(id=2, created_at=created_at)


class TestLineItem:
    def test_line_item_is_mutable(self):
        line = LineItem(inventory_item_id=1, name="Filter", quantity=1, price=Decimal("10.00"))
        line.quantity = 3
        assert line.subtotal == Decimal("30.00")

    def test_service_item_subtotal(self):
        item = ServiceItem(
            id=1,
            service_id=1,
            inventory_item_id=1,
            quantity=4,
            price=Decimal("2.50"),
            created_at=datetime.now(UTC),
        )
        assert item.subtotal == Decimal("10.00")


class TestEnums:
    def test_category_type_values(self):
        assert CategoryType("product") is CategoryType.PRODUCT
        assert CategoryType.SERVICE == "service"

    def test_auth_session_active(self):
        session = AuthSession(token="t", user_id=1, kind=SessionKind.PASSWORD, created_at=datetime.now(UTC))
        assert session.is_active
        revoked = AuthSession(
            token="t",
            user_id=1,
            kind=SessionKind.PASSWORD,
            created_at=session.created_at,
            revoked_at=datetime.now(UTC),
        )
        assert not revoked.is_active


class TestMonthlyTotal:
    def test_period_key_and_label(self):
        month = MonthlyTotal(year=2024, month=3, value=Decimal("0"))
        assert month.period_key == "2024-03"
        assert month.label == date(2024, 3, 1).strftime("%b %Y")
