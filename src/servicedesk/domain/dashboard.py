"""Dashboard aggregation of financial entries."""

import logging
from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Optional

from dateutil.relativedelta import relativedelta

from servicedesk.domain.entities import CategoryTotal, DashboardReport, FinancialEntry, MonthlyTotal
from servicedesk.domain.errors import ValidationError
from servicedesk.utils.date_parser import month_start, trailing_months_range

if TYPE_CHECKING:
    from servicedesk.database.base import Database

logger = logging.getLogger(__name__)

DEFAULT_MONTHS = 6
OTHER_CATEGORY = "other"


def monthly_series(
    entries: Iterable[FinancialEntry], today: Optional[date] = None, months: int = DEFAULT_MONTHS
) -> list[MonthlyTotal]:
    """Sum entry values per calendar month.

    Args:
        entries: Financial entries
        today: Any day of the newest month (defaults to the current date)
        months: Number of buckets

    Returns:
        One MonthlyTotal per month, oldest first. Months without entries are
        zero; entries outside the window are ignored.
    """
    if months < 1:
        raise ValueError(f"Number of months must be at least 1, got {months}")
    today = today or date.today()
    first = month_start(today) - relativedelta(months=months - 1)

    buckets: OrderedDict[tuple[int, int], Decimal] = OrderedDict()
    for offset in range(months):
        day = first + relativedelta(months=offset)
        buckets[(day.year, day.month)] = Decimal("0")

    for entry in entries:
        key = (entry.entry_date.year, entry.entry_date.month)
        if key in buckets:
            buckets[key] += entry.value

    return [MonthlyTotal(year=year, month=month, value=value) for (year, month), value in buckets.items()]


def category_series(
    entries: Iterable[FinancialEntry], other_label: str = OTHER_CATEGORY
) -> list[CategoryTotal]:
    """Sum entry values per service type of the linked service.

    Entries without a linked service are summed under ``other_label``.
    Ordered by value, largest first.
    """
    totals: dict[str, Decimal] = {}
    for entry in entries:
        name = entry.service_type or other_label
        totals[name] = totals.get(name, Decimal("0")) + entry.value

    ordered = sorted(totals.items(), key=lambda pair: pair[1], reverse=True)
    return [CategoryTotal(name=name, value=value) for name, value in ordered]


class DashboardService:
    """Builds the dashboard figures of one company."""

    def __init__(self, db: "Database", company_id: int):
        """Initialize dashboard service.

        Args:
            db: Database instance
            company_id: Company whose figures are aggregated
        """
        self.db = db
        self.company_id = company_id

    def build_report(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        today: Optional[date] = None,
    ) -> DashboardReport:
        """Aggregate the entries of a date range.

        Args:
            start_date: First day included (defaults to the first day of the
                month five months before today)
            end_date: Last day included (defaults to the last day of today's month)
            today: Reference date (defaults to the current date)

        Returns:
            DashboardReport. The monthly series ends with the month of
            ``end_date`` when one is given, otherwise with today's month.

        Raises:
            ValidationError: If start_date is after end_date
        """
        today = today or date.today()
        default_start, default_end = trailing_months_range(DEFAULT_MONTHS, today)
        start = start_date or default_start
        end = end_date or default_end
        if start > end:
            raise ValidationError(
                f"Start date {start.isoformat()} is after end date {end.isoformat()}",
                field="start_date",
            )

        entries = self.db.list_financial_entries(self.company_id, start_date=start, end_date=end)
        services = [
            service
            for service in self.db.list_services(self.company_id)
            if start <= service.service_date <= end
        ]
        clients = self.db.list_clients(self.company_id)

        logger.debug(
            "Dashboard for company %s from %s to %s: %d entries", self.company_id, start, end, len(entries)
        )
        return DashboardReport(
            start_date=start,
            end_date=end,
            total_revenue=sum((entry.value for entry in entries), Decimal("0")),
            entry_count=len(entries),
            client_count=len(clients),
            service_count=len(services),
            monthly=tuple(monthly_series(entries, today=end_date or today)),
            by_category=tuple(category_series(entries)),
        )
