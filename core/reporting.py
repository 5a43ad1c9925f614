"""
Dashboard statistics and invoice listing.

Works on already-loaded InvoiceRecords; no database access. Money is never
converted between currencies: every aggregate is keyed by currency code.
"""

from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Iterable

from pydantic import BaseModel

from core.formatting import format_currency
from core.models import InvoiceRecord
from utils.timezone import now_utc

RECENT_INVOICE_COUNT = 5
REVENUE_SERIES_MONTHS = 6

_MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
                 "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class SortOrder(str, Enum):
    DATE_DESC = "date-desc"
    DATE_ASC = "date-asc"
    AMOUNT_DESC = "amount-desc"
    AMOUNT_ASC = "amount-asc"
    CLIENT_ASC = "client-asc"


class InvoiceSummary(BaseModel):
    """One row of the invoice listing."""

    invoice_number: str
    client_name: str
    issue_date: str
    total: Decimal
    total_display: str
    currency_code: str
    status: str
    created_at: datetime

    @classmethod
    def from_record(cls, record: InvoiceRecord) -> "InvoiceSummary":
        return cls(
            invoice_number=record.invoice_number,
            client_name=record.client_info.name,
            issue_date=record.invoice_meta.issue_date_display,
            total=record.total,
            total_display=format_currency(record.total, record.currency_code),
            currency_code=record.currency_code.value,
            status=record.status.value,
            created_at=record.created_at,
        )


class InvoicePage(BaseModel):
    items: list[InvoiceSummary]
    page: int
    per_page: int
    total: int
    pages: int


class MonthRevenue(BaseModel):
    month: str  # YYYY-MM
    label: str
    totals: dict[str, Decimal]


class DashboardStats(BaseModel):
    monthly_revenue: dict[str, Decimal]
    yearly_revenue: dict[str, Decimal]
    average_invoice: dict[str, Decimal]
    total_invoices: int
    this_month_count: int
    revenue_by_month: list[MonthRevenue]
    recent: list[InvoiceSummary]


def _sum_by_currency(invoices: Iterable[InvoiceRecord]) -> dict[str, Decimal]:
    totals: dict[str, Decimal] = defaultdict(Decimal)
    for invoice in invoices:
        totals[invoice.currency_code.value] += invoice.total
    return dict(sorted(totals.items()))


def _month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def calculate_stats(invoices: list[InvoiceRecord], now: datetime | None = None) -> DashboardStats:
    """
    Dashboard figures for the owner's invoices.

    "This month" and "this year" are judged by each invoice's created_at,
    in the timezone of now (UTC by default).

    Args:
        invoices: Owner's invoices, newest first
        now: Reference time
    """
    now = now or now_utc()

    def local(record: InvoiceRecord) -> datetime:
        return record.created_at.astimezone(now.tzinfo) if now.tzinfo else record.created_at

    this_year = [inv for inv in invoices if local(inv).year == now.year]
    this_month = [inv for inv in this_year if local(inv).month == now.month]

    all_time = _sum_by_currency(invoices)
    counts: dict[str, int] = defaultdict(int)
    for invoice in invoices:
        counts[invoice.currency_code.value] += 1
    average = {code: total / counts[code] for code, total in all_time.items()}

    series: dict[str, dict[str, Decimal]] = {}
    year, month = now.year, now.month
    keys = []
    for _ in range(REVENUE_SERIES_MONTHS):
        keys.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    for y, m in reversed(keys):
        series[_month_key(y, m)] = {}

    for invoice in invoices:
        created = local(invoice)
        key = _month_key(created.year, created.month)
        if key in series:
            bucket = series[key]
            code = invoice.currency_code.value
            bucket[code] = bucket.get(code, Decimal(0)) + invoice.total

    return DashboardStats(
        monthly_revenue=_sum_by_currency(this_month),
        yearly_revenue=_sum_by_currency(this_year),
        average_invoice=average,
        total_invoices=len(invoices),
        this_month_count=len(this_month),
        revenue_by_month=[
            MonthRevenue(month=key, label=_MONTH_LABELS[int(key[5:]) - 1], totals=totals)
            for key, totals in series.items()
        ],
        recent=[InvoiceSummary.from_record(inv) for inv in invoices[:RECENT_INVOICE_COUNT]],
    )


def list_consultants(invoices: Iterable[InvoiceRecord]) -> list[str]:
    """Distinct consultant tags across all line items, sorted case-insensitively."""
    names: set[str] = set()
    for invoice in invoices:
        names |= invoice.consultants
    return sorted(names, key=str.casefold)


def filter_invoices(
    invoices: Iterable[InvoiceRecord],
    search: str | None = None,
    consultant: str | None = None,
) -> list[InvoiceRecord]:
    """
    Keep invoices whose number or client name contains search
    (case-insensitive) and, if consultant is given, that bill at least one
    item tagged with exactly that consultant.
    """
    query = (search or "").strip().casefold()
    consultant = (consultant or "").strip()

    result = []
    for invoice in invoices:
        if query and query not in invoice.invoice_number.casefold() \
                and query not in invoice.client_info.name.casefold():
            continue
        if consultant and consultant not in invoice.consultants:
            continue
        result.append(invoice)
    return result


def sort_invoices(invoices: Iterable[InvoiceRecord], order: SortOrder | str = SortOrder.DATE_DESC) -> list[InvoiceRecord]:
    """
    Sorted copy of invoices.

    Raises:
        ValueError: If order is not a known sort key
    """
    order = SortOrder(order)
    invoices = list(invoices)

    if order == SortOrder.DATE_DESC:
        return sorted(invoices, key=lambda inv: inv.created_at, reverse=True)
    if order == SortOrder.DATE_ASC:
        return sorted(invoices, key=lambda inv: inv.created_at)
    if order == SortOrder.AMOUNT_DESC:
        return sorted(invoices, key=lambda inv: inv.total, reverse=True)
    if order == SortOrder.AMOUNT_ASC:
        return sorted(invoices, key=lambda inv: inv.total)
    return sorted(invoices, key=lambda inv: inv.client_info.name.casefold())


def paginate(invoices: list[InvoiceRecord], page: int = 1, per_page: int = 20) -> InvoicePage:
    """
    One page of summaries. Pages are 1-based; a page past the end is empty.

    Raises:
        ValueError: If page or per_page is below 1
    """
    if page < 1 or per_page < 1:
        raise ValueError("page and per_page must be at least 1")

    total = len(invoices)
    start = (page - 1) * per_page
    return InvoicePage(
        items=[InvoiceSummary.from_record(inv) for inv in invoices[start:start + per_page]],
        page=page,
        per_page=per_page,
        total=total,
        pages=(total + per_page - 1) // per_page,
    )


def query_invoices(
    invoices: Iterable[InvoiceRecord],
    search: str | None = None,
    consultant: str | None = None,
    sort: SortOrder | str = SortOrder.DATE_DESC,
    page: int = 1,
    per_page: int = 20,
) -> InvoicePage:
    """Filter, sort and paginate in the order the listing applies them."""
    return paginate(sort_invoices(filter_invoices(invoices, search, consultant), sort), page, per_page)
