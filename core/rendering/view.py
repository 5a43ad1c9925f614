"""
Display projection shared by the HTML and PDF renderers.

Every string a renderer shows (formatted money, quantities, labels, which
totals rows exist) is decided here, once. Renderers only lay the strings out,
which is what keeps the preview and the exported PDF in agreement.
"""

from dataclasses import dataclass
from decimal import Decimal

from core.formatting import format_currency, format_quantity
from core.models import DiscountType, InvoiceDocument

DEFAULT_BUSINESS_NAME = "Your Company"
INVOICE_TITLE = "INVOICE"


@dataclass(frozen=True)
class ItemRow:
    description: str
    details: tuple[str, ...]
    quantity: str
    rate: str
    amount: str


@dataclass(frozen=True)
class TotalsRow:
    key: str
    label: str
    value: str
    highlight: bool = False


@dataclass(frozen=True)
class PartyBlock:
    name: str
    lines: tuple[str, ...]


@dataclass(frozen=True)
class InvoiceView:
    title: str
    brand_color: str
    logo: str | None
    business: PartyBlock
    client: PartyBlock
    meta_rows: tuple[tuple[str, str], ...]
    amount_due: str
    items: tuple[ItemRow, ...]
    totals_rows: tuple[TotalsRow, ...]
    notes: str
    payment_instructions: str


def signed_currency(amount: Decimal, code) -> str:
    """format_currency with a leading '-' for negative amounts."""
    formatted = format_currency(amount, code)
    return f"-{formatted}" if amount < 0 else formatted


def _percent_label(value: Decimal) -> str:
    return f"{format_quantity(value)}%"


def _party_lines(party) -> tuple[str, ...]:
    lines = list(party.address_lines)
    if party.email:
        lines.append(party.email)
    if party.phone:
        lines.append(party.phone)
    return tuple(lines)


def build_view(doc: InvoiceDocument) -> InvoiceView:
    """Project a document into display strings."""
    code = doc.currency_code
    totals = doc.totals
    settings = doc.settings

    items = tuple(
        ItemRow(
            description=item.description or "Item",
            details=tuple(item.details),
            quantity=format_quantity(item.quantity),
            rate=format_currency(item.rate, code),
            amount=format_currency(item.amount, code),
        )
        for item in doc.items
    )

    amount_due = signed_currency(totals.total, code)

    rows = [TotalsRow("subtotal", "Subtotal", format_currency(totals.subtotal, code))]
    if totals.tax_amount > 0:
        rows.append(TotalsRow(
            "tax",
            f"Tax ({_percent_label(settings.tax_rate_percent)})",
            format_currency(totals.tax_amount, code),
        ))
    if totals.discount_amount > 0:
        label = "Discount"
        if settings.discount_type == DiscountType.PERCENT:
            label = f"Discount ({_percent_label(settings.discount_value)})"
        rows.append(TotalsRow(
            "discount",
            label,
            f"-{format_currency(totals.discount_amount, code)}",
        ))
    rows.append(TotalsRow("total", "Total", amount_due, highlight=True))

    meta_rows = [
        ("Invoice #", doc.invoice_number),
        ("Date", doc.meta.issue_date_display),
        ("Due Date", doc.meta.due_date_display),
    ]
    if doc.meta.terms:
        meta_rows.append(("Terms", doc.meta.terms))

    return InvoiceView(
        title=INVOICE_TITLE,
        brand_color=settings.brand_color,
        logo=doc.business.logo,
        business=PartyBlock(
            name=doc.business.name or DEFAULT_BUSINESS_NAME,
            lines=_party_lines(doc.business),
        ),
        client=PartyBlock(
            name=doc.client.name,
            lines=_party_lines(doc.client),
        ),
        meta_rows=tuple(meta_rows),
        amount_due=amount_due,
        items=items,
        totals_rows=tuple(rows),
        notes=doc.notes.strip(),
        payment_instructions=doc.payment_instructions.strip(),
    )
