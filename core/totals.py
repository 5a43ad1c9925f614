"""
Totals engine.

Pure aggregation of line items and settings into subtotal, tax, discount and
grand total. No rounding happens here; values keep full Decimal precision
until they are formatted for display. Negative totals (discount larger than
subtotal plus tax) are returned as-is.
"""

from collections.abc import Iterable, Mapping
from decimal import Decimal

from core.models import DiscountType, InvoiceSettings, LineItem, Totals
from core.numbers import coerce_decimal

_HUNDRED = Decimal(100)


def line_amount(item: LineItem | Mapping) -> Decimal:
    """quantity x rate of one item, treating invalid numbers as 0."""
    if isinstance(item, LineItem):
        return item.quantity * item.rate
    return coerce_decimal(item.get("quantity")) * coerce_decimal(item.get("rate"))


def compute_totals(
    items: Iterable[LineItem | Mapping],
    settings: InvoiceSettings | Mapping | None = None,
) -> Totals:
    """
    Compute invoice totals.

    Args:
        items: Line items (models or raw mappings with quantity/rate)
        settings: Tax and discount settings; defaults when omitted

    Returns:
        Totals where total == subtotal + tax_amount - discount_amount
    """
    if settings is None:
        settings = InvoiceSettings()
    elif not isinstance(settings, InvoiceSettings):
        settings = InvoiceSettings.model_validate(settings)

    subtotal = Decimal(0)
    for item in items:
        subtotal += line_amount(item)

    tax_amount = subtotal * settings.tax_rate_percent / _HUNDRED

    if settings.discount_type == DiscountType.PERCENT:
        discount_amount = subtotal * settings.discount_value / _HUNDRED
    else:
        discount_amount = settings.discount_value

    return Totals(
        subtotal=subtotal,
        tax_amount=tax_amount,
        discount_amount=discount_amount,
        total=subtotal + tax_amount - discount_amount,
    )
