"""Derived invoice totals. Full precision; rounding happens only at display."""

from decimal import Decimal

from pydantic import BaseModel


class Totals(BaseModel):
    """Output of the totals engine. `total` may be negative."""

    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total: Decimal

    model_config = {"frozen": True}
