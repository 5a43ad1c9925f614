"""Per-invoice presentation and pricing settings."""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, field_validator

from core.formatting import normalize_hex_color
from core.numbers import coerce_decimal

DEFAULT_BRAND_COLOR = "#3b82f6"


class DiscountType(str, Enum):
    """How discount_value is applied to the subtotal."""

    PERCENT = "percent"
    FIXED = "fixed"


class CurrencyCode(str, Enum):
    """Supported display currencies. No conversion is ever performed."""

    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    INR = "INR"
    CAD = "CAD"


class InvoiceSettings(BaseModel):
    """Brand colour, tax, discount and currency for one invoice."""

    brand_color: str = DEFAULT_BRAND_COLOR
    tax_rate_percent: Decimal = Decimal(0)
    discount_type: DiscountType = DiscountType.PERCENT
    discount_value: Decimal = Decimal(0)
    currency_code: CurrencyCode = CurrencyCode.USD

    model_config = {"frozen": True}

    @field_validator("brand_color", mode="before")
    @classmethod
    def validate_brand_color(cls, value) -> str:
        """
        Brand colour is inserted into inline styles unescaped, so it must be
        a real hex colour. Missing values fall back to the default.
        """
        if value is None or value == "":
            return DEFAULT_BRAND_COLOR
        return normalize_hex_color(value)

    @field_validator("tax_rate_percent", "discount_value", mode="before")
    @classmethod
    def coerce_numbers(cls, value) -> Decimal:
        return coerce_decimal(value)
