"""
Line item domain model.

Quantities and rates are Decimals. The amount is never stored on its own: it
is a computed field, so `amount == quantity * rate` holds wherever an item is
observed (including its serialised form).
"""

from decimal import Decimal

from pydantic import BaseModel, Field, computed_field, field_validator

from core.numbers import coerce_decimal


class LineItem(BaseModel):
    """One billable row: description x quantity x rate."""

    description: str = Field("", max_length=500)
    quantity: Decimal = Decimal(1)
    rate: Decimal = Decimal(0)
    client_tag: str = Field("", max_length=200)
    consultant_tag: str = Field("", max_length=200)
    billing_period: str = Field("", max_length=200)
    notes: str = Field("", max_length=2000)

    model_config = {"frozen": True}

    @field_validator("quantity", "rate", mode="before")
    @classmethod
    def coerce_numbers(cls, value) -> Decimal:
        """Non-numeric input becomes 0 instead of failing validation."""
        return coerce_decimal(value)

    @field_validator(
        "description", "client_tag", "consultant_tag", "billing_period", "notes",
        mode="before",
    )
    @classmethod
    def blank_if_missing(cls, value) -> str:
        return "" if value is None else value

    @computed_field
    @property
    def amount(self) -> Decimal:
        return self.quantity * self.rate

    @property
    def details(self) -> list[str]:
        """Optional detail lines, in display order, skipping empty ones."""
        lines = []
        if self.client_tag:
            lines.append(f"Client: {self.client_tag}")
        if self.consultant_tag:
            lines.append(f"Consultant: {self.consultant_tag}")
        if self.billing_period:
            lines.append(f"Period: {self.billing_period}")
        if self.notes:
            lines.append(self.notes)
        return lines
