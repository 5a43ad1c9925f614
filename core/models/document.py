"""
Immutable invoice snapshot consumed by the renderers.

An InvoiceDocument is created from the editing session on every preview,
save and export. Nothing downstream may modify it.
"""

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, computed_field

from core.formatting import format_date
from core.models.line_item import LineItem
from core.models.party import PartyInfo
from core.models.settings import CurrencyCode, InvoiceSettings
from core.models.totals import Totals


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status."""

    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"


class InvoiceMeta(BaseModel):
    """
    Dates, terms and currency.

    Dates are held once as calendar dates; the display strings are computed
    from them so the two forms can never disagree.
    """

    issue_date: date
    due_date: date | None = None
    terms: str = Field("", max_length=100)
    currency_code: CurrencyCode = CurrencyCode.USD

    model_config = {"frozen": True}

    @computed_field
    @property
    def issue_date_display(self) -> str:
        return format_date(self.issue_date)

    @computed_field
    @property
    def due_date_display(self) -> str:
        return format_date(self.due_date)


class InvoiceDocument(BaseModel):
    """Everything needed to render one invoice."""

    invoice_number: str
    status: InvoiceStatus = InvoiceStatus.DRAFT
    business: PartyInfo
    client: PartyInfo
    meta: InvoiceMeta
    settings: InvoiceSettings
    items: tuple[LineItem, ...] = Field(..., min_length=1)
    totals: Totals
    notes: str = ""
    payment_instructions: str = ""

    model_config = {"frozen": True}

    @property
    def currency_code(self) -> CurrencyCode:
        return self.settings.currency_code
