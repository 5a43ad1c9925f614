"""
Stored invoice record.

One row per (owner, invoice_number). Sections are kept as JSONB columns in
the shape of the document they were snapshotted from; totals are stored for
listing and reporting but always recomputed when an invoice is reopened.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel

from core.models.document import InvoiceMeta, InvoiceStatus
from core.models.line_item import LineItem
from core.models.party import PartyInfo
from core.models.settings import CurrencyCode, InvoiceSettings
from core.models.totals import Totals


class InvoiceRecord(BaseModel):
    """Full invoice entity as stored."""

    id: UUID
    user_id: UUID
    invoice_number: str
    status: InvoiceStatus
    business_info: PartyInfo
    client_info: PartyInfo
    invoice_meta: InvoiceMeta
    settings: InvoiceSettings
    items: list[LineItem]
    notes: str
    payment_instructions: str
    totals: Totals
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @property
    def total(self) -> Decimal:
        """Grand total as saved."""
        return self.totals.total

    @property
    def currency_code(self) -> CurrencyCode:
        return self.settings.currency_code

    @property
    def consultants(self) -> set[str]:
        """Distinct consultant tags across the line items."""
        return {item.consultant_tag.strip() for item in self.items if item.consultant_tag.strip()}
