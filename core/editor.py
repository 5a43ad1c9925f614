"""
Editing session for one invoice.

EditableInvoiceState is the single mutable structure behind the editor. The
UI layer (here, the HTTP API) is the only code that changes it; the document
builder reads it once per snapshot and keeps no reference to it.
"""

from datetime import date, timedelta

from pydantic import BaseModel, Field

from core.config import InvoicingConfig
from core.models import (
    InvoiceRecord,
    InvoiceSettings,
    InvoiceStatus,
    LineItem,
    PartyInfo,
    Template,
    TemplateCreate,
    Totals,
)
from core.totals import compute_totals
from utils.timezone import today_in


class LastLineItemError(ValueError):
    """An invoice must keep at least one line item."""


class EditableInvoiceState(BaseModel):
    """Current form contents of the invoice being edited."""

    invoice_number: str = Field("", max_length=50)
    status: InvoiceStatus = InvoiceStatus.DRAFT
    business: PartyInfo = Field(default_factory=PartyInfo)
    client: PartyInfo = Field(default_factory=PartyInfo)
    issue_date: date = Field(default_factory=today_in)
    due_date: date | None = None
    terms: str = Field("", max_length=100)
    settings: InvoiceSettings = Field(default_factory=InvoiceSettings)
    items: list[LineItem] = Field(default_factory=lambda: [LineItem()], min_length=1)
    notes: str = Field("", max_length=5000)
    payment_instructions: str = Field("", max_length=5000)

    model_config = {"validate_assignment": True}

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def new(
        cls,
        invoice_number: str,
        config: InvoicingConfig | None = None,
        today: date | None = None,
    ) -> "EditableInvoiceState":
        """Blank invoice with session defaults (due date, note, terms, one item)."""
        config = config or InvoicingConfig()
        issue_date = today or today_in(config.timezone)

        return cls(
            invoice_number=invoice_number,
            issue_date=issue_date,
            due_date=issue_date + timedelta(days=config.default_due_days),
            terms=config.default_terms,
            settings=InvoiceSettings(
                brand_color=config.default_brand_color,
                currency_code=config.default_currency,
            ),
            items=[LineItem()],
            notes=config.default_note,
        )

    @classmethod
    def from_record(cls, record: InvoiceRecord) -> "EditableInvoiceState":
        """Reopen a saved invoice for editing."""
        meta = record.invoice_meta
        return cls(
            invoice_number=record.invoice_number,
            status=record.status,
            business=record.business_info,
            client=record.client_info,
            issue_date=meta.issue_date,
            due_date=meta.due_date,
            terms=meta.terms,
            settings=record.settings,
            items=list(record.items) or [LineItem()],
            notes=record.notes,
            payment_instructions=record.payment_instructions,
        )

    # -------------------------------------------------------------------------
    # Line items
    # -------------------------------------------------------------------------

    def add_item(self, item: LineItem | None = None, **fields) -> LineItem:
        """Append a line item (blank unless given) and return it."""
        if item is None:
            item = LineItem(**fields)
        self.items.append(item)
        return item

    def update_item(self, index: int, **changes) -> LineItem:
        """
        Replace fields of the item at index. The amount follows automatically.

        Raises:
            ValueError: If no item exists at index
        """
        current = self._item_at(index)
        data = current.model_dump(exclude={"amount"})
        data.update(changes)
        updated = LineItem.model_validate(data)
        self.items[index] = updated
        return updated

    def remove_item(self, index: int) -> LineItem:
        """
        Remove the item at index.

        Raises:
            LastLineItemError: If it is the only remaining item
            ValueError: If index is unknown
        """
        self._item_at(index)
        if len(self.items) == 1:
            raise LastLineItemError("Cannot remove the last line item")
        return self.items.pop(index)

    def _item_at(self, index: int) -> LineItem:
        if index < 0 or index >= len(self.items):
            raise ValueError(f"Line item {index} not found")
        return self.items[index]

    # -------------------------------------------------------------------------
    # Settings, logo, templates
    # -------------------------------------------------------------------------

    def update_settings(self, **changes) -> InvoiceSettings:
        data = self.settings.model_dump()
        data.update(changes)
        self.settings = InvoiceSettings.model_validate(data)
        return self.settings

    def set_logo(self, logo: str | None) -> None:
        """Set or clear the business logo (a data URI from core.logo)."""
        data = self.business.model_dump()
        data["logo"] = logo or None
        self.business = PartyInfo.model_validate(data)

    def apply_template(
        self,
        template: Template | TemplateCreate,
        config: InvoicingConfig | None = None,
        today: date | None = None,
    ) -> None:
        """
        Pre-fill from a template.

        Business, client and settings are copied; line items reset to a single
        blank item, notes are cleared and dates restart from today. The invoice
        number is kept.
        """
        config = config or InvoicingConfig()
        issue_date = today or today_in(config.timezone)

        self.business = template.business_info
        self.client = template.client_info
        self.settings = template.settings
        self.items = [LineItem()]
        self.notes = ""
        self.payment_instructions = ""
        self.issue_date = issue_date
        self.due_date = issue_date + timedelta(days=config.default_due_days)

    def totals(self) -> Totals:
        return compute_totals(self.items, self.settings)
