"""Invoicing configuration."""

from pydantic import BaseModel, Field

from core.models import CurrencyCode, DEFAULT_BRAND_COLOR


class InvoicingConfig(BaseModel):
    """
    Defaults for new invoices, numbering format and presentation knobs.

    Secrets (database, Valkey) are not configured here; they come from Vault.
    """

    # Numbering
    invoice_number_prefix: str = Field(
        default="INV-",
        description="Prefix of generated invoice numbers",
        min_length=1,
        max_length=10,
    )
    invoice_number_width: int = Field(
        default=4,
        description="Zero-padded width of the numeric part",
        ge=1,
        le=10,
    )
    local_counter_path: str = Field(
        default="~/.invoicer/counter.json",
        description="Counter file used in local-only mode",
    )

    # New invoice defaults
    default_due_days: int = Field(
        default=30,
        description="Due date offset from the issue date",
        ge=0,
        le=3650,
    )
    default_terms: str = Field(default="Net 30")
    default_note: str = Field(default="Thank you for your business!")
    default_brand_color: str = Field(default=DEFAULT_BRAND_COLOR)
    default_currency: CurrencyCode = Field(default=CurrencyCode.USD)
    timezone: str | None = Field(
        default=None,
        description="IANA timezone used to pick 'today' for new invoices (UTC if unset)",
    )

    # Presentation
    preview_debounce_ms: int = Field(
        default=100,
        description="Coalescing window for preview refreshes",
        ge=0,
        le=5000,
    )
    invoices_per_page: int = Field(
        default=20,
        description="Page size of the invoice listing",
        ge=1,
        le=500,
    )
