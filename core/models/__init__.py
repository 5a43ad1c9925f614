"""Core domain models."""

from core.models.line_item import LineItem
from core.models.settings import InvoiceSettings, DiscountType, CurrencyCode, DEFAULT_BRAND_COLOR
from core.models.party import PartyInfo
from core.models.totals import Totals
from core.models.document import InvoiceDocument, InvoiceMeta, InvoiceStatus
from core.models.invoice import InvoiceRecord
from core.models.template import Template, TemplateCreate

__all__ = [
    # LineItem
    "LineItem",
    # Settings
    "InvoiceSettings", "DiscountType", "CurrencyCode", "DEFAULT_BRAND_COLOR",
    # Party
    "PartyInfo",
    # Totals
    "Totals",
    # Document
    "InvoiceDocument", "InvoiceMeta", "InvoiceStatus",
    # Invoice
    "InvoiceRecord",
    # Template
    "Template", "TemplateCreate",
]
