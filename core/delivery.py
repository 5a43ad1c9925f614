"""
Post-load delivery actions: download the PDF or open a prefilled email.

An invoice opened with ?invoice_number=INV-0042&action=email gets a mailto:
link addressed to the client; action=download points at the PDF export.
"""

from enum import Enum
from urllib.parse import quote

from core.models import InvoiceDocument
from core.rendering.view import DEFAULT_BUSINESS_NAME, signed_currency


class LoadAction(str, Enum):
    DOWNLOAD = "download"
    EMAIL = "email"


def parse_load_action(value: str | None) -> LoadAction | None:
    """LoadAction for a query value; None when absent or unrecognised."""
    if not value:
        return None
    try:
        return LoadAction(value.strip().lower())
    except ValueError:
        return None


def resolve_invoice_param(invoice_number: str | None = None, invoice: str | None = None) -> str | None:
    """The invoice to open: invoice_number wins over its short alias."""
    for value in (invoice_number, invoice):
        if value and value.strip():
            return value.strip()
    return None


def email_subject(doc: InvoiceDocument) -> str:
    business = doc.business.name or DEFAULT_BUSINESS_NAME
    return f"Invoice {doc.invoice_number} from {business}"


def email_body(doc: InvoiceDocument) -> str:
    business = doc.business.name or DEFAULT_BUSINESS_NAME
    total = signed_currency(doc.totals.total, doc.currency_code)

    body = (
        f"Hi {doc.client.name},\n\n"
        f"Please find attached invoice {doc.invoice_number} for {total}.\n\n"
    )
    if doc.meta.due_date_display:
        body += f"Due Date: {doc.meta.due_date_display}\n\n"
    body += f"Thank you,\n{business}"
    return body


def build_mailto(doc: InvoiceDocument) -> str:
    """mailto: link to the client with subject and body filled in."""
    recipient = quote(doc.client.email.strip(), safe="@")
    subject = quote(email_subject(doc), safe="")
    body = quote(email_body(doc), safe="")
    return f"mailto:{recipient}?subject={subject}&body={body}"
