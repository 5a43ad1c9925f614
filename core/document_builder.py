"""Snapshot the editing session into an immutable InvoiceDocument."""

from core.models import InvoiceDocument, InvoiceMeta
from core.totals import compute_totals

DRAFT_INVOICE_NUMBER = "INV-DRAFT"


def build_document(state) -> InvoiceDocument:
    """
    Build the document every renderer consumes.

    Args:
        state: EditableInvoiceState (read once, not retained)

    Returns:
        Frozen InvoiceDocument. Later edits to state do not affect it.
    """
    items = tuple(state.items)
    totals = compute_totals(items, state.settings)

    return InvoiceDocument(
        invoice_number=state.invoice_number.strip() or DRAFT_INVOICE_NUMBER,
        status=state.status,
        business=state.business,
        client=state.client,
        meta=InvoiceMeta(
            issue_date=state.issue_date,
            due_date=state.due_date,
            terms=state.terms,
            currency_code=state.settings.currency_code,
        ),
        settings=state.settings,
        items=items,
        totals=totals,
        notes=state.notes,
        payment_instructions=state.payment_instructions,
    )
