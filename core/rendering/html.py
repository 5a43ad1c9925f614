"""
HTML preview renderer.

Produces the "paper" fragment shown next to the editor. All user-supplied
text is escaped. The only values inserted raw are the logo src (validated
image data URI) and the brand colour (validated hex).
"""

from html import escape

from core.models import InvoiceDocument
from core.rendering.view import InvoiceView, ItemRow, PartyBlock, build_view


def _e(value: str) -> str:
    return escape(value, quote=True)


def _lines(lines) -> str:
    return "".join(f"<div>{_e(line)}</div>" for line in lines)


def _render_header(view: InvoiceView) -> str:
    logo = ""
    if view.logo:
        logo = f'<img src="{view.logo}" class="paper-logo" alt="Logo">'

    meta = "".join(
        f'<div class="paper-meta-label">{_e(label)}</div>'
        f'<div class="paper-meta-value">{_e(value)}</div>'
        for label, value in view.meta_rows
    )
    meta += (
        '<div class="paper-meta-label">Amount Due</div>'
        f'<div class="paper-meta-value paper-meta-value--highlight" '
        f'style="color:{view.brand_color}">{_e(view.amount_due)}</div>'
    )

    return (
        '<div class="paper-header">'
        "<div>"
        f"{logo}"
        f'<div class="paper-company-name" style="color:{view.brand_color}">'
        f"{_e(view.business.name)}</div>"
        f'<div class="paper-company-details">{_lines(view.business.lines)}</div>'
        "</div>"
        '<div class="paper-invoice-block">'
        f'<div class="paper-invoice-title">{_e(view.title)}</div>'
        f'<div class="paper-meta-table">{meta}</div>'
        "</div>"
        "</div>"
    )


def _render_bill_to(client: PartyBlock) -> str:
    return (
        '<div class="paper-addresses">'
        '<div class="paper-address-label">Bill To</div>'
        f'<div class="paper-client-name">{_e(client.name)}</div>'
        f'<div class="paper-client-details">{_lines(client.lines)}</div>'
        "</div>"
    )


def _render_item(row: ItemRow) -> str:
    details = ""
    if row.details:
        details = '<div class="paper-item-details">' + "".join(
            f'<div class="paper-item-detail-line">{_e(line)}</div>'
            for line in row.details
        ) + "</div>"

    return (
        '<div class="paper-item"><div class="paper-item-row">'
        '<div class="paper-item-desc">'
        f'<div class="paper-item-title">{_e(row.description)}</div>'
        f"{details}"
        "</div>"
        '<div class="paper-item-metrics">'
        f'<div class="paper-item-qty">{_e(row.quantity)}</div>'
        f'<div class="paper-item-rate">{_e(row.rate)}</div>'
        "</div>"
        f'<div class="paper-item-amount">{_e(row.amount)}</div>'
        "</div></div>"
    )


def _render_items(view: InvoiceView) -> str:
    return (
        '<div class="paper-items-section">'
        '<div class="paper-items-header">'
        '<div class="paper-items-header-desc">Items</div>'
        '<div class="paper-items-header-cols">'
        '<div class="paper-items-header-col">Qty</div>'
        '<div class="paper-items-header-col">Rate</div>'
        '<div class="paper-items-header-col">Amount</div>'
        "</div></div>"
        f'<div class="paper-items-list">{"".join(_render_item(r) for r in view.items)}</div>'
        "</div>"
    )


def _render_notes(view: InvoiceView) -> str:
    blocks = []
    if view.notes:
        blocks.append(
            '<div class="paper-notes-block">'
            '<div class="paper-notes-label">Notes</div>'
            f'<div class="paper-notes-text">{_e(view.notes)}</div>'
            "</div>"
        )
    if view.payment_instructions:
        blocks.append(
            '<div class="paper-notes-block">'
            '<div class="paper-notes-label">Payment Instructions</div>'
            f'<div class="paper-notes-text">{_e(view.payment_instructions)}</div>'
            "</div>"
        )
    if not blocks:
        return ""
    return f'<div class="paper-notes-section">{"".join(blocks)}</div>'


def _render_totals(view: InvoiceView) -> str:
    rows = []
    for row in view.totals_rows:
        css = "paper-totals-row paper-totals-row--grand" if row.highlight else "paper-totals-row"
        style = f' style="color:{view.brand_color}"' if row.highlight else ""
        rows.append(
            f'<div class="{css}" data-row="{row.key}">'
            f'<span class="paper-totals-label">{_e(row.label)}</span>'
            f'<span class="paper-totals-value"{style}>{_e(row.value)}</span>'
            "</div>"
        )
    return f'<div class="paper-totals-section">{"".join(rows)}</div>'


def render_html(doc: InvoiceDocument) -> str:
    """Render the preview fragment for a document."""
    view = build_view(doc)
    return (
        '<div class="paper">'
        f"{_render_header(view)}"
        f"{_render_bill_to(view.client)}"
        f"{_render_items(view)}"
        '<div class="paper-footer">'
        f"{_render_notes(view)}"
        f"{_render_totals(view)}"
        "</div>"
        "</div>"
    )
