"""Invoice renderers. Both consume the same InvoiceView projection."""

from core.rendering.view import InvoiceView, ItemRow, TotalsRow, build_view
from core.rendering.html import render_html
from core.rendering.pdf import render_pdf, export_filename
