"""
PDF renderer (reportlab platypus).

Lays out the same InvoiceView as the HTML preview on A4 pages. The item table
repeats its header row when it spills onto further pages. A logo that cannot
be decoded is logged and left out; the rest of the document is still built.
"""

import logging
import os
import re
from functools import lru_cache
from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from core.logo import decode_logo
from core.models import InvoiceDocument
from core.rendering.view import InvoiceView, ItemRow, PartyBlock, build_view

logger = logging.getLogger(__name__)

PAGE_MARGIN = 20 * mm
CONTENT_WIDTH = A4[0] - 2 * PAGE_MARGIN
LOGO_MAX_WIDTH = 40 * mm
LOGO_MAX_HEIGHT = 20 * mm

# Helvetica has no glyph for the rupee sign, so a Unicode TTF is preferred.
FONT_NAME = "InvoiceSans"
FONT_NAME_BOLD = "InvoiceSans-Bold"
FONT_FILES = ("DejaVuSans.ttf", "DejaVuSans-Bold.ttf")
FONT_DIRS = (
    os.environ.get("INVOICER_FONT_DIR", ""),
    "/usr/share/fonts/truetype/dejavu",
    "/usr/share/fonts/dejavu",
    "/usr/share/fonts/TTF",
    "/usr/local/share/fonts",
    "/Library/Fonts",
)


@lru_cache(maxsize=1)
def document_fonts() -> tuple[str, str]:
    """
    (regular, bold) font names for the PDF, registering the TTF pair once.

    Falls back to Helvetica when no DejaVu pair is installed; currency symbols
    outside Latin-1 will then not render.
    """
    regular_file, bold_file = FONT_FILES
    for directory in FONT_DIRS:
        if not directory:
            continue
        regular = os.path.join(directory, regular_file)
        bold = os.path.join(directory, bold_file)
        if os.path.isfile(regular) and os.path.isfile(bold):
            pdfmetrics.registerFont(TTFont(FONT_NAME, regular))
            pdfmetrics.registerFont(TTFont(FONT_NAME_BOLD, bold))
            pdfmetrics.registerFontFamily(
                FONT_NAME, normal=FONT_NAME, bold=FONT_NAME_BOLD,
                italic=FONT_NAME, boldItalic=FONT_NAME_BOLD,
            )
            logger.info(f"Registered PDF fonts from {directory}")
            return FONT_NAME, FONT_NAME_BOLD
    logger.warning("No Unicode TTF found for PDF export, using Helvetica")
    return "Helvetica", "Helvetica-Bold"


def export_filename(doc: InvoiceDocument) -> str:
    """Download name: Invoice-<number>.pdf, minus characters paths can't hold."""
    number = re.sub(r'[\\/*?:"<>|\x00-\x1f\x7f]', "", doc.invoice_number).strip() or "DRAFT"
    return f"Invoice-{number}.pdf"


def pdf_item_rows(view: InvoiceView) -> list[tuple[str, str, str, str]]:
    """(description, qty, rate, amount) for each row of the item table."""
    return [(row.description, row.quantity, row.rate, row.amount) for row in view.items]


def _styles(brand: colors.Color) -> dict[str, ParagraphStyle]:
    regular, bold = document_fonts()
    base = getSampleStyleSheet()
    normal = ParagraphStyle(
        "InvoiceNormal", parent=base["Normal"], fontName=regular, fontSize=10, leading=13,
    )
    return {
        "normal": normal,
        "muted": ParagraphStyle("InvoiceMuted", parent=normal, textColor=colors.HexColor("#646464")),
        "company": ParagraphStyle(
            "InvoiceCompany", parent=normal, fontName=bold,
            fontSize=18, leading=22, textColor=brand,
        ),
        "title": ParagraphStyle(
            "InvoiceTitle", parent=normal, fontName=bold,
            fontSize=24, leading=28, textColor=brand, alignment=TA_RIGHT,
        ),
        "label": ParagraphStyle(
            "InvoiceLabel", parent=normal, fontName=bold,
            fontSize=11, textColor=colors.HexColor("#969696"),
        ),
        "client": ParagraphStyle("InvoiceClient", parent=normal, fontName=bold, fontSize=12, leading=15),
        "item": ParagraphStyle("InvoiceItem", parent=normal, fontSize=9, leading=11),
        "notes_label": ParagraphStyle("InvoiceNotesLabel", parent=normal, fontName=bold, fontSize=9),
        "notes": ParagraphStyle("InvoiceNotes", parent=normal, fontSize=9, leading=11, textColor=colors.HexColor("#505050")),
    }


def _multiline(text: str) -> str:
    return "<br/>".join(escape(line) for line in text.splitlines())


def _logo_flowable(data_uri: str):
    """Image flowable scaled into the logo box, or None if it can't be read."""
    try:
        raw = decode_logo(data_uri)
        reader = ImageReader(BytesIO(raw))
        width, height = reader.getSize()
        scale = min(LOGO_MAX_WIDTH / width, LOGO_MAX_HEIGHT / height)
        return Image(BytesIO(raw), width=width * scale, height=height * scale, hAlign="LEFT")
    except Exception as e:
        logger.warning(f"Skipping undecodable logo in PDF export: {e}")
        return None


def _party_flowables(party: PartyBlock, name_style, styles) -> list:
    flowables = [Paragraph(escape(party.name), name_style)]
    for line in party.lines:
        flowables.append(Paragraph(escape(line), styles["muted"]))
    return flowables


def _header(view: InvoiceView, styles, brand) -> Table:
    regular, bold = document_fonts()
    left = []
    if view.logo:
        logo = _logo_flowable(view.logo)
        if logo is not None:
            left.extend([logo, Spacer(1, 3 * mm)])
    left.extend(_party_flowables(view.business, styles["company"], styles))

    meta_data = [[f"{label}:", value] for label, value in view.meta_rows]
    meta_data.append(["Amount Due:", view.amount_due])
    meta = Table(meta_data, colWidths=[28 * mm, 42 * mm])
    meta.setStyle(TableStyle([
        ("ALIGN", (0, 0), (-1, -1), "RIGHT"),
        ("FONTNAME", (0, 0), (-1, -1), regular),
        ("FONTNAME", (0, 0), (0, -1), bold),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("TEXTCOLOR", (0, 0), (-1, -1), colors.HexColor("#505050")),
        ("TEXTCOLOR", (1, -1), (1, -1), brand),
        ("FONTNAME", (1, -1), (1, -1), bold),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 1),
        ("TOPPADDING", (0, 0), (-1, -1), 1),
    ]))
    right = [Paragraph(escape(view.title), styles["title"]), Spacer(1, 2 * mm), meta]

    header = Table([[left, right]], colWidths=[CONTENT_WIDTH - 72 * mm, 72 * mm])
    header.setStyle(TableStyle([
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("LEFTPADDING", (0, 0), (0, 0), 0),
        ("RIGHTPADDING", (-1, 0), (-1, 0), 0),
    ]))
    return header


def _item_cell(row: ItemRow, style) -> Paragraph:
    markup = f"<b>{escape(row.description)}</b>"
    for detail in row.details:
        markup += f"<br/>{_multiline(detail)}"
    return Paragraph(markup, style)


def _items_table(view: InvoiceView, styles, brand) -> Table:
    regular, bold = document_fonts()
    data = [["Item", "Qty", "Rate", "Amount"]]
    for row, (_, quantity, rate, amount) in zip(view.items, pdf_item_rows(view)):
        data.append([_item_cell(row, styles["item"]), quantity, rate, amount])

    table = Table(
        data,
        repeatRows=1,
        colWidths=[CONTENT_WIDTH - 80 * mm, 20 * mm, 30 * mm, 30 * mm],
    )
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), brand),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, -1), regular),
        ("FONTNAME", (0, 0), (-1, 0), bold),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#c8c8c8")),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("ALIGN", (1, 0), (1, -1), "CENTER"),
        ("ALIGN", (2, 0), (3, -1), "RIGHT"),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ]))
    return table


def _totals_table(view: InvoiceView, brand) -> Table:
    regular, bold = document_fonts()
    data = [[f"{row.label}:", row.value] for row in view.totals_rows]
    totals = Table(data, colWidths=[45 * mm, 35 * mm])
    style = [
        ("ALIGN", (0, 0), (-1, -1), "RIGHT"),
        ("FONTNAME", (0, 0), (-1, -1), regular),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
    ]
    for index, row in enumerate(view.totals_rows):
        if row.highlight:
            style.extend([
                ("FONTNAME", (0, index), (-1, index), bold),
                ("FONTSIZE", (0, index), (-1, index), 12),
                ("TEXTCOLOR", (0, index), (-1, index), brand),
                ("TOPPADDING", (0, index), (-1, index), 6),
            ])
    totals.setStyle(TableStyle(style))

    wrap = Table([[totals]], colWidths=[CONTENT_WIDTH])
    wrap.setStyle(TableStyle([("ALIGN", (0, 0), (-1, -1), "RIGHT")]))
    return wrap


def _notes(view: InvoiceView, styles) -> list:
    flowables = []
    for label, text in (("Notes", view.notes), ("Payment Instructions", view.payment_instructions)):
        if not text:
            continue
        flowables.extend([
            Spacer(1, 4 * mm),
            Paragraph(f"{label}:", styles["notes_label"]),
            Paragraph(_multiline(text), styles["notes"]),
        ])
    return flowables


def build_story(view: InvoiceView) -> list:
    """Flowables for one invoice, in page order."""
    brand = colors.HexColor(view.brand_color)
    styles = _styles(brand)

    story = [_header(view, styles, brand), Spacer(1, 10 * mm)]

    story.append(Paragraph("BILL TO", styles["label"]))
    story.append(Spacer(1, 1 * mm))
    story.extend(_party_flowables(view.client, styles["client"], styles))
    story.append(Spacer(1, 8 * mm))

    story.append(_items_table(view, styles, brand))
    story.append(Spacer(1, 6 * mm))
    story.append(_totals_table(view, brand))
    story.extend(_notes(view, styles))
    return story


def render_pdf(doc: InvoiceDocument) -> bytes:
    """
    Render a document to PDF bytes.

    Writes only to an in-memory buffer, so an abandoned export leaves nothing
    behind.
    """
    view = build_view(doc)
    buf = BytesIO()
    pdf = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=PAGE_MARGIN,
        rightMargin=PAGE_MARGIN,
        topMargin=PAGE_MARGIN,
        bottomMargin=PAGE_MARGIN,
        title=f"Invoice {doc.invoice_number}",
        author=view.business.name,
        subject="Invoice",
    )
    pdf.build(build_story(view))
    return buf.getvalue()
