"""Tests for the PDF renderer."""

import logging
from decimal import Decimal
from io import BytesIO

import pytest
from pdfminer.high_level import extract_pages, extract_text

from core.document_builder import build_document
from core.models import CurrencyCode, DiscountType, InvoiceSettings, LineItem, PartyInfo
from core.rendering.pdf import FONT_NAME, document_fonts, export_filename, render_pdf


def _text(pdf: bytes) -> str:
    return extract_text(BytesIO(pdf))


class TestRenderPdf:

    def test_produces_pdf(self, state):
        pdf = render_pdf(build_document(state))
        assert pdf.startswith(b"%PDF")

    def test_contains_invoice_content(self, state):
        text = _text(render_pdf(build_document(state)))

        for expected in ("INVOICE", "INV-0042", "Acme Consulting", "Globex", "BILL TO",
                         "Design", "Consultant: Ada", "$100.00", "Subtotal", "$125.00",
                         "Tax (10%)", "$12.50", "$137.50", "Jan 5, 2026",
                         "Thank you for your business!"):
            assert expected in text

    def test_conditional_rows_match_preview(self, make_state):
        settings = InvoiceSettings(discount_type=DiscountType.FIXED, discount_value=5)
        text = _text(render_pdf(build_document(make_state(settings=settings))))

        assert "Discount" in text
        assert "-$5.00" in text
        assert "Tax" not in text

    def test_user_markup_is_literal(self, make_state):
        state = make_state(client=PartyInfo(name="Smith & <Sons>"))
        text = _text(render_pdf(build_document(state)))
        assert "Smith & <Sons>" in text

    def test_many_items_span_pages_with_repeated_header(self, make_state):
        items = [LineItem(description=f"Task {i}", quantity=1, rate=10) for i in range(80)]
        pdf = render_pdf(build_document(make_state(items=items)))

        pages = list(extract_pages(BytesIO(pdf)))
        assert len(pages) >= 2

        text = _text(pdf)
        assert "Task 79" in text
        assert text.count("Rate") == len(pages)

    def test_logo_embedded(self, make_state, png_logo):
        state = make_state(business=PartyInfo(name="Acme", logo=png_logo))
        assert render_pdf(build_document(state)).startswith(b"%PDF")

    def test_undecodable_logo_logged_and_skipped(self, make_state, caplog):
        state = make_state(business=PartyInfo(name="Acme", logo="data:image/png;base64,AAAA"))

        with caplog.at_level(logging.WARNING, logger="core.rendering.pdf"):
            pdf = render_pdf(build_document(state))

        assert "Acme" in _text(pdf)
        assert "Skipping undecodable logo" in caplog.text


class TestExportFilename:

    def test_uses_invoice_number(self, state):
        assert export_filename(build_document(state)) == "Invoice-INV-0042.pdf"

    def test_strips_path_characters(self, make_state):
        doc = build_document(make_state(invoice_number='A/B:"C"'))
        assert export_filename(doc) == "Invoice-ABC.pdf"

    def test_strips_control_characters(self, make_state):
        doc = build_document(make_state(invoice_number="INV-\r\n42\x00"))
        assert export_filename(doc) == "Invoice-INV-42.pdf"

    def test_keeps_non_ascii_characters(self, make_state):
        doc = build_document(make_state(invoice_number="INV-№42"))
        assert export_filename(doc) == "Invoice-INV-№42.pdf"


class TestDocumentFonts:

    def test_unicode_font_registered(self):
        regular, bold = document_fonts()
        if regular != FONT_NAME:
            pytest.skip("DejaVu fonts not installed")
        assert bold == f"{FONT_NAME}-Bold"

    def test_rupee_sign_survives_export(self, make_state):
        """Helvetica has no rupee glyph; the TTF font must carry it through."""
        if document_fonts()[0] != FONT_NAME:
            pytest.skip("DejaVu fonts not installed")
        state = make_state(
            settings=InvoiceSettings(tax_rate_percent=Decimal("10"), currency_code=CurrencyCode.INR),
        )

        text = _text(render_pdf(build_document(state)))

        assert "₹137.50" in text
        assert "₹50.00" in text
