"""The HTML preview and the exported PDF must show the same figures."""

import re
from html import unescape
from io import BytesIO

import pytest
from pdfminer.high_level import extract_text

from core.document_builder import build_document
from core.models import CurrencyCode, DiscountType, InvoiceSettings, LineItem
from core.rendering import build_view, render_html, render_pdf
from core.rendering.pdf import FONT_NAME, document_fonts

_ITEM = re.compile(
    r'<div class="paper-item-title">(.*?)</div>.*?'
    r'<div class="paper-item-qty">(.*?)</div>'
    r'<div class="paper-item-rate">(.*?)</div>.*?'
    r'<div class="paper-item-amount">(.*?)</div>',
    re.DOTALL,
)

_TOTAL_ROW = re.compile(
    r'data-row="(\w+)"><span class="paper-totals-label">(.*?)</span>'
    r'<span class="paper-totals-value"[^>]*>(.*?)</span>'
)

ITEMS = [
    LineItem(description="Workshop & follow-up", quantity="1.5", rate="1200"),
    LineItem(description="Hosting (monthly)", quantity=3, rate="19.99"),
]

SETTINGS = [
    pytest.param(InvoiceSettings(currency_code=CurrencyCode.USD), id="usd"),
    pytest.param(InvoiceSettings(tax_rate_percent=8.25, currency_code=CurrencyCode.EUR), id="eur-tax"),
    pytest.param(
        InvoiceSettings(discount_type=DiscountType.PERCENT, discount_value=15, currency_code=CurrencyCode.GBP),
        id="gbp-percent-discount",
    ),
    pytest.param(
        InvoiceSettings(tax_rate_percent=18, discount_type=DiscountType.PERCENT, discount_value=5,
                        currency_code=CurrencyCode.INR),
        id="inr",
    ),
    pytest.param(
        InvoiceSettings(tax_rate_percent=5, discount_type=DiscountType.FIXED, discount_value=1000,
                        currency_code=CurrencyCode.CAD),
        id="cad-fixed-discount",
    ),
]


def _html_items(html: str):
    return [tuple(unescape(part) for part in match) for match in _ITEM.findall(html)]


def _html_totals(html: str):
    return [(key, unescape(label), unescape(value)) for key, label, value in _TOTAL_ROW.findall(html)]


def _pdf_text(doc) -> str:
    return extract_text(BytesIO(render_pdf(doc)))


@pytest.fixture(autouse=True)
def unicode_font():
    if document_fonts()[0] != FONT_NAME:
        pytest.skip("DejaVu fonts not installed")


def test_every_currency_covered():
    covered = {param.values[0].currency_code for param in SETTINGS}
    assert covered == set(CurrencyCode)


@pytest.mark.parametrize("settings", SETTINGS)
def test_item_rows_agree(make_state, settings):
    doc = build_document(make_state(settings=settings, items=ITEMS))

    html_items = _html_items(render_html(doc))
    pdf_text = _pdf_text(doc)

    assert [item[0] for item in html_items] == ["Workshop & follow-up", "Hosting (monthly)"]
    for cells in html_items:
        for cell in cells:
            assert cell in pdf_text
    amounts = [pdf_text.index(cells[3]) for cells in html_items]
    assert amounts == sorted(amounts)


@pytest.mark.parametrize("settings", SETTINGS)
def test_totals_agree(make_state, settings):
    doc = build_document(make_state(settings=settings, items=ITEMS))
    view = build_view(doc)

    html_rows = _html_totals(render_html(doc))
    assert html_rows == [(row.key, row.label, row.value) for row in view.totals_rows]

    pdf_text = _pdf_text(doc)
    for _, label, value in html_rows:
        assert label in pdf_text
        assert value in pdf_text
