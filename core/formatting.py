"""
Money, quantity and date formatting shared by every renderer.

Sign convention: format_currency() always formats the absolute value and never
emits a sign. Callers that need a minus (discount rows, a negative amount due)
prepend "-" themselves.
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "CAD": "$",
}

DEFAULT_CURRENCY_SYMBOL = "$"

_CENT = Decimal("0.01")

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_DISPLAY_DATE = re.compile(r"^\s*([A-Za-z]{3})[a-z]*\.?\s+(\d{1,2}),\s*(\d{4})\s*$")

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")


def _quantize(value: Decimal, exp: Decimal) -> Decimal:
    """quantize() with enough precision for every digit the result keeps."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() - exp.as_tuple().exponent + 2)
        return value.quantize(exp, rounding=ROUND_HALF_UP)


def currency_symbol(code) -> str:
    """Display symbol for a currency code; unknown codes fall back to '$'."""
    key = getattr(code, "value", code)
    return CURRENCY_SYMBOLS.get(str(key).upper() if key else "", DEFAULT_CURRENCY_SYMBOL)


def format_currency(amount, code="USD") -> str:
    """
    Format an amount as '<symbol><#,###.##>'.

    Args:
        amount: Decimal, int, float or numeric string
        code: Currency code (str or CurrencyCode)

    Returns:
        e.g. "$1,234.56". The absolute value is used; see module docstring.
    """
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        value = Decimal(0)
    if not value.is_finite():
        value = Decimal(0)

    value = _quantize(abs(value), _CENT)
    return f"{currency_symbol(code)}{value:,.2f}"


def format_quantity(quantity) -> str:
    """Quantity without trailing zeros: 2 -> '2', 1.50 -> '1.5'."""
    value = Decimal(str(quantity))
    if value == value.to_integral_value():
        return str(_quantize(value, Decimal(1)))
    return format(value.normalize(), "f")


def format_date(value: date | str | None) -> str:
    """
    Display form of a calendar date: 'Jan 5, 2026'.

    Accepts a date or an ISO 'YYYY-MM-DD' string. Empty input gives ''.
    """
    if not value:
        return ""
    if isinstance(value, str):
        value = date.fromisoformat(value.strip())
    return f"{_MONTHS[value.month - 1]} {value.day}, {value.year}"


def parse_date_to_input(display: str | None) -> str:
    """
    Recover the canonical 'YYYY-MM-DD' value from a display date.

    'Jan 5, 2026' -> '2026-01-05'. ISO strings pass through unchanged.
    Anything unparseable gives ''.
    """
    if not display:
        return ""

    text = display.strip()
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError:
        pass

    match = _DISPLAY_DATE.match(text)
    if match is None:
        return ""

    month_name, day, year = match.groups()
    month_name = month_name.capitalize()
    if month_name not in _MONTHS:
        return ""

    try:
        parsed = date(int(year), _MONTHS.index(month_name) + 1, int(day))
    except ValueError:
        return ""
    return parsed.isoformat()


def normalize_hex_color(value: str) -> str:
    """
    Normalize '#abc' / 'AABBCC' to '#aabbcc'.

    Raises ValueError if the value is not a hex colour.
    """
    match = _HEX_COLOR.match((value or "").strip())
    if match is None:
        raise ValueError(f"Invalid hex colour: {value!r}")
    digits = match.group(1).lower()
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return f"#{digits}"


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    """'#3b82f6' -> (59, 130, 246). Invalid colours give black."""
    try:
        digits = normalize_hex_color(value)[1:]
    except ValueError:
        return (0, 0, 0)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))
