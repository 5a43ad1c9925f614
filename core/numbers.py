"""Permissive numeric parsing for form input."""

from decimal import Decimal, InvalidOperation

ZERO = Decimal(0)


def coerce_decimal(value) -> Decimal:
    """
    Parse user input into a non-negative Decimal.

    Form fields are free text, so this never raises: None, blanks, non-numeric
    text, NaN/Infinity and negative numbers all become 0. Floats go through
    str() so 0.1 stays 0.1 rather than its binary expansion.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        parsed = value
    else:
        text = str(value).strip()
        if not text:
            return ZERO
        try:
            parsed = Decimal(text)
        except (InvalidOperation, ValueError):
            return ZERO

    if not parsed.is_finite() or parsed < 0:
        return ZERO
    return parsed
