"""
Logo upload handling.

Logos travel as base64 data URIs. Only image data URIs produced by
logo_data_uri() are accepted, which is what allows renderers to place the
value in an <img src> without escaping.
"""

import base64
import binascii
import re

ALLOWED_LOGO_TYPES = {"image/png", "image/jpeg", "image/gif", "image/webp"}

MAX_LOGO_BYTES = 2 * 1024 * 1024

_DATA_URI = re.compile(r"^data:(image/(?:png|jpeg|gif|webp));base64,([A-Za-z0-9+/]*={0,2})$")


def logo_data_uri(content: bytes, content_type: str) -> str:
    """
    Encode an uploaded image as a data URI.

    Raises:
        ValueError: If the content type is not an allowed image type,
            or the file is empty or too large
    """
    content_type = (content_type or "").lower()
    if content_type == "image/jpg":
        content_type = "image/jpeg"
    if content_type not in ALLOWED_LOGO_TYPES:
        raise ValueError(f"Unsupported logo type '{content_type}'")
    if not content:
        raise ValueError("Logo file is empty")
    if len(content) > MAX_LOGO_BYTES:
        raise ValueError(f"Logo exceeds {MAX_LOGO_BYTES} bytes")

    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def validate_logo(value: str | None) -> str | None:
    """Return the data URI unchanged, None for blanks; ValueError otherwise."""
    if value is None or value == "":
        return None
    if not isinstance(value, str) or _DATA_URI.match(value) is None:
        raise ValueError("Logo must be a base64 image data URI")
    return value


def decode_logo(data_uri: str) -> bytes:
    """
    Raw image bytes of a logo data URI.

    Raises ValueError if the URI is malformed or the payload is not base64.
    """
    match = _DATA_URI.match(data_uri or "")
    if match is None:
        raise ValueError("Logo must be a base64 image data URI")
    try:
        return base64.b64decode(match.group(2), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Logo payload is not valid base64: {e}")
