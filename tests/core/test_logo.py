"""Tests for logo data URI handling."""

import base64

import pytest

from core.logo import MAX_LOGO_BYTES, decode_logo, logo_data_uri, validate_logo


class TestLogoDataUri:

    def test_encodes_image(self):
        uri = logo_data_uri(b"\x89PNG", "image/png")
        assert uri == "data:image/png;base64," + base64.b64encode(b"\x89PNG").decode()

    def test_normalizes_jpg(self):
        assert logo_data_uri(b"\xff\xd8", "image/jpg").startswith("data:image/jpeg;base64,")

    def test_rejects_other_types(self):
        with pytest.raises(ValueError, match="Unsupported logo type"):
            logo_data_uri(b"<svg/>", "image/svg+xml")

    def test_rejects_empty_and_oversized(self):
        with pytest.raises(ValueError, match="empty"):
            logo_data_uri(b"", "image/png")
        with pytest.raises(ValueError, match="exceeds"):
            logo_data_uri(b"0" * (MAX_LOGO_BYTES + 1), "image/png")


class TestValidateAndDecode:

    def test_validate_accepts_encoded_logo(self, png_logo):
        assert validate_logo(png_logo) == png_logo

    @pytest.mark.parametrize("value", [
        'data:image/png;base64,AAAA" onerror="alert(1)',
        "https://example.test/logo.png",
        "data:image/svg+xml;base64,PHN2Zz4=",
    ])
    def test_validate_rejects_anything_else(self, value):
        with pytest.raises(ValueError):
            validate_logo(value)

    def test_decode_round_trip(self):
        assert decode_logo(logo_data_uri(b"abc", "image/gif")) == b"abc"

    def test_decode_rejects_bad_padding(self):
        with pytest.raises(ValueError, match="base64"):
            decode_logo("data:image/png;base64,abc")
