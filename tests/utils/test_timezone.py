"""Tests for time helpers."""

from datetime import date, timezone

import pytest

from utils.timezone import now_utc, parse_iso, today_in


class TestTimezone:

    def test_now_is_utc(self):
        assert now_utc().tzinfo == timezone.utc

    def test_today_defaults_to_utc(self):
        assert today_in() == now_utc().date()

    def test_today_in_zone(self):
        assert isinstance(today_in("Asia/Kolkata"), date)

    def test_unknown_zone(self):
        with pytest.raises(ValueError, match="Unknown timezone"):
            today_in("Mars/Olympus_Mons")

    def test_parse_iso_converts_to_utc(self):
        parsed = parse_iso("2026-01-05T12:00:00+05:30")

        assert parsed.tzinfo == timezone.utc
        assert parsed.hour == 6 and parsed.minute == 30

    def test_parse_iso_rejects_naive(self):
        with pytest.raises(ValueError, match="naive"):
            parse_iso("2026-01-05T12:00:00")
