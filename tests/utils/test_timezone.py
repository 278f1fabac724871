"""Tests for utils/timezone.py - UTC-only time handling for promo windows."""

from datetime import datetime, timedelta, timezone

import pytest

from utils.timezone import now_utc, to_utc


class TestNowUtc:

    def test_is_aware_utc(self):
        result = now_utc()
        assert result.tzinfo == timezone.utc


class TestToUtc:

    def test_raises_on_naive(self):
        """A promo window without an offset cannot be compared."""
        with pytest.raises(ValueError, match="naive"):
            to_utc(datetime(2026, 1, 1, 12, 0, 0))

    def test_converts_jakarta_time(self):
        """Jakarta is UTC+7: 07:00 local is midnight UTC."""
        wib = timezone(timedelta(hours=7))
        result = to_utc(datetime(2026, 1, 1, 7, 0, 0, tzinfo=wib))
        assert result == datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
        assert result.tzinfo == timezone.utc

    def test_utc_passes_through(self):
        utc_time = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        assert to_utc(utc_time) == utc_time
