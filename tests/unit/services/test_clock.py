"""Unit tests for BusinessClock"""

from datetime import datetime, timedelta, timezone

import pytest

from src.app.services.clock import BusinessClock
from src.domain.base import as_utc, utc_now


@pytest.fixture
def clock():
    return BusinessClock("Asia/Kolkata")


class TestUtcTimestamps:
    def test_utc_now_is_timezone_aware(self):
        assert utc_now().utcoffset() == timedelta(0)

    def test_naive_values_are_read_as_utc(self):
        assert as_utc(datetime(2025, 3, 1, 10, 0)) == datetime(2025, 3, 1, 10, 0, tzinfo=timezone.utc)

    def test_offset_values_are_converted(self, clock):
        ist_moment = datetime(2025, 3, 1, 15, 30, tzinfo=clock.tz)

        assert as_utc(ist_moment) == datetime(2025, 3, 1, 10, 0, tzinfo=timezone.utc)
        assert as_utc(ist_moment).tzinfo is timezone.utc

    def test_clock_now_is_timezone_aware(self, clock):
        assert clock.now().tzinfo is not None


class TestBusinessClockFormatting:
    def test_date_and_time_rendered_in_business_timezone(self, clock):
        moment = datetime(2025, 3, 1, 10, 0, tzinfo=timezone.utc)  # 15:30 IST

        assert clock.date_str(moment) == "01/03/2025"
        assert clock.time_str(moment) == "03:30 PM"

    def test_naive_moment_formats_as_utc(self, clock):
        assert clock.time_str(datetime(2025, 3, 1, 10, 0)) == "03:30 PM"

    def test_year_follows_business_timezone(self, clock):
        # 2025-12-31 18:45 UTC is already 2026 in IST
        moment = datetime(2025, 12, 31, 18, 45, tzinfo=timezone.utc)

        assert clock.year(moment) == 2026
        assert clock.date_str(moment) == "01/01/2026"
        assert clock.time_str(moment) == "12:15 AM"


class TestTimeRangeStart:
    def test_all_has_no_lower_bound(self, clock):
        assert clock.range_start("all") is None

    def test_today_starts_at_business_midnight(self, clock):
        moment = datetime(2025, 6, 10, 12, 0, tzinfo=timezone.utc)  # 17:30 IST

        assert clock.range_start("today", moment) == datetime(2025, 6, 9, 18, 30, tzinfo=timezone.utc)

    @pytest.mark.parametrize("preset,days", [("7d", 7), ("1m", 30), ("1y", 365)])
    def test_rolling_windows(self, clock, preset, days):
        moment = datetime(2025, 6, 10, 12, 0, tzinfo=timezone.utc)

        start = clock.range_start(preset, moment)

        assert start == moment - timedelta(days=days)
        assert start.tzinfo is not None

    def test_unknown_preset_raises(self, clock):
        with pytest.raises(ValueError):
            clock.range_start("2w")
