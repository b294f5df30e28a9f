"""Business Clock

Ledger rows carry human-facing date/time strings rendered in the business
timezone (dd/mm/yyyy, hh:mm AM/PM). Timestamps are stored as timezone-aware UTC.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo
from src.domain.base import as_utc, utc_now

DATE_FORMAT = "%d/%m/%Y"
TIME_FORMAT = "%I:%M %p"

# Rolling windows for time range presets; "today" starts at local midnight
TIME_RANGE_WINDOWS = {
    "7d": timedelta(days=7),
    "1m": timedelta(days=30),
    "1y": timedelta(days=365),
}
TIME_RANGES = ("all", "today", *TIME_RANGE_WINDOWS.keys())


class BusinessClock:
    def __init__(self, timezone_name: str = "Asia/Kolkata"):
        self.tz = ZoneInfo(timezone_name)

    def now(self) -> datetime:
        return utc_now()

    def local(self, moment: Optional[datetime] = None) -> datetime:
        moment = moment or self.now()
        return as_utc(moment).astimezone(self.tz)

    def date_str(self, moment: Optional[datetime] = None) -> str:
        return self.local(moment).strftime(DATE_FORMAT)

    def time_str(self, moment: Optional[datetime] = None) -> str:
        return self.local(moment).strftime(TIME_FORMAT)

    def year(self, moment: Optional[datetime] = None) -> int:
        return self.local(moment).year

    def range_start(self, time_range: str, moment: Optional[datetime] = None) -> Optional[datetime]:
        """
        UTC lower bound for a time range preset

        Args:
            time_range: all, today, 7d, 1m or 1y
            moment: Reference time (defaults to now)

        Returns:
            Inclusive start, or None for "all"

        Raises:
            ValueError: Unknown preset
        """
        moment = as_utc(moment or self.now())
        if time_range == "all":
            return None
        if time_range == "today":
            midnight = self.local(moment).replace(hour=0, minute=0, second=0, microsecond=0)
            return midnight.astimezone(timezone.utc)
        if time_range in TIME_RANGE_WINDOWS:
            return moment - TIME_RANGE_WINDOWS[time_range]
        raise ValueError(f"Unknown time range '{time_range}'")
