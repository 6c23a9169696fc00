"""
Common Value Objects

Value objects used across multiple domains:
- TimeWindow: A booking period between two inclusive instants
- GeoPoint: A latitude/longitude pair in decimal degrees
"""

from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo

from shared.domain.base import ValueObject


@dataclass(frozen=True)
class TimeWindow(ValueObject):
    """
    Time window value object

    Represents a period from start (inclusive) to end (inclusive).
    A zero-length window (start == end) is allowed.
    Used for booking periods and availability checks.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Window start ({self.start}) must not be after its end ({self.end})")

    @classmethod
    def for_day(cls, day: date, tz: tzinfo | None = None) -> 'TimeWindow':
        """Whole-day window from 00:00 to 23:59:59.999999"""
        return cls(
            datetime.combine(day, time.min, tzinfo=tz),
            datetime.combine(day, time.max, tzinfo=tz),
        )

    @classmethod
    def for_days(cls, first_day: date, last_day: date, tz: tzinfo | None = None) -> 'TimeWindow':
        """Window covering every day from first_day to last_day"""
        return cls(
            datetime.combine(first_day, time.min, tzinfo=tz),
            datetime.combine(last_day, time.max, tzinfo=tz),
        )

    def overlaps_with(self, other: 'TimeWindow') -> bool:
        """
        Check if this window overlaps with another

        Touching windows do not overlap: a window ending exactly when
        another starts leaves both free.

        Examples:
            - [10:00, 12:00] overlaps with [11:00, 13:00] -> True
            - [10:00, 12:00] overlaps with [12:00, 14:00] -> False (touching)
        """
        if not isinstance(other, TimeWindow):
            raise TypeError("Can only check overlap with another TimeWindow")

        # Overlap formula: start1 < end2 AND end1 > start2
        return self.start < other.end and self.end > other.start

    @property
    def duration_days(self) -> int:
        """Number of started 24h periods, at least one"""
        seconds = (self.end - self.start).total_seconds()
        full_days, remainder = divmod(seconds, 86400)
        return max(1, int(full_days) + (1 if remainder else 0))

    def __str__(self):
        return f"{self.start.isoformat()} - {self.end.isoformat()}"

    def __repr__(self):
        return f"TimeWindow({self.start!r}, {self.end!r})"


@dataclass(frozen=True)
class GeoPoint(ValueObject):
    """Latitude/longitude in decimal degrees (no range validation)"""
    lat: float
    lng: float

    def __str__(self):
        return f"{self.lat:.5f},{self.lng:.5f}"
