"""Time-bounded views over a reading series."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, Iterable, List

from models.records import Reading


class TimeRange(str, Enum):
    """Display windows offered to consumers."""

    last_hour = "hour"
    last_day = "day"
    last_month = "month"
    all = "all"



# A month is a fixed 30 days, not a calendar month.
WINDOW_SPANS: Dict[TimeRange, timedelta] = {
    TimeRange.last_hour: timedelta(hours=1),
    TimeRange.last_day: timedelta(hours=24),
    TimeRange.last_month: timedelta(days=30),
}


def select(series: Iterable[Reading], time_range: TimeRange, now: datetime) -> List[Reading]:
    """Return the readings of ``series`` inside ``time_range``, order preserved.

    The lower bound ``now - span`` is inclusive. ``now`` must be supplied by
    the caller; a naive value is taken as UTC.
    """
    span = WINDOW_SPANS.get(time_range)
    if span is None:
        return list(series)

    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    cutoff = now - span
    return [reading for reading in series if reading.timestamp >= cutoff]


def chronological(readings: Iterable[Reading]) -> List[Reading]:
    """Oldest-first copy of a newest-first sequence."""
    return list(reversed(list(readings)))
