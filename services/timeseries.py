"""In-memory, newest-first series of readings."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, Optional, Tuple

from models.records import Reading


class TimeSeriesStore:
    """Holds the deduplicated readings of the last successful poll.

    The upstream source always returns its full history, so the store is only
    ever replaced wholesale.
    """

    def __init__(self) -> None:
        self._readings: Tuple[Reading, ...] = ()
        self._revision = 0

    @property
    def revision(self) -> int:
        return self._revision

    def replace_all(self, readings: Iterable[Reading]) -> None:
        by_timestamp: Dict[datetime, Reading] = {}
        for reading in readings:
            # Later duplicates overwrite earlier ones.
            by_timestamp[reading.timestamp] = reading
        self._readings = tuple(
            sorted(by_timestamp.values(), key=lambda item: item.timestamp, reverse=True)
        )
        self._revision += 1

    def latest(self) -> Optional[Reading]:
        if not self._readings:
            return None
        return self._readings[0]

    def all(self) -> Tuple[Reading, ...]:
        return self._readings

    def __len__(self) -> int:
        return len(self._readings)
