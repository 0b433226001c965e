"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Reading:
    """A single normalized telemetry sample from the room sensor."""

    timestamp: datetime
    temperature: float
    humidity: float
    gas_voltage: float
