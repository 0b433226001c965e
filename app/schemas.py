"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.records import Reading
from services.status import GasStatus, classify
from services.windows import TimeRange


class ReadingOrder(str, Enum):
    """Ordering of readings in list responses."""

    newest = "newest"
    oldest = "oldest"


class ReadingOut(BaseModel):
    """A reading together with its derived gas status."""

    model_config = ConfigDict(populate_by_name=True)

    timestamp: datetime
    temperature: float = Field(..., description="Temperature in degrees Celsius.")
    humidity: float = Field(..., description="Relative humidity in percent.")
    gas_voltage: float = Field(..., alias="gasVoltage", description="Gas sensor output in volts.")
    status: GasStatus

    @classmethod
    def from_reading(cls, reading: Reading) -> "ReadingOut":
        return cls(
            timestamp=reading.timestamp,
            temperature=reading.temperature,
            humidity=reading.humidity,
            gas_voltage=reading.gas_voltage,
            status=classify(reading.gas_voltage),
        )


class ReadingsResponse(BaseModel):
    """Readings inside the requested time window."""

    range: TimeRange
    order: ReadingOrder
    count: int = Field(..., ge=0)
    readings: List[ReadingOut] = Field(default_factory=list)


class EngineStatus(BaseModel):
    """Poller state as seen by consumers."""

    loading: bool
    error: Optional[str] = None
    running: bool
    last_attempt_at: Optional[datetime] = None
    last_success_at: Optional[datetime] = None
    cycle_count: int = Field(..., ge=0)
    dropped_count: int = Field(..., ge=0)
    reading_count: int = Field(..., ge=0)
