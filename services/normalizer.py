"""Conversion of raw wire records into validated readings."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping

from models.records import Reading
from services.errors import InvalidMeasurement, InvalidTimestamp, NormalizationError

logger = logging.getLogger(__name__)

# Fractional seconds followed by an optional UTC offset.
_FRACTION = re.compile(r"\.(\d+)(?=([+-]\d{2}:?\d{2})?$)")

# Wire field name -> Reading attribute.
MEASUREMENT_FIELDS = (
    ("temperature", "temperature"),
    ("humidity", "humidity"),
    ("gasVoltage", "gas_voltage"),
)


@dataclass(frozen=True)
class RejectedRecord:
    """A record dropped during normalization."""

    index: int
    reason: str


@dataclass
class NormalizationOutcome:
    readings: List[Reading] = field(default_factory=list)
    rejected: List[RejectedRecord] = field(default_factory=list)


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 value into an aware UTC datetime.

    Naive values are interpreted as UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            raise InvalidTimestamp(value)

        if candidate.endswith("Z"):
            candidate = candidate[:-1] + "+00:00"

        # fromisoformat on 3.10 only takes 3 or 6 fraction digits.
        candidate = _FRACTION.sub(lambda match: "." + match.group(1)[:6].ljust(6, "0"), candidate)

        try:
            parsed = datetime.fromisoformat(candidate)
        except ValueError as exc:
            raise InvalidTimestamp(value) from exc
    else:
        raise InvalidTimestamp(value)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed.astimezone(timezone.utc)


def parse_measurement(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise InvalidMeasurement(name, value)

    try:
        parsed = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError) as exc:
        raise InvalidMeasurement(name, value) from exc

    if not math.isfinite(parsed):
        raise InvalidMeasurement(name, value)
    return parsed


def normalize(raw: Any) -> Reading:
    """Build a :class:`Reading` from one wire record or raise a NormalizationError."""
    if not isinstance(raw, Mapping):
        raise NormalizationError("record is not an object")

    timestamp = parse_timestamp(raw.get("timestamp"))
    values = {
        attribute: parse_measurement(wire_name, raw.get(wire_name))
        for wire_name, attribute in MEASUREMENT_FIELDS
    }
    return Reading(timestamp=timestamp, **values)


def normalize_many(records: Iterable[Any]) -> NormalizationOutcome:
    """Normalize each record on its own, dropping the ones that fail."""
    outcome = NormalizationOutcome()
    for index, raw in enumerate(records):
        try:
            outcome.readings.append(normalize(raw))
        except NormalizationError as exc:
            outcome.rejected.append(RejectedRecord(index=index, reason=str(exc)))
            logger.warning(
                "Dropping telemetry record",
                extra={"record_index": index, "reason": str(exc)},
            )
    return outcome
