from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from services.errors import InvalidMeasurement, InvalidTimestamp, NormalizationError
from services.normalizer import normalize, normalize_many


def _record(**overrides):
    record = {
        "timestamp": "2024-05-01T12:00:00Z",
        "temperature": "21.5",
        "humidity": "40.2",
        "gasVoltage": "0.3",
    }
    record.update(overrides)
    return record


def test_normalize_parses_numeric_strings() -> None:
    reading = normalize(_record())

    assert reading.timestamp == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    assert reading.temperature == 21.5
    assert reading.humidity == 40.2
    assert reading.gas_voltage == 0.3


def test_normalize_accepts_plain_numbers_and_offsets() -> None:
    reading = normalize(
        _record(
            timestamp="2024-05-01T14:00:00+02:00",
            temperature=22,
            humidity=39.0,
            gasVoltage=" 1.25 ",
        )
    )

    assert reading.timestamp == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    assert reading.temperature == 22.0
    assert reading.gas_voltage == 1.25


def test_naive_timestamp_is_taken_as_utc() -> None:
    reading = normalize(_record(timestamp="2024-05-01T12:00:00"))

    assert reading.timestamp.utcoffset() == timedelta(0)
    assert reading.timestamp.hour == 12


@pytest.mark.parametrize("value", ["not-a-date", "", "   ", None, 1714564800, "2024-13-01T00:00:00Z"])
def test_invalid_timestamp(value) -> None:
    with pytest.raises(InvalidTimestamp):
        normalize(_record(timestamp=value))


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("temperature", "warm"),
        ("humidity", None),
        ("gasVoltage", "nan"),
        ("gasVoltage", "inf"),
        ("temperature", True),
        ("humidity", [40.0]),
    ],
)
def test_invalid_measurement_names_the_field(field: str, value) -> None:
    with pytest.raises(InvalidMeasurement) as excinfo:
        normalize(_record(**{field: value}))

    assert excinfo.value.field == field


def test_missing_measurement_field() -> None:
    record = _record()
    del record["gasVoltage"]

    with pytest.raises(InvalidMeasurement) as excinfo:
        normalize(record)

    assert excinfo.value.field == "gasVoltage"


def test_non_mapping_record_is_rejected() -> None:
    with pytest.raises(NormalizationError):
        normalize(["2024-05-01T12:00:00Z", 21.5, 40.2, 0.3])


def test_normalize_many_drops_bad_records_individually() -> None:
    records = [
        _record(),
        _record(timestamp="garbage"),
        "not an object",
        _record(timestamp="2024-05-01T11:50:00Z", humidity="n/a"),
        _record(timestamp="2024-05-01T11:40:00Z", gasVoltage="1.2"),
    ]

    outcome = normalize_many(records)

    assert [reading.gas_voltage for reading in outcome.readings] == [0.3, 1.2]
    assert [rejected.index for rejected in outcome.rejected] == [1, 2, 3]
    assert "humidity" in outcome.rejected[2].reason


def test_normalize_many_empty_payload() -> None:
    outcome = normalize_many([])

    assert outcome.readings == []
    assert outcome.rejected == []


@pytest.mark.parametrize(
    ("value", "expected_microsecond"),
    [
        ("2024-05-01T12:00:00.1234567Z", 123456),
        ("2024-05-01T12:00:00.12Z", 120000),
        ("2024-05-01T12:00:00.5+00:00", 500000),
        ("2024-05-01T12:00:00.123456", 123456),
    ],
)
def test_fractional_seconds_of_any_precision(value: str, expected_microsecond: int) -> None:
    reading = normalize(_record(timestamp=value))

    assert reading.timestamp.replace(microsecond=0) == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    assert reading.timestamp.microsecond == expected_microsecond


def test_normalize_many_keeps_high_precision_timestamps() -> None:
    outcome = normalize_many(
        [
            _record(timestamp="2024-05-01T12:00:00.1234567Z"),
            _record(timestamp="2024-05-01T11:59:00.12Z"),
        ]
    )

    assert outcome.rejected == []
    assert len(outcome.readings) == 2
