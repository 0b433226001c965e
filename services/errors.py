"""Exception hierarchy for the telemetry engine."""

from __future__ import annotations


class TelemetryError(Exception):
    """Base class for all telemetry engine errors."""


class NormalizationError(TelemetryError):
    """A raw record could not be turned into a reading."""


class InvalidTimestamp(NormalizationError):
    def __init__(self, value: object) -> None:
        super().__init__(f"invalid timestamp: {value!r}")
        self.value = value


class InvalidMeasurement(NormalizationError):
    def __init__(self, field: str, value: object) -> None:
        super().__init__(f"invalid measurement {field}: {value!r}")
        self.field = field
        self.value = value


class FetchError(TelemetryError):
    """The remote source could not be reached or refused the request."""


class NetworkFailure(FetchError):
    pass


class HttpStatus(FetchError):
    def __init__(self, status_code: int) -> None:
        super().__init__(f"HTTP error! Status: {status_code}")
        self.status_code = status_code


class PayloadError(TelemetryError):
    """The remote source answered with a body that is not usable."""


class MalformedJson(PayloadError):
    pass
