from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


DEFAULT_ENDPOINT_URL = "https://esp32-room-sensor.azurewebsites.net/api/sensor"
DEFAULT_POLL_INTERVAL_MS = 30000
DEFAULT_FETCH_TIMEOUT = 10.0

_ENDPOINT_URL_ENV = "TELEMETRY_ENDPOINT_URL"
_POLL_INTERVAL_ENV = "TELEMETRY_POLL_INTERVAL_MS"
_FETCH_TIMEOUT_ENV = "TELEMETRY_FETCH_TIMEOUT"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    endpoint_url: str
    poll_interval_ms: int
    fetch_timeout: float
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_poll_interval(default: int) -> int:
    value = os.getenv(_POLL_INTERVAL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_fetch_timeout(default: float) -> float:
    value = os.getenv(_FETCH_TIMEOUT_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        endpoint_url=_read_str_env(_ENDPOINT_URL_ENV, DEFAULT_ENDPOINT_URL),
        poll_interval_ms=_read_poll_interval(DEFAULT_POLL_INTERVAL_MS),
        fetch_timeout=_read_fetch_timeout(DEFAULT_FETCH_TIMEOUT),
        log_level=_read_log_level("INFO"),
    )
