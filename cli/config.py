from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from settings import get_settings


@dataclass(frozen=True)
class CLIConfig:
    endpoint_url: str
    poll_interval_ms: int
    fetch_timeout: float


def load_config(
    endpoint_url: Optional[str] = None,
    poll_interval_ms: Optional[int] = None,
    fetch_timeout: Optional[float] = None,
) -> CLIConfig:
    """Layer command-line overrides on top of the environment settings."""
    settings = get_settings()
    if poll_interval_ms is None or poll_interval_ms <= 0:
        poll_interval_ms = settings.poll_interval_ms
    if fetch_timeout is None or fetch_timeout <= 0:
        fetch_timeout = settings.fetch_timeout
    return CLIConfig(
        endpoint_url=endpoint_url or settings.endpoint_url,
        poll_interval_ms=poll_interval_ms,
        fetch_timeout=fetch_timeout,
    )
