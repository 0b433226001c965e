"""Owned telemetry engine wiring the source, store and poller together."""

from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from typing import List, Optional, Tuple

from models.records import Reading
from services.poller import Listener, PollStatus, TelemetryPoller
from services.source import HttpTelemetrySource, TelemetrySource
from services.status import GasStatus, classify
from services.timeseries import TimeSeriesStore
from services.windows import TimeRange, select
from settings import DEFAULT_POLL_INTERVAL_MS, get_settings


class TelemetryEngine:
    """Single entry point the views talk to.

    Holds the time series and the poll status for one remote source; callers
    own the instance and drive its lifecycle with ``start``/``stop``.
    """

    def __init__(
        self,
        source: TelemetrySource,
        store: Optional[TimeSeriesStore] = None,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        fetch_timeout: Optional[float] = None,
    ) -> None:
        self.source = source
        self.store = store if store is not None else TimeSeriesStore()
        self.poll_interval_ms = poll_interval_ms
        self.poller = TelemetryPoller(source, self.store, fetch_timeout=fetch_timeout)

    @property
    def status(self) -> PollStatus:
        return self.poller.status

    @property
    def running(self) -> bool:
        return self.poller.running

    def start(self) -> None:
        self.poller.start(self.poll_interval_ms)

    async def stop(self) -> None:
        await self.poller.stop()

    async def refresh(self) -> PollStatus:
        return await self.poller.refresh()

    def add_listener(self, listener: Listener) -> None:
        self.poller.add_listener(listener)

    def remove_listener(self, listener: Listener) -> None:
        self.poller.remove_listener(listener)

    def series(self) -> Tuple[Reading, ...]:
        return self.store.all()

    def latest(self) -> Optional[Reading]:
        return self.store.latest()

    def window(self, time_range: TimeRange, now: Optional[datetime] = None) -> List[Reading]:
        if now is None:
            now = datetime.now(timezone.utc)
        return select(self.store.all(), time_range, now)

    @staticmethod
    def classify(reading: Reading) -> GasStatus:
        return classify(reading.gas_voltage)

    async def aclose(self) -> None:
        """Stop polling and release the source's HTTP resources."""
        await self.stop()
        close = getattr(self.source, "aclose", None)
        if close is not None:
            await close()


@lru_cache
def build_default_engine() -> TelemetryEngine:
    """Factory that wires the engine to the configured HTTP endpoint."""
    settings = get_settings()
    source = HttpTelemetrySource(settings.endpoint_url, timeout=settings.fetch_timeout)
    return TelemetryEngine(
        source=source,
        poll_interval_ms=settings.poll_interval_ms,
        fetch_timeout=settings.fetch_timeout,
    )
