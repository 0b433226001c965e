"""Periodic synchronization of the time series with the remote source."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from models.records import Reading
from services.errors import FetchError, NetworkFailure, PayloadError
from services.normalizer import normalize_many
from services.source import TelemetrySource
from services.timeseries import TimeSeriesStore

logger = logging.getLogger(__name__)


@dataclass
class PollStatus:
    """Observable state of the poller consumed by the views."""

    loading: bool = False
    error: Optional[str] = None
    last_attempt_at: Optional[datetime] = None
    last_success_at: Optional[datetime] = None
    cycle_count: int = 0
    dropped_count: int = 0


Listener = Callable[[PollStatus, Optional[Reading]], None]


class TelemetryPoller:
    """Runs fetch-normalize-store cycles on a fixed cadence.

    Cycles are serialized: the scheduled loop and on-demand refreshes share a
    lock, so a tick that comes due while a cycle is running waits for it
    instead of racing it into the store.
    """

    def __init__(
        self,
        source: TelemetrySource,
        store: TimeSeriesStore,
        fetch_timeout: Optional[float] = None,
    ) -> None:
        self.source = source
        self.store = store
        self.fetch_timeout = fetch_timeout
        self._status = PollStatus()
        self._listeners: List[Listener] = []
        self._cycle_lock = asyncio.Lock()
        self._task: Optional[asyncio.Task[None]] = None
        self._stop_event: Optional[asyncio.Event] = None

    @property
    def status(self) -> PollStatus:
        return replace(self._status)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def start(self, interval_ms: int) -> asyncio.Task[None]:
        """Schedule a cycle now and then every ``interval_ms`` milliseconds."""
        if interval_ms <= 0:
            raise ValueError("Poll interval must be a positive number of milliseconds.")
        if self.running:
            raise RuntimeError("Poller is already running.")

        self._stop_event = asyncio.Event()
        self._task = asyncio.get_running_loop().create_task(
            self._run(interval_ms / 1000.0, self._stop_event),
            name="telemetry-poller",
        )
        return self._task

    async def stop(self) -> None:
        """Cancel future ticks and wait for an in-flight cycle to finish."""
        task = self._task
        if task is None:
            return
        self._task = None
        if self._stop_event is not None:
            self._stop_event.set()
        await task

    async def refresh(self) -> PollStatus:
        """Run one cycle, queued behind any cycle already in flight."""
        async with self._cycle_lock:
            await self._cycle()
        return self.status

    async def _run(self, interval: float, stop_event: asyncio.Event) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        while not stop_event.is_set():
            try:
                await self.refresh()
            except Exception:
                logger.exception("Unexpected failure during telemetry poll cycle")

            next_tick += interval
            delay = next_tick - loop.time()
            if delay <= 0:
                # Overran the slot: the queued tick fires now, missed ones collapse.
                next_tick = loop.time()
                await asyncio.sleep(0)
                continue
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=delay)
            except asyncio.TimeoutError:
                pass

    async def _fetch(self) -> Any:
        if self.fetch_timeout is None:
            return await self.source.fetch()
        try:
            return await asyncio.wait_for(self.source.fetch(), timeout=self.fetch_timeout)
        except asyncio.TimeoutError as exc:
            raise NetworkFailure(f"request timed out after {self.fetch_timeout}s") from exc

    async def _cycle(self) -> None:
        started = time.perf_counter()
        self._status.loading = True
        self._status.last_attempt_at = datetime.now(timezone.utc)
        try:
            payload = await self._fetch()
            outcome = normalize_many(payload)
        except (FetchError, PayloadError) as exc:
            self._status.error = f"Error fetching sensor data: {exc}"
            logger.error("Telemetry poll cycle failed", extra={"reason": str(exc)})
        except Exception as exc:
            self._status.error = f"Error fetching sensor data: {exc}"
            raise
        else:
            self.store.replace_all(outcome.readings)
            self._status.error = None
            self._status.last_success_at = datetime.now(timezone.utc)
            self._status.dropped_count = len(outcome.rejected)
            logger.info(
                "Telemetry poll cycle complete",
                extra={
                    "reading_count": len(self.store),
                    "dropped_count": len(outcome.rejected),
                    "cycle_ms": int((time.perf_counter() - started) * 1000),
                },
            )
        finally:
            self._status.loading = False
            self._status.cycle_count += 1
            self._notify()

    def _notify(self) -> None:
        status = self.status
        latest = self.store.latest()
        for listener in list(self._listeners):
            try:
                listener(status, latest)
            except Exception:
                logger.exception("Telemetry listener raised")
