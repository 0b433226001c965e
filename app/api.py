"""HTTP route definitions for the service."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from app.schemas import EngineStatus, ReadingOrder, ReadingOut, ReadingsResponse
from services.engine import TelemetryEngine
from services.windows import TimeRange, chronological

router = APIRouter()


def get_engine(request: Request) -> TelemetryEngine:
    return request.app.state.engine


def _engine_status(engine: TelemetryEngine) -> EngineStatus:
    poll_status = engine.status
    return EngineStatus(
        loading=poll_status.loading,
        error=poll_status.error,
        running=engine.running,
        last_attempt_at=poll_status.last_attempt_at,
        last_success_at=poll_status.last_success_at,
        cycle_count=poll_status.cycle_count,
        dropped_count=poll_status.dropped_count,
        reading_count=len(engine.series()),
    )


@router.get(
    "/readings",
    response_model=ReadingsResponse,
    summary="Readings inside a time window, newest first by default.",
)
async def list_readings(
    time_range: TimeRange = Query(TimeRange.last_hour, alias="range"),
    order: ReadingOrder = Query(ReadingOrder.newest),
    engine: TelemetryEngine = Depends(get_engine),
) -> ReadingsResponse:
    readings = engine.window(time_range)
    if order is ReadingOrder.oldest:
        readings = chronological(readings)
    return ReadingsResponse(
        range=time_range,
        order=order,
        count=len(readings),
        readings=[ReadingOut.from_reading(reading) for reading in readings],
    )


@router.get(
    "/readings/latest",
    response_model=ReadingOut,
    summary="Most recent reading with its gas status.",
)
async def latest_reading(
    engine: TelemetryEngine = Depends(get_engine),
) -> ReadingOut:
    reading = engine.latest()
    if reading is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No readings available yet.",
        )
    return ReadingOut.from_reading(reading)


@router.get(
    "/status",
    response_model=EngineStatus,
    summary="Loading and error state of the poller.",
)
async def engine_status(
    engine: TelemetryEngine = Depends(get_engine),
) -> EngineStatus:
    return _engine_status(engine)


@router.post(
    "/refresh",
    response_model=EngineStatus,
    summary="Run a poll cycle immediately.",
)
async def refresh(
    engine: TelemetryEngine = Depends(get_engine),
) -> EngineStatus:
    await engine.refresh()
    return _engine_status(engine)


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
