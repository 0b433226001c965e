from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from app.api import router
from logging_config import configure_logging
from services.engine import TelemetryEngine, build_default_engine


def create_app(engine: Optional[TelemetryEngine] = None) -> FastAPI:
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        telemetry = engine if engine is not None else build_default_engine()
        app.state.engine = telemetry
        telemetry.start()
        try:
            yield
        finally:
            await telemetry.aclose()
            if engine is None:
                build_default_engine.cache_clear()

    app = FastAPI(
        title="Room Sensor Telemetry",
        description="Polls the room sensor endpoint and serves windowed readings.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    return app


app = create_app()
