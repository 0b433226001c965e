"""HTTP access to the remote sensor endpoint."""

from __future__ import annotations

import json
import logging
from typing import Any, List, Optional, Protocol

import httpx

from services.errors import HttpStatus, MalformedJson, NetworkFailure

logger = logging.getLogger(__name__)


class TelemetrySource(Protocol):
    async def fetch(self) -> List[Any]:
        ...


class HttpTelemetrySource:
    """Fetches the full reading history from the sensor API."""

    def __init__(
        self,
        endpoint_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.endpoint_url = endpoint_url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def fetch(self) -> List[Any]:
        try:
            response = await self._client.get(self.endpoint_url)
        except httpx.RequestError as exc:
            logger.warning(
                "Telemetry request failed",
                extra={"endpoint": self.endpoint_url, "reason": str(exc)},
            )
            raise NetworkFailure(str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            logger.warning(
                "Telemetry endpoint returned an error status",
                extra={"endpoint": self.endpoint_url, "status_code": response.status_code},
            )
            raise HttpStatus(response.status_code)

        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise MalformedJson(f"response is not valid JSON: {exc}") from exc

        if not isinstance(payload, list):
            raise MalformedJson(
                f"expected a JSON array of readings, got {type(payload).__name__}"
            )
        return payload

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpTelemetrySource":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
