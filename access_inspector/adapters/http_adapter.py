from __future__ import annotations

import os
from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger

from access_inspector.adapters.base import ScanSourceError

SCAN_SERVICE_URL = os.getenv("SCAN_SERVICE_URL", "http://scan-service:8080/api")
SCAN_TIMEOUT_SECONDS = float(os.getenv("SCAN_TIMEOUT_SECONDS", "10"))


def _decode_error_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        text = response.text.strip()
        return {"message": text} if text else None


class HttpScanAdapter:
    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = (base_url or SCAN_SERVICE_URL).rstrip("/")
        self._timeout_seconds = timeout_seconds if timeout_seconds is not None else SCAN_TIMEOUT_SECONDS
        self._client = client

    def build_url(self, record_id: str) -> str:
        return f"{self._base_url}/records/{quote(record_id, safe='')}/access"

    async def _get(self, url: str, params: dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, params=params)
        async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
            return await client.get(url, params=params)

    async def fetch_record_access(self, record_id: str, access_type: str) -> dict[str, Any]:
        url = self.build_url(record_id)
        try:
            response = await self._get(url, {"accessType": access_type})
        except httpx.HTTPError as exc:
            raise ScanSourceError(f"scan service unreachable: {exc}") from exc

        if response.status_code >= 400:
            logger.warning(
                "scan service returned {} for record={} access_type={}",
                response.status_code,
                record_id,
                access_type,
            )
            raise ScanSourceError(
                f"scan service returned {response.status_code}",
                body=_decode_error_body(response),
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ScanSourceError("scan service returned invalid JSON") from exc
        if not isinstance(payload, dict):
            logger.warning("scan service payload for record={} is not an object; using empty response", record_id)
            return {}
        return payload
