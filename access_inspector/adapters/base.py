from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from access_inspector.domain.models import ScanResponse


class ScanSourceError(Exception):
    def __init__(
        self,
        message: str,
        *,
        body: Any = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.body = body
        self.status_code = status_code


class ScanSource(Protocol):
    async def fetch_record_access(
        self,
        record_id: str,
        access_type: str,
    ) -> Mapping[str, Any] | ScanResponse | None: ...
