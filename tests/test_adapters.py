from __future__ import annotations

import asyncio
from typing import Any

import httpx
import pytest

from access_inspector.adapters.base import ScanSourceError
from access_inspector.adapters.fake_adapter import FakeScanAdapter
from access_inspector.adapters.http_adapter import HttpScanAdapter
from access_inspector.services.error_messages import join_error_messages, reduce_errors
from access_inspector.services.normalizer import coerce_scan_response


def _http_adapter(handler: Any) -> tuple[HttpScanAdapter, httpx.AsyncClient]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpScanAdapter(base_url="http://scan.test/api/", client=client), client


def test_fake_adapter_is_deterministic_per_record_and_mode() -> None:
    adapter = FakeScanAdapter(user_count=12)

    async def _run() -> tuple[Any, Any, Any]:
        first = await adapter.fetch_record_access("006A", "read")
        again = await adapter.fetch_record_access("006A", "read")
        delete = await adapter.fetch_record_access("006A", "delete")
        return first, again, delete

    first, again, delete = asyncio.run(_run())
    assert first == again
    assert len(first["users"]) == 12
    assert first["usersWithAccess"] == 12
    assert len(delete["users"]) == 4
    assert all(user["hasDelete"] for user in delete["users"])
    assert len({user["userId"] for user in first["users"]}) == 12

    response = coerce_scan_response(first)
    assert response.share_object_available is True
    assert response.selected_access_type == "read"


def test_fake_adapter_rejects_unknown_access_type() -> None:
    adapter = FakeScanAdapter()

    with pytest.raises(ScanSourceError) as exc_info:
        asyncio.run(adapter.fetch_record_access("006A", "owner"))

    assert exc_info.value.status_code == 400
    assert reduce_errors(exc_info.value) == ["Unsupported access type: owner"]


def test_http_adapter_fetches_json_payload() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"objectLabel": "Opportunity", "users": [{"userId": "005A"}]})

    adapter, client = _http_adapter(handler)

    async def _run() -> dict[str, Any]:
        try:
            return await adapter.fetch_record_access("006/A", "edit")
        finally:
            await client.aclose()

    payload = asyncio.run(_run())
    assert payload["objectLabel"] == "Opportunity"
    assert str(seen[0].url).startswith("http://scan.test/api/records/006%2FA/access")
    assert seen[0].url.params["accessType"] == "edit"


def test_http_adapter_raises_with_structured_error_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            403,
            json=[{"errorCode": "INSUFFICIENT_ACCESS", "message": "You do not have access"}],
        )

    adapter, client = _http_adapter(handler)

    async def _run() -> None:
        try:
            await adapter.fetch_record_access("006A", "read")
        finally:
            await client.aclose()

    with pytest.raises(ScanSourceError) as exc_info:
        asyncio.run(_run())

    assert exc_info.value.status_code == 403
    assert join_error_messages(exc_info.value) == "You do not have access"


def test_http_adapter_wraps_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    adapter, client = _http_adapter(handler)

    async def _run() -> None:
        try:
            await adapter.fetch_record_access("006A", "read")
        finally:
            await client.aclose()

    with pytest.raises(ScanSourceError) as exc_info:
        asyncio.run(_run())

    assert "connection refused" in join_error_messages(exc_info.value)


def test_http_adapter_treats_non_object_payload_as_empty() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=["unexpected"])

    adapter, client = _http_adapter(handler)

    async def _run() -> dict[str, Any]:
        try:
            return await adapter.fetch_record_access("006A", "read")
        finally:
            await client.aclose()

    assert asyncio.run(_run()) == {}


def test_reduce_errors_fallback_chain() -> None:
    assert reduce_errors(ScanSourceError("x", body=[{"message": "a"}, {"message": "b"}])) == ["a", "b"]
    assert reduce_errors(ScanSourceError("x", body=[{"code": 1}])) == ["Unknown error"]
    assert reduce_errors(ScanSourceError("generic", body={"message": "from body"})) == ["from body"]
    assert reduce_errors(ScanSourceError("generic", body={"detail": "ignored"})) == ["generic"]
    assert reduce_errors(RuntimeError()) == ["Unknown error"]
    assert reduce_errors(None) == ["Unknown error"]
