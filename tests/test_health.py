from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from access_inspector import main as app_main


def test_healthz_ok() -> None:
    client = TestClient(app_main.app)
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_entry_point_serves_app_with_uvicorn(monkeypatch: pytest.MonkeyPatch) -> None:
    from access_inspector import __main__ as entry

    seen: dict[str, object] = {}

    def fake_run(app: str, **kwargs: object) -> None:
        seen["app"] = app
        seen.update(kwargs)

    monkeypatch.setattr(entry.uvicorn, "run", fake_run)
    entry.run()

    assert seen["app"] == "access_inspector.main:app"
    assert seen["host"] == entry.HOST
    assert seen["port"] == entry.PORT
