from __future__ import annotations

from fastapi import FastAPI

from access_inspector.api.routers import inspector
from access_inspector.infra.log import configure_logging

configure_logging()

app = FastAPI(
    title="record-access-inspector",
    description="Scoped, searchable and paginated view of who can access a record.",
    version="0.1.0",
)

app.include_router(inspector.router, prefix="/api/inspector", tags=["inspector"])


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}
