from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from access_inspector.adapters.base import ScanSource
from access_inspector.api.deps import get_scan_source
from access_inspector.domain.models import AccessMode, InspectorView, UserScope
from access_inspector.domain.permissions import DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS
from access_inspector.services.inspector_service import InspectorController

router = APIRouter()

Source = Annotated[ScanSource, Depends(get_scan_source)]


@router.get("/records/{record_id}", response_model=InspectorView)
async def get_record_access(
    record_id: str,
    source: Source,
    mode: AccessMode = AccessMode.READ,
    scope: UserScope = UserScope.ALL,
    search: str = "",
    page_size: int = Query(default=DEFAULT_PAGE_SIZE),
    page: int = Query(default=1, ge=1),
) -> InspectorView:
    if page_size not in PAGE_SIZE_OPTIONS:
        allowed = ", ".join(str(size) for size in PAGE_SIZE_OPTIONS)
        raise HTTPException(status_code=422, detail=f"page_size must be one of {allowed}")
    controller = InspectorController(source, access_mode=mode, page_size=page_size)
    await controller.set_record_id(record_id)
    controller.set_user_scope(scope)
    controller.set_search_term(search)
    controller.go_to_page(page)
    return controller.view()
