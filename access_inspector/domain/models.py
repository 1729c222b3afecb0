from __future__ import annotations

import math
from collections.abc import Mapping
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic import Field as PydanticField
from pydantic.alias_generators import to_camel

from access_inspector.domain.state_machine import UiState


class AccessMode(StrEnum):
    READ = "read"
    EDIT = "edit"
    DELETE = "delete"


class UserScope(StrEnum):
    ALL = "all"
    INTERNAL = "internal"
    EXTERNAL = "external"


def as_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def as_flag(value: Any) -> bool:
    return value if isinstance(value, bool) else False


def as_optional_flag(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def as_count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return 0


def _mapping_or_empty(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data
    if isinstance(data, Mapping):
        return dict(data)
    return {}


class InspectorModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class AccessPathText(InspectorModel):
    kind: Literal["text"] = "text"
    text: str


class AccessPathEntry(InspectorModel):
    kind: Literal["entry"] = "entry"
    key: str | None = None
    label: str | None = None
    url: str | None = None


RawAccessPath = Annotated[AccessPathText | AccessPathEntry, PydanticField(discriminator="kind")]


def _raw_access_path(item: Any) -> AccessPathText | AccessPathEntry | None:
    if isinstance(item, (AccessPathText, AccessPathEntry)):
        return item
    if isinstance(item, str):
        return AccessPathText(text=item)
    if isinstance(item, Mapping):
        return AccessPathEntry(
            key=as_text(item.get("key")),
            label=as_text(item.get("label")),
            url=as_text(item.get("url")),
        )
    return None


class RawUserAccessRecord(InspectorModel):
    user_id: str | None = None
    user_name: str | None = None
    login_name: str | None = None
    profile_name: str | None = None
    role_name: str | None = None
    user_type: str | None = None
    max_access_level: str | None = None
    has_read: bool = False
    has_edit: bool = False
    has_delete: bool = False
    is_external: bool | None = None
    access_paths: tuple[RawAccessPath, ...] = ()
    profile_id: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _ensure_mapping(cls, data: Any) -> Any:
        return _mapping_or_empty(data)

    @field_validator(
        "user_id",
        "user_name",
        "login_name",
        "profile_name",
        "role_name",
        "user_type",
        "max_access_level",
        "profile_id",
        mode="before",
    )
    @classmethod
    def _text_fields(cls, value: Any) -> str | None:
        return as_text(value)

    @field_validator("has_read", "has_edit", "has_delete", mode="before")
    @classmethod
    def _flag_fields(cls, value: Any) -> bool:
        return as_flag(value)

    @field_validator("is_external", mode="before")
    @classmethod
    def _optional_flag(cls, value: Any) -> bool | None:
        return as_optional_flag(value)

    @field_validator("access_paths", mode="before")
    @classmethod
    def _access_paths(cls, value: Any) -> list[AccessPathText | AccessPathEntry]:
        if not isinstance(value, (list, tuple)):
            return []
        resolved = (_raw_access_path(item) for item in value)
        return [item for item in resolved if item is not None]


class ScanResponse(InspectorModel):
    object_api_name: str = ""
    object_label: str = ""
    selected_access_type: str = AccessMode.READ.value
    internal_sharing_model: str = ""
    external_sharing_model: str = ""
    share_object_api_name: str = ""
    share_object_available: bool = False
    total_active_users: int = 0
    scanned_users: int = 0
    users_with_access: int = 0
    direct_share_count: int = 0
    group_share_count: int = 0
    notes: tuple[str, ...] = ()
    users: tuple[RawUserAccessRecord, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _ensure_mapping(cls, data: Any) -> Any:
        return _mapping_or_empty(data)

    @field_validator(
        "object_api_name",
        "object_label",
        "internal_sharing_model",
        "external_sharing_model",
        "share_object_api_name",
        mode="before",
    )
    @classmethod
    def _text_fields(cls, value: Any) -> str:
        return as_text(value) or ""

    @field_validator("selected_access_type", mode="before")
    @classmethod
    def _access_type(cls, value: Any) -> str:
        return as_text(value) or AccessMode.READ.value

    @field_validator("share_object_available", mode="before")
    @classmethod
    def _flag_fields(cls, value: Any) -> bool:
        return as_flag(value)

    @field_validator(
        "total_active_users",
        "scanned_users",
        "users_with_access",
        "direct_share_count",
        "group_share_count",
        mode="before",
    )
    @classmethod
    def _count_fields(cls, value: Any) -> int:
        return as_count(value)

    @field_validator("notes", mode="before")
    @classmethod
    def _notes(cls, value: Any) -> list[str]:
        if not isinstance(value, (list, tuple)):
            return []
        return [item for item in value if isinstance(item, str)]

    @field_validator("users", mode="before")
    @classmethod
    def _users(cls, value: Any) -> list[Any]:
        if not isinstance(value, (list, tuple)):
            return []
        return [item for item in value if isinstance(item, (Mapping, RawUserAccessRecord))]


def empty_scan_response() -> ScanResponse:
    return ScanResponse()


class AccessPath(InspectorModel):
    key: str
    label: str
    url: str | None = None


class PermissionBadge(InspectorModel):
    key: str
    label: str
    title: str
    active: bool
    danger: bool = False


class NormalizedUserRecord(InspectorModel):
    user_id: str | None = None
    user_name: str | None = None
    login_name: str | None = None
    profile_name: str | None = None
    role_name: str | None = None
    user_type: str | None = None
    max_access_level: str | None = None
    has_read: bool = False
    has_edit: bool = False
    has_delete: bool = False
    profile_id: str | None = None
    is_external: bool
    initials: str
    access_paths: tuple[AccessPath, ...] = ()
    path_count: int = 0
    profile_url: str | None = None
    permission_badges: tuple[PermissionBadge, ...]


class ToggleOption(InspectorModel):
    value: str
    label: str
    active: bool
    class_name: str


class PageSizeOption(InspectorModel):
    label: str
    value: str


class PaginationRead(InspectorModel):
    effective_page: int
    total_pages: int
    page_size: int
    total_items: int
    summary: str
    can_go_previous: bool
    can_go_next: bool


class ScanOverview(InspectorModel):
    object_api_name: str
    object_label: str
    selected_access_type: str
    internal_sharing_model: str
    external_sharing_model: str
    share_object_api_name: str
    share_object_available: bool
    total_active_users: int
    scanned_users: int
    users_with_access: int
    direct_share_count: int
    group_share_count: int


class InspectorView(InspectorModel):
    record_id: str | None
    ui_state: UiState
    is_loading: bool
    error_message: str | None = None
    access_mode: AccessMode
    access_mode_label: str
    user_scope: UserScope
    search_term: str
    mode_options: tuple[ToggleOption, ...]
    scope_options: tuple[ToggleOption, ...]
    page_size_options: tuple[PageSizeOption, ...]
    page_size_value: str
    selected_count_label: str
    overview: ScanOverview
    notes: tuple[str, ...] = ()
    users: tuple[NormalizedUserRecord, ...] = ()
    pagination: PaginationRead
    has_record_context: bool
    has_users: bool
    has_notes: bool
    show_main_content: bool
    show_users_grid: bool
    show_empty_state: bool
    show_filter_empty_state: bool
