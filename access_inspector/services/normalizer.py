from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from access_inspector.domain.models import (
    AccessPath,
    AccessPathText,
    NormalizedUserRecord,
    PermissionBadge,
    RawUserAccessRecord,
    ScanResponse,
)
from access_inspector.domain.permissions import (
    PERMISSION_BADGE_SPECS,
    PROFILE_URL_TEMPLATE,
    is_external_user_type,
)

FALLBACK_USER_KEY = "u"
FALLBACK_INITIALS = "NA"


def coerce_scan_response(payload: Any) -> ScanResponse:
    if isinstance(payload, ScanResponse):
        return payload
    return ScanResponse.model_validate(payload)


def coerce_user_record(raw: RawUserAccessRecord | Mapping[str, Any]) -> RawUserAccessRecord:
    if isinstance(raw, RawUserAccessRecord):
        return raw
    return RawUserAccessRecord.model_validate(raw)


def build_initials(name: str | None) -> str:
    if not name or not name.strip():
        return FALLBACK_INITIALS
    parts = name.split()
    if len(parts) == 1:
        return parts[0][:2].upper()
    return (parts[0][0] + parts[-1][0]).upper()


def resolve_is_external(raw: RawUserAccessRecord) -> bool:
    if raw.is_external is not None:
        return raw.is_external
    return is_external_user_type(raw.user_type)


def build_profile_url(profile_id: str | None) -> str | None:
    if not profile_id:
        return None
    return PROFILE_URL_TEMPLATE.format(profile_id=profile_id)


def normalize_access_paths(raw: RawUserAccessRecord) -> tuple[AccessPath, ...]:
    user_key = raw.user_id or FALLBACK_USER_KEY
    seen_keys: set[str] = set()
    paths: list[AccessPath] = []
    for index, entry in enumerate(raw.access_paths):
        positional_key = f"{user_key}-path-{index}"
        if isinstance(entry, AccessPathText):
            key, label, url = positional_key, entry.text, None
        else:
            key, label, url = entry.key or positional_key, entry.label or "", entry.url or None
        if not label.strip():
            continue
        if key in seen_keys:
            key = positional_key
        suffix = 1
        while key in seen_keys:
            key = f"{positional_key}-{suffix}"
            suffix += 1
        seen_keys.add(key)
        paths.append(AccessPath(key=key, label=label, url=url))
    return tuple(paths)


def build_permission_badges(raw: RawUserAccessRecord) -> tuple[PermissionBadge, ...]:
    user_key = raw.user_id or FALLBACK_USER_KEY
    badges: list[PermissionBadge] = []
    for spec in PERMISSION_BADGE_SPECS:
        active = bool(getattr(raw, spec.flag))
        badges.append(
            PermissionBadge(
                key=f"{user_key}-{spec.suffix}",
                label=spec.label,
                title=spec.title,
                active=active,
                danger=spec.danger and active,
            )
        )
    return tuple(badges)


def normalize_user(raw: RawUserAccessRecord | Mapping[str, Any]) -> NormalizedUserRecord:
    record = coerce_user_record(raw)
    access_paths = normalize_access_paths(record)
    return NormalizedUserRecord(
        user_id=record.user_id,
        user_name=record.user_name,
        login_name=record.login_name,
        profile_name=record.profile_name,
        role_name=record.role_name,
        user_type=record.user_type,
        max_access_level=record.max_access_level,
        has_read=record.has_read,
        has_edit=record.has_edit,
        has_delete=record.has_delete,
        profile_id=record.profile_id,
        is_external=resolve_is_external(record),
        initials=build_initials(record.user_name),
        access_paths=access_paths,
        path_count=len(access_paths),
        profile_url=build_profile_url(record.profile_id),
        permission_badges=build_permission_badges(record),
    )


def normalize_users(
    records: Iterable[RawUserAccessRecord | Mapping[str, Any]],
) -> tuple[NormalizedUserRecord, ...]:
    return tuple(normalize_user(raw) for raw in records)
