from __future__ import annotations

import re
from dataclasses import dataclass

from access_inspector.domain.models import AccessMode, UserScope

ACCESS_MODE_LABELS: dict[AccessMode, str] = {
    AccessMode.READ: "Read",
    AccessMode.EDIT: "Write",
    AccessMode.DELETE: "Delete",
}

USER_SCOPE_LABELS: dict[UserScope, str] = {
    UserScope.ALL: "All users",
    UserScope.INTERNAL: "Internal",
    UserScope.EXTERNAL: "External",
}

PAGE_SIZE_OPTIONS: tuple[int, ...] = (10, 25, 50, 100)
DEFAULT_PAGE_SIZE = 25

PROFILE_URL_TEMPLATE = "/lightning/setup/EnhancedProfiles/page?address=%2F{profile_id}"

# Matches PowerPartner, CspLitePortal, CustomerSuccess, PowerCustomerSuccess, Guest, community licences.
EXTERNAL_USER_TYPE_PATTERN = re.compile(r"portal|customer|partner|guest|community", re.IGNORECASE)


@dataclass(frozen=True)
class PermissionBadgeSpec:
    suffix: str
    label: str
    title: str
    flag: str
    danger: bool = False


PERMISSION_BADGE_SPECS: tuple[PermissionBadgeSpec, ...] = (
    PermissionBadgeSpec(suffix="read", label="R", title="Read", flag="has_read"),
    PermissionBadgeSpec(suffix="write", label="W", title="Write", flag="has_edit"),
    PermissionBadgeSpec(suffix="delete", label="D", title="Delete", flag="has_delete", danger=True),
)


def is_external_user_type(user_type: str | None) -> bool:
    if not user_type:
        return False
    return EXTERNAL_USER_TYPE_PATTERN.search(user_type.lower()) is not None


def coerce_page_size(value: object) -> int:
    try:
        size = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_PAGE_SIZE
    if size not in PAGE_SIZE_OPTIONS:
        return DEFAULT_PAGE_SIZE
    return size
