from __future__ import annotations

from collections.abc import Iterable

from access_inspector.domain.models import NormalizedUserRecord, UserScope


def normalize_search_term(search_term: str | None) -> str:
    return (search_term or "").strip().lower()


def apply_user_scope(
    records: Iterable[NormalizedUserRecord],
    scope: UserScope,
) -> list[NormalizedUserRecord]:
    if scope == UserScope.INTERNAL:
        return [record for record in records if not record.is_external]
    if scope == UserScope.EXTERNAL:
        return [record for record in records if record.is_external]
    return list(records)


def build_search_haystack(record: NormalizedUserRecord) -> str:
    parts = [
        record.user_name,
        record.login_name,
        record.profile_name,
        record.role_name,
        record.user_type,
        record.max_access_level,
        *(path.label for path in record.access_paths),
    ]
    return " ".join(part for part in parts if part).lower()


def apply_search(
    records: Iterable[NormalizedUserRecord],
    search_term: str | None,
) -> list[NormalizedUserRecord]:
    needle = normalize_search_term(search_term)
    if not needle:
        return list(records)
    return [record for record in records if needle in build_search_haystack(record)]


def filter_users(
    records: Iterable[NormalizedUserRecord],
    scope: UserScope,
    search_term: str | None,
) -> tuple[NormalizedUserRecord, ...]:
    scoped = apply_user_scope(records, scope)
    return tuple(apply_search(scoped, search_term))
