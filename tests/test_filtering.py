from __future__ import annotations

from typing import Any

from access_inspector.domain.models import NormalizedUserRecord, UserScope
from access_inspector.services.filtering import build_search_haystack, filter_users
from access_inspector.services.normalizer import normalize_users


def _users() -> tuple[NormalizedUserRecord, ...]:
    raw: list[dict[str, Any]] = [
        {
            "userId": "005A",
            "userName": "Ada Lovelace",
            "loginName": "ada@example.com",
            "profileName": "System Administrator",
            "roleName": "CEO",
            "userType": "Standard",
            "maxAccessLevel": "All",
            "accessPaths": ["Record Owner"],
        },
        {
            "userId": "005B",
            "userName": "Pat Partner",
            "loginName": "pat@partner.example.com",
            "profileName": "Partner Community User",
            "userType": "PowerPartner",
            "maxAccessLevel": "Read",
            "accessPaths": [{"key": "g1", "label": "Public Group: Resellers"}],
        },
        {
            "userId": "005C",
            "userName": "Grace Hopper",
            "loginName": "grace@example.com",
            "profileName": "Sales User",
            "roleName": "VP Sales",
            "userType": "Standard",
            "maxAccessLevel": "Edit",
            "isExternal": True,
            "accessPaths": ["Sharing Rule: Sales Team"],
        },
    ]
    return normalize_users(raw)


def test_scope_filter_partitions_users_and_preserves_order() -> None:
    users = _users()

    assert [u.user_id for u in filter_users(users, UserScope.ALL, "")] == ["005A", "005B", "005C"]
    assert [u.user_id for u in filter_users(users, UserScope.INTERNAL, "")] == ["005A"]
    assert [u.user_id for u in filter_users(users, UserScope.EXTERNAL, "")] == ["005B", "005C"]


def test_search_is_trimmed_case_insensitive_and_covers_access_paths() -> None:
    users = _users()

    assert [u.user_id for u in filter_users(users, UserScope.ALL, "  GRACE ")] == ["005C"]
    assert [u.user_id for u in filter_users(users, UserScope.ALL, "resellers")] == ["005B"]
    assert [u.user_id for u in filter_users(users, UserScope.ALL, "sales")] == ["005C"]
    assert [u.user_id for u in filter_users(users, UserScope.ALL, "powerpartner")] == ["005B"]
    assert filter_users(users, UserScope.ALL, "nobody-matches") == ()


def test_blank_search_is_a_no_op() -> None:
    users = _users()

    assert filter_users(users, UserScope.ALL, "   ") == users
    assert filter_users(users, UserScope.ALL, None) == users


def test_scope_and_search_compose_as_intersection() -> None:
    users = _users()

    assert [u.user_id for u in filter_users(users, UserScope.EXTERNAL, "example.com")] == ["005B", "005C"]
    assert filter_users(users, UserScope.INTERNAL, "grace") == ()


def test_haystack_skips_missing_fields() -> None:
    partner = _users()[1]

    assert build_search_haystack(partner) == (
        "pat partner pat@partner.example.com partner community user powerpartner read public group: resellers"
    )
