from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from hashlib import sha1
from typing import Any

from access_inspector.adapters.base import ScanSourceError

FIRST_NAMES = ("Ada", "Grace", "Alan", "Katherine", "Linus", "Barbara", "Dennis", "Margaret")
LAST_NAMES = ("Lovelace", "Hopper", "Turing", "Johnson", "Torvalds", "Liskov", "Ritchie", "Hamilton")
USER_TYPES = ("Standard", "Standard", "PowerPartner", "CspLitePortal", "Standard", "Guest")
PROFILES = ("System Administrator", "Sales User", "Partner Community User", "Customer Portal User")
ROLES = ("CEO", "VP Sales", "Account Executive", None)

MODE_FLAGS = {"read": "hasRead", "edit": "hasEdit", "delete": "hasDelete"}


@dataclass(frozen=True)
class FakeScanCall:
    record_id: str
    access_type: str


class FakeScanAdapter:
    def __init__(
        self,
        *,
        user_count: int = 12,
        latency_seconds: float | Mapping[str, float] = 0.0,
        fail_with: Exception | None = None,
        responses: Mapping[tuple[str, str], Mapping[str, Any]] | None = None,
    ) -> None:
        self._user_count = max(user_count, 0)
        self._latency_seconds = latency_seconds
        self._fail_with = fail_with
        self._responses = dict(responses or {})
        self.calls: list[FakeScanCall] = []

    def set_failure(self, error: Exception | None) -> None:
        self._fail_with = error

    def set_response(self, record_id: str, access_type: str, payload: Mapping[str, Any]) -> None:
        self._responses[(record_id, access_type)] = payload

    def _latency_for(self, access_type: str) -> float:
        if isinstance(self._latency_seconds, Mapping):
            return max(float(self._latency_seconds.get(access_type, 0.0)), 0.0)
        return max(float(self._latency_seconds), 0.0)

    async def fetch_record_access(self, record_id: str, access_type: str) -> Mapping[str, Any]:
        self.calls.append(FakeScanCall(record_id=record_id, access_type=access_type))
        delay = self._latency_for(access_type)
        if delay:
            await asyncio.sleep(delay)
        if self._fail_with is not None:
            raise self._fail_with
        override = self._responses.get((record_id, access_type))
        if override is not None:
            return dict(override)
        if access_type not in MODE_FLAGS:
            raise ScanSourceError(
                "Invalid access type",
                body=[{"message": f"Unsupported access type: {access_type}"}],
                status_code=400,
            )
        return self._build_response(record_id, access_type)

    def _seed_for_record(self, record_id: str) -> int:
        digest = sha1(record_id.encode(), usedforsecurity=False).hexdigest()
        return int(digest[:8], 16)

    def _build_user(self, seed: int, index: int) -> dict[str, Any]:
        first = FIRST_NAMES[(seed + index) % len(FIRST_NAMES)]
        last = LAST_NAMES[(seed // 7 + index) % len(LAST_NAMES)]
        user_type = USER_TYPES[index % len(USER_TYPES)]
        access_paths: list[Any] = ["Record Owner"] if index == 0 else ["Role Hierarchy"]
        if index % 3 == 1:
            access_paths.append(
                {
                    "key": f"share-{index}",
                    "label": "Sharing Rule: Sales Team",
                    "url": "/lightning/setup/SecuritySharing/home",
                }
            )
        if index % 4 == 2:
            access_paths.append(f"Public Group: Region {index % 5}")
        return {
            "userId": f"005{seed % 100000:05d}{index:04d}",
            "userName": f"{first} {last}",
            "loginName": f"{first.lower()}.{last.lower()}{index}@example.com",
            "profileName": PROFILES[index % len(PROFILES)],
            "roleName": ROLES[index % len(ROLES)],
            "userType": user_type,
            "maxAccessLevel": "All" if index == 0 else ("Edit" if index % 2 == 0 else "Read"),
            "hasRead": True,
            "hasEdit": index % 2 == 0,
            "hasDelete": index % 3 == 0,
            "accessPaths": access_paths,
            "profileId": f"00e{seed % 1000:03d}{index % len(PROFILES):03d}",
        }

    def _build_response(self, record_id: str, access_type: str) -> dict[str, Any]:
        seed = self._seed_for_record(record_id)
        scanned = [self._build_user(seed, index) for index in range(self._user_count)]
        flag = MODE_FLAGS[access_type]
        users = [user for user in scanned if user[flag]]
        notes = []
        if any(user["userType"] != "Standard" for user in users):
            notes.append("External users are included; review sharing sets for portal access.")
        return {
            "objectApiName": "Opportunity",
            "objectLabel": "Opportunity",
            "selectedAccessType": access_type,
            "internalSharingModel": "Private",
            "externalSharingModel": "Private",
            "shareObjectApiName": "OpportunityShare",
            "shareObjectAvailable": True,
            "totalActiveUsers": self._user_count + 3,
            "scannedUsers": len(scanned),
            "usersWithAccess": len(users),
            "directShareCount": seed % 3,
            "groupShareCount": seed % 2,
            "notes": notes,
            "users": users,
        }
