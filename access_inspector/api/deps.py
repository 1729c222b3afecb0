from __future__ import annotations

import os

from access_inspector.adapters.base import ScanSource
from access_inspector.adapters.fake_adapter import FakeScanAdapter
from access_inspector.adapters.http_adapter import HttpScanAdapter

SCAN_SOURCE = os.getenv("SCAN_SOURCE", "fake").strip().lower()


def get_scan_source() -> ScanSource:
    if SCAN_SOURCE == "http":
        return HttpScanAdapter()
    if SCAN_SOURCE == "fake":
        return FakeScanAdapter()
    raise RuntimeError(f"unsupported scan source: {SCAN_SOURCE}")
