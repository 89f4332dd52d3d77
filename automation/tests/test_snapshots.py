"""
Unit tests for snapshot file naming and lookup.
"""

from __future__ import annotations

from datetime import datetime

import pytest

from automation.snapshots import (
    build_snapshot_path,
    find_snapshot,
    read_snapshot,
    snapshot_timestamp,
    write_snapshot,
)
from shared.errors import SnapshotNotFoundError


def test_snapshot_timestamp_format():
    assert snapshot_timestamp(datetime(2025, 3, 4, 5, 6, 7)) == "2025-03-04_05-06-07"


def test_build_snapshot_path(tmp_path):
    path = build_snapshot_path(tmp_path, "getCartContent", "2025-03-04_05-06-07")

    assert path == tmp_path / "getCartContent_2025-03-04_05-06-07.html"


def test_write_snapshot_creates_directories(tmp_path):
    path = tmp_path / "nested" / "mocks" / "searchProducts_2025-01-01_00-00-00.html"

    size = write_snapshot(path, "<div>é</div>")

    assert path.read_text(encoding="utf-8") == "<div>é</div>"
    assert size == len("<div>é</div>".encode("utf-8"))


def test_pinned_snapshot_wins(tmp_path):
    (tmp_path / "getCartContent_2025-05-01_00-00-00.html").write_text("timestamped")
    (tmp_path / "getCartContent.html").write_text("pinned")

    assert find_snapshot(tmp_path, "getCartContent").name == "getCartContent.html"


def test_newest_timestamped_snapshot_is_used(tmp_path):
    (tmp_path / "getOrdersHistory_2024-12-31_23-59-59.html").write_text("old")
    (tmp_path / "getOrdersHistory_2025-01-02_08-00-00.html").write_text("new")
    (tmp_path / "getCartContent_2026-01-01_00-00-00.html").write_text("other operation")

    assert read_snapshot(tmp_path, "getOrdersHistory") == "new"


def test_missing_snapshot(tmp_path):
    with pytest.raises(SnapshotNotFoundError) as exc_info:
        find_snapshot(tmp_path, "searchProducts")

    assert exc_info.value.error_kind == "not_found"
    assert "searchProducts" in exc_info.value.message
