"""
Markup snapshot files: timestamped captures of live pages, read back in mock mode.

Naming: {snapshots_dir}/{operation}_{YYYY-mm-dd_HH-MM-SS}.html. A file named
exactly {operation}.html is a pinned snapshot and wins over timestamped ones.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

from shared.errors import SnapshotNotFoundError
from shared.logging import get_logger

logger = get_logger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"
SNAPSHOT_SUFFIX = ".html"


def snapshot_timestamp(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


def build_snapshot_path(
    snapshots_dir: str | Path, operation: str, timestamp: Optional[str] = None
) -> Path:
    """Path for a new capture of `operation` (does not create anything)."""
    stamp = timestamp or snapshot_timestamp()
    return Path(snapshots_dir) / f"{operation}_{stamp}{SNAPSHOT_SUFFIX}"


def write_snapshot(path: Path, html: str) -> int:
    """Write markup to `path`, creating parent directories. Returns bytes written."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = html.encode("utf-8")
    path.write_bytes(data)
    return len(data)


def find_snapshot(snapshots_dir: str | Path, operation: str) -> Path:
    """
    Locate the snapshot to read for `operation`.

    Prefers the pinned {operation}.html, else the newest timestamped capture
    (timestamps sort lexicographically). Raises SnapshotNotFoundError.
    """
    directory = Path(snapshots_dir)
    pinned = directory / f"{operation}{SNAPSHOT_SUFFIX}"
    if pinned.is_file():
        return pinned

    captures = sorted(directory.glob(f"{operation}_*{SNAPSHOT_SUFFIX}"))
    if captures:
        return captures[-1]

    raise SnapshotNotFoundError(operation, str(directory))


def read_snapshot(snapshots_dir: str | Path, operation: str) -> str:
    path = find_snapshot(snapshots_dir, operation)
    logger.info("snapshot_read", operation=operation, path=str(path))
    return path.read_text(encoding="utf-8")
