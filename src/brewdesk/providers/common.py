"""Helpers shared by the Homebrew providers."""

from __future__ import annotations

import os
import stat
from datetime import datetime
from pathlib import Path


def directory_size(path: Path) -> int:
    """Total size in bytes of all regular files under ``path``.

    Symlinks are not followed. A missing path has size 0.

    Args:
        path: Directory to measure.

    Returns:
        The size in bytes.
    """
    total = 0
    for root, _dirs, files in os.walk(path):
        for name in files:
            try:
                st = os.lstat(os.path.join(root, name))
            except FileNotFoundError:
                continue
            if stat.S_ISREG(st.st_mode):
                total += st.st_size
    return total


def timestamp_to_datetime(value: int | float | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromtimestamp(value)


def human_size_from_bytes(maybe_bytes: int | None) -> str:
    """Convert a size in bytes to a human-readable string.

    Args:
        maybe_bytes (int | None): The size in bytes.

    Returns:
        str: The human-readable size string.
    """
    if not maybe_bytes:
        return "-"

    units = ["B", "KB", "MB", "GB", "TB"]
    size = float(maybe_bytes)
    i = 0
    while size >= 1024 and i < len(units) - 1:
        size /= 1024
        i += 1

    return f"{size:.2f} {units[i]}"
