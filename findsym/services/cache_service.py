"""Shared helpers for deciding whether a cached symbol index is current."""

from __future__ import annotations

from pathlib import Path

from ..cache import CacheEntry


def is_cache_stale(root: Path, entry: CacheEntry) -> bool:
    """Return True if *entry* is missing or older than the directory *root*.

    Only the root directory's own mtime is compared; additions deep inside the
    tree that do not touch the root go unnoticed until a forced rebuild.
    """

    if not entry.exists or entry.mtime is None:
        return True
    try:
        root_mtime = root.stat().st_mtime
    except OSError:
        return True
    return root_mtime > entry.mtime

