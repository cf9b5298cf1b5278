"""findsym package initialization."""

from __future__ import annotations

from .api import (
    FindsymError,
    clear_cache,
    clear_index,
    index,
    search,
    set_data_dir,
)

__all__ = [
    "__version__",
    "FindsymError",
    "clear_cache",
    "clear_index",
    "get_version",
    "index",
    "search",
    "set_data_dir",
]

__version__ = "0.3.0"


def get_version() -> str:
    """Return the current package version."""
    return __version__
