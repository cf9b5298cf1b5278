"""Utility helpers for filesystem access and path handling."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence, Tuple
import os


def resolve_directory(path: Path | str) -> Path:
    """Resolve and validate a user supplied directory path."""
    dir_path = Path(path).expanduser().resolve()
    if not dir_path.exists():
        raise FileNotFoundError(f"Directory does not exist: {dir_path}")
    if not dir_path.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {dir_path}")
    return dir_path


def normalize_extensions(values: Iterable[str] | None) -> tuple[str, ...]:
    """Return a sorted, deduplicated tuple of normalized file extensions."""

    if not values:
        return ()

    normalized: list[str] = []
    seen: set[str] = set()
    for raw in values:
        if raw is None:
            continue
        for part in raw.replace(",", " ").split():
            token = part.strip().lower()
            if not token:
                continue
            if not token.startswith("."):
                token = f".{token}"
            if token == ".":
                continue
            if token not in seen:
                seen.add(token)
                normalized.append(token)
    if not normalized:
        return ()
    return tuple(sorted(normalized))


def collect_files(
    root: Path | str,
    extensions: Sequence[str] | None = None,
) -> List[Path]:
    """Collect files under *root* recursively, keeping those whose suffix matches."""

    directory = resolve_directory(root)
    files: List[Path] = []
    normalized_exts: Tuple[str, ...] = tuple(ext.lower() for ext in extensions or ())

    # os.walk drops unreadable directories unless onerror is given
    for dirpath, _dirnames, filenames in os.walk(directory, topdown=True):
        current_dir = Path(dirpath)
        for filename in filenames:
            candidate = current_dir / filename
            if normalized_exts and not _matches_extension(candidate, normalized_exts):
                continue
            files.append(candidate)

    files.sort()
    return files


def _matches_extension(path: Path, extensions: Sequence[str]) -> bool:
    """Return True if *path* ends with any of the provided *extensions*."""

    filename = path.name.lower()
    return any(filename.endswith(ext) for ext in extensions)


def format_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "KiB", "MiB"):
        if value < 1024:
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GiB"


def plural_suffix(count: int, singular: str = "", plural: str = "s") -> str:
    return singular if count == 1 else plural
