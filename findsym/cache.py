"""Symbol index cache for findsym backed by flat text files."""

from __future__ import annotations

import hashlib
import os
import re
from dataclasses import dataclass
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path

DEFAULT_CACHE_DIR = Path(os.path.expanduser("~")) / ".cache" / "findsym"
CACHE_DIR = DEFAULT_CACHE_DIR
_CACHE_DIR_OVERRIDE: ContextVar[Path | None] = ContextVar(
    "findsym_cache_dir_override",
    default=None,
)
CACHE_KEY_LENGTH = 32
INDEX_SUFFIX = ".syms"
ROOT_SUFFIX = ".root"
# <identifier>.syms, <identifier>.syms.<pid>.tmp and <identifier>.root
_CACHE_FILE_RE = re.compile(
    rf"[0-9a-f]{{{CACHE_KEY_LENGTH}}}"
    rf"(?:{re.escape(INDEX_SUFFIX)}(?:\.\d+\.tmp)?|{re.escape(ROOT_SUFFIX)})"
)


@dataclass(slots=True)
class CacheEntry:
    """A persisted symbol index for one search root."""

    identifier: str
    path: Path
    root: Path | None = None
    mtime: float | None = None

    @property
    def exists(self) -> bool:
        return self.mtime is not None

    @property
    def size(self) -> int:
        try:
            return self.path.stat().st_size
        except OSError:
            return 0

    @property
    def updated_at(self) -> str | None:
        if self.mtime is None:
            return None
        return datetime.fromtimestamp(self.mtime, tz=timezone.utc).isoformat()


def cache_key(root: Path) -> str:
    """Return the cache identifier for the canonical search root *root*."""

    digest = hashlib.sha256(str(root).encode("utf-8")).hexdigest()
    return digest[:CACHE_KEY_LENGTH]


def _resolve_cache_dir() -> Path:
    override = _CACHE_DIR_OVERRIDE.get()
    return override if override is not None else CACHE_DIR


def cache_dir() -> Path:
    """Return the active cache directory without creating it."""
    return _resolve_cache_dir()


@contextmanager
def cache_dir_context(path: Path | str | None):
    """Temporarily override the cache directory for the current context."""

    if path is None:
        yield
        return
    dir_path = Path(path).expanduser().resolve()
    if dir_path.exists() and not dir_path.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {dir_path}")
    token = _CACHE_DIR_OVERRIDE.set(dir_path)
    try:
        yield
    finally:
        _CACHE_DIR_OVERRIDE.reset(token)


def ensure_cache_dir() -> Path:
    cache_dir = _resolve_cache_dir()
    cache_dir.mkdir(parents=True, exist_ok=True)
    return cache_dir


def set_cache_dir(path: Path | str | None) -> None:
    global CACHE_DIR
    if path is None:
        CACHE_DIR = DEFAULT_CACHE_DIR
        return
    dir_path = Path(path).expanduser().resolve()
    if dir_path.exists() and not dir_path.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {dir_path}")
    CACHE_DIR = dir_path


def cache_file(identifier: str) -> Path:
    """Return the backing file for *identifier*; the filesystem is not touched."""
    return _resolve_cache_dir() / f"{identifier}{INDEX_SUFFIX}"


def _root_file(identifier: str) -> Path:
    return _resolve_cache_dir() / f"{identifier}{ROOT_SUFFIX}"


def _read_root(identifier: str) -> Path | None:
    try:
        content = _root_file(identifier).read_text(encoding="utf-8").strip()
    except OSError:
        return None
    return Path(content) if content else None


def _stat_mtime(path: Path) -> float | None:
    try:
        return path.stat().st_mtime
    except FileNotFoundError:
        return None


def load_entry(root: Path) -> CacheEntry:
    """Return the cache entry for *root*, whether or not it has been built."""

    identifier = cache_key(root)
    path = cache_file(identifier)
    return CacheEntry(
        identifier=identifier,
        path=path,
        root=root,
        mtime=_stat_mtime(path),
    )


def write_entry(root: Path, lines) -> tuple[CacheEntry, int]:
    """Replace the index for *root* with *lines*, returning the entry and line count.

    Lines are streamed into a temporary sibling which is then moved over the
    backing file, so a concurrent reader sees either the old or the new index.
    """

    ensure_cache_dir()
    entry = load_entry(root)
    tmp_path = entry.path.with_name(f"{entry.path.name}.{os.getpid()}.tmp")
    count = 0
    try:
        with tmp_path.open("w", encoding="utf-8", errors="replace", newline="\n") as handle:
            for line in lines:
                handle.write(line.rstrip("\n"))
                handle.write("\n")
                count += 1
        os.replace(tmp_path, entry.path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()
    _root_file(entry.identifier).write_text(f"{root}\n", encoding="utf-8")
    entry.mtime = _stat_mtime(entry.path)
    return entry, count


def remove_entry(root: Path) -> bool:
    """Delete the cached index for *root*; return True if one existed."""

    entry = load_entry(root)
    removed = False
    for path in (entry.path, _root_file(entry.identifier)):
        try:
            path.unlink()
        except FileNotFoundError:
            continue
        if path == entry.path:
            removed = True
    return removed


def list_cache_entries() -> list[CacheEntry]:
    """Return every cached index currently stored, newest first."""

    directory = _resolve_cache_dir()
    if not directory.is_dir():
        return []
    entries: list[CacheEntry] = []
    for path in directory.glob(f"*{INDEX_SUFFIX}"):
        if not _is_cache_file(path):
            continue
        mtime = _stat_mtime(path)
        if mtime is None:
            continue
        identifier = path.name[: -len(INDEX_SUFFIX)]
        entries.append(
            CacheEntry(
                identifier=identifier,
                path=path,
                root=_read_root(identifier),
                mtime=mtime,
            )
        )
    entries.sort(key=lambda entry: entry.mtime or 0.0, reverse=True)
    return entries


def _is_cache_file(path: Path) -> bool:
    return _CACHE_FILE_RE.fullmatch(path.name) is not None and path.is_file()


def clear_all_cache() -> int:
    """Remove every cached index, returning number of entries removed.

    Only index, sidecar and temporary files written by this module are
    deleted; the cache directory itself goes once nothing else is left in it.
    """

    directory = _resolve_cache_dir()
    if not directory.is_dir():
        return 0
    total = len(list_cache_entries())
    for path in directory.iterdir():
        if not _is_cache_file(path):
            continue
        try:
            path.unlink()
        except FileNotFoundError:
            continue
    if not any(directory.iterdir()):
        directory.rmdir()
    return total
