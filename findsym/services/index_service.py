"""Logic helpers for building the per-root symbol index."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, Sequence

from .cache_service import is_cache_stale
from ..cache import load_entry, remove_entry, write_entry
from ..config import DEFAULT_EXTENSIONS, DEFAULT_NM_ARGS, DEFAULT_NM_COMMAND
from ..text import Messages
from ..utils import collect_files

NM_TIMEOUT_SECONDS = 120.0


class IndexStatus(str, Enum):
    EMPTY = "empty"
    UP_TO_DATE = "up_to_date"
    STORED = "stored"


@dataclass(slots=True)
class IndexResult:
    status: IndexStatus
    cache_path: Path | None = None
    files_scanned: int = 0
    files_failed: int = 0
    symbol_count: int = 0


class SymbolDumpUnavailable(RuntimeError):
    """Raised when the symbol dump executable cannot be started at all."""


class SymbolDumpFailed(RuntimeError):
    """Raised when the symbol dump rejects a single file."""


def dump_symbols(
    path: Path,
    *,
    nm_command: str = DEFAULT_NM_COMMAND,
    nm_args: Sequence[str] = DEFAULT_NM_ARGS,
    timeout: float = NM_TIMEOUT_SECONDS,
) -> list[str]:
    """Return the defined-symbol records ``nm`` prints for *path*.

    Diagnostics on stderr are discarded. A non-zero exit status raises
    :class:`SymbolDumpFailed`; a missing executable raises
    :class:`SymbolDumpUnavailable`.
    """

    try:
        completed = subprocess.run(
            [nm_command, *nm_args, str(path)],
            check=False,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except FileNotFoundError as exc:
        raise SymbolDumpUnavailable(
            Messages.ERROR_NM_MISSING.format(command=nm_command)
        ) from exc
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise SymbolDumpFailed(str(exc)) from exc
    if completed.returncode != 0:
        raise SymbolDumpFailed(f"{nm_command} exited with status {completed.returncode}")
    return [line for line in completed.stdout.splitlines() if line.strip()]


def build_index(
    directory: Path,
    *,
    force: bool = False,
    nm_command: str = DEFAULT_NM_COMMAND,
    nm_args: Sequence[str] = DEFAULT_NM_ARGS,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
) -> IndexResult:
    """Create or refresh the symbol index for *directory* when it is stale."""

    entry = load_entry(directory)
    if not force and not is_cache_stale(directory, entry):
        return IndexResult(status=IndexStatus.UP_TO_DATE, cache_path=entry.path)

    files = collect_files(directory, extensions=extensions)
    failed = 0

    def _records() -> Iterator[str]:
        nonlocal failed
        for path in files:
            try:
                lines = dump_symbols(path, nm_command=nm_command, nm_args=nm_args)
            except SymbolDumpFailed:
                failed += 1
                continue
            yield from lines

    stored, symbol_count = write_entry(directory, _records())
    return IndexResult(
        status=IndexStatus.STORED if files else IndexStatus.EMPTY,
        cache_path=stored.path,
        files_scanned=len(files),
        files_failed=failed,
        symbol_count=symbol_count,
    )


def clear_index_entry(directory: Path) -> bool:
    """Remove the cached index for *directory*; return True if one existed."""

    return remove_entry(directory)
