"""Public Python API for findsym."""

from __future__ import annotations

from dataclasses import dataclass
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Sequence

from .cache import cache_dir_context, clear_all_cache, set_cache_dir
from .config import (
    Config,
    config_dir_context,
    load_config,
    resolve_nm_command,
    set_config_dir,
)
from .services.index_service import IndexResult, build_index, clear_index_entry
from .services.search_service import SearchRequest, SearchResponse, perform_search
from .text import Messages
from .utils import normalize_extensions, resolve_directory


class FindsymError(ValueError):
    """Raised when the findsym public API input is invalid."""


@dataclass(frozen=True, slots=True)
class RuntimeSettings:
    nm_command: str
    nm_args: tuple[str, ...]
    extensions: tuple[str, ...]
    cache_dir: str | None


def resolve_settings(
    config: Config | None = None,
    *,
    nm_command: str | None = None,
    extensions: Sequence[str] | str | None = None,
) -> RuntimeSettings:
    """Merge explicit overrides, the environment and the stored config."""

    base = config if config is not None else load_config()
    if isinstance(extensions, str):
        extensions = [extensions]
    resolved_exts = normalize_extensions(extensions) if extensions else base.extensions
    if extensions and not resolved_exts:
        raise FindsymError(Messages.ERROR_EXTENSIONS_EMPTY)
    return RuntimeSettings(
        nm_command=nm_command.strip() if nm_command else resolve_nm_command(base.nm_command),
        nm_args=tuple(base.nm_args),
        extensions=tuple(resolved_exts),
        cache_dir=base.cache_dir,
    )


@contextmanager
def data_dir_context(
    *,
    config_dir: Path | str | None = None,
    cache_dir: Path | str | None = None,
):
    """Scope config and cache directory overrides to the current context."""
    if config_dir is None and cache_dir is None:
        yield
        return
    with ExitStack() as stack:
        if config_dir is not None:
            stack.enter_context(config_dir_context(config_dir))
        if cache_dir is not None:
            stack.enter_context(cache_dir_context(cache_dir))
        yield


def set_data_dir(path: Path | str | None) -> None:
    """Set the base directory for config and cache data.

    Indexes live in a `cache` subdirectory so clearing them never touches the
    config file.
    """
    set_config_dir(path)
    set_cache_dir(None if path is None else Path(path) / "cache")


def _clean_patterns(values: Sequence[str] | str | None) -> tuple[str, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        values = [values]
    return tuple(value for value in values if value)


def search(
    symbols: Sequence[str] | str | None = None,
    *,
    regexes: Sequence[str] | str | None = None,
    path: Path | str = ".",
    rebuild: bool = False,
    nm_command: str | None = None,
    extensions: Sequence[str] | str | None = None,
    config_dir: Path | str | None = None,
    cache_dir: Path | str | None = None,
) -> SearchResponse:
    """Find the index records defining *symbols* (whole words) or matching *regexes*."""

    words = _clean_patterns(symbols)
    patterns = _clean_patterns(regexes)
    if not words and not patterns:
        raise FindsymError(Messages.ERROR_NOTHING_TO_SEARCH)
    with data_dir_context(config_dir=config_dir):
        settings = resolve_settings(nm_command=nm_command, extensions=extensions)
    directory = resolve_directory(path)
    effective_cache_dir = cache_dir if cache_dir is not None else settings.cache_dir
    with data_dir_context(cache_dir=effective_cache_dir):
        return perform_search(
            SearchRequest(
                directory=directory,
                words=words,
                regexes=patterns,
                rebuild=rebuild,
                nm_command=settings.nm_command,
                nm_args=settings.nm_args,
                extensions=settings.extensions,
            )
        )


def index(
    path: Path | str = ".",
    *,
    force: bool = False,
    nm_command: str | None = None,
    extensions: Sequence[str] | str | None = None,
    config_dir: Path | str | None = None,
    cache_dir: Path | str | None = None,
) -> IndexResult:
    """Build or refresh the symbol index for *path*."""

    with data_dir_context(config_dir=config_dir):
        settings = resolve_settings(nm_command=nm_command, extensions=extensions)
    directory = resolve_directory(path)
    effective_cache_dir = cache_dir if cache_dir is not None else settings.cache_dir
    with data_dir_context(cache_dir=effective_cache_dir):
        return build_index(
            directory,
            force=force,
            nm_command=settings.nm_command,
            nm_args=settings.nm_args,
            extensions=settings.extensions,
        )


def clear_index(path: Path | str = ".", *, cache_dir: Path | str | None = None) -> bool:
    """Remove the cached index for *path*."""

    directory = resolve_directory(path)
    effective_cache_dir = cache_dir if cache_dir is not None else load_config().cache_dir
    with data_dir_context(cache_dir=effective_cache_dir):
        return clear_index_entry(directory)


def clear_cache(*, cache_dir: Path | str | None = None) -> int:
    """Remove every cached index, returning how many entries were dropped."""

    effective_cache_dir = cache_dir if cache_dir is not None else load_config().cache_dir
    with data_dir_context(cache_dir=effective_cache_dir):
        return clear_all_cache()
