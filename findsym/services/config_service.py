"""Logic helpers for the `findsym config` command."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..config import (
    Config,
    load_config,
    reset_config,
    set_cache_dir_setting,
    set_extensions,
    set_nm_command,
)
from ..utils import normalize_extensions


@dataclass(slots=True)
class ConfigUpdateResult:
    reset: bool = False
    nm_command_set: bool = False
    extensions_set: bool = False
    cache_dir_set: bool = False

    @property
    def changed(self) -> bool:
        return any(
            (
                self.reset,
                self.nm_command_set,
                self.extensions_set,
                self.cache_dir_set,
            )
        )


def apply_config_updates(
    *,
    reset: bool = False,
    nm_command: str | None = None,
    extensions: Sequence[str] | None = None,
    cache_dir: str | None = None,
) -> ConfigUpdateResult:
    """Apply config mutations and report which fields were updated."""

    result = ConfigUpdateResult()
    if reset:
        reset_config()
        result.reset = True
    if nm_command is not None:
        set_nm_command(nm_command)
        result.nm_command_set = True
    if extensions is not None:
        normalized = normalize_extensions(extensions)
        if not normalized:
            raise ValueError("extensions must contain at least one suffix")
        set_extensions(normalized)
        result.extensions_set = True
    if cache_dir is not None:
        set_cache_dir_setting(cache_dir.strip() or None)
        result.cache_dir_set = True
    return result


def get_config_snapshot() -> Config:
    return load_config()
