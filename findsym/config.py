"""Global configuration management for findsym."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from contextlib import contextmanager
from contextvars import ContextVar
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict

from .text import Messages
from .utils import normalize_extensions

DEFAULT_CONFIG_DIR = Path(os.path.expanduser("~")) / ".findsym"
CONFIG_DIR = DEFAULT_CONFIG_DIR
CONFIG_FILE = CONFIG_DIR / "config.json"
_CONFIG_DIR_OVERRIDE: ContextVar[Path | None] = ContextVar(
    "findsym_config_dir_override",
    default=None,
)
DEFAULT_NM_COMMAND = "nm"
# -A prefixes every record with the owning file (archive.a:member.o: for archives)
DEFAULT_NM_ARGS: tuple[str, ...] = ("-A", "--defined-only")
DEFAULT_EXTENSIONS: tuple[str, ...] = (".a", ".lib", ".o", ".obj")
ENV_NM_COMMAND = "FINDSYM_NM"


class ConfigError(ValueError):
    """Raised when the config file cannot be parsed."""


@dataclass
class Config:
    nm_command: str = DEFAULT_NM_COMMAND
    nm_args: tuple[str, ...] = DEFAULT_NM_ARGS
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    cache_dir: str | None = None


def _resolve_config_dir() -> Path:
    override = _CONFIG_DIR_OVERRIDE.get()
    return override if override is not None else CONFIG_DIR


def _resolve_config_file() -> Path:
    override = _CONFIG_DIR_OVERRIDE.get()
    if override is not None:
        return override / "config.json"
    return CONFIG_FILE


@contextmanager
def config_dir_context(path: Path | str | None):
    """Temporarily override the config directory for the current context."""

    if path is None:
        yield
        return
    dir_path = Path(path).expanduser().resolve()
    if dir_path.exists() and not dir_path.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {dir_path}")
    token = _CONFIG_DIR_OVERRIDE.set(dir_path)
    try:
        yield
    finally:
        _CONFIG_DIR_OVERRIDE.reset(token)


def _coerce_string_tuple(raw: object, default: tuple[str, ...]) -> tuple[str, ...]:
    if raw is None:
        return default
    if isinstance(raw, str):
        raw = raw.split()
    if not isinstance(raw, (list, tuple)):
        return default
    values = tuple(str(item).strip() for item in raw if str(item).strip())
    return values


def _coerce_extensions(raw: object) -> tuple[str, ...]:
    if raw is None:
        return DEFAULT_EXTENSIONS
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        return DEFAULT_EXTENSIONS
    return normalize_extensions(str(item) for item in raw) or DEFAULT_EXTENSIONS


def _config_from_mapping(raw: Mapping[str, object]) -> Config:
    nm_command = raw.get("nm_command")
    cache_dir = raw.get("cache_dir")
    return Config(
        nm_command=(str(nm_command).strip() if nm_command else "") or DEFAULT_NM_COMMAND,
        nm_args=_coerce_string_tuple(raw.get("nm_args"), DEFAULT_NM_ARGS),
        extensions=_coerce_extensions(raw.get("extensions")),
        cache_dir=(str(cache_dir).strip() if cache_dir else "") or None,
    )


def load_config() -> Config:
    config_file = _resolve_config_file()
    if not config_file.exists():
        return Config()
    try:
        raw = json.loads(config_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(
            Messages.ERROR_CONFIG_INVALID.format(path=config_file, reason=exc.msg)
        ) from exc
    if not isinstance(raw, dict):
        return Config()
    return _config_from_mapping(raw)


def save_config(config: Config) -> None:
    config_dir = _resolve_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    data: Dict[str, Any] = {}
    if config.nm_command:
        data["nm_command"] = config.nm_command
    data["nm_args"] = list(config.nm_args)
    data["extensions"] = list(config.extensions)
    if config.cache_dir:
        data["cache_dir"] = config.cache_dir
    config_file = _resolve_config_file()
    config_file.write_text(
        json.dumps(data, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )


def set_config_dir(path: Path | str | None) -> None:
    global CONFIG_DIR, CONFIG_FILE
    if path is None:
        CONFIG_DIR = DEFAULT_CONFIG_DIR
    else:
        dir_path = Path(path).expanduser().resolve()
        if dir_path.exists() and not dir_path.is_dir():
            raise NotADirectoryError(f"Path is not a directory: {dir_path}")
        CONFIG_DIR = dir_path
    CONFIG_FILE = CONFIG_DIR / "config.json"


def set_nm_command(value: str) -> None:
    config = load_config()
    config.nm_command = value.strip() or DEFAULT_NM_COMMAND
    save_config(config)


def set_extensions(values: tuple[str, ...]) -> None:
    config = load_config()
    config.extensions = values
    save_config(config)


def set_cache_dir_setting(value: str | None) -> None:
    config = load_config()
    config.cache_dir = value
    save_config(config)


def reset_config() -> None:
    save_config(Config())


def resolve_nm_command(configured: str | None) -> str:
    """Return the symbol dump executable, letting the environment win."""
    env_value = os.getenv(ENV_NM_COMMAND)
    if env_value and env_value.strip():
        return env_value.strip()
    return (configured or "").strip() or DEFAULT_NM_COMMAND
