from __future__ import annotations

import json

import pytest

import findsym.config as config_module
from findsym.config import (
    Config,
    ConfigError,
    DEFAULT_EXTENSIONS,
    DEFAULT_NM_ARGS,
    DEFAULT_NM_COMMAND,
    load_config,
    resolve_nm_command,
    save_config,
)
from findsym.services.config_service import apply_config_updates, get_config_snapshot


@pytest.fixture(autouse=True)
def temp_config_home(tmp_path, monkeypatch):
    config_dir = tmp_path / "config"
    config_file = config_dir / "config.json"
    monkeypatch.setattr(config_module, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_file)
    monkeypatch.delenv(config_module.ENV_NM_COMMAND, raising=False)
    return config_file


def test_load_config_defaults_when_missing():
    cfg = load_config()

    assert cfg.nm_command == DEFAULT_NM_COMMAND
    assert cfg.nm_args == DEFAULT_NM_ARGS
    assert cfg.extensions == DEFAULT_EXTENSIONS
    assert cfg.cache_dir is None


def test_save_and_load_config(temp_config_home):
    save_config(
        Config(
            nm_command="llvm-nm",
            nm_args=("-A", "-g"),
            extensions=(".o",),
            cache_dir="/tmp/symcache",
        )
    )

    data = json.loads(temp_config_home.read_text(encoding="utf-8"))
    assert data["nm_command"] == "llvm-nm"
    cfg = load_config()
    assert cfg.nm_command == "llvm-nm"
    assert cfg.nm_args == ("-A", "-g")
    assert cfg.extensions == (".o",)
    assert cfg.cache_dir == "/tmp/symcache"


def test_load_config_normalizes_values(temp_config_home):
    temp_config_home.parent.mkdir(parents=True)
    temp_config_home.write_text(
        json.dumps({"nm_command": "  ", "extensions": ["O", ".LIB"], "nm_args": "-A -C"}),
        encoding="utf-8",
    )

    cfg = load_config()

    assert cfg.nm_command == DEFAULT_NM_COMMAND
    assert cfg.extensions == (".lib", ".o")
    assert cfg.nm_args == ("-A", "-C")


def test_load_config_invalid_json(temp_config_home):
    temp_config_home.parent.mkdir(parents=True)
    temp_config_home.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config()


def test_resolve_nm_command_prefers_environment(monkeypatch):
    assert resolve_nm_command(None) == DEFAULT_NM_COMMAND
    assert resolve_nm_command("gnm") == "gnm"
    monkeypatch.setenv(config_module.ENV_NM_COMMAND, "llvm-nm")
    assert resolve_nm_command("gnm") == "llvm-nm"


def test_config_dir_context_scopes_reads(tmp_path):
    other = tmp_path / "other"
    with config_module.config_dir_context(other):
        save_config(Config(nm_command="other-nm"))
        assert load_config().nm_command == "other-nm"
    assert load_config().nm_command == DEFAULT_NM_COMMAND
    assert (other / "config.json").exists()


def test_apply_config_updates_reports_changes():
    result = apply_config_updates(nm_command="llvm-nm", extensions=["o", "a"])

    assert result.changed is True
    assert result.nm_command_set is True
    assert result.extensions_set is True
    snapshot = get_config_snapshot()
    assert snapshot.nm_command == "llvm-nm"
    assert snapshot.extensions == (".a", ".o")

    assert apply_config_updates().changed is False


def test_apply_config_updates_rejects_empty_extensions():
    with pytest.raises(ValueError):
        apply_config_updates(extensions=[" ", "."])


def test_apply_config_updates_reset_and_cache_dir():
    apply_config_updates(nm_command="llvm-nm", cache_dir="/tmp/cache")
    assert get_config_snapshot().cache_dir == "/tmp/cache"

    apply_config_updates(cache_dir="")
    assert get_config_snapshot().cache_dir is None

    result = apply_config_updates(reset=True)
    assert result.reset is True
    assert get_config_snapshot().nm_command == DEFAULT_NM_COMMAND
