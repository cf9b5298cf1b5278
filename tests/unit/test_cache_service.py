from __future__ import annotations

import os

import findsym.cache as cache
from findsym.services import cache_service


def _patch_cache_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(cache, "CACHE_DIR", tmp_path / "cache")


def test_missing_entry_is_stale(tmp_path, monkeypatch):
    _patch_cache_dir(tmp_path, monkeypatch)
    root = tmp_path / "project"
    root.mkdir()

    assert cache_service.is_cache_stale(root, cache.load_entry(root)) is True


def test_fresh_entry_is_current(tmp_path, monkeypatch):
    _patch_cache_dir(tmp_path, monkeypatch)
    root = tmp_path / "project"
    root.mkdir()
    os.utime(root, (1_000_000, 1_000_000))
    entry, _ = cache.write_entry(root, ["a.o: 1 T alpha"])

    assert cache_service.is_cache_stale(root, entry) is False


def test_entry_older_than_root_is_stale(tmp_path, monkeypatch):
    _patch_cache_dir(tmp_path, monkeypatch)
    root = tmp_path / "project"
    root.mkdir()
    entry, _ = cache.write_entry(root, ["a.o: 1 T alpha"])
    newer = entry.mtime + 60
    os.utime(root, (newer, newer))

    assert cache_service.is_cache_stale(root, cache.load_entry(root)) is True


def test_nested_change_without_root_mtime_bump_is_not_detected(tmp_path, monkeypatch):
    _patch_cache_dir(tmp_path, monkeypatch)
    root = tmp_path / "project"
    nested = root / "sub"
    nested.mkdir(parents=True)
    os.utime(root, (1_000_000, 1_000_000))
    entry, _ = cache.write_entry(root, [])

    (nested / "late.o").write_text("x", encoding="utf-8")
    os.utime(root, (1_000_000, 1_000_000))

    assert cache_service.is_cache_stale(root, cache.load_entry(root)) is False
