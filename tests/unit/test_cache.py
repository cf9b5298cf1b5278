from __future__ import annotations

import re

import pytest

import findsym.cache as cache


@pytest.fixture(autouse=True)
def temp_cache_dir(tmp_path, monkeypatch):
    cache_dir = tmp_path / "cache"
    monkeypatch.setattr(cache, "CACHE_DIR", cache_dir)
    return cache_dir


def test_cache_key_is_stable_and_truncated(tmp_path):
    root = tmp_path.resolve()
    first = cache.cache_key(root)

    assert first == cache.cache_key(root)
    assert first == cache.cache_key(type(root)(str(root)))
    assert re.fullmatch(r"[0-9a-f]{32}", first)


def test_cache_key_differs_between_roots(tmp_path):
    assert cache.cache_key(tmp_path / "a") != cache.cache_key(tmp_path / "b")


def test_cache_file_does_not_touch_filesystem(temp_cache_dir):
    path = cache.cache_file("abc")

    assert path == temp_cache_dir / "abc.syms"
    assert not temp_cache_dir.exists()


def test_ensure_cache_dir_is_idempotent(temp_cache_dir):
    assert cache.ensure_cache_dir() == temp_cache_dir
    assert cache.ensure_cache_dir() == temp_cache_dir
    assert temp_cache_dir.is_dir()


def test_load_entry_reports_missing_index(tmp_path):
    entry = cache.load_entry(tmp_path)

    assert entry.exists is False
    assert entry.mtime is None
    assert entry.identifier == cache.cache_key(tmp_path)
    assert entry.updated_at is None
    assert entry.size == 0


def test_write_entry_replaces_content(tmp_path):
    root = tmp_path / "project"
    root.mkdir()

    entry, count = cache.write_entry(root, ["a.o: 1 T alpha\n", "a.o: 2 T beta"])
    assert count == 2
    assert entry.exists
    assert entry.path.read_text(encoding="utf-8") == "a.o: 1 T alpha\na.o: 2 T beta\n"

    entry, count = cache.write_entry(root, ["b.o: 3 T gamma"])
    assert count == 1
    assert entry.path.read_text(encoding="utf-8") == "b.o: 3 T gamma\n"
    assert not list(entry.path.parent.glob("*.tmp"))


def test_write_entry_keeps_previous_index_when_lines_fail(tmp_path):
    root = tmp_path / "project"
    root.mkdir()
    entry, _ = cache.write_entry(root, ["a.o: 1 T alpha"])

    def broken_lines():
        yield "b.o: 2 T beta"
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        cache.write_entry(root, broken_lines())

    assert entry.path.read_text(encoding="utf-8") == "a.o: 1 T alpha\n"
    assert not list(entry.path.parent.glob("*.tmp"))


def test_list_cache_entries_reports_roots(tmp_path):
    assert cache.list_cache_entries() == []

    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    cache.write_entry(first, ["x"])
    cache.write_entry(second, ["y"])

    entries = cache.list_cache_entries()

    assert {entry.root for entry in entries} == {first, second}
    assert all(entry.exists for entry in entries)


def test_remove_entry(tmp_path):
    root = tmp_path / "project"
    root.mkdir()
    cache.write_entry(root, ["x"])

    assert cache.remove_entry(root) is True
    assert cache.load_entry(root).exists is False
    assert cache.remove_entry(root) is False


def test_clear_all_cache_removes_directory(tmp_path, temp_cache_dir):
    root = tmp_path / "project"
    root.mkdir()
    cache.write_entry(root, ["x"])

    assert cache.clear_all_cache() == 1
    assert not temp_cache_dir.exists()
    assert cache.load_entry(root).exists is False


def test_clear_all_cache_without_directory_is_noop(temp_cache_dir):
    assert not temp_cache_dir.exists()
    assert cache.clear_all_cache() == 0


def test_cache_dir_context_scopes_override(tmp_path, temp_cache_dir):
    other = tmp_path / "other"
    with cache.cache_dir_context(other):
        assert cache.cache_dir() == other.resolve()
        assert cache.cache_file("id").parent == other.resolve()
    assert cache.cache_dir() == temp_cache_dir


def test_set_cache_dir_rejects_files(tmp_path, monkeypatch):
    file_path = tmp_path / "file"
    file_path.write_text("x", encoding="utf-8")
    with pytest.raises(NotADirectoryError):
        cache.set_cache_dir(file_path)

    cache.set_cache_dir(tmp_path / "new")
    assert cache.CACHE_DIR == (tmp_path / "new").resolve()
    cache.set_cache_dir(None)
    assert cache.CACHE_DIR == cache.DEFAULT_CACHE_DIR


def test_clear_all_cache_leaves_foreign_files(tmp_path, temp_cache_dir):
    root = tmp_path / "project"
    root.mkdir()
    cache.write_entry(root, ["x"])
    (temp_cache_dir / "config.json").write_text("{}", encoding="utf-8")
    (temp_cache_dir / "notes.syms").write_text("mine", encoding="utf-8")
    (temp_cache_dir / "scratch.tmp").write_text("mine", encoding="utf-8")
    (temp_cache_dir / "nested").mkdir()

    assert cache.clear_all_cache() == 1

    assert sorted(path.name for path in temp_cache_dir.iterdir()) == [
        "config.json",
        "nested",
        "notes.syms",
        "scratch.tmp",
    ]
    assert cache.load_entry(root).exists is False
    assert cache.list_cache_entries() == []
