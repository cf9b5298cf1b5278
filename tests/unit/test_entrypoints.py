from __future__ import annotations

import runpy
import sys

import pytest
from typer.testing import CliRunner

import findsym
from findsym.cli import app


def test_get_version_matches_dunder():
    assert findsym.get_version() == findsym.__version__


def test_module_main_calls_run(monkeypatch):
    import findsym.__main__ as main_mod

    called = {"ok": False}

    def fake_run():
        called["ok"] = True

    monkeypatch.setattr(main_mod, "run", fake_run)
    main_mod.main()
    assert called["ok"] is True


def test_module_runs_as_script(monkeypatch):
    import findsym.cli

    called = {"ok": False}

    def fake_run() -> None:
        called["ok"] = True

    monkeypatch.setattr(findsym.cli, "run", fake_run)

    sys.modules.pop("findsym.__main__", None)

    with pytest.raises(SystemExit) as exc:
        runpy.run_module("findsym.__main__", run_name="__main__")

    assert called["ok"] is True
    assert exc.value.code is None


def test_cli_version_flag_prints_version():
    runner = CliRunner()
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"findsym v{findsym.__version__}" in result.stdout
