"""Command line interface for findsym."""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import click
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from typer.core import TyperGroup

from . import __version__
from .api import FindsymError, RuntimeSettings, data_dir_context, resolve_settings
from .cache import cache_dir, clear_all_cache, list_cache_entries, load_entry
from .config import ConfigError, load_config
from .query import QuerySyntaxError
from .services.cache_service import is_cache_stale
from .services.config_service import apply_config_updates, get_config_snapshot
from .services.index_service import (
    IndexResult,
    IndexStatus,
    SymbolDumpUnavailable,
    build_index,
    clear_index_entry,
)
from .services.search_service import SearchRequest, perform_search
from .text import Messages, Styles
from .utils import format_size, plural_suffix, resolve_directory

console = Console()
err_console = Console(stderr=True)

_GROUP_OPTIONS = {
    "-h",
    "--help",
    "-v",
    "--version",
    "--install-completion",
    "--show-completion",
}


def _route_default_command(args: list[str]) -> list[str]:
    """Send option-first invocations such as ``findsym -e 'foo.*'`` to search."""

    if not args:
        return args
    first = args[0]
    if first == "--" or (first.startswith("-") and first not in _GROUP_OPTIONS):
        return ["search", *args]
    return args


class DefaultSearchGroup(TyperGroup):
    """Treat unknown subcommands as search queries."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        return super().parse_args(ctx, _route_default_command(list(args)))

    def resolve_command(
        self,
        ctx: click.Context,
        args: list[str],
    ) -> tuple[str | None, click.Command | None, list[str]]:
        original_args = list(args)
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError:
            if not original_args:
                raise
            token = original_args[0]
            if token.startswith("-"):
                raise
            command = self.get_command(ctx, "search")
            if command is None:
                raise
            return "search", command, original_args


app = typer.Typer(
    help=Messages.APP_HELP,
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    cls=DefaultSearchGroup,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"findsym v{__version__}")
        raise typer.Exit()


def _styled(text: str, style: str) -> str:
    return f"[{style}]{escape(text)}[/{style}]"


def _fail(message: str) -> NoReturn:
    err_console.print(_styled(message, Styles.ERROR))
    raise typer.Exit(code=1)


def _load_settings(nm_command: str | None = None) -> RuntimeSettings:
    try:
        return resolve_settings(load_config(), nm_command=nm_command)
    except (ConfigError, FindsymError) as exc:
        _fail(str(exc))


def _resolve_root(path: Path) -> Path:
    try:
        return resolve_directory(path)
    except (FileNotFoundError, NotADirectoryError) as exc:
        _fail(str(exc))


def _report_cleared(removed: int) -> None:
    if removed:
        err_console.print(
            _styled(
                Messages.INFO_CACHE_CLEARED.format(
                    count=removed,
                    plural=plural_suffix(removed, "y", "ies"),
                ),
                Styles.SUCCESS,
            )
        )
    else:
        err_console.print(_styled(Messages.INFO_CACHE_CLEAR_NONE, Styles.INFO))


def _report_index(result: IndexResult, directory: Path) -> None:
    if result.status == IndexStatus.UP_TO_DATE:
        return
    if result.status == IndexStatus.EMPTY:
        err_console.print(
            _styled(Messages.INFO_INDEX_EMPTY.format(path=directory), Styles.WARNING)
        )
        return
    err_console.print(
        _styled(
            Messages.INFO_INDEX_SAVED.format(
                path=result.cache_path,
                files=result.files_scanned,
                plural=plural_suffix(result.files_scanned),
                symbols=result.symbol_count,
            ),
            Styles.SUCCESS,
        )
    )
    if result.files_failed:
        err_console.print(
            _styled(
                Messages.INFO_INDEX_FAILED_FILES.format(
                    count=result.files_failed,
                    plural=plural_suffix(result.files_failed),
                ),
                Styles.WARNING,
            )
        )


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    )
) -> None:
    """Global Typer callback for shared options."""
    return None


@app.command()
def search(
    symbols: list[str] | None = typer.Argument(None, help=Messages.HELP_SYMBOLS),
    regexes: list[str] | None = typer.Option(
        None,
        "--regex",
        "-e",
        help=Messages.HELP_REGEX,
    ),
    path: Path = typer.Option(
        Path("."),
        "--path",
        "-p",
        help=Messages.HELP_SEARCH_PATH,
    ),
    clean: bool = typer.Option(False, "--clean", "-c", help=Messages.HELP_CLEAN),
    rebuild: bool = typer.Option(False, "--rebuild", "-r", help=Messages.HELP_REBUILD),
    nm_command: str | None = typer.Option(None, "--nm", help=Messages.HELP_NM),
) -> None:
    """Print every indexed symbol record matching the given names or patterns."""
    settings = _load_settings(nm_command)
    words = tuple(symbol for symbol in symbols or () if symbol)
    patterns = tuple(regex for regex in regexes or () if regex)

    with data_dir_context(cache_dir=settings.cache_dir):
        if clean:
            _report_cleared(clear_all_cache())
        if not words and not patterns:
            if clean:
                return
            _fail(Messages.ERROR_NOTHING_TO_SEARCH)

        directory = _resolve_root(path)
        if rebuild or is_cache_stale(directory, load_entry(directory)):
            err_console.print(
                _styled(Messages.INFO_INDEX_RUNNING.format(path=directory), Styles.INFO)
            )
        request = SearchRequest(
            directory=directory,
            words=words,
            regexes=patterns,
            rebuild=rebuild,
            nm_command=settings.nm_command,
            nm_args=settings.nm_args,
            extensions=settings.extensions,
        )
        try:
            response = perform_search(request)
        except (SymbolDumpUnavailable, QuerySyntaxError) as exc:
            _fail(str(exc))

    _report_index(response.index, directory)
    lines = response.matched_lines
    if not lines:
        err_console.print(_styled(Messages.INFO_NO_RESULTS, Styles.WARNING))
        return
    for line in lines:
        typer.echo(line)


@app.command()
def index(
    path: Path = typer.Option(
        Path("."),
        "--path",
        "-p",
        help=Messages.HELP_INDEX_PATH,
    ),
    force: bool = typer.Option(False, "--force", "-f", help=Messages.HELP_INDEX_FORCE),
    clear: bool = typer.Option(False, "--clear", help=Messages.HELP_INDEX_CLEAR),
    nm_command: str | None = typer.Option(None, "--nm", help=Messages.HELP_NM),
) -> None:
    """Create or refresh the cached symbol index for the given directory."""
    settings = _load_settings(nm_command)
    directory = _resolve_root(path)

    with data_dir_context(cache_dir=settings.cache_dir):
        if clear:
            if clear_index_entry(directory):
                console.print(
                    _styled(Messages.INFO_INDEX_CLEARED.format(path=directory), Styles.SUCCESS)
                )
            else:
                console.print(
                    _styled(Messages.INFO_INDEX_CLEAR_NONE.format(path=directory), Styles.INFO)
                )
            return

        if force or is_cache_stale(directory, load_entry(directory)):
            err_console.print(
                _styled(Messages.INFO_INDEX_RUNNING.format(path=directory), Styles.INFO)
            )
        try:
            result = build_index(
                directory,
                force=force,
                nm_command=settings.nm_command,
                nm_args=settings.nm_args,
                extensions=settings.extensions,
            )
        except SymbolDumpUnavailable as exc:
            _fail(str(exc))

    if result.status == IndexStatus.UP_TO_DATE:
        console.print(
            _styled(Messages.INFO_INDEX_UP_TO_DATE.format(path=directory), Styles.INFO)
        )
        return
    _report_index(result, directory)


@app.command()
def cache(
    list_entries: bool = typer.Option(False, "--list", "-l", help=Messages.HELP_CACHE_LIST),
    clear_all: bool = typer.Option(False, "--clear-all", help=Messages.HELP_CACHE_CLEAR_ALL),
) -> None:
    """Inspect or wipe the symbol index cache."""
    settings = _load_settings()
    with data_dir_context(cache_dir=settings.cache_dir):
        if clear_all:
            _report_cleared(clear_all_cache())
            return
        entries = list_cache_entries()
        location = cache_dir()

    if not entries:
        console.print(_styled(Messages.INFO_CACHE_EMPTY, Styles.INFO))
        return
    console.print(_styled(f"{Messages.INFO_CACHE_HEADER} ({location})", Styles.TITLE))
    table = Table(show_header=True, header_style=Styles.TABLE_HEADER)
    table.add_column(Messages.TABLE_HEADER_ROOT, overflow="fold")
    table.add_column(Messages.TABLE_HEADER_ID, no_wrap=True)
    table.add_column(Messages.TABLE_HEADER_SIZE, justify="right")
    table.add_column(Messages.TABLE_HEADER_UPDATED, overflow="fold")
    for entry in entries:
        table.add_row(
            escape(str(entry.root)) if entry.root is not None else "unknown",
            entry.identifier,
            format_size(entry.size),
            entry.updated_at or "",
        )
    console.print(table)


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help=Messages.HELP_SHOW_CONFIG),
    set_nm: str | None = typer.Option(None, "--set-nm", help=Messages.HELP_SET_NM),
    set_extensions: list[str] | None = typer.Option(
        None,
        "--set-extensions",
        help=Messages.HELP_SET_EXTENSIONS,
    ),
    set_cache_dir: str | None = typer.Option(
        None,
        "--set-cache-dir",
        help=Messages.HELP_SET_CACHE_DIR,
    ),
    reset: bool = typer.Option(False, "--reset", help=Messages.HELP_RESET_CONFIG),
) -> None:
    """Manage findsym configuration."""
    try:
        updates = apply_config_updates(
            reset=reset,
            nm_command=set_nm,
            extensions=set_extensions,
            cache_dir=set_cache_dir,
        )
    except ConfigError as exc:
        _fail(str(exc))
    except ValueError as exc:
        raise typer.BadParameter(Messages.ERROR_EXTENSIONS_EMPTY) from exc

    if updates.reset:
        console.print(_styled(Messages.INFO_CONFIG_RESET, Styles.SUCCESS))
    if updates.nm_command_set:
        console.print(_styled(Messages.INFO_NM_SET.format(value=set_nm), Styles.SUCCESS))
    if updates.extensions_set:
        cfg = get_config_snapshot()
        console.print(
            _styled(
                Messages.INFO_EXTENSIONS_SET.format(value=", ".join(cfg.extensions)),
                Styles.SUCCESS,
            )
        )
    if updates.cache_dir_set:
        console.print(
            _styled(
                Messages.INFO_CACHE_DIR_SET.format(value=set_cache_dir or "default"),
                Styles.SUCCESS,
            )
        )

    if show or not updates.changed:
        try:
            cfg = get_config_snapshot()
        except ConfigError as exc:
            _fail(str(exc))
        with data_dir_context(cache_dir=cfg.cache_dir):
            location = cache_dir()
        console.print(
            _styled(
                Messages.INFO_CONFIG_SUMMARY.format(
                    nm=cfg.nm_command,
                    nm_args=" ".join(cfg.nm_args) or "none",
                    extensions=", ".join(cfg.extensions),
                    cache_dir=location,
                ),
                Styles.INFO,
            )
        )


def run(argv: list[str] | None = None) -> None:
    """Entry point wrapper allowing optional argument override."""
    if argv is None:
        app()
    else:
        app(args=list(argv))
