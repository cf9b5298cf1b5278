"""Centralized user-facing text for the findsym CLI."""

from __future__ import annotations

class Styles:
    ERROR = "red"
    WARNING = "yellow"
    SUCCESS = "green"
    INFO = "dim"
    TITLE = "bold cyan"
    TABLE_HEADER = "bold magenta"


class Messages:
    APP_HELP = "findsym: locate the object and archive files that define a symbol."
    HELP_SYMBOLS = "Symbol names to match as whole words."
    HELP_REGEX = "Regular expression to match against symbol names (repeatable)."
    HELP_SEARCH_PATH = "Root directory whose object and archive files are searched."
    HELP_CLEAN = "Remove every cached symbol index before searching."
    HELP_REBUILD = "Rebuild the symbol index for the search root even if it looks current."
    HELP_NM = "Symbol dump executable to run instead of the configured one."
    HELP_INDEX_PATH = "Root directory to scan recursively for object and archive files."
    HELP_INDEX_FORCE = "Rebuild the index even if the cached one looks current."
    HELP_INDEX_CLEAR = "Remove the cached index for the specified path."
    HELP_CACHE_LIST = "List every cached symbol index."
    HELP_CACHE_CLEAR_ALL = "Remove the whole cache directory."
    HELP_SHOW_CONFIG = "Show current configuration."
    HELP_SET_NM = "Persist the symbol dump executable (default: nm)."
    HELP_SET_EXTENSIONS = "Persist the archive/object file suffixes to index (repeatable)."
    HELP_SET_CACHE_DIR = "Persist a custom cache directory."
    HELP_RESET_CONFIG = "Restore every setting to its default."

    ERROR_NOTHING_TO_SEARCH = (
        "Nothing to search for. Pass symbol names and/or `-e <regex>` patterns."
    )
    ERROR_NM_MISSING = (
        "Symbol dump command `{command}` was not found. Install binutils or "
        "configure another executable via `findsym config --set-nm <command>`."
    )
    ERROR_EXTENSIONS_EMPTY = "At least one non-empty file suffix is required."
    ERROR_CONFIG_INVALID = "Config file {path} is not valid JSON ({reason})."
    ERROR_TEMPLATE_PLACEHOLDER = (
        "Template {template!r} for group '{name}' must contain {placeholder} exactly once."
    )
    ERROR_GROUP_DEFINED = "Pattern group '{name}' is already defined."
    ERROR_GROUP_UNKNOWN = "Unknown pattern group '{name}'."
    ERROR_PATTERN_INVALID = "Invalid pattern {pattern!r}: {reason}."
    WARNING_EMPTY_QUERY = "Query for template {template!r} has no patterns; skipping."

    INFO_INDEX_RUNNING = "Indexing object and archive files under {path}..."
    INFO_INDEX_SAVED = "Index saved to {path} ({files} file{plural}, {symbols} symbols)."
    INFO_INDEX_FAILED_FILES = "Skipped {count} file{plural} the symbol dump could not read."
    INFO_INDEX_EMPTY = "No object or archive files found under {path}."
    INFO_INDEX_UP_TO_DATE = "Index for {path} is current; nothing to do."
    INFO_INDEX_CLEARED = "Removed cached index for {path}."
    INFO_INDEX_CLEAR_NONE = "No cached index found for {path}."
    INFO_CACHE_CLEARED = "Removed {count} cached index entr{plural}."
    INFO_CACHE_CLEAR_NONE = "No cached indexes to remove."
    INFO_CACHE_EMPTY = "No cached indexes found."
    INFO_CACHE_HEADER = "Cached symbol indexes"
    INFO_NO_RESULTS = "No matching symbols found."
    INFO_NM_SET = "Symbol dump command set to {value}."
    INFO_EXTENSIONS_SET = "Indexed suffixes set to {value}."
    INFO_CACHE_DIR_SET = "Cache directory set to {value}."
    INFO_CONFIG_RESET = "Configuration restored to defaults."
    INFO_CONFIG_SUMMARY = (
        "Symbol dump command: {nm}\n"
        "Symbol dump arguments: {nm_args}\n"
        "Indexed suffixes: {extensions}\n"
        "Cache directory: {cache_dir}"
    )

    TABLE_HEADER_ROOT = "Search root"
    TABLE_HEADER_ID = "Cache id"
    TABLE_HEADER_SIZE = "Size"
    TABLE_HEADER_UPDATED = "Updated"
