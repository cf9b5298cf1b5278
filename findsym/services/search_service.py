"""Logic helpers for the `findsym search` command."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from .index_service import IndexResult, build_index
from ..config import DEFAULT_EXTENSIONS, DEFAULT_NM_ARGS, DEFAULT_NM_COMMAND
from ..groups import REGEX_GROUP, WORD_GROUP, PatternGroupRegistry, default_registry
from ..query import compile_query, search_index


@dataclass(slots=True)
class SearchRequest:
    directory: Path
    words: tuple[str, ...] = ()
    regexes: tuple[str, ...] = ()
    rebuild: bool = False
    nm_command: str = DEFAULT_NM_COMMAND
    nm_args: tuple[str, ...] = DEFAULT_NM_ARGS
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS

    @property
    def has_patterns(self) -> bool:
        return bool(self.words or self.regexes)


@dataclass(slots=True)
class SearchResponse:
    base_path: Path
    index: IndexResult
    # executed groups only, in registry order
    matches: dict[str, list[str]] = field(default_factory=dict)

    @property
    def matched_lines(self) -> list[str]:
        lines: list[str] = []
        for group_lines in self.matches.values():
            lines.extend(group_lines)
        return lines


def build_registry(
    words: Sequence[str] = (),
    regexes: Sequence[str] = (),
) -> PatternGroupRegistry:
    registry = default_registry()
    registry.extend(WORD_GROUP, words)
    registry.extend(REGEX_GROUP, regexes)
    return registry


def perform_search(request: SearchRequest) -> SearchResponse:
    """Refresh the index for the request root if needed and run each group's query."""

    registry = build_registry(request.words, request.regexes)
    # malformed patterns fail before any index work
    for group in registry:
        if not group.is_empty:
            compile_query(group.template, group.patterns)
    index_result = build_index(
        request.directory,
        force=request.rebuild,
        nm_command=request.nm_command,
        nm_args=request.nm_args,
        extensions=request.extensions,
    )
    response = SearchResponse(base_path=request.directory, index=index_result)
    for group in registry:
        if group.is_empty:
            continue
        response.matches[group.name] = search_index(
            index_result.cache_path,
            group.template,
            group.patterns,
        )
    return response
