"""Compile pattern groups into one regular expression and run it over an index."""

from __future__ import annotations

import re
import warnings
from pathlib import Path
from typing import Iterable, Sequence

from .groups import PatternConfigurationError, has_placeholder, render, PLACEHOLDER
from .text import Messages

# The match has to run to the end of the record's last token, so a pattern
# cannot be satisfied by the file name prefix or by a longer symbol's head.
TOKEN_TAIL = r"\S*$"


class EmptyQueryWarning(UserWarning):
    """Issued when a query pass is requested with no patterns."""


class TemplateWarning(UserWarning):
    """Issued when a query pass is given a template without the placeholder."""


class QuerySyntaxError(ValueError):
    """Raised when a pattern does not compile as a regular expression."""


def _template_message(template: str) -> str:
    return Messages.ERROR_TEMPLATE_PLACEHOLDER.format(
        template=template, name="<query>", placeholder=PLACEHOLDER
    )


def build_expression(template: str, pattern: str) -> str:
    return render(template, pattern) + TOKEN_TAIL


def compile_query(template: str, patterns: Sequence[str]) -> re.Pattern[str]:
    """Return one compiled alternation matching any of *patterns*."""

    if not has_placeholder(template):
        raise PatternConfigurationError(_template_message(template))
    parts: list[str] = []
    for pattern in patterns:
        expression = build_expression(template, pattern)
        try:
            re.compile(expression)
        except re.error as exc:
            raise QuerySyntaxError(
                Messages.ERROR_PATTERN_INVALID.format(pattern=pattern, reason=exc)
            ) from exc
        parts.append(f"(?:{expression})")
    return re.compile("|".join(parts))


def run_query(template: str, patterns: Sequence[str], lines: Iterable[str]) -> list[str]:
    """Return every line in *lines* matched by any of *patterns*.

    An empty *patterns* issues :class:`EmptyQueryWarning` and a template
    without the placeholder issues :class:`TemplateWarning`; either way the
    pass returns no matches without consuming *lines*.
    """

    if not has_placeholder(template):
        warnings.warn(_template_message(template), TemplateWarning, stacklevel=2)
        return []
    if not patterns:
        warnings.warn(
            Messages.WARNING_EMPTY_QUERY.format(template=template),
            EmptyQueryWarning,
            stacklevel=2,
        )
        return []
    query = compile_query(template, patterns)
    matches: list[str] = []
    for line in lines:
        record = line.rstrip("\r\n")
        if query.search(record):
            matches.append(record)
    return matches


def search_index(index_path: Path, template: str, patterns: Sequence[str]) -> list[str]:
    """Run one query pass over the index file at *index_path*."""

    if not patterns or not has_placeholder(template):
        return run_query(template, patterns, ())
    with index_path.open("r", encoding="utf-8", errors="replace") as handle:
        return run_query(template, patterns, handle)
