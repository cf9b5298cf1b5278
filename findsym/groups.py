"""Named groups of symbol patterns sharing one match template."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from .text import Messages

PLACEHOLDER = "{pattern}"
WORD_GROUP = "word"
REGEX_GROUP = "regex"
WORD_TEMPLATE = r"\b" + PLACEHOLDER + r"\b"
REGEX_TEMPLATE = PLACEHOLDER


class PatternConfigurationError(ValueError):
    """Raised when a group template is malformed."""


class UnknownGroupError(KeyError):
    """Raised when patterns are added to a group that was never defined."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


def has_placeholder(template: str) -> bool:
    return template.count(PLACEHOLDER) == 1


def render(template: str, pattern: str) -> str:
    """Substitute *pattern* into *template* without interpreting braces."""
    return template.replace(PLACEHOLDER, pattern)


@dataclass(slots=True)
class PatternGroup:
    name: str
    template: str
    patterns: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.patterns


class PatternGroupRegistry:
    """Ordered mapping of group name to :class:`PatternGroup`.

    Groups are defined up front, filled while arguments are processed, and only
    read once queries run.
    """

    def __init__(self) -> None:
        self._groups: dict[str, PatternGroup] = {}

    def define_group(self, name: str, template: str) -> PatternGroup:
        if not has_placeholder(template):
            raise PatternConfigurationError(
                Messages.ERROR_TEMPLATE_PLACEHOLDER.format(
                    template=template, name=name, placeholder=PLACEHOLDER
                )
            )
        if name in self._groups:
            raise PatternConfigurationError(Messages.ERROR_GROUP_DEFINED.format(name=name))
        group = PatternGroup(name=name, template=template)
        self._groups[name] = group
        return group

    def add_pattern(self, name: str, pattern: str) -> None:
        self.get(name).patterns.append(pattern)

    def extend(self, name: str, patterns) -> None:
        group = self.get(name)
        for pattern in patterns:
            group.patterns.append(pattern)

    def is_empty(self, name: str) -> bool:
        return self.get(name).is_empty

    def get(self, name: str) -> PatternGroup:
        try:
            return self._groups[name]
        except KeyError:
            raise UnknownGroupError(Messages.ERROR_GROUP_UNKNOWN.format(name=name)) from None

    def names(self) -> list[str]:
        return list(self._groups)

    def __contains__(self, name: object) -> bool:
        return name in self._groups

    def __iter__(self) -> Iterator[PatternGroup]:
        return iter(self._groups.values())

    def __len__(self) -> int:
        return len(self._groups)


def default_registry() -> PatternGroupRegistry:
    """Return a registry holding the built-in whole-word and regex groups."""

    registry = PatternGroupRegistry()
    registry.define_group(WORD_GROUP, WORD_TEMPLATE)
    registry.define_group(REGEX_GROUP, REGEX_TEMPLATE)
    return registry
