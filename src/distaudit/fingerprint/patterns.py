"""Ignore rules used to exclude files and directories from fingerprinting."""

from collections.abc import Iterable, Sequence
import fnmatch
import posixpath
import re
from typing import Protocol, runtime_checkable

from attrs import define, field

WILDCARD = "wildcard"
GLOB = "glob"
SYNTAXES = (WILDCARD, GLOB)


@runtime_checkable
class Pattern(Protocol):
    def matches(self, relative_path: str) -> bool: ...


def _compile_wildcard(pattern: str) -> re.Pattern[str]:
    # Only "*" is special; every other character, dots included, is literal.
    return re.compile(".*".join(re.escape(part) for part in pattern.split("*")), re.DOTALL)


@define(frozen=True, slots=True)
class WildcardRule:
    """
    A `*`-only pattern matched in full against a relative path or its base name.

    `*` expands to any run of characters, path separators included.
    """

    pattern: str
    _regex: re.Pattern[str] = field(init=False, repr=False, eq=False)

    def __attrs_post_init__(self) -> None:
        object.__setattr__(self, "_regex", _compile_wildcard(self.pattern))

    def matches(self, relative_path: str) -> bool:
        base_name = posixpath.basename(relative_path)
        return bool(
            self._regex.fullmatch(relative_path) or self._regex.fullmatch(base_name)
        )


@define(frozen=True, slots=True)
class GlobRule:
    """An fnmatch pattern (`*`, `?`, `[...]`) tested like WildcardRule."""

    pattern: str

    def matches(self, relative_path: str) -> bool:
        base_name = posixpath.basename(relative_path)
        return fnmatch.fnmatchcase(relative_path, self.pattern) or fnmatch.fnmatchcase(
            base_name, self.pattern
        )


def compile_patterns(
    patterns: Iterable[str], syntax: str = WILDCARD
) -> tuple[Pattern, ...]:
    if syntax == WILDCARD:
        return tuple(WildcardRule(p) for p in patterns)
    if syntax == GLOB:
        return tuple(GlobRule(p) for p in patterns)
    raise ValueError(f"Unknown ignore pattern syntax: {syntax!r}")


def matches(relative_path: str, base_name: str, patterns: Sequence[str]) -> bool:
    """True if any wildcard pattern matches *relative_path* or *base_name*."""
    for pattern in patterns:
        regex = _compile_wildcard(pattern)
        if regex.fullmatch(relative_path) or regex.fullmatch(base_name):
            return True
    return False


def is_ignored(relative_path: str, rules: Iterable[Pattern]) -> bool:
    return any(rule.matches(relative_path) for rule in rules)
