"""Group pattern classification and glob compilation.

A group is a list of raw pattern strings.  Each one is classified by
prefix and compiled into one of two glob sets:

- ``pkg:<glob>``  matches the crate name (identifier namespace)
- ``path:<glob>`` matches the workspace-relative crate directory
- ``<glob>``      no prefix: treated exactly like ``path:<glob>``, the
  same convention cargo uses for its own package-selection globs

Glob dialect (whole-string, case-sensitive match)::

    ?        any single character
    *        any sequence of characters, including ``/``
    **       any sequence; ``**/`` also matches zero leading directories
    [abc]    character class; ``[a-z]`` ranges, ``[!a]`` / ``[^a]`` negation
    {a,b}    alternation (not nested)
    \\x      literal ``x``

This is the default dialect of cargo's ``globset`` crate.  Malformed
globs raise :class:`PatternError` and the whole group fails to compile.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import StrEnum
from typing import TYPE_CHECKING

from pydantic import BaseModel

from cargo_groups.domain.errors import PatternError

if TYPE_CHECKING:
    from cargo_groups.domain.packages import Package

IDENTIFIER_PREFIX = "pkg:"
PATH_PREFIX = "path:"


class RuleKind(StrEnum):
    """Namespace a pattern is matched against."""

    IDENTIFIER = "identifier"
    PATH = "path"


class PatternRule(BaseModel):
    """A classified group pattern.

    Attributes:
        kind: Which namespace the glob applies to.
        glob: The glob with its prefix removed.
        raw: The pattern exactly as written in the manifest.
    """

    model_config = {"frozen": True}

    kind: RuleKind
    glob: str
    raw: str


def parse_rule(raw: str) -> PatternRule:
    """Classify a raw pattern by its prefix."""
    if raw.startswith(IDENTIFIER_PREFIX):
        return PatternRule(kind=RuleKind.IDENTIFIER, glob=raw[len(IDENTIFIER_PREFIX) :], raw=raw)
    if raw.startswith(PATH_PREFIX):
        return PatternRule(kind=RuleKind.PATH, glob=raw[len(PATH_PREFIX) :], raw=raw)
    return PatternRule(kind=RuleKind.PATH, glob=raw, raw=raw)


class _GlobSyntaxError(Exception):
    """Internal: raised by translate(), re-raised as PatternError."""


def _translate_class(glob: str, start: int) -> tuple[str, int]:
    """Translate the character class opening at *start*.

    Returns the regex fragment and the index just past the closing ``]``.
    """
    i = start + 1
    n = len(glob)
    negate = i < n and glob[i] in "!^"
    if negate:
        i += 1

    members: list[str] = []
    first = True
    while i < n and (glob[i] != "]" or first):
        first = False
        lo = glob[i]
        if i + 2 < n and glob[i + 1] == "-" and glob[i + 2] != "]":
            hi = glob[i + 2]
            if lo > hi:
                raise _GlobSyntaxError(f"invalid character range {lo}-{hi}")
            members.append(f"{re.escape(lo)}-{re.escape(hi)}")
            i += 3
        else:
            members.append(re.escape(lo))
            i += 1

    if i >= n:
        raise _GlobSyntaxError("unclosed character class")
    body = "".join(members)
    return (f"[^{body}]" if negate else f"[{body}]"), i + 1


def translate(glob: str) -> str:
    """Translate a glob into an (unanchored) regular expression.

    Raises:
        PatternError: If *glob* is not valid glob syntax.
    """
    try:
        return _translate(glob)
    except _GlobSyntaxError as exc:
        raise PatternError(glob, str(exc)) from None


def _translate(glob: str) -> str:
    out: list[str] = []
    in_alternation = False
    i = 0
    n = len(glob)
    while i < n:
        c = glob[i]
        if c == "\\":
            if i + 1 >= n:
                raise _GlobSyntaxError("dangling escape")
            out.append(re.escape(glob[i + 1]))
            i += 2
        elif c == "*":
            j = i
            while j < n and glob[j] == "*":
                j += 1
            recursive = j - i >= 2
            after_separator = i == 0 or glob[i - 1] == "/"
            if recursive and after_separator and j < n and glob[j] == "/":
                # Leading or inner "**/" may match zero directories.
                out.append("(?:.*/)?")
                j += 1
            else:
                out.append(".*")
            i = j
        elif c == "?":
            out.append(".")
            i += 1
        elif c == "[":
            fragment, i = _translate_class(glob, i)
            out.append(fragment)
        elif c == "{":
            if in_alternation:
                raise _GlobSyntaxError("nested alternation")
            in_alternation = True
            out.append("(?:")
            i += 1
        elif c == "}":
            if not in_alternation:
                raise _GlobSyntaxError("unopened alternation")
            in_alternation = False
            out.append(")")
            i += 1
        elif c == "," and in_alternation:
            out.append("|")
            i += 1
        else:
            out.append(re.escape(c))
            i += 1

    if in_alternation:
        raise _GlobSyntaxError("unclosed alternation")
    return "".join(out)


def _compile_set(rules: list[PatternRule]) -> re.Pattern[str] | None:
    """Compile many rules into one alternation; ``None`` matches nothing."""
    if not rules:
        return None
    fragments: list[str] = []
    for rule in rules:
        try:
            fragments.append(f"(?:{_translate(rule.glob)})")
        except _GlobSyntaxError as exc:
            raise PatternError(rule.raw, str(exc)) from None
    return re.compile("|".join(fragments), re.DOTALL)


class CompiledMatcher:
    """Two compiled glob sets: one over crate names, one over crate paths.

    Immutable after construction; safe to query from several threads.
    """

    __slots__ = ("_identifier_re", "_path_re", "_rules")

    def __init__(self, rules: Iterable[PatternRule]) -> None:
        self._rules = tuple(rules)
        self._identifier_re = _compile_set(
            [r for r in self._rules if r.kind is RuleKind.IDENTIFIER]
        )
        self._path_re = _compile_set([r for r in self._rules if r.kind is RuleKind.PATH])

    @property
    def rules(self) -> tuple[PatternRule, ...]:
        return self._rules

    def identifier_matches(self, identifier: str) -> bool:
        if self._identifier_re is None:
            return False
        return self._identifier_re.fullmatch(identifier) is not None

    def path_matches(self, path: str) -> bool:
        if self._path_re is None:
            return False
        return self._path_re.fullmatch(path) is not None

    def matches(self, package: Package) -> bool:
        """True if the package's name OR its path satisfies the group."""
        return self.identifier_matches(package.identifier) or self.path_matches(package.path)

    def __repr__(self) -> str:
        return f"CompiledMatcher({[r.raw for r in self._rules]!r})"


def classify(raw_patterns: Iterable[str]) -> CompiledMatcher:
    """Classify raw group patterns and compile them into a matcher.

    Raises:
        PatternError: If any pattern is malformed.  No partial matcher
            is ever returned.
    """
    return CompiledMatcher(parse_rule(raw) for raw in raw_patterns)
