"""Ignore matcher — compile gitignore-style patterns into a reusable rule set.

Dialect (a subset of gitignore, matched against POSIX paths relative to the
walk root):

- blank lines and lines starting with ``#`` are skipped; ``\\#`` and ``\\!``
  escape a literal leading character
- leading whitespace and unescaped trailing spaces are stripped
- ``!`` negates; the last matching rule decides
- a trailing ``/`` only matches directories
- a pattern with a ``/`` anywhere but the end is anchored to the root (a
  leading ``/`` only anchors); without one it matches at any depth
- ``*`` and ``?`` never cross ``/``; ``**`` as a whole segment matches zero or
  more directories; ``[...]`` classes support ranges and ``!``/``^`` negation
- a path inside an excluded directory is excluded, and a negation cannot
  re-include it

Invalid patterns are an unterminated ``[`` class, a bad class range, a
trailing lone backslash, a bare ``!`` and a pattern made only of slashes.

Patterns typed directly by the caller fail the whole invocation when invalid.
Patterns read from a file are skipped with a warning and the remaining rules
still apply.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePath
from typing import Iterable

from skeletor.errors import ConfigError, FilesystemError, PatternError
from skeletor.reporting.reporter import Reporter, SilentReporter

logger = logging.getLogger(__name__)


class PatternOrigin(Enum):
    """Where a pattern came from; decides how a compile failure is handled."""

    DIRECT = "direct"  # Typed on the invocation surface
    FROM_FILE = "from_file"  # One line of a pattern file


@dataclass(frozen=True)
class PatternSpec:
    """An uncompiled pattern plus its provenance."""

    pattern: str
    origin: PatternOrigin = PatternOrigin.DIRECT
    source: str | None = None
    line: int | None = None

    def location(self) -> str:
        if not self.source:
            return ""
        if self.line is not None:
            return f" from {self.source}:{self.line}"
        return f" from {self.source}"


class InvalidPattern(ValueError):
    """Raised by ``compile_pattern``; callers map it per origin."""


@dataclass(frozen=True)
class IgnoreRule:
    pattern: str
    regex: re.Pattern
    negated: bool = False
    dir_only: bool = False
    origin: PatternOrigin = PatternOrigin.DIRECT

    def applies_to(self, path: str, is_dir: bool) -> bool:
        if self.dir_only and not is_dir:
            return False
        return self.regex.match(path) is not None


class IgnoreRuleSet:
    """An ordered list of compiled rules. Matching is pure and total."""

    def __init__(self, rules: Iterable[IgnoreRule] = ()):
        self.rules: tuple[IgnoreRule, ...] = tuple(rules)

    def __len__(self) -> int:
        return len(self.rules)

    def __repr__(self) -> str:
        return f"IgnoreRuleSet({list(self.patterns)!r})"

    @property
    def patterns(self) -> tuple[str, ...]:
        return tuple(rule.pattern for rule in self.rules)

    def matches(self, rel_path: str | PurePath, is_dir: bool = False) -> bool:
        """Return ``True`` when ``rel_path`` (or one of its parent dirs) is excluded."""
        if not self.rules:
            return False
        path = _normalize(rel_path)
        if not path:
            return False
        parts = path.split("/")
        for depth in range(1, len(parts)):
            if self._decide("/".join(parts[:depth]), True):
                return True
        return self._decide(path, is_dir)

    def _decide(self, path: str, is_dir: bool) -> bool:
        ignored = False
        for rule in self.rules:
            if rule.applies_to(path, is_dir):
                ignored = not rule.negated
        return ignored


def _normalize(rel_path: str | PurePath) -> str:
    if isinstance(rel_path, PurePath):
        rel_path = rel_path.as_posix()
    path = rel_path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path.strip("/") if path != "." else ""


# ---------------------------------------------------------------------------
# Compilation
# ---------------------------------------------------------------------------


def clean_pattern(line: str) -> str | None:
    """Strip a raw pattern line; ``None`` for blank lines and comments."""
    text = line.rstrip("\r\n").lstrip()
    if not text or text.startswith("#"):
        return None
    stripped = text.rstrip(" ")
    if stripped != text and stripped.endswith("\\"):
        stripped += " "
    return stripped or None


def compile_pattern(pattern: str, origin: PatternOrigin = PatternOrigin.DIRECT) -> IgnoreRule:
    """Compile one cleaned pattern.

    Raises:
        InvalidPattern: if the pattern cannot be translated.
    """
    text = pattern
    negated = False
    if text.startswith("!"):
        negated = True
        text = text[1:]
        if not text:
            raise InvalidPattern("negation without a pattern")

    dir_only = text.endswith("/") and not text.endswith("\\/")
    text = text.rstrip("/") if dir_only else text
    anchored = "/" in text
    segments = [seg for seg in text.split("/") if seg]
    if not segments:
        raise InvalidPattern("pattern matches nothing")

    body = []
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        if segment == "**":
            body.append(".*" if last else "(?:[^/]*/)*")
            continue
        body.append(_translate_segment(segment))
        if not last:
            body.append("/")

    prefix = "^" if anchored else "^(?:.*/)?"
    source = prefix + "".join(body) + "$"
    try:
        regex = re.compile(source, re.DOTALL)
    except re.error as e:
        raise InvalidPattern(str(e)) from e
    return IgnoreRule(pattern=pattern, regex=regex, negated=negated, dir_only=dir_only, origin=origin)


def _translate_segment(segment: str) -> str:
    out: list[str] = []
    i = 0
    n = len(segment)
    while i < n:
        char = segment[i]
        if char == "\\":
            if i + 1 >= n:
                raise InvalidPattern("trailing backslash")
            out.append(re.escape(segment[i + 1]))
            i += 2
        elif char == "*":
            out.append("[^/]*")
            i += 1
        elif char == "?":
            out.append("[^/]")
            i += 1
        elif char == "[":
            translated, i = _translate_class(segment, i)
            out.append(translated)
        else:
            out.append(re.escape(char))
            i += 1
    return "".join(out)


def _translate_class(segment: str, start: int) -> tuple[str, int]:
    """Translate ``[...]`` starting at ``start``; return regex and the next index."""
    i = start + 1
    negate = i < len(segment) and segment[i] in "!^"
    if negate:
        i += 1
    members: list[str] = []
    first = True
    while i < len(segment):
        char = segment[i]
        if char == "]" and not first:
            head = "[^/" if negate else "["
            return head + "".join(members) + "]", i + 1
        if char == "\\" and i + 1 < len(segment):
            members.append(re.escape(segment[i + 1]))
            i += 2
        else:
            members.append("\\" + char if char in "\\[]^" else char)
            i += 1
        first = False
    raise InvalidPattern("unterminated character class")


# ---------------------------------------------------------------------------
# Rule sets
# ---------------------------------------------------------------------------


def compile_rules(specs: Iterable[PatternSpec], reporter: Reporter | None = None) -> IgnoreRuleSet:
    """Compile pattern specs in order.

    Raises:
        PatternError: for the first invalid ``DIRECT`` pattern. Invalid
            ``FROM_FILE`` patterns are reported as warnings and skipped.
    """
    reporter = reporter or SilentReporter()
    rules: list[IgnoreRule] = []
    for spec in specs:
        text = clean_pattern(spec.pattern)
        if text is None:
            continue
        try:
            rules.append(compile_pattern(text, spec.origin))
        except InvalidPattern as e:
            if spec.origin is PatternOrigin.DIRECT:
                raise PatternError(text, str(e)) from e
            logger.warning("Skipping invalid ignore pattern %r%s: %s", text, spec.location(), e)
            reporter.warning(f"Skipping invalid ignore pattern '{text}'{spec.location()}: {e}")
            reporter.tip("Check ignore pattern syntax or escape special characters")
    logger.debug("Compiled %d ignore rule(s)", len(rules))
    return IgnoreRuleSet(rules)


def load_pattern_file(path: str | Path) -> list[PatternSpec]:
    """Read a pattern file into ``FROM_FILE`` specs, one per line.

    Raises:
        ConfigError: if the file does not exist.
        FilesystemError: if it exists but cannot be read.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigError(
            f"ignore file not found: '{path}'",
            tip="Check the path passed to --ignore-file",
        )
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise FilesystemError.from_os_error(e, path) from e
    return [
        PatternSpec(line, PatternOrigin.FROM_FILE, source=str(path), line=number)
        for number, line in enumerate(text.splitlines(), start=1)
    ]


def collect_ignore_rules(
    patterns: Iterable[str] = (),
    pattern_files: Iterable[str | Path] = (),
    reporter: Reporter | None = None,
) -> IgnoreRuleSet:
    """Build a rule set from command-line values.

    A value in ``patterns`` that names an existing file is read as a pattern
    file; anything else is a direct pattern.
    """
    specs: list[PatternSpec] = []
    for value in patterns:
        if Path(value).is_file():
            specs.extend(load_pattern_file(value))
        else:
            specs.append(PatternSpec(value, PatternOrigin.DIRECT))
    for pattern_file in pattern_files:
        specs.extend(load_pattern_file(pattern_file))
    return compile_rules(specs, reporter)
