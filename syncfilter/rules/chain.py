#!/usr/bin/env python3
"""Filter chains: rule grammar, precedence and transactional reload.

A rule line has the form ``<polarity><type?><strategy?>:<pattern>``:

- polarity: ``-`` exclusion, ``+`` inclusion
- type: ``N`` name (not inherited), ``n`` name (inherited, default),
  ``p`` path (always inherited)
- strategy: ``g`` glob (default), ``r`` regex
- pattern: everything after the ``:``, must not be blank

Lines starting with ``#`` are comments when passed to :meth:`FilterChain.load`.

Example:
    >>> chain = FilterChain()
    >>> chain.load(["# build output", "-n:*.o", "-N:build", "+p:build/keep.o"])
    True
    >>> chain.excluded(Subject("main.o", "src/main.o"), only_inheritable=False)
    True
    >>> chain.included(Subject("keep.o", "build/keep.o"), only_inheritable=False)
    True
"""

import os
import threading
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import IO, Iterable, Iterator, List, NamedTuple, Optional, Tuple, Union

from syncfilter.core.constants import FilterStrategy, FilterType, RuleSyntax
from syncfilter.core.logging import Logger, LogLevel, get_logger
from syncfilter.rules.filters import Filter, GlobFilter, RegexFilter, RuleSyntaxError
from syncfilter.rules.reader import read_numbered_lines

# ASCII whitespace only; other Unicode spaces are pattern characters.
_BLANK = " \t\n\v\f\r"


class Subject(NamedTuple):
    """A filesystem entry under test."""

    name: str
    path: str

    @classmethod
    def from_path(cls, path: Union[str, PurePosixPath]) -> "Subject":
        """Build a subject from a relative POSIX path.

        The name is the last path component.
        """
        path = PurePosixPath(path)
        return cls(path.name, path.as_posix())


@dataclass(frozen=True)
class ParsedRule:
    """A rule line broken into its grammar components."""

    exclusion: bool
    type: FilterType
    inheritable: bool
    strategy: FilterStrategy
    pattern: str

    def build(self) -> Filter:
        """Construct the filter described by this rule.

        Raises:
            RuleSyntaxError: If a regex pattern does not compile
        """
        if self.strategy is FilterStrategy.REGEX:
            return RegexFilter(self.pattern, self.inheritable, self.type)
        return GlobFilter(self.pattern, self.inheritable, self.type)


def parse_rule(text: str) -> ParsedRule:
    """Parse one rule line.

    Selector characters are only consumed directly after the polarity
    character; the first ``:`` after them starts the pattern, so
    ``-:n:foo`` is a name glob for ``n:foo``.

    Raises:
        RuleSyntaxError: If the line does not follow the grammar
    """
    if not text:
        raise RuleSyntaxError(text, "empty rule")

    polarity = text[0]
    if polarity == RuleSyntax.EXCLUDE:
        exclusion = True
    elif polarity == RuleSyntax.INCLUDE:
        exclusion = False
    else:
        raise RuleSyntaxError(text, f"unknown polarity {polarity!r}, expected '-' or '+'")

    pos = 1
    inheritable = True
    type = FilterType.NAME

    selector = text[pos:pos + 1]
    if selector == RuleSyntax.NAME_LOCAL:
        inheritable = False
        pos += 1
    elif selector == RuleSyntax.NAME:
        pos += 1
    elif selector == RuleSyntax.PATH:
        type = FilterType.PATH
        pos += 1

    strategy = FilterStrategy.GLOB

    selector = text[pos:pos + 1]
    if selector == RuleSyntax.GLOB:
        pos += 1
    elif selector == RuleSyntax.REGEX:
        strategy = FilterStrategy.REGEX
        pos += 1

    if text[pos:pos + 1] != RuleSyntax.SEPARATOR:
        raise RuleSyntaxError(text, f"expected {RuleSyntax.SEPARATOR!r} at position {pos}")

    pattern = text[pos + 1:]
    if not pattern.strip(_BLANK):
        raise RuleSyntaxError(text, "empty pattern")

    return ParsedRule(exclusion, type, inheritable, strategy, pattern)


class FilterClass:
    """Filters of one polarity, split into path and name filters.

    Path filters are evaluated before name filters; within each list,
    insertion order is evaluation order.
    """

    def __init__(self, logger: Optional[Logger] = None):
        """Initialize filter class.

        Args:
            logger: Receives DEBUG records for skipped and matching filters
        """
        self._names: List[Filter] = []
        self._paths: List[Filter] = []
        self._logger = logger

    def add(self, filter: Filter) -> None:
        """Append a filter to the list selected by its type."""
        if filter.type is FilterType.NAME:
            self._names.append(filter)
        elif filter.type is FilterType.PATH:
            self._paths.append(filter)
        else:
            raise AssertionError(f"Unknown filter type: {filter.type!r}")

    def clear(self) -> None:
        """Remove all filters."""
        self._names.clear()
        self._paths.clear()

    def empty(self) -> bool:
        return not self._names and not self._paths

    def match(self, subject: Subject, only_inheritable: bool) -> bool:
        """Check whether any applicable filter matches the subject.

        Args:
            subject: Entry under test; path filters see ``subject.path``,
                name filters see ``subject.name``
            only_inheritable: Skip filters that are not inheritable

        Returns:
            True on the first matching filter
        """
        trace = self._logger is not None and self._logger.is_enabled_for(LogLevel.DEBUG)

        for filters, value in ((self._paths, subject.path), (self._names, subject.name)):
            for f in filters:
                if only_inheritable and not f.inheritable:
                    if trace:
                        self._logger.debug("Skipped uninheritable filter", filter=str(f))
                    continue

                if f.match(value):
                    if trace:
                        self._logger.debug("Filter matched", subject=value, filter=str(f))
                    return True

        return False

    @property
    def names(self) -> Tuple[Filter, ...]:
        return tuple(self._names)

    @property
    def paths(self) -> Tuple[Filter, ...]:
        return tuple(self._paths)

    def __iter__(self) -> Iterator[Filter]:
        """Iterate filters in evaluation order."""
        yield from self._paths
        yield from self._names

    def __len__(self) -> int:
        return len(self._names) + len(self._paths)


class FilterChain:
    """Exclusion and inclusion filters for one directory scope.

    ``add``, ``load`` and ``clear`` serialise on an internal lock. The
    committed ``(exclusions, inclusions)`` pair is replaced with a single
    assignment, so ``excluded``/``included`` never observe a partially
    loaded rule set.
    """

    def __init__(self, logger: Optional[Logger] = None):
        """Initialize an empty chain.

        Args:
            logger: Diagnostics sink; defaults to the package logger
        """
        self._logger = logger if logger is not None else get_logger()
        self._lock = threading.RLock()
        self._state: Tuple[FilterClass, FilterClass] = self._new_state()
        self.last_error: Optional[RuleSyntaxError] = None

    def _new_state(self) -> Tuple[FilterClass, FilterClass]:
        return FilterClass(self._logger), FilterClass(self._logger)

    def _build(self, text: str) -> Optional[Tuple[bool, Filter]]:
        try:
            rule = parse_rule(text)
            filter = rule.build()
        except RuleSyntaxError as e:
            # Regex errors carry only the pattern; report the whole line.
            error = e if e.rule == text else RuleSyntaxError(text, e.reason)
            self.last_error = error
            self._logger.debug("Syntax error parsing rule", rule=text, reason=error.reason)
            return None

        self._logger.debug(
            "Adding exclusion" if rule.exclusion else "Adding inclusion", filter=str(filter)
        )
        return rule.exclusion, filter

    def add(self, text: str) -> bool:
        """Parse a rule line and append the resulting filter.

        Returns:
            False on a syntax error (the chain is left unchanged)
        """
        with self._lock:
            built = self._build(text)
            if built is None:
                return False

            exclusion, filter = built
            exclusions, inclusions = self._state
            (exclusions if exclusion else inclusions).add(filter)
            return True

    def load(self, lines: Iterable[str]) -> bool:
        """Replace every filter with the rules in ``lines``.

        Comment lines (starting with ``#``) are skipped. If any other line
        fails to parse, nothing is committed and the previous filters stay
        in effect.

        Returns:
            True if every rule was accepted and committed
        """
        return self.load_numbered(enumerate(lines, start=1))

    def load_numbered(self, lines: Iterable[Tuple[int, str]]) -> bool:
        """Like :meth:`load`, for ``(line number, text)`` pairs.

        A syntax error records the paired line number, so sources with
        dropped blank lines still report their real positions.
        """
        with self._lock:
            exclusions, inclusions = self._new_state()

            for lineno, line in lines:
                if line.startswith(RuleSyntax.COMMENT):
                    continue

                built = self._build(line)
                if built is None:
                    self.last_error.line = lineno
                    self._logger.debug("Filters not committed", line=lineno)
                    return False

                exclusion, filter = built
                (exclusions if exclusion else inclusions).add(filter)

            self._state = (exclusions, inclusions)
            return True

    def load_stream(self, stream: IO) -> bool:
        """Read rule lines from a text or binary stream and :meth:`load` them."""
        try:
            lines = read_numbered_lines(stream)
        except (OSError, UnicodeDecodeError) as e:
            self._logger.warning("Unable to read filter rules", error=str(e))
            return False
        return self.load_numbered(lines)

    def load_file(self, path: Union[str, os.PathLike]) -> bool:
        """Read rule lines from a file and :meth:`load` them.

        Returns:
            False if the file cannot be read or any rule is malformed
        """
        try:
            with open(path, "rb") as f:
                return self.load_stream(f)
        except OSError as e:
            self._logger.warning("Unable to open filter rules", path=str(path), error=str(e))
            return False

    def clear(self) -> None:
        """Remove all filters."""
        with self._lock:
            self._state = self._new_state()

    def empty(self) -> bool:
        exclusions, inclusions = self._state
        return exclusions.empty() and inclusions.empty()

    def excluded(self, subject: Subject, only_inheritable: bool) -> bool:
        """Check whether an exclusion filter matches the subject."""
        return self._state[0].match(subject, only_inheritable)

    def included(self, subject: Subject, only_inheritable: bool) -> bool:
        """Check whether an inclusion filter matches the subject."""
        return self._state[1].match(subject, only_inheritable)

    @property
    def exclusions(self) -> Tuple[Filter, ...]:
        """Snapshot of the committed exclusions, in evaluation order."""
        return tuple(self._state[0])

    @property
    def inclusions(self) -> Tuple[Filter, ...]:
        """Snapshot of the committed inclusions, in evaluation order."""
        return tuple(self._state[1])

    def __len__(self) -> int:
        exclusions, inclusions = self._state
        return len(exclusions) + len(inclusions)
