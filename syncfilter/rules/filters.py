#!/usr/bin/env python3
r"""Single compiled filter rules.

A filter is one matching rule: pattern text, whether it is inherited by
subdirectories, and whether it looks at an entry's name or its path.
Two matching strategies are provided:

- GlobFilter: shell wildcards (``*``, ``?``, ``[...]``), whole-string match
- RegexFilter: regular expression compiled once, whole-string match

Example:
    >>> f = RegexFilter(r".*\.log", inheritable=True, type=FilterType.NAME)
    >>> f.match("server.log")
    True
    >>> str(f)
    'NAME/REGEX:.*\\.log'
"""

import fnmatch
import re
from abc import ABC, abstractmethod
from typing import Optional, Pattern

from syncfilter.core.constants import ErrorCode, FilterStrategy, FilterType


class RuleSyntaxError(Exception):
    """A rule line that does not follow the filter grammar."""

    def __init__(
        self,
        rule: str,
        reason: str,
        line: Optional[int] = None,
        error_code: ErrorCode = ErrorCode.INVALID_INPUT,
    ):
        """Initialize RuleSyntaxError.

        Args:
            rule: The offending rule text
            reason: What is wrong with it
            line: 1-based line number when the rule came from a rules source
            error_code: Associated error code
        """
        self.rule = rule
        self.reason = reason
        self.line = line
        self.error_code = error_code
        super().__init__(f"Syntax error parsing {rule!r}: {reason}")

    def __str__(self) -> str:
        message = f"Syntax error parsing {self.rule!r}: {self.reason}"
        if self.line is not None:
            return f"line {self.line}: {message}"
        return message


class Filter(ABC):
    """Abstract base class for filters.

    Filters are immutable once constructed. Subclasses implement
    :meth:`match` and :attr:`strategy`.
    """

    __slots__ = ("_text", "_inheritable", "_type")

    def __init__(self, text: str, inheritable: bool, type: FilterType):
        """Initialize filter.

        Args:
            text: Raw pattern text
            inheritable: Whether the filter applies to descendant directories
            type: Whether the filter matches entry names or paths
        """
        self._text = text
        self._inheritable = inheritable
        self._type = type

    @property
    def text(self) -> str:
        return self._text

    @property
    def inheritable(self) -> bool:
        return self._inheritable

    @property
    def type(self) -> FilterType:
        return self._type

    @property
    @abstractmethod
    def strategy(self) -> FilterStrategy:
        """Matching algorithm used by this filter."""

    @abstractmethod
    def match(self, subject: str) -> bool:
        """Check whether the whole subject string matches.

        Args:
            subject: Entry name or relative path, depending on :attr:`type`

        Returns:
            True if the pattern matches the entire subject
        """

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Filter):
            return NotImplemented
        return (
            self.strategy is other.strategy
            and self._type is other._type
            and self._inheritable == other._inheritable
            and self._text == other._text
        )

    def __hash__(self) -> int:
        return hash((self.strategy, self._type, self._inheritable, self._text))

    def __str__(self) -> str:
        return filter_to_string(self)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self._text!r}, "
            f"inheritable={self._inheritable}, type={self._type})"
        )


class GlobFilter(Filter):
    """Filter using shell-style wildcards.

    ``*`` matches any run of characters (path separators included), ``?``
    exactly one character, and bracket classes are supported. Matching is
    case sensitive and anchored at both ends.
    """

    __slots__ = ()

    @property
    def strategy(self) -> FilterStrategy:
        return FilterStrategy.GLOB

    def match(self, subject: str) -> bool:
        return fnmatch.fnmatchcase(subject, self._text)


class RegexFilter(Filter):
    """Filter using a regular expression.

    The pattern is compiled once, at construction, and must match the
    entire subject.

    Raises:
        RuleSyntaxError: If the pattern does not compile
    """

    __slots__ = ("_regex",)

    def __init__(self, text: str, inheritable: bool, type: FilterType):
        super().__init__(text, inheritable, type)
        try:
            self._regex: Pattern[str] = re.compile(text)
        except re.error as e:
            raise RuleSyntaxError(text, f"invalid regular expression: {e}") from e

    @property
    def strategy(self) -> FilterStrategy:
        return FilterStrategy.REGEX

    def match(self, subject: str) -> bool:
        return self._regex.fullmatch(subject) is not None


_TYPE_STRINGS = {
    FilterType.NAME: "NAME",
    FilterType.PATH: "PATH",
}

_STRATEGY_STRINGS = {
    FilterStrategy.GLOB: "GLOB",
    FilterStrategy.REGEX: "REGEX",
}


def filter_type_to_string(type: FilterType) -> str:
    """Render a filter type as ``NAME`` or ``PATH``."""
    if type not in _TYPE_STRINGS:
        raise AssertionError(f"Unknown filter type: {type!r}")
    return _TYPE_STRINGS[type]


def filter_strategy_to_string(strategy: FilterStrategy) -> str:
    """Render a filter strategy as ``GLOB`` or ``REGEX``."""
    if strategy not in _STRATEGY_STRINGS:
        raise AssertionError(f"Unknown filter strategy: {strategy!r}")
    return _STRATEGY_STRINGS[strategy]


def filter_to_string(filter: Filter) -> str:
    """Render a filter as ``<TYPE>/<STRATEGY>:<text>``."""
    return (
        f"{filter_type_to_string(filter.type)}/"
        f"{filter_strategy_to_string(filter.strategy)}:"
        f"{filter.text}"
    )
