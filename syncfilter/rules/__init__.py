"""SyncFilter Rules System.

This module provides the filter rule engine:
- Filter, GlobFilter, RegexFilter: single compiled rules
- FilterClass: filters of one polarity, path filters evaluated first
- FilterChain: rule grammar and transactional reload
- FilterScope: evaluation across a directory hierarchy
"""

from syncfilter.core.constants import FilterStrategy, FilterType

from .chain import FilterChain, FilterClass, ParsedRule, Subject, parse_rule
from .filters import (
    Filter,
    GlobFilter,
    RegexFilter,
    RuleSyntaxError,
    filter_strategy_to_string,
    filter_to_string,
    filter_type_to_string,
)
from .reader import number_lines, read_lines, read_numbered_lines, split_lines
from .scope import FilterScope

__all__ = [
    # Filters
    "FilterType",
    "FilterStrategy",
    "Filter",
    "GlobFilter",
    "RegexFilter",
    "RuleSyntaxError",
    "filter_type_to_string",
    "filter_strategy_to_string",
    "filter_to_string",
    # Chains
    "Subject",
    "ParsedRule",
    "parse_rule",
    "FilterClass",
    "FilterChain",
    "FilterScope",
    # Rule sources
    "number_lines",
    "read_lines",
    "read_numbered_lines",
    "split_lines",
]
