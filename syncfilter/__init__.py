"""SyncFilter - inclusion/exclusion rules for folder synchronization.

Rule text such as ``-n:*.tmp`` or ``+p:src/keep/*`` is compiled into a
:class:`FilterChain`, which decides for every scanned filesystem entry
whether it takes part in synchronization.
"""

from syncfilter.core.constants import SYNCFILTER_VERSION as __version__
from syncfilter.rules import (
    Filter,
    FilterChain,
    FilterClass,
    FilterScope,
    FilterStrategy,
    FilterType,
    GlobFilter,
    RegexFilter,
    RuleSyntaxError,
    Subject,
)

__all__ = [
    "__version__",
    "Filter",
    "FilterChain",
    "FilterClass",
    "FilterScope",
    "FilterStrategy",
    "FilterType",
    "GlobFilter",
    "RegexFilter",
    "RuleSyntaxError",
    "Subject",
]
