#!/usr/bin/env python3
"""Filter evaluation across a directory hierarchy.

Each directory of a scanned tree may carry its own :class:`FilterChain`.
An entry is judged by the chain of the directory that contains it and by
the chains of every ancestor directory:

- the containing directory's chain is queried with ``only_inheritable=False``
- every ancestor is queried with ``only_inheritable=True``, with the entry's
  path made relative to that ancestor
- the nearest directory that has an opinion decides; within one directory
  an inclusion overrides an exclusion

Example:
    >>> root = FilterScope(root_chain)
    >>> docs = root.child("docs", docs_chain)
    >>> docs.is_excluded("draft.tmp")
    True
"""

from typing import Optional

from syncfilter.rules.chain import FilterChain, Subject


class FilterScope:
    """A filter chain attached to one directory."""

    def __init__(
        self,
        chain: Optional[FilterChain] = None,
        parent: Optional["FilterScope"] = None,
        name: str = "",
    ):
        """Initialize scope.

        Args:
            chain: Rules defined in this directory, if any
            parent: Scope of the parent directory
            name: Directory name relative to the parent scope
        """
        self.chain = chain
        self.parent = parent
        self.name = name

    def child(self, name: str, chain: Optional[FilterChain] = None) -> "FilterScope":
        """Create the scope of subdirectory ``name``."""
        return FilterScope(chain, parent=self, name=name)

    @property
    def path(self) -> str:
        """Path of this scope's directory relative to the outermost scope."""
        parts = []
        scope: Optional[FilterScope] = self
        while scope is not None and scope.parent is not None:
            parts.append(scope.name)
            scope = scope.parent
        return "/".join(reversed(parts))

    def is_excluded(self, name: str) -> bool:
        """Decide whether entry ``name`` of this directory is excluded.

        Args:
            name: Base name of an entry directly inside this scope's directory

        Returns:
            True if the nearest deciding scope excludes the entry
        """
        path = name
        only_inheritable = False
        scope: Optional[FilterScope] = self

        while scope is not None:
            chain = scope.chain
            if chain is not None and not chain.empty():
                subject = Subject(name, path)
                if chain.included(subject, only_inheritable):
                    return False
                if chain.excluded(subject, only_inheritable):
                    return True

            if scope.parent is not None:
                path = f"{scope.name}/{path}"
            scope = scope.parent
            only_inheritable = True

        return False

    def __repr__(self) -> str:
        return f"FilterScope(path={self.path!r}, rules={len(self.chain) if self.chain else 0})"
