#!/usr/bin/env python3
"""Local directory scanner driven by per-directory filter rules.

The scanner walks a directory tree, loads the rules file of each directory
it enters (``.syncignore`` by default) into a :class:`FilterChain`, and
reports every entry together with the filtering decision. Excluded
directories are reported but not descended into.

Example:
    >>> scanner = Scanner("/data", default_rules=["-n:*.tmp"])
    >>> [e.path for e in scanner.scan() if not e.excluded]
    ['docs', 'docs/index.md', 'notes.txt']
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Union

from syncfilter.core.constants import DEFAULT_RULES_FILE_NAME
from syncfilter.core.logging import Logger, get_logger
from syncfilter.rules.chain import FilterChain
from syncfilter.rules.reader import read_numbered_lines
from syncfilter.rules.scope import FilterScope


@dataclass(frozen=True)
class ScanEntry:
    """One filesystem entry seen by the scanner."""

    path: str  # Relative to the scan root, "/"-separated
    is_dir: bool
    excluded: bool


class Scanner:
    """Walks a directory tree applying hierarchical filter rules."""

    def __init__(
        self,
        root: Union[str, Path],
        rules_file_name: str = DEFAULT_RULES_FILE_NAME,
        default_rules: Sequence[str] = (),
        logger: Optional[Logger] = None,
    ):
        """Initialize scanner.

        Args:
            root: Directory to scan
            rules_file_name: Name of the per-directory rules file
            default_rules: Rule lines applied at the root, before the root's
                own rules file
            logger: Diagnostics sink; defaults to the package logger

        Raises:
            RuleSyntaxError: If a default rule is malformed
        """
        self.root = Path(root)
        self.rules_file_name = rules_file_name
        self._logger = logger if logger is not None else get_logger()
        self._default_rules: List[str] = list(default_rules)

        check = FilterChain(self._logger)
        if not check.load(self._default_rules):
            raise check.last_error

    def scan(self) -> Iterator[ScanEntry]:
        """Yield every entry under the root, depth first, sorted by name."""
        scope = FilterScope(self._load_chain(self.root, self._default_rules))
        yield from self._scan_dir(self.root, "", scope)

    def _scan_dir(self, directory: Path, relative: str, scope: FilterScope) -> Iterator[ScanEntry]:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            self._logger.warning("Unable to list directory", path=str(directory), error=str(e))
            return

        for entry in entries:
            path = f"{relative}/{entry.name}" if relative else entry.name
            is_dir = entry.is_dir(follow_symlinks=False)
            excluded = scope.is_excluded(entry.name)

            if excluded:
                self._logger.debug("Excluded", path=path)

            yield ScanEntry(path, is_dir, excluded)

            if is_dir and not excluded:
                subdirectory = Path(entry.path)
                child = scope.child(entry.name, self._load_chain(subdirectory))
                yield from self._scan_dir(subdirectory, path, child)

    def _load_chain(self, directory: Path, base_rules: Sequence[str] = ()) -> Optional[FilterChain]:
        """Build the chain for ``directory``.

        A rules file that cannot be read or parsed is logged and ignored;
        ``base_rules`` still apply.
        """
        rules_path = directory / self.rules_file_name
        has_rules_file = rules_path.is_file()
        if not base_rules and not has_rules_file:
            return None

        chain = FilterChain(self._logger)
        chain.load(base_rules)

        if has_rules_file:
            try:
                with open(rules_path, "rb") as f:
                    lines = read_numbered_lines(f)
            except (OSError, UnicodeDecodeError) as e:
                self._logger.warning("Unable to read rules file", path=str(rules_path), error=str(e))
            else:
                # Default rules were checked in __init__, so errors point into the file.
                if not chain.load_numbered([*((0, rule) for rule in base_rules), *lines]):
                    error = chain.last_error
                    self._logger.warning(
                        "Rules file rejected",
                        path=str(rules_path),
                        line=error.line,
                        reason=error.reason,
                    )

        return chain if not chain.empty() else None


def scan_tree(
    root: Union[str, Path],
    rules_file_name: str = DEFAULT_RULES_FILE_NAME,
    default_rules: Sequence[str] = (),
    logger: Optional[Logger] = None,
) -> List[ScanEntry]:
    """Scan ``root`` and return the entries that are not excluded.

    Raises:
        RuleSyntaxError: If a default rule is malformed
    """
    scanner = Scanner(root, rules_file_name, default_rules, logger)
    return [entry for entry in scanner.scan() if not entry.excluded]
