#!/usr/bin/env python3
"""Tests for the directory scanner."""

import pytest

from syncfilter.rules.filters import RuleSyntaxError
from syncfilter.scanner import ScanEntry, Scanner, scan_tree

KEPT = [
    ".syncignore",
    "docs",
    "docs/.syncignore",
    "docs/build",
    "docs/build/page.html",
    "docs/drafts",
    "docs/index.md",
    "keep.tmp",
    "notes.txt",
]

EXCLUDED = [
    "build",
    "docs/cache.tmp",
    "docs/drafts/sub",
    "docs/drafts/wip.md",
    "docs/local.md",
    "scratch.tmp",
]


class TestScanner:
    """Tests for Scanner."""

    def test_scan_tree(self, source_tree, logger):
        """Test which entries survive the per-directory rules."""
        entries = scan_tree(source_tree, logger=logger)

        assert [e.path for e in entries] == KEPT

    def test_excluded_entries_reported(self, source_tree, logger):
        """Test that excluded entries are reported but not descended into."""
        entries = list(Scanner(source_tree, logger=logger).scan())

        assert sorted(e.path for e in entries if e.excluded) == EXCLUDED
        assert "build/out.o" not in {e.path for e in entries}

    def test_directory_flag(self, source_tree, logger):
        """Test is_dir on reported entries."""
        entries = {e.path: e for e in Scanner(source_tree, logger=logger).scan()}

        assert entries["docs"] == ScanEntry("docs", True, False)
        assert entries["notes.txt"] == ScanEntry("notes.txt", False, False)
        assert entries["build"] == ScanEntry("build", True, True)

    def test_default_rules(self, source_tree, logger):
        """Test rules applied at the root before the root rules file."""
        entries = scan_tree(source_tree, default_rules=["-n:*.md"], logger=logger)
        paths = [e.path for e in entries]

        assert "docs/index.md" not in paths
        assert "notes.txt" in paths

    def test_default_rules_without_rules_file(self, tmp_path, logger):
        """Test default rules when no rules file exists."""
        (tmp_path / "a.tmp").write_text("")
        (tmp_path / "b.txt").write_text("")

        entries = scan_tree(tmp_path, default_rules=["-n:*.tmp"], logger=logger)

        assert [e.path for e in entries] == ["b.txt"]

    def test_invalid_default_rules(self, tmp_path, logger):
        """Test that malformed default rules raise immediately."""
        with pytest.raises(RuleSyntaxError) as exc_info:
            Scanner(tmp_path, default_rules=["-n:ok", "oops"], logger=logger)

        assert exc_info.value.line == 2

    def test_custom_rules_file_name(self, source_tree, logger):
        """Test scanning with a different rules file name."""
        (source_tree / ".megaignore").write_text("-n:notes.txt\n")

        entries = scan_tree(source_tree, rules_file_name=".megaignore", logger=logger)
        paths = [e.path for e in entries]

        assert "notes.txt" not in paths
        assert "scratch.tmp" in paths

    def test_malformed_rules_file_ignored(self, source_tree, logger, log_handler):
        """Test that a rejected rules file leaves the directory unfiltered."""
        (source_tree / "docs" / ".syncignore").write_text("-N:local.md\n-x:broken\n")

        paths = [e.path for e in scan_tree(source_tree, logger=logger)]

        assert "docs/local.md" in paths
        assert "docs/drafts/wip.md" in paths
        assert "docs/cache.tmp" not in paths
        assert any("Rules file rejected" in m and "line=2" in m for m in log_handler.messages)

    def test_malformed_rules_file_keeps_defaults(self, source_tree, logger, log_handler):
        """Test that default rules survive a rejected root rules file."""
        (source_tree / ".syncignore").write_text("bad rule\n")

        paths = [e.path for e in scan_tree(source_tree, default_rules=["-n:notes.txt"], logger=logger)]

        assert "notes.txt" not in paths
        assert "scratch.tmp" in paths
        assert any("Rules file rejected" in m and "line=1" in m for m in log_handler.messages)

    def test_rejected_rules_file_line_counts_blank_lines(self, source_tree, logger, log_handler):
        """Test that the reported line is the source line of the bad rule."""
        (source_tree / "docs" / ".syncignore").write_text("# docs\n\n-N:local.md\n\n-x:broken\n")

        scan_tree(source_tree, default_rules=["-n:a", "-n:b"], logger=logger)

        rejected = [m for m in log_handler.messages if "Rules file rejected" in m]
        assert len(rejected) == 1
        assert "line=5" in rejected[0]

    def test_unreadable_rules_file(self, source_tree, logger, log_handler):
        """Test that undecodable rules files are skipped."""
        (source_tree / "docs" / ".syncignore").write_bytes(b"\xff\xfe")

        paths = [e.path for e in scan_tree(source_tree, logger=logger)]

        assert "docs/local.md" in paths
        assert any("Unable to read rules file" in m for m in log_handler.messages)

    def test_missing_root(self, tmp_path, logger, log_handler):
        """Test scanning a directory that does not exist."""
        assert scan_tree(tmp_path / "missing", logger=logger) == []
        assert any("Unable to list directory" in m for m in log_handler.messages)
