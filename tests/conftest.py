"""Shared pytest fixtures for SyncFilter tests."""
import logging
from pathlib import Path
from typing import Any, Dict, List

import pytest

from syncfilter.core.logging import Logger, LogLevel
from syncfilter.rules.chain import FilterChain


class ListHandler(logging.Handler):
    """Collects formatted log messages in memory."""

    def __init__(self):
        super().__init__()
        self.messages: List[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


@pytest.fixture
def log_handler() -> ListHandler:
    """In-memory log handler."""
    return ListHandler()


@pytest.fixture
def logger(log_handler: ListHandler) -> Logger:
    """Debug-level logger writing to ``log_handler``."""
    return Logger(name="syncfilter.test", level=LogLevel.DEBUG, handlers=[log_handler])


@pytest.fixture
def chain(logger: Logger) -> FilterChain:
    """Empty filter chain with a capturing logger."""
    return FilterChain(logger)


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """Create a directory tree with per-directory rules files."""
    root = tmp_path / "sync"
    root.mkdir()

    (root / ".syncignore").write_text("# root rules\n-n:*.tmp\n-N:build\n+n:keep.tmp\n")
    (root / "notes.txt").write_text("notes")
    (root / "scratch.tmp").write_text("scratch")
    (root / "keep.tmp").write_text("keep")

    (root / "build").mkdir()
    (root / "build" / "out.o").write_text("binary")

    (root / "docs").mkdir()
    (root / "docs" / ".syncignore").write_text("-p:drafts/*\n-N:local.md\n")
    (root / "docs" / "index.md").write_text("# Index")
    (root / "docs" / "local.md").write_text("local")
    (root / "docs" / "cache.tmp").write_text("cache")
    (root / "docs" / "build").mkdir()
    (root / "docs" / "build" / "page.html").write_text("<html/>")
    (root / "docs" / "drafts").mkdir()
    (root / "docs" / "drafts" / "wip.md").write_text("wip")
    (root / "docs" / "drafts" / "sub").mkdir()
    (root / "docs" / "drafts" / "sub" / "local.md").write_text("nested")

    return root


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Provide a sample SyncFilter configuration."""
    return {
        "syncfilter": {
            "rules_file_name": ".megaignore",
            "default_rules": ["-n:.DS_Store", "-r:.*~"],
            "logging": {"level": "DEBUG"},
        }
    }
