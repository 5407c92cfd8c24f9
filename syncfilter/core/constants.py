"""
SyncFilter Core: Constants and Type Definitions

This module provides package-wide constants, error codes, and the closed
enumerations used by the filter rule engine.
"""
from enum import Enum, IntEnum

# Version information
SYNCFILTER_VERSION = "1.0.0"


# Error codes (0-9 range)
class ErrorCode(IntEnum):
    """Standardized error codes for SyncFilter operations."""

    INVALID_INPUT = 1  # Malformed rule, invalid configuration
    NOT_FOUND = 2  # Rules file or directory doesn't exist
    PERMISSION_DENIED = 3  # Insufficient permissions


class FilterType(Enum):
    """What part of a filesystem entry a filter is matched against."""

    NAME = "name"  # Base name of the entry
    PATH = "path"  # Path relative to the rule's defining directory


class FilterStrategy(Enum):
    """Matching algorithm used by a filter."""

    GLOB = "glob"  # Shell-style wildcards
    REGEX = "regex"  # Regular expressions


# Rule grammar characters
class RuleSyntax:
    """Characters recognised by the rule-line grammar."""

    EXCLUDE = "-"
    INCLUDE = "+"

    NAME_LOCAL = "N"  # Name filter, not inherited
    NAME = "n"  # Name filter, inherited
    PATH = "p"  # Path filter, always inherited

    GLOB = "g"
    REGEX = "r"

    SEPARATOR = ":"
    COMMENT = "#"


# Configuration keys
class ConfigKey:
    """Configuration key constants."""

    ROOT = "syncfilter"
    RULES_FILE_NAME = "syncfilter.rules_file_name"
    DEFAULT_RULES = "syncfilter.default_rules"
    LOGGING_LEVEL = "syncfilter.logging.level"
    LOGGING_FILE = "syncfilter.logging.file"


DEFAULT_RULES_FILE_NAME = ".syncignore"
