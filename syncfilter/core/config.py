#!/usr/bin/env python3
"""Layered configuration for SyncFilter.

Configuration is merged from several sources, lowest precedence first:

1. Compiled defaults
2. User config file (YAML)
3. Environment variables (``SYNCFILTER_*``)
4. Runtime updates (CLI flags, :meth:`ConfigManager.set`)

Example:
    >>> config = ConfigManager()
    >>> config.load_file("syncfilter.yaml")
    >>> config.get("syncfilter.rules_file_name")
    '.syncignore'
"""

import copy
import os
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from syncfilter.core.constants import DEFAULT_RULES_FILE_NAME, ConfigKey, ErrorCode

ENV_PREFIX = "SYNCFILTER_"


class ConfigSource(Enum):
    """Configuration source precedence levels."""

    COMPILED_DEFAULTS = 1  # Lowest precedence
    USER_CONFIG = 2
    ENVIRONMENT = 3
    RUNTIME = 4  # Highest precedence


class ConfigError(Exception):
    """Configuration error."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ConfigManager:
    """Thread-safe layered configuration manager."""

    DEFAULT_CONFIG: Dict[str, Any] = {
        "syncfilter": {
            "rules_file_name": DEFAULT_RULES_FILE_NAME,
            "default_rules": [],
            "logging": {
                "level": "INFO",
                "file": None,
            },
        }
    }

    # Taken verbatim from the environment
    STRING_KEYS = frozenset({ConfigKey.RULES_FILE_NAME, ConfigKey.LOGGING_LEVEL, ConfigKey.LOGGING_FILE})

    def __init__(self, config_file: Optional[str] = None, environ: Optional[Dict[str, str]] = None):
        """Initialize configuration manager.

        Args:
            config_file: Optional YAML file to load
            environ: Environment mapping to read ``SYNCFILTER_*`` keys from
                (defaults to ``os.environ``)
        """
        self._config: Dict[ConfigSource, Dict[str, Any]] = {}
        self._lock = threading.RLock()

        self._config[ConfigSource.COMPILED_DEFAULTS] = copy.deepcopy(self.DEFAULT_CONFIG)

        if config_file:
            self.load_file(config_file)

        self._load_environment(os.environ if environ is None else environ)

    def load_file(self, file_path: str, source: ConfigSource = ConfigSource.USER_CONFIG) -> None:
        """Load configuration from YAML file.

        Args:
            file_path: Path to YAML config file
            source: Configuration source level

        Raises:
            ConfigError: If file cannot be loaded or parsed
        """
        path = Path(file_path).expanduser()

        if not path.exists():
            raise ConfigError(f"Config file not found: {file_path}", ErrorCode.NOT_FOUND)

        try:
            with open(path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML parse error in {file_path}: {e}") from e
        except OSError as e:
            raise ConfigError(
                f"Error loading config {file_path}: {e}", ErrorCode.PERMISSION_DENIED
            ) from e

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ConfigError(f"Invalid config format in {file_path}")

        with self._lock:
            self._config[source] = config_data

    def _load_environment(self, environ: Dict[str, str]) -> None:
        """Load ``SYNCFILTER_<SECTION>__<KEY>=value`` variables.

        Double underscores separate nesting levels so that keys containing
        single underscores survive: ``SYNCFILTER_LOGGING__LEVEL=DEBUG``,
        ``SYNCFILTER_RULES_FILE_NAME=.megaignore``.
        """
        env_config: Dict[str, Any] = {}

        for key, value in environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            parts = key[len(ENV_PREFIX):].lower().split("__")
            dotted = ".".join([ConfigKey.ROOT, *parts])

            current = env_config
            for part in parts[:-1]:
                current = current.setdefault(part, {})
            current[parts[-1]] = value if dotted in self.STRING_KEYS else self._parse_env_value(value)

        if env_config:
            with self._lock:
                self._config[ConfigSource.ENVIRONMENT] = {ConfigKey.ROOT: env_config}

    def _parse_env_value(self, value: str) -> Any:
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        return value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot-separated key.

        Args:
            key: Dot-separated key path (e.g., "syncfilter.logging.level")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        with self._lock:
            for source in sorted(self._config.keys(), key=lambda s: s.value, reverse=True):
                value = self._get_nested(self._config[source], key)
                if value is not None:
                    return value

            return default

    def _get_nested(self, config: Dict[str, Any], key: str) -> Optional[Any]:
        current: Any = config
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return None
            current = current[part]
        return current

    def set(self, key: str, value: Any, source: ConfigSource = ConfigSource.RUNTIME) -> None:
        """Set configuration value.

        Args:
            key: Dot-separated key path
            value: Value to set
            source: Configuration source level
        """
        with self._lock:
            current = self._config.setdefault(source, {})
            parts = key.split(".")
            for part in parts[:-1]:
                current = current.setdefault(part, {})
            current[parts[-1]] = value

    def get_default_rules(self) -> List[str]:
        """Rule lines applied at the root of every scan.

        Raises:
            ConfigError: If the configured value is not a list of strings
        """
        rules = self.get(ConfigKey.DEFAULT_RULES, [])
        if isinstance(rules, str):
            rules = rules.splitlines()
        if not isinstance(rules, list) or not all(isinstance(r, str) for r in rules):
            raise ConfigError(f"{ConfigKey.DEFAULT_RULES} must be a list of rule strings")
        return [r for r in rules if r]

    def get_rules_file_name(self) -> str:
        """Name of the per-directory rules file.

        Raises:
            ConfigError: If the configured name is empty or contains a separator
        """
        name = self.get(ConfigKey.RULES_FILE_NAME, DEFAULT_RULES_FILE_NAME)
        if not isinstance(name, str) or not name or "/" in name:
            raise ConfigError(f"Invalid rules file name: {name!r}")
        return name
