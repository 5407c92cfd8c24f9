#!/usr/bin/env python3
"""Command-line interface for SyncFilter.

Subcommands:
- ``check``: evaluate relative paths against a rules file
- ``lint``: validate a rules file and report the first syntax error
- ``scan``: walk a directory tree applying per-directory rules files

Example:
    >>> from syncfilter.cli import parse_arguments
    >>> args = parse_arguments(["check", ".syncignore", "build/out.o"])
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from syncfilter.core.config import ConfigError, ConfigManager
from syncfilter.core.constants import SYNCFILTER_VERSION, ConfigKey
from syncfilter.core.logging import Logger, set_global_logger
from syncfilter.rules.chain import FilterChain, Subject
from syncfilter.rules.filters import RuleSyntaxError
from syncfilter.scanner import Scanner

DESCRIPTION = "SyncFilter - inclusion/exclusion rules for folder synchronization"


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    Raises:
        SystemExit: On invalid arguments or --help/--version
    """
    parser = argparse.ArgumentParser(
        prog="syncfilter",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Rule lines:
  -n:*.tmp        exclude by name, inherited, glob
  -N:build        exclude by name, this directory only
  +p:src/keep/    include by path, glob
  -r:.*\\.log      exclude by name, regex

Examples:
  syncfilter check .syncignore build/main.o docs/index.md
  syncfilter lint .syncignore
  syncfilter scan ~/Sync --show-excluded
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {SYNCFILTER_VERSION}",
    )

    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help="Configuration file path (YAML format)",
    )

    log_group = parser.add_argument_group("logging options")

    log_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    log_group.add_argument(
        "--log-file",
        metavar="FILE",
        type=str,
        help="Also write log records to FILE",
    )

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    check = commands.add_parser("check", help="Evaluate paths against a rules file")
    check.add_argument("rules", metavar="RULES_FILE", help="Rules file to load")
    check.add_argument("paths", metavar="PATH", nargs="+", help="Paths relative to the rules file")
    check.add_argument(
        "--inherited-only",
        action="store_true",
        help="Only apply inheritable rules (as seen from a subdirectory)",
    )

    lint = commands.add_parser("lint", help="Validate a rules file")
    lint.add_argument("rules", metavar="RULES_FILE", help="Rules file to validate")

    scan = commands.add_parser("scan", help="Scan a directory tree")
    scan.add_argument("root", metavar="DIR", help="Directory to scan")
    scan.add_argument(
        "--rules-name",
        metavar="NAME",
        help="Name of per-directory rules files (default: from config, .syncignore)",
    )
    scan.add_argument(
        "--show-excluded",
        action="store_true",
        help="Also list excluded entries, prefixed with '-'",
    )

    return parser.parse_args(args)


def build_config(args: argparse.Namespace) -> ConfigManager:
    """
    Build configuration from an optional file and command-line arguments.

    Command-line arguments take precedence over the file and environment.

    Raises:
        CLIError: If the configuration file cannot be loaded
    """
    try:
        config = ConfigManager(args.config)
    except ConfigError as e:
        raise CLIError(e.message) from e

    if args.debug:
        config.set(ConfigKey.LOGGING_LEVEL, "DEBUG")
    if args.log_file:
        config.set(ConfigKey.LOGGING_FILE, args.log_file)
    if getattr(args, "rules_name", None):
        config.set(ConfigKey.RULES_FILE_NAME, args.rules_name)

    return config


def setup_logging(config: ConfigManager) -> Logger:
    """
    Setup logging based on configuration.

    Returns:
        Configured logger, also installed as the global logger

    Raises:
        CLIError: If the configured level is unknown
    """
    level = str(config.get(ConfigKey.LOGGING_LEVEL, "INFO"))
    try:
        logger = Logger("syncfilter", level=level)
    except (KeyError, ValueError) as e:
        raise CLIError(f"Unknown log level: {level}") from e

    log_file = config.get(ConfigKey.LOGGING_FILE)
    if log_file:
        logger.add_handler(logger.create_file_handler(log_file))

    set_global_logger(logger)
    return logger


def _load_rules(path: str, logger: Logger) -> FilterChain:
    if not Path(path).is_file():
        raise CLIError(f"Rules file does not exist: {path}")

    chain = FilterChain(logger)
    if not chain.load_file(path):
        if chain.last_error is not None:
            raise CLIError(f"{path}: {chain.last_error}")
        raise CLIError(f"Failed to read rules file: {path}")
    return chain


def run_check(args: argparse.Namespace, logger: Logger) -> int:
    """Print ``excluded``, ``included`` or ``-`` for every path."""
    chain = _load_rules(args.rules, logger)

    for path in args.paths:
        subject = Subject.from_path(path)
        if chain.included(subject, args.inherited_only):
            verdict = "included"
        elif chain.excluded(subject, args.inherited_only):
            verdict = "excluded"
        else:
            verdict = "-"
        print(f"{verdict}\t{subject.path}")

    return 0


def run_lint(args: argparse.Namespace, logger: Logger) -> int:
    """Validate a rules file, printing every filter it defines."""
    chain = _load_rules(args.rules, logger)

    for polarity, filters in (("-", chain.exclusions), ("+", chain.inclusions)):
        for f in filters:
            scope = "inherited" if f.inheritable else "local"
            print(f"{polarity} {f} ({scope})")

    print(f"{args.rules}: {len(chain)} rules OK")
    return 0


def run_scan(args: argparse.Namespace, config: ConfigManager, logger: Logger) -> int:
    """List the entries of a tree that survive filtering."""
    root = Path(args.root)
    if not root.is_dir():
        raise CLIError(f"Not a directory: {args.root}")

    try:
        scanner = Scanner(
            root,
            rules_file_name=config.get_rules_file_name(),
            default_rules=config.get_default_rules(),
            logger=logger,
        )
    except ConfigError as e:
        raise CLIError(e.message) from e
    except RuleSyntaxError as e:
        raise CLIError(f"Invalid default rule: {e}") from e

    for entry in scanner.scan():
        suffix = "/" if entry.is_dir else ""
        if not entry.excluded:
            print(f"{entry.path}{suffix}")
        elif args.show_excluded:
            print(f"- {entry.path}{suffix}")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit status
    """
    try:
        args = parse_arguments(argv)
        config = build_config(args)
        logger = setup_logging(config)

        if args.command == "check":
            return run_check(args, logger)
        if args.command == "lint":
            return run_lint(args, logger)
        return run_scan(args, config, logger)

    except CLIError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
