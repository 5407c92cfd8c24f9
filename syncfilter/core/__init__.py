"""SyncFilter Core - Shared utilities and infrastructure.

Import specific functions from submodules:
    from syncfilter.core.config import ConfigManager
    from syncfilter.core import constants
    from syncfilter.core.logging import Logger, get_logger
"""

from syncfilter.core import config, constants, logging

__all__ = [
    "config",
    "constants",
    "logging",
]
