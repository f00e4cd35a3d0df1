"""
Utilities package for the squid log daemon.

Exports shared logging helpers. Keep this package free of domain logic.
"""

from squid_log_daemon.utils.logging import JsonFormatter, configure_logging, get_logger

__all__ = [
    "JsonFormatter",
    "configure_logging",
    "get_logger",
]
