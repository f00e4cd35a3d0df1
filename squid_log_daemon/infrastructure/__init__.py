"""
Infrastructure package for the squid log daemon.

Centralizes database connectivity: the connection factory and the store
that owns the daemon's single connection and prepared insert.
"""

from squid_log_daemon.infrastructure.access_log_store import AccessLogStore
from squid_log_daemon.infrastructure.db_factory import (
    apply_statement_timeout,
    get_sync_connection,
)

__all__ = [
    "AccessLogStore",
    "apply_statement_timeout",
    "get_sync_connection",
]
