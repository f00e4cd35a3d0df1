"""
squid-log-daemon - store Squid access log records in PostgreSQL.

The proxy starts this program as its `logfile_daemon` and writes one command
per line on its stdin. Each `L` line becomes one row in the configured
table; a record that cannot be stored is logged to stderr and skipped so
the proxy is never disturbed by storage trouble.
"""

from __future__ import annotations

__version__ = "0.4.0"
__license__ = "MIT"

# Public API exports
from squid_log_daemon.config import Settings, get_settings
from squid_log_daemon.daemon import check_startup, run_daemon, start_store
from squid_log_daemon.domain.models import (
    APPEND_FIELDS,
    RECORD_FIELDS,
    ConnectionConfig,
    InsertOutcome,
    ProtocolStats,
)
from squid_log_daemon.errors import (
    ConfigMalformed,
    ConnectionFailed,
    DaemonError,
    InputEncodingUnknown,
    SchemaMismatch,
    StatementPrepareFailed,
)
from squid_log_daemon.resolver import resolve_config
from squid_log_daemon.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    "resolve_config",
    # Daemon
    "check_startup",
    "run_daemon",
    "start_store",
    # Domain
    "APPEND_FIELDS",
    "RECORD_FIELDS",
    "ConnectionConfig",
    "InsertOutcome",
    "ProtocolStats",
    # Errors
    "DaemonError",
    "ConfigMalformed",
    "ConnectionFailed",
    "SchemaMismatch",
    "InputEncodingUnknown",
    "StatementPrepareFailed",
    # Logging
    "configure_logging",
    "get_logger",
]
