"""
Database connection factory for the squid log daemon.

Opens the single autocommit psycopg connection the daemon keeps for its
whole lifetime. There is no pool and no retry: a connection failure at
startup is fatal and reported to the proxy through the exit code.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import psycopg
from psycopg import Connection

from squid_log_daemon.config import Settings, get_settings
from squid_log_daemon.domain.models import ConnectionConfig
from squid_log_daemon.errors import ConnectionFailed
from squid_log_daemon.utils.logging import get_logger

log = get_logger(__name__)


def connect_kwargs(config: ConnectionConfig, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Compose psycopg keyword arguments from the resolved configuration.

    The password is only passed when one was given, so libpq falls back to
    its own mechanisms (trust, peer, .pgpass) otherwise.
    """
    settings = settings or get_settings()
    kwargs: Dict[str, Any] = {
        "host": config.host,
        "port": settings.db_port,
        "dbname": config.database,
        "user": config.user,
        "connect_timeout": settings.db_connect_timeout,
    }
    if config.password:
        kwargs["password"] = config.password
    return kwargs


def describe_target(config: ConnectionConfig, settings: Optional[Settings] = None) -> str:
    """Human-readable connection target with the password masked."""
    settings = settings or get_settings()
    password = "..." if config.password else ""
    return (
        f"host='{config.host}' port={settings.db_port} database='{config.database}' "
        f"username='{config.user}' password='{password}'"
    )


def apply_statement_timeout(cur: Any, timeout_ms: int) -> None:
    """
    Set a session-level statement timeout; no-op when `timeout_ms` <= 0.
    """
    if timeout_ms <= 0:
        return
    cur.execute("SELECT set_config('statement_timeout', %s, false)", (f"{timeout_ms}ms",))


def get_sync_connection(
    config: ConnectionConfig, settings: Optional[Settings] = None
) -> Connection:
    """
    Open the daemon's autocommit connection.

    Raises
    ------
    ConnectionFailed
        If psycopg cannot establish the connection.
    """
    settings = settings or get_settings()
    log.info("Connecting... %s", describe_target(config, settings))
    try:
        return psycopg.connect(autocommit=True, **connect_kwargs(config, settings))
    except psycopg.Error as exc:
        raise ConnectionFailed(f"Cannot connect to database: {exc}".strip()) from exc


__all__ = [
    "apply_statement_timeout",
    "connect_kwargs",
    "describe_target",
    "get_sync_connection",
]
