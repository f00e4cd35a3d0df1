"""
Access log store: the one connection and one prepared insert the daemon owns.

Startup runs `open()`, `validate_schema()` and `prepare_insert()` in that
order; each raises a fatal DaemonError. After that `insert()` is called once
per `L` command until the input closes and `close()` releases the
connection.

Example
-------
    with AccessLogStore.open(config) as store:
        store.validate_schema()
        store.prepare_insert()
        store.insert(values)
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

import psycopg
from psycopg import sql

from squid_log_daemon.config import Settings, get_settings
from squid_log_daemon.domain.models import APPEND_FIELDS, RECORD_FIELDS, ConnectionConfig
from squid_log_daemon.errors import ConnectionFailed, SchemaMismatch, StatementPrepareFailed
from squid_log_daemon.infrastructure.db_factory import (
    apply_statement_timeout,
    get_sync_connection,
)
from squid_log_daemon.utils.logging import get_logger

log = get_logger(__name__)

STATEMENT_NAME = "squid_log_insert"


def table_identifier(table: str) -> sql.Identifier:
    """Quote `table`, treating `schema.table` as a qualified name."""
    return sql.Identifier(*table.split("."))


def build_select_query(table: str) -> sql.Composed:
    """`SELECT <all record fields> FROM <table> LIMIT 1`."""
    return sql.SQL("SELECT {fields} FROM {table} LIMIT 1").format(
        fields=sql.SQL(", ").join(map(sql.Identifier, RECORD_FIELDS)),
        table=table_identifier(table),
    )


def build_prepare_statement(table: str, name: str = STATEMENT_NAME) -> sql.Composed:
    """
    `PREPARE <name> AS INSERT ... VALUES (DEFAULT, $1, ..., $12)`.

    The identifier column takes DEFAULT so the table's sequence assigns it.
    """
    placeholders = [sql.SQL("DEFAULT")] + [
        sql.SQL(f"${position}") for position in range(1, len(APPEND_FIELDS) + 1)
    ]
    return sql.SQL("PREPARE {name} AS INSERT INTO {table} ({fields}) VALUES ({values})").format(
        name=sql.Identifier(name),
        table=table_identifier(table),
        fields=sql.SQL(", ").join(map(sql.Identifier, RECORD_FIELDS)),
        values=sql.SQL(", ").join(placeholders),
    )


def build_execute_statement(values: Sequence[str], name: str = STATEMENT_NAME) -> sql.Composed:
    """
    `EXECUTE <name> ('v1', ..., 'v12')`.

    Values are sent as untyped literals; the server casts them to the
    parameter types inferred when the statement was prepared.
    """
    return sql.SQL("EXECUTE {name} ({values})").format(
        name=sql.Identifier(name),
        values=sql.SQL(", ").join(map(sql.Literal, values)),
    )


class AccessLogStore:
    """
    Owns the daemon's connection and its prepared insert statement.
    """

    def __init__(self, config: ConnectionConfig, connection: Any) -> None:
        self.config = config
        self._conn = connection
        self._prepared = False

    @classmethod
    def open(
        cls, config: ConnectionConfig, settings: Optional[Settings] = None
    ) -> "AccessLogStore":
        """
        Connect to the store described by `config`.

        Raises
        ------
        ConnectionFailed
            If the connection cannot be established.
        """
        settings = settings or get_settings()
        conn = get_sync_connection(config, settings)
        if settings.db_statement_timeout_ms > 0:
            try:
                with conn.cursor() as cur:
                    apply_statement_timeout(cur, settings.db_statement_timeout_ms)
            except psycopg.Error as exc:
                conn.close()
                raise ConnectionFailed(f"Cannot set statement timeout: {exc}") from exc
        return cls(config, conn)

    @property
    def prepared(self) -> bool:
        return self._prepared

    @property
    def closed(self) -> bool:
        return bool(self._conn.closed)

    def validate_schema(self) -> None:
        """
        Select every record column from the table, one row at most.

        Only column presence is checked; types and widths are left to the
        insert itself.

        Raises
        ------
        SchemaMismatch
            If the table or one of the columns cannot be selected.
        """
        try:
            with self._conn.cursor() as cur:
                cur.execute(build_select_query(self.config.table))
                cur.fetchall()
        except psycopg.Error as exc:
            raise SchemaMismatch(f"Cannot SELECT from {self.config.table}: {exc}") from exc
        log.debug("Table %s exposes all %d record columns", self.config.table, len(RECORD_FIELDS))

    def prepare_insert(self) -> None:
        """
        Prepare the insert statement once for the lifetime of the connection.

        Raises
        ------
        StatementPrepareFailed
            If the server rejects the statement.
        """
        if self._prepared:
            return
        try:
            with self._conn.cursor() as cur:
                cur.execute(build_prepare_statement(self.config.table))
        except psycopg.Error as exc:
            raise StatementPrepareFailed(
                f"Error while preparing sql statement: {exc}"
            ) from exc
        self._prepared = True

    def insert(self, values: Sequence[str]) -> None:
        """
        Execute the prepared insert with `values` bound in field order.

        Any driver error propagates to the caller.
        """
        if not self._prepared:
            raise RuntimeError("insert statement has not been prepared")
        with self._conn.cursor() as cur:
            cur.execute(build_execute_statement(values))

    def close(self) -> None:
        """Release the connection (idempotent)."""
        if self._conn is not None and not self.closed:
            self._conn.close()
        self._prepared = False

    def __enter__(self) -> "AccessLogStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        del exc_type, exc, tb
        self.close()


__all__ = [
    "STATEMENT_NAME",
    "AccessLogStore",
    "build_execute_statement",
    "build_prepare_statement",
    "build_select_query",
    "table_identifier",
]
