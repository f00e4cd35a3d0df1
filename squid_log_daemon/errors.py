"""Startup errors for the squid log daemon.

Every class here is fatal: it aborts the process before any input line is
consumed. Per-record failures are reported through `InsertOutcome` instead.
"""

from __future__ import annotations


class DaemonError(Exception):
    """Base exception for all fatal daemon errors."""

    pass


class ConfigMalformed(DaemonError):
    """Raised when the configuration string does not split into five components."""

    def __init__(self, config_string: str, components: int) -> None:
        super().__init__(
            f"Malformed configuration '{config_string}': expected "
            f"/host/database/table/user/password (5 components), got {components}"
        )
        self.config_string = config_string
        self.components = components


class ConnectionFailed(DaemonError):
    """Raised when the database connection cannot be established."""

    pass


class SchemaMismatch(DaemonError):
    """Raised when the target table or one of its columns cannot be selected."""

    pass


class StatementPrepareFailed(DaemonError):
    """Raised when the insert statement cannot be prepared."""

    pass


class InputEncodingUnknown(DaemonError):
    """Raised when the configured input encoding has no codec."""

    def __init__(self, encoding: str) -> None:
        super().__init__(f"Unknown input encoding '{encoding}'")
        self.encoding = encoding


__all__ = [
    "DaemonError",
    "ConfigMalformed",
    "ConnectionFailed",
    "SchemaMismatch",
    "StatementPrepareFailed",
    "InputEncodingUnknown",
]
