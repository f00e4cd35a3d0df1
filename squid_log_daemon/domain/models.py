"""
Domain models for the squid log daemon.

Defines the fixed access_log record layout shared by the schema check, the
insert statement and the protocol parser, plus the resolved connection
parameters and the per-record insert outcome.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from pydantic import BaseModel, Field

# Column order matters: it is the bind order of the prepared insert and the
# token order of an `L` protocol line.
RECORD_FIELDS: Tuple[str, ...] = (
    "id",
    "time_since_epoch",
    "response_time",
    "client_src_ip_addr",
    "squid_request_status",
    "http_status_code",
    "reply_size",
    "request_method",
    "request_url",
    "username",
    "squid_hier_status",
    "server_ip_addr",
    "mime_type",
)

ID_FIELD: str = RECORD_FIELDS[0]
APPEND_FIELDS: Tuple[str, ...] = RECORD_FIELDS[1:]

AppendRecord = Tuple[str, ...]

RECORD_MALFORMED = "RecordMalformed"
INSERT_FAILED = "InsertFailed"


class ConnectionConfig(BaseModel):
    """
    Resolved connection parameters for the access_log store.
    """

    host: str = Field("localhost", description="Database server host.")
    database: str = Field("squid_log", description="Database name.")
    table: str = Field("access_log", description="Table receiving log records.")
    user: str = Field("squid", description="Database role to connect as.")
    password: Optional[str] = Field(
        None, description="Password; None connects without one.", repr=False
    )

    model_config = {"frozen": True}


@dataclass(frozen=True)
class InsertOutcome:
    """
    Result of one insert attempt for an `L` command.
    """

    values: AppendRecord
    error_kind: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def success(cls, values: AppendRecord) -> "InsertOutcome":
        return cls(values=values)

    @classmethod
    def failure(cls, values: AppendRecord, kind: str, error: str) -> "InsertOutcome":
        return cls(values=values, error_kind=kind, error=error)


@dataclass
class ProtocolStats:
    """
    Counters kept by the protocol reader, reported at shutdown.
    """

    lines: int = field(default=0)
    appended: int = field(default=0)
    failed: int = field(default=0)
    ignored: int = field(default=0)


__all__ = [
    "RECORD_FIELDS",
    "ID_FIELD",
    "APPEND_FIELDS",
    "AppendRecord",
    "RECORD_MALFORMED",
    "INSERT_FAILED",
    "ConnectionConfig",
    "InsertOutcome",
    "ProtocolStats",
]
