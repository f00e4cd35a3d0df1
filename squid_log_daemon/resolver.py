"""
Resolve the daemon's command-line argument into connection parameters.

The proxy passes the path of its `access_log daemon:` directive as the only
argument, e.g. `/db_host/squid_log/access_log/squid/secret`. Any component
may be left empty to fall back to its default:

    access_log daemon://///secret squid_mysql     # only the password
"""

from __future__ import annotations

from typing import List

from squid_log_daemon.domain.models import ConnectionConfig
from squid_log_daemon.errors import ConfigMalformed
from squid_log_daemon.utils.logging import get_logger

log = get_logger(__name__)

COMPONENTS = ("host", "database", "table", "user", "password")

_DEFAULT_MESSAGES = {
    "host": "Database host not specified. Using {}.",
    "database": "Database name not specified. Using {}.",
    "table": "Table parameter not specified. Using {}.",
    "user": "User parameter not specified. Using {}.",
}


def split_config_string(config_string: str) -> List[str]:
    """
    Split the configuration string into exactly five components.

    A single leading slash is the path root the proxy prepends, so six parts
    with an empty first part are accepted as the five that follow.

    Raises
    ------
    ConfigMalformed
        If the string does not decompose into five components.
    """
    parts = config_string.split("/")
    if len(parts) == len(COMPONENTS) + 1 and parts[0] == "":
        parts = parts[1:]
    if len(parts) != len(COMPONENTS):
        raise ConfigMalformed(config_string, len(parts))
    return parts


def resolve_config(config_string: str) -> ConnectionConfig:
    """
    Build a ConnectionConfig, substituting defaults for empty components.

    Each default used is logged at INFO, as is a missing password.
    """
    parts = split_config_string(config_string)
    defaults = ConnectionConfig()
    values = {}
    for name, raw in zip(COMPONENTS, parts):
        if raw:
            values[name] = raw
        elif name == "password":
            log.info("No password specified. Connecting with NO password.")
        else:
            default = getattr(defaults, name)
            log.info(_DEFAULT_MESSAGES[name].format(default))
    return ConnectionConfig(**values)


__all__ = ["COMPONENTS", "split_config_string", "resolve_config"]
