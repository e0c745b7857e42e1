"""
SSH client configuration parsing for sshpick.

Only a small subset of ``ssh_config(5)`` is understood: ``Host`` blocks and the
``HostName``, ``Port``, ``User``, ``ProxyJump``, ``LocalForward`` and
``IdentityFile`` settings inside them.  Anything else is reported as a parse
error with the 1-based line number of the offending line.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

HOST_PREFIX = "Host "

# lower-cased directive -> HostRecord attribute
SETTING_FIELDS = {
    "hostname": "host_name",
    "port": "port",
    "user": "user",
    "proxyjump": "proxy_jump",
    "localforward": "local_forward",
    "identityfile": "id_file",
}

# Canonical spelling used when writing records back out
SETTING_NAMES = {
    "host_name": "HostName",
    "port": "Port",
    "user": "User",
    "proxy_jump": "ProxyJump",
    "local_forward": "LocalForward",
    "id_file": "IdentityFile",
}

# (attribute, label) pairs in text dump order
DUMP_FIELDS = (
    ("host_name", "hostname"),
    ("port", "port"),
    ("user", "user"),
    ("proxy_jump", "proxyjump"),
    ("local_forward", "localforward"),
    ("id_file", "identityfile"),
)

_PORT_RE = re.compile(r"\+?[0-9]+", re.ASCII)
_MAX_PORT_VALUE = 0xFFFFFFFF


class SshConfigError(Exception):
    """Base class for failures while loading an SSH config."""


class ConfigReadError(SshConfigError):
    """The config file could not be opened or decoded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"I/O error: {reason}")


class ConfigParseError(SshConfigError):
    """A line of the config does not follow the supported grammar."""

    def __init__(self, line_number: int, message: str):
        self.line_number = line_number
        self.message = message
        super().__init__(f"Parse error on line {line_number}: {message}")


@dataclass
class HostRecord:
    """One ``Host`` block of an SSH config."""

    host_id: str
    host_name: Optional[str] = None
    port: Optional[int] = None
    user: Optional[str] = None
    proxy_jump: Optional[str] = None
    local_forward: Optional[str] = None
    id_file: Optional[str] = None
    expanded: bool = field(default=False, compare=False, repr=False)

    def __str__(self):
        return format_host(self)


def parse_port(value: str) -> Optional[int]:
    """Return *value* as an unsigned port number, or ``None`` if it is not one.

    Invalid ports are deliberately not treated as errors; the setting is just
    dropped from the record.
    """
    if not _PORT_RE.fullmatch(value):
        return None
    port = int(value)
    if port > _MAX_PORT_VALUE:
        return None
    return port


def parse_ssh_config(text: str) -> List[HostRecord]:
    """Parse *text* into the list of host blocks it declares, in file order.

    Raises :class:`ConfigParseError` on the first malformed line; no partial
    result is returned.
    """
    hosts: List[HostRecord] = []
    current: Optional[HostRecord] = None

    # Line numbers count every LF-delimited line, blank and comment lines included
    for line_number, raw_line in enumerate(text.split("\n"), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        if line.startswith(HOST_PREFIX):
            if current is not None:
                hosts.append(current)
            patterns = line[len(HOST_PREFIX):].split()
            current = HostRecord(host_id=patterns[0])
            continue

        if current is None:
            raise ConfigParseError(line_number, "Setting outside of Host block")

        parts = line.split(None, 1)
        if len(parts) != 2:
            raise ConfigParseError(line_number, "Invalid config line format")

        key, value = parts
        attr = SETTING_FIELDS.get(key.lower())
        if attr is None:
            raise ConfigParseError(line_number, "Invalid config line format")

        if attr == "port":
            current.port = parse_port(value)
            if current.port is None:
                logger.debug("Ignoring invalid port %r for host %s on line %d", value, current.host_id, line_number)
        else:
            setattr(current, attr, value)

    if current is not None:
        hosts.append(current)

    logger.debug("Parsed %d host block(s)", len(hosts))
    return hosts


def read_ssh_config(path: str) -> List[HostRecord]:
    """Read and parse the SSH config stored at *path*."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigReadError(path, str(exc)) from exc

    logger.info("Loading SSH config from %s", path)
    return parse_ssh_config(content)


def format_host(host: HostRecord) -> str:
    """Return the debug text dump of *host*, ``none`` standing in for absent fields."""
    lines = [f"host {host.host_id}"]
    for attr, label in DUMP_FIELDS:
        value = getattr(host, attr)
        lines.append(f"    {label} {value if value is not None else 'none'}")
    return "\n".join(lines) + "\n"


def format_hosts(hosts: Iterable[HostRecord]) -> str:
    return "".join(format_host(host) for host in hosts)


def serialize_hosts(hosts: Iterable[HostRecord]) -> str:
    """Write *hosts* back out as ``Host`` blocks that :func:`parse_ssh_config` reads."""
    lines: List[str] = []
    for host in hosts:
        lines.append(f"{HOST_PREFIX}{host.host_id}")
        for attr, name in SETTING_NAMES.items():
            value = getattr(host, attr)
            if value is not None:
                lines.append(f"    {name} {value}")
    return "\n".join(lines) + ("\n" if lines else "")


__all__ = [
    "ConfigParseError",
    "ConfigReadError",
    "HostRecord",
    "SshConfigError",
    "format_host",
    "format_hosts",
    "parse_ssh_config",
    "read_ssh_config",
    "serialize_hosts",
]
