"""Text shown for a host in the interactive list.

Both list views leave out settings that are absent from the config; only the
debug dump in :mod:`sshpick.ssh_config` spells them out as ``none``.
"""

from typing import List, Optional, Tuple

from sshpick.ssh_config import HostRecord

SUMMARY_SEPARATOR = "  "

# (attribute, label) pairs shown when a row is expanded
EXPANDED_FIELDS = (
    ("host_name", "HostName"),
    ("port", "Port"),
    ("proxy_jump", "ProxyJump"),
    ("user", "User"),
    ("local_forward", "LocalForward"),
    ("id_file", "IdentityFile"),
)


def summary_fields(host: HostRecord) -> List[Tuple[str, str]]:
    """Return ``(label, value)`` pairs for the collapsed one-line view."""
    candidates: List[Tuple[str, Optional[object]]] = [
        ("host", host.host_name),
        ("user", host.user),
        ("port", host.port),
        ("via", host.proxy_jump),
    ]
    return [(label, str(value)) for label, value in candidates if value is not None]


def summary_line(host: HostRecord) -> str:
    details = SUMMARY_SEPARATOR.join(f"{label} {value}" for label, value in summary_fields(host))
    if not details:
        return host.host_id
    return f"{host.host_id}{SUMMARY_SEPARATOR}{details}"


def expanded_fields(host: HostRecord) -> List[Tuple[str, str]]:
    fields = []
    for attr, label in EXPANDED_FIELDS:
        value = getattr(host, attr)
        if value is not None:
            fields.append((label, str(value)))
    return fields


def expanded_lines(host: HostRecord) -> List[str]:
    """Return the multi-line view: the host id, then one line per present setting."""
    return [host.host_id] + [f"  {label} {value}" for label, value in expanded_fields(host)]