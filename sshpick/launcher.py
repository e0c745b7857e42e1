"""
Hand the terminal over to ``ssh`` once a host has been picked.

On POSIX the picker process is replaced by ``ssh`` so the session owns the
terminal directly.  Where ``exec`` is not available the command runs as a
child process instead and its exit status is passed back to the caller.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

SSH_BINARY = "ssh"
SSH_NOT_FOUND_EXIT_CODE = 127


def build_ssh_command(host_id: str) -> List[str]:
    """Return the argv for an interactive session to the config alias *host_id*."""
    host_id = (host_id or "").strip()
    if not host_id:
        raise ValueError("Host identifier must not be empty")
    return [SSH_BINARY, "-t", host_id]


def can_exec() -> bool:
    return os.name == "posix" and hasattr(os, "execvp")


def launch_ssh(
    host_id: str,
    *,
    execvp: Optional[Callable[[str, List[str]], None]] = None,
    run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    use_exec: Optional[bool] = None,
) -> int:
    """Start ``ssh -t <host_id>``.

    With *use_exec* (the default on POSIX) this only returns if ``execvp``
    itself returns, which the real one never does.  Otherwise the exit code of
    the child ``ssh`` process is returned.
    """
    cmd = build_ssh_command(host_id)
    logger.info("Launching %s", " ".join(shlex.quote(part) for part in cmd))

    if use_exec is None:
        use_exec = can_exec()

    if use_exec:
        (execvp or os.execvp)(cmd[0], cmd)
        return 0

    try:
        return run(cmd).returncode
    except FileNotFoundError:
        logger.error("ssh executable was not found on PATH.")
        return SSH_NOT_FOUND_EXIT_CODE


__all__ = ["build_ssh_command", "launch_ssh"]
