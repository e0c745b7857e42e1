"""Platform-related utility functions."""

import logging
import os
from pathlib import Path
from typing import Optional

APP_NAME = "sshpick"

logger = logging.getLogger(__name__)


def _normalize_path(path: str) -> str:
    """Expand user and environment references and return an absolute path."""
    return os.path.abspath(os.path.expanduser(os.path.expandvars(path)))


def get_ssh_dir() -> str:
    """Return the user's SSH directory.

    The location can be overridden by setting the ``SSHPICK_SSH_DIR``
    environment variable.  Otherwise ``~/.ssh`` is used, falling back to
    :meth:`pathlib.Path.home` when ``~`` cannot be expanded.
    """
    override = os.environ.get("SSHPICK_SSH_DIR")
    if override:
        return _normalize_path(override)

    home_dir = os.path.expanduser("~")
    if not home_dir or home_dir == "~":
        try:
            home_dir = str(Path.home())
        except RuntimeError:
            logger.warning(
                "Unable to determine the user's home directory; "
                "falling back to the current working directory for SSH data."
            )
            home_dir = os.getcwd()

    return _normalize_path(os.path.join(home_dir, ".ssh"))


def get_ssh_config_path(override: Optional[str] = None) -> str:
    """Return the SSH config file to read.

    Priority: explicit *override* (the ``--config`` option), then the
    ``SSHPICK_CONFIG`` environment variable, then ``config`` inside
    :func:`get_ssh_dir`.
    """
    if override:
        return _normalize_path(override)
    env_path = os.environ.get("SSHPICK_CONFIG", "").strip()
    if env_path:
        return _normalize_path(env_path)
    return os.path.join(get_ssh_dir(), "config")
