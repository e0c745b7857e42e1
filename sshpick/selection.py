"""
Navigation state for the host picker.

:class:`SelectionModel` owns the parsed hosts for one session together with
the cursor and the per-host expanded flags.  It knows nothing about how the
list is drawn; the TUI only calls the operations below and re-renders.
"""

from __future__ import annotations

import enum
import logging
from typing import Dict, List, Optional, Sequence, Set, Tuple

from sshpick.ssh_config import HostRecord

logger = logging.getLogger(__name__)


# action -> keys, using Textual key names
KEY_BINDINGS: Dict[str, Tuple[str, ...]] = {
    "quit": ("q", "escape"),
    "clear_selection": ("h", "left"),
    "select_next": ("j", "down"),
    "select_previous": ("k", "up"),
    "select_first": ("g", "home"),
    "select_last": ("G", "end"),
    "toggle_expand": ("l", "right"),
    "confirm": ("enter",),
}

_KEY_TO_ACTION: Dict[str, str] = {key: action for action, keys in KEY_BINDINGS.items() for key in keys}


class NoSelectionError(Exception):
    """Raised when a session was confirmed while no host was highlighted."""

    def __init__(self, message: str = "No ssh config selected!"):
        super().__init__(message)


class SessionState(enum.Enum):
    BROWSING = "browsing"
    CONFIRMED = "confirmed"
    ABORTED = "aborted"


class SelectionModel:
    """Cursor, expand flags and session outcome over an ordered host list."""

    def __init__(self, hosts: Sequence[HostRecord]):
        self.hosts: List[HostRecord] = list(hosts)
        self.cursor: Optional[int] = None
        self.state = SessionState.BROWSING
        self.filter_text = ""
        self._visible: List[int] = list(range(len(self.hosts)))
        self._visible_set: Set[int] = set(self._visible)
        self._chosen: Optional[str] = None

    # ------------------------------------------------------------- queries
    @property
    def visible_hosts(self) -> List[HostRecord]:
        """Hosts that can currently be navigated, in file order."""
        return [self.hosts[i] for i in self._visible]

    @property
    def selected_host(self) -> Optional[HostRecord]:
        if self.cursor is None:
            return None
        return self.hosts[self._visible[self.cursor]]

    @property
    def finished(self) -> bool:
        return self.state is not SessionState.BROWSING

    def is_visible(self, host_index: int) -> bool:
        return host_index in self._visible_set

    def is_selected(self, host_index: int) -> bool:
        return self.cursor is not None and self._visible[self.cursor] == host_index

    def chosen_host(self) -> str:
        """Return the host picked by :meth:`confirm`.

        Raises :class:`NoSelectionError` if the session was confirmed without a
        cursor, or has not been confirmed at all.
        """
        if self.state is not SessionState.CONFIRMED or self._chosen is None:
            raise NoSelectionError()
        return self._chosen

    # ---------------------------------------------------------- navigation
    def select_next(self) -> None:
        if self.finished or not self._visible:
            return
        if self.cursor is None:
            self.cursor = 0
        else:
            self.cursor = min(self.cursor + 1, len(self._visible) - 1)

    def select_previous(self) -> None:
        if self.finished or not self._visible:
            return
        if self.cursor is None:
            # Entering from nothing starts at the bottom of the list
            self.cursor = len(self._visible) - 1
        else:
            self.cursor = max(self.cursor - 1, 0)

    def select_first(self) -> None:
        if self.finished or not self._visible:
            return
        self.cursor = 0

    def select_last(self) -> None:
        if self.finished or not self._visible:
            return
        self.cursor = len(self._visible) - 1

    def clear_selection(self) -> None:
        if self.finished:
            return
        self.cursor = None

    def toggle_expand(self) -> None:
        if self.finished:
            return
        host = self.selected_host
        if host is not None:
            host.expanded = not host.expanded

    # ---------------------------------------------------------- transitions
    def confirm(self) -> None:
        if self.finished:
            return
        host = self.selected_host
        self._chosen = host.host_id if host is not None else None
        self.state = SessionState.CONFIRMED
        logger.debug("Session confirmed with %s", self._chosen or "no selection")

    def quit(self) -> None:
        if self.finished:
            return
        self.state = SessionState.ABORTED
        logger.debug("Session aborted")

    def handle_key(self, key: str) -> bool:
        """Apply the operation bound to *key*; return ``True`` once the session ended."""
        action = _KEY_TO_ACTION.get(key)
        if action is not None and not self.finished:
            getattr(self, action)()
        return self.finished

    # ------------------------------------------------------------- filtering
    def set_filter(self, text: str) -> None:
        """Restrict navigation to hosts matching *text* (case-insensitive substring)."""
        if self.finished:
            return
        previous = self._visible[self.cursor] if self.cursor is not None else None
        self.filter_text = text
        needle = (text or "").strip().lower()
        self._visible = [i for i, host in enumerate(self.hosts) if not needle or _matches(host, needle)]
        self._visible_set = set(self._visible)

        if previous is not None and previous in self._visible_set:
            self.cursor = self._visible.index(previous)
        else:
            self.cursor = None


def _matches(host: HostRecord, needle: str) -> bool:
    fields = (host.host_id, host.host_name, host.user, host.proxy_jump)
    for field in fields:
        if field and needle in field.lower():
            return True
    return False


__all__ = ["KEY_BINDINGS", "NoSelectionError", "SelectionModel", "SessionState"]
