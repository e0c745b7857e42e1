from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, List, Optional, Sequence

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Footer, Header, Input, Static

from sshpick import __version__
from sshpick.display import SUMMARY_SEPARATOR, expanded_fields, expanded_lines, summary_fields, summary_line
from sshpick.launcher import launch_ssh
from sshpick.platform_utils import get_ssh_config_path
from sshpick.selection import KEY_BINDINGS, NoSelectionError, SelectionModel, SessionState
from sshpick.ssh_config import HostRecord, SshConfigError, format_hosts, read_ssh_config

LOG = logging.getLogger(__name__)

HIGHLIGHT_SYMBOL = ">"

ACTION_LABELS = {
    "quit": "Quit",
    "clear_selection": "Unselect",
    "select_next": "Down",
    "select_previous": "Up",
    "select_first": "Top",
    "select_last": "Bottom",
    "toggle_expand": "Expand",
    "confirm": "Connect",
}

# Terminals speaking the kitty keyboard protocol report Shift+G as "shift+g"
EXTRA_KEYS = {"select_last": ("shift+g",)}


def _build_bindings() -> List[Binding]:
    bindings = []
    for action, keys in KEY_BINDINGS.items():
        all_keys = keys + EXTRA_KEYS.get(action, ())
        bindings.append(Binding(",".join(all_keys), action, ACTION_LABELS[action], show=action != "select_last"))
    bindings.append(Binding("/", "focus_filter", "Filter"))
    bindings.append(Binding("ctrl+c", "quit", "Quit", show=False))
    return bindings


class HostRow(Static):
    """One host in the list; spans several lines while expanded."""

    def __init__(self, host_index: int, **kwargs):
        super().__init__(**kwargs)
        self.host_index = host_index

    def show_host(self, host: HostRecord, *, selected: bool, odd: bool) -> None:
        self.set_class(selected, "-selected")
        self.set_class(odd, "-odd")
        self.update(self._render_host(host, selected))
        self.tooltip = "\n".join(expanded_lines(host))

    @staticmethod
    def _render_host(host: HostRecord, selected: bool) -> Text:
        marker = f"{HIGHLIGHT_SYMBOL} " if selected else "  "
        text = Text(marker)
        if host.expanded:
            text.append(host.host_id, style="bold underline")
            for label, value in expanded_fields(host):
                text.append(f"\n    {label} ")
                text.append(value, style="italic")
            return text

        text.append(host.host_id, style="bold")
        for label, value in summary_fields(host):
            text.append(SUMMARY_SEPARATOR)
            text.append(f"{label} ", style="dim")
            text.append(value)
        return text


class HostList(VerticalScroll, inherit_bindings=False):
    """Scrollable host rows; navigation keys are handled by the app."""


class FilterInput(Input):
    BINDINGS = [Binding("escape", "leave_filter", "Back to list", show=False)]

    def action_leave_filter(self) -> None:
        self.app.action_focus_list()


class HostPickerApp(App[None]):
    """Textual interface for picking a host from an SSH config."""

    TITLE = "sshpick"
    SUB_TITLE = "Your ssh configs"
    AUTO_FOCUS = "#host-list"
    CSS = """
    Screen {
        layout: vertical;
    }

    #filter {
        margin: 0 1;
    }

    #host-list {
        height: 1fr;
        padding: 0 1;
    }

    HostRow {
        background: $surface;
        padding: 0 1;
    }

    HostRow.-odd {
        background: $panel;
    }

    HostRow.-selected {
        background: $accent 40%;
        text-style: bold;
    }

    #empty {
        padding: 1 2;
        color: $secondary;
    }

    #help {
        height: 1;
        content-align: center middle;
        color: $secondary;
    }
    """

    BINDINGS = _build_bindings()

    def __init__(self, model: SelectionModel, *, config_path: str = "", **kwargs):
        super().__init__(**kwargs)
        self.model = model
        self.config_path = config_path
        self._rows: List[HostRow] = []

    # --------------------------------------------------------------------- UI
    def compose(self) -> ComposeResult:
        yield Header()
        yield FilterInput(placeholder="Filter hosts…", id="filter")
        self._rows = [HostRow(index) for index in range(len(self.model.hosts))]
        with HostList(id="host-list"):
            yield from self._rows
            yield Static(self._empty_message(), id="empty")
        yield Static(
            "Use ↓↑ to move, ← to unselect, → to expand, g/G to go top/bottom, / to filter.",
            id="help",
        )
        yield Footer()

    def on_mount(self) -> None:
        self.host_list = self.query_one(HostList)
        self.filter_input = self.query_one(FilterInput)
        self.empty_label = self.query_one("#empty", Static)
        self.host_list.focus()
        self.refresh_rows()

    def refresh_rows(self) -> None:
        """Redraw every row from the model state."""
        position = 0
        selected_row: Optional[HostRow] = None
        for row in self._rows:
            visible = self.model.is_visible(row.host_index)
            row.display = visible
            if not visible:
                continue
            selected = self.model.is_selected(row.host_index)
            row.show_host(self.model.hosts[row.host_index], selected=selected, odd=position % 2 == 1)
            if selected:
                selected_row = row
            position += 1

        self.empty_label.display = position == 0
        self.empty_label.update(self._empty_message())
        if selected_row is not None:
            selected_row.scroll_visible(animate=False)

    def _empty_message(self) -> str:
        if self.model.filter_text.strip():
            return "No hosts match the current filter"
        if self.config_path:
            return f"No hosts found in {self.config_path}"
        return "No hosts found"

    # ---------------------------------------------------------------- bindings
    def _apply(self, operation: Callable[[], None]) -> None:
        operation()
        if self.model.finished:
            self.exit()
        else:
            self.refresh_rows()

    def action_quit(self) -> None:
        self._apply(self.model.quit)

    def action_clear_selection(self) -> None:
        self._apply(self.model.clear_selection)

    def action_select_next(self) -> None:
        self._apply(self.model.select_next)

    def action_select_previous(self) -> None:
        self._apply(self.model.select_previous)

    def action_select_first(self) -> None:
        self._apply(self.model.select_first)

    def action_select_last(self) -> None:
        self._apply(self.model.select_last)

    def action_toggle_expand(self) -> None:
        self._apply(self.model.toggle_expand)

    def action_confirm(self) -> None:
        host = self.model.selected_host
        if host is not None:
            LOG.info("Selected %s", summary_line(host))
        self._apply(self.model.confirm)

    def action_focus_filter(self) -> None:
        self.filter_input.focus()
        self.filter_input.cursor_position = len(self.filter_input.value)

    def action_focus_list(self) -> None:
        self.host_list.focus()

    # ----------------------------------------------------------------- events
    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "filter":
            self.model.set_filter(event.value)
            self.refresh_rows()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "filter":
            self.action_focus_list()


def parse_args(argv: Optional[Sequence[str]] = None):
    parser = argparse.ArgumentParser(
        prog="sshpick",
        description="Pick a host from your SSH config and connect to it",
    )
    parser.add_argument(
        "-F",
        "--config",
        help="SSH config file to read (default: $SSHPICK_CONFIG or ~/.ssh/config)",
    )
    parser.add_argument(
        "--dump",
        action="store_true",
        help="Print the parsed hosts and exit without starting the UI",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Python logging level (default: WARNING)",
    )
    parser.add_argument(
        "--log-file",
        help="Write log messages to this file instead of standard error",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None, *, launcher: Callable[[str], int] = launch_ssh) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        filename=args.log_file,
    )

    config_path = get_ssh_config_path(args.config)
    try:
        hosts = read_ssh_config(config_path)
    except SshConfigError as exc:
        LOG.debug("Failed to load %s", config_path, exc_info=True)
        print(f"sshpick: {config_path}: {exc}", file=sys.stderr)
        return 1

    if args.dump:
        sys.stdout.write(format_hosts(hosts))
        return 0

    model = SelectionModel(hosts)
    app = HostPickerApp(model, config_path=config_path)
    try:
        app.run()
    except KeyboardInterrupt:
        return 0

    return_code = getattr(app, "return_code", 0) or 0
    if return_code:
        return return_code
    if model.state is not SessionState.CONFIRMED:
        return 0

    try:
        host_id = model.chosen_host()
    except NoSelectionError as exc:
        print(f"sshpick: {exc}", file=sys.stderr)
        return 1

    try:
        return launcher(host_id)
    except OSError as exc:
        LOG.exception("Failed to launch ssh for %s", host_id)
        print(f"sshpick: failed to launch ssh: {exc}", file=sys.stderr)
        return 1


__all__ = ["main", "HostPickerApp"]


if __name__ == "__main__":
    sys.exit(main())
