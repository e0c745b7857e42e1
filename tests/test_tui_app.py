import asyncio

import pytest

from sshpick.selection import SelectionModel, SessionState
from sshpick.ssh_config import HostRecord
from sshpick.tui.app import HostPickerApp, HostRow, main

CONFIG_TEXT = """\
# personal hosts
Host alpha
    HostName 10.0.0.1
    Port 2222
Host beta
    User root
"""


def _write_config(tmp_path, text=CONFIG_TEXT):
    path = tmp_path / "config"
    path.write_text(text, encoding="utf-8")
    return path


def _hosts():
    return [
        HostRecord(host_id="alpha", host_name="10.0.0.1", port=2222),
        HostRecord(host_id="beta", user="root"),
        HostRecord(host_id="db", host_name="db.internal"),
    ]


def _drive(model, keys, check=None):
    async def scenario():
        app = HostPickerApp(model)
        async with app.run_test() as pilot:
            await pilot.press(*keys)
            if check is not None:
                await pilot.pause()
                check(app)

    asyncio.run(scenario())


# --------------------------------------------------------------------- UI
def test_navigation_keys_move_the_highlight():
    model = SelectionModel(_hosts())

    def check(app):
        assert model.cursor == 1
        selected = [row.host_index for row in app.query(HostRow) if row.has_class("-selected")]
        assert selected == [1]

    _drive(model, ["j", "down", "k", "j"], check)


def test_expand_key_toggles_the_highlighted_row():
    model = SelectionModel(_hosts())

    def check(app):
        assert [h.expanded for h in model.hosts] == [False, False, True]

    _drive(model, ["G", "l"], check)


def test_enter_confirms_highlighted_host():
    model = SelectionModel(_hosts())
    _drive(model, ["j", "j", "enter"])

    assert model.state is SessionState.CONFIRMED
    assert model.chosen_host() == "beta"


def test_quit_key_aborts():
    model = SelectionModel(_hosts())
    _drive(model, ["j", "q"])
    assert model.state is SessionState.ABORTED


def test_ctrl_c_aborts():
    model = SelectionModel(_hosts())
    _drive(model, ["j", "ctrl+c"])
    assert model.state is SessionState.ABORTED


def test_escape_in_filter_box_returns_to_list_without_quitting():
    model = SelectionModel(_hosts())

    def check(app):
        assert model.state is SessionState.BROWSING
        assert model.filter_text == "x"
        assert app.focused is app.host_list

    _drive(model, ["slash", "x", "escape"], check)
    assert model.state is SessionState.BROWSING


def test_filter_box_narrows_the_list():
    model = SelectionModel(_hosts())

    def check(app):
        visible = [row.host_index for row in app.query(HostRow) if row.display]
        assert visible == [2]

    _drive(model, ["slash", "d", "b", "enter", "j"], check)
    assert model.selected_host.host_id == "db"


# ------------------------------------------------------------------- main()
def test_dump_prints_hosts_without_starting_ui(tmp_path, capsys):
    config = _write_config(tmp_path)

    assert main(["--config", str(config), "--dump"]) == 0

    out = capsys.readouterr().out
    assert out.startswith("host alpha\n    hostname 10.0.0.1\n    port 2222\n")
    assert "host beta\n" in out
    assert "    user root\n" in out


def test_config_path_from_environment(monkeypatch, tmp_path, capsys):
    config = _write_config(tmp_path, "Host envhost\n")
    monkeypatch.setenv("SSHPICK_CONFIG", str(config))

    assert main(["--dump"]) == 0
    assert "host envhost" in capsys.readouterr().out


def test_parse_error_is_reported_before_ui(monkeypatch, tmp_path, capsys):
    config = _write_config(tmp_path, "Foo bar\n")
    monkeypatch.setattr(HostPickerApp, "run", lambda self: pytest.fail("UI must not start"))

    assert main(["--config", str(config)]) == 1
    assert "Parse error on line 1: Setting outside of Host block" in capsys.readouterr().err


def test_missing_config_is_reported(tmp_path, capsys):
    assert main(["--config", str(tmp_path / "missing")]) == 1
    assert "I/O error" in capsys.readouterr().err


def test_confirmed_host_is_handed_to_launcher(monkeypatch, tmp_path):
    config = _write_config(tmp_path)

    def fake_run(self):
        self.model.select_last()
        self.model.confirm()

    monkeypatch.setattr(HostPickerApp, "run", fake_run)
    launched = []

    rc = main(["--config", str(config)], launcher=lambda host_id: launched.append(host_id) or 0)

    assert rc == 0
    assert launched == ["beta"]


def test_confirm_without_selection_exits_with_error(monkeypatch, tmp_path, capsys):
    config = _write_config(tmp_path)
    monkeypatch.setattr(HostPickerApp, "run", lambda self: self.model.confirm())

    rc = main(["--config", str(config)], launcher=lambda host_id: pytest.fail("nothing to launch"))

    assert rc == 1
    assert "No ssh config selected!" in capsys.readouterr().err


def test_abort_launches_nothing(monkeypatch, tmp_path):
    config = _write_config(tmp_path)
    monkeypatch.setattr(HostPickerApp, "run", lambda self: self.model.quit())

    rc = main(["--config", str(config)], launcher=lambda host_id: pytest.fail("nothing to launch"))
    assert rc == 0


def test_launcher_failure_is_reported(monkeypatch, tmp_path, capsys):
    config = _write_config(tmp_path)

    def fake_run(self):
        self.model.select_next()
        self.model.confirm()

    def failing_launcher(host_id):
        raise OSError("exec failed")

    monkeypatch.setattr(HostPickerApp, "run", fake_run)

    assert main(["--config", str(config)], launcher=failing_launcher) == 1
    assert "failed to launch ssh: exec failed" in capsys.readouterr().err
