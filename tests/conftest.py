import os
import sys

import pytest

# Ensure project root is on sys.path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


@pytest.fixture(autouse=True)
def _isolated_ssh_env(monkeypatch, tmp_path):
    """Keep tests away from the developer's real ~/.ssh/config."""
    monkeypatch.delenv('SSHPICK_CONFIG', raising=False)
    monkeypatch.setenv('SSHPICK_SSH_DIR', str(tmp_path / 'ssh'))
