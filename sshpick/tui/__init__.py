"""
Textual front end for sshpick.

``main`` is resolved lazily from :mod:`sshpick.tui.app` so importing this
package (for example from the console script) does not pull in Textual until
the picker actually starts, and ``python -m sshpick.tui.app`` does not import
the module twice.
"""

from __future__ import annotations

from typing import Any

__all__ = ["main"]


def main(*args: Any, **kwargs: Any) -> Any:
    """Entry point used by the ``sshpick`` console script."""
    from .app import main as _app_main

    return _app_main(*args, **kwargs)
