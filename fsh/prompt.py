"""Building the shell prompt."""

from __future__ import annotations

import os
import sys

from fsh import externs

PROMPT_TOTAL_LENGTH = 29

_START = "\001"
_END = "\002"


def _color(code: str) -> str:
    return f"{_START}\033[{code}m{_END}"


def fixed_prompt_length(last_return: int) -> int:
    """Visible width of ``[status]$ `` for the given status."""
    return 3 + len(str(abs(last_return)))


def truncate_path(path: str, max_length: int) -> str:
    """Shorten ``path`` to ``max_length`` characters, prefixing ``...`` if cut."""
    if len(path) <= max_length:
        return path
    tail = path[len(path) - max_length + 3:] if max_length >= 3 else ""
    return ("..." + tail)[:max_length]


def generate_prompt(last_return: int, cwd: str | None = None) -> str:
    """Return the coloured prompt for the last status and working directory."""
    if cwd is None:
        try:
            cwd = os.getcwd()
        except OSError as err:
            print(f"Erreur getcwd: {err.strerror}", file=sys.stderr)
            cwd = None
    if cwd is None:
        shown = "?"
    else:
        shown = truncate_path(cwd, PROMPT_TOTAL_LENGTH - fixed_prompt_length(last_return))

    if externs.last_was_signal > 0:
        return f"{_color('91')}[SIG]{_color('34')}{shown}$ {_color('36')}"
    status_color = "32" if last_return == 0 else "91"
    return (
        f"{_color(status_color)}[{last_return}]{_color('00')}"
        f"{_color('34')}{shown}$ {_color('36')}"
    )