"""Built-in commands: cd, pwd, exit and ftype."""

from __future__ import annotations

import os
import re
import stat
import sys

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    """Read the leading integer of ``text``, or 0 if there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _error(message: str) -> None:
    print(message, file=sys.stderr, flush=True)


def pwd() -> int:
    """Print the working directory; return 0, or 1 on failure."""
    try:
        cwd = os.getcwd()
    except OSError as err:
        _error(f"pwd: {err.strerror}")
        return 1
    print(cwd, flush=True)
    return 0


def ftype(path: str) -> int:
    """Print the type of ``path`` without following links; return 0 or 1."""
    try:
        mode = os.lstat(path).st_mode
    except OSError as err:
        _error(f"ftype: {err.strerror}")
        return 1
    if stat.S_ISREG(mode):
        kind = "regular file"
    elif stat.S_ISDIR(mode):
        kind = "directory"
    elif stat.S_ISLNK(mode):
        kind = "symbolic link"
    elif stat.S_ISFIFO(mode):
        kind = "named pipe"
    else:
        kind = "other"
    print(kind, flush=True)
    return 0


def exit_shell(code: int):
    """Leave the shell with ``code``."""
    sys.stdout.flush()
    sys.stderr.flush()
    raise SystemExit(code)


class Builtins:
    """The built-in commands, with the state ``cd -`` needs."""

    NAMES = frozenset({"cd", "pwd", "exit", "ftype"})

    def __init__(self) -> None:
        self.previous_dir = ""

    def cd(self, path: str | None = None) -> int:
        """Change directory: to $HOME if ``path`` is None, back if ``-``."""
        try:
            current = os.getcwd()
        except OSError as err:
            _error(f"cd: {err.strerror}")
            return 1

        if path is None:
            target = os.environ.get("HOME")
            if target is None:
                _error("Erreur: HOME non défini")
                return 1
        elif path == "-":
            target = self.previous_dir
        else:
            target = path

        try:
            os.chdir(target)
        except OSError as err:
            _error(f"cd: {err.strerror}")
            return 1
        self.previous_dir = current
        return 0

    def handle(self, command: str, args, last_return: int) -> int | None:
        """Run ``command`` if it is built in and return its status.

        Returns None when ``command`` is not a built-in. ``exit`` raises
        ``SystemExit``.
        """
        args = list(args)
        if command == "cd":
            if len(args) > 1:
                _error("cd: too many arguments")
                return 1
            return self.cd(args[0] if args else None)
        if command == "pwd":
            if args:
                _error(f"pwd: {args[0]}: invalid argument")
                return 1
            return pwd()
        if command == "exit":
            if len(args) > 1:
                _error("exit: too many arguments")
                return 1
            exit_shell(_atoi(args[0]) if args else last_return)
        if command == "ftype":
            if len(args) != 1:
                _error("ftype: invalid number of arguments")
                return 1
            return ftype(args[0])
        return None