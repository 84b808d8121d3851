"""Redirection of the standard streams to files."""

from __future__ import annotations

import os
import sys

_WRITE_NEW = os.O_WRONLY | os.O_CREAT | os.O_EXCL
_WRITE_TRUNC = os.O_WRONLY | os.O_CREAT | os.O_TRUNC
_WRITE_APPEND = os.O_WRONLY | os.O_CREAT | os.O_APPEND

OPERATORS = {
    "<": (0, os.O_RDONLY),
    ">": (1, _WRITE_NEW),
    ">|": (1, _WRITE_TRUNC),
    ">>": (1, _WRITE_APPEND),
    "2>": (2, _WRITE_NEW),
    "2>|": (2, _WRITE_TRUNC),
    "2>>": (2, _WRITE_APPEND),
}


class RedirectionError(Exception):
    """A redirection could not be carried out."""


def _flush_std() -> None:
    sys.stdout.flush()
    sys.stderr.flush()


def apply_redirections(tokens) -> list[str]:
    """Apply the redirections in ``tokens`` to fds 0, 1 and 2.

    Returns the tokens with every operator and its file name removed.
    """
    remaining: list[str] = []
    items = iter(tokens)
    for token in items:
        target = OPERATORS.get(token)
        if target is None:
            remaining.append(token)
            continue
        filename = next(items, None)
        if filename is None:
            raise RedirectionError(f"missing file name after '{token}'")
        target_fd, flags = target
        try:
            fd = os.open(filename, flags, 0o644)
        except OSError as err:
            raise RedirectionError(f"{filename}: {err.strerror}") from err
        try:
            _flush_std()
            os.dup2(fd, target_fd)
        except OSError as err:
            raise RedirectionError(f"{filename}: {err.strerror}") from err
        finally:
            os.close(fd)
    return remaining


class SavedStreams:
    """Copies of the standard file descriptors, to be put back later."""

    def __init__(self) -> None:
        self._saved = [os.dup(fd) for fd in (0, 1, 2)]

    def reset(self) -> None:
        """Point fds 0, 1 and 2 back at the saved streams."""
        _flush_std()
        for fd, saved in enumerate(self._saved):
            os.dup2(saved, fd)

    def close(self) -> None:
        """Release the saved copies."""
        for saved in self._saved:
            os.close(saved)
        self._saved = []

    def __enter__(self) -> "SavedStreams":
        return self

    def __exit__(self, *args) -> None:
        self.reset()
        self.close()