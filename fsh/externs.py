"""Running external programs."""

from __future__ import annotations

import signal
import subprocess
import sys
from enum import IntEnum

from fsh.signals import restore_default_signals

SIGNAL_EXIT_STATUS = 255


class SignalStatus(IntEnum):
    """How the last external command ended."""

    NONE = 0
    SIGNALED = 1
    INTERRUPTED = 2


last_was_signal: SignalStatus = SignalStatus.NONE


def execute_external_command(args) -> int:
    """Run ``args`` as a program found on PATH and return its exit status.

    A program killed by a signal gives 255; a program that cannot be started
    gives 1. ``last_was_signal`` is updated to tell how the program ended.
    """
    global last_was_signal
    args = list(args)
    if not args:
        raise ValueError("no command to execute")

    sys.stdout.flush()
    sys.stderr.flush()
    try:
        completed = subprocess.run(args, preexec_fn=restore_default_signals)
    except OSError as err:
        print(f"execvp: {err.strerror}", file=sys.stderr)
        last_was_signal = SignalStatus.NONE
        return 1

    code = completed.returncode
    if code < 0:
        last_was_signal = (
            SignalStatus.INTERRUPTED if -code == signal.SIGINT else SignalStatus.SIGNALED
        )
        return SIGNAL_EXIT_STATUS
    last_was_signal = SignalStatus.NONE
    return code