"""Signal handling for the interactive shell."""

from __future__ import annotations

import signal
from dataclasses import dataclass

_NAMES = {
    signal.SIGINT: "SIGINT",
    signal.SIGTERM: "SIGTERM",
}


@dataclass
class InterruptState:
    """Records whether SIGINT or SIGTERM was received, and which."""

    was_interrupted: bool = False
    last_signal: int = 0

    def clear(self) -> None:
        self.was_interrupted = False
        self.last_signal = 0


interrupt_state = InterruptState()


def handle_signal(signum, frame) -> None:
    """Record an interruption by SIGINT or SIGTERM; other signals are ignored."""
    if signum in (signal.SIGINT, signal.SIGTERM):
        interrupt_state.was_interrupted = True
        interrupt_state.last_signal = int(signum)


def setup_signals() -> None:
    """Install ``handle_signal`` for SIGINT and SIGTERM."""
    for signum in (signal.SIGINT, signal.SIGTERM):
        signal.signal(signum, handle_signal)
        signal.siginterrupt(signum, False)


def restore_default_signals() -> None:
    """Put back the default disposition of SIGINT and SIGTERM."""
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    signal.signal(signal.SIGTERM, signal.SIG_DFL)


def get_signal_name(signum) -> str:
    """Return the name of SIGINT or SIGTERM, or ``"UNKNOWN"``."""
    return _NAMES.get(signum, "UNKNOWN")