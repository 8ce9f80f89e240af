"""Signal handling for the dirwalk CLI.

SIGINT and SIGPIPE do not kill the process outright. They are recorded, the running
walk notices on its next visitor call and stops, and the CLI exits with the matching
status once output has been closed.
"""

import atexit
import os
import signal
import sys
from threading import Event
from types import FrameType
from typing import Any, Optional

HAS_SIGPIPE = hasattr(signal, "SIGPIPE")


class SignalHandler:
    """Records interrupting signals so a walk can stop between entries.

    Attributes:
        sigpipe_received: Set when SIGPIPE arrives (Unix-like systems only).
        sigint_received: Set when SIGINT arrives.
        original_sigpipe_handler: Handler installed before ours, restored after the first SIGPIPE.
        original_sigint_handler: Handler installed before ours, restored after the first SIGINT.
    """

    def __init__(self) -> None:
        self.sigpipe_received = Event()
        self.sigint_received = Event()
        self.original_sigpipe_handler: Any = signal.getsignal(signal.SIGPIPE) if HAS_SIGPIPE else None
        self.original_sigint_handler: Any = signal.getsignal(signal.SIGINT)

    def handle_sigpipe(self, signum: int, frame: Optional[FrameType]) -> None:
        self.sigpipe_received.set()
        signal.signal(signal.SIGPIPE, self.original_sigpipe_handler)

    def handle_sigint(self, signum: int, frame: Optional[FrameType]) -> None:
        # A second Ctrl+C goes to the original handler and interrupts for real.
        self.sigint_received.set()
        signal.signal(signal.SIGINT, self.original_sigint_handler)

    def interrupted(self) -> bool:
        """True once either signal has been received."""
        return self.sigpipe_received.is_set() or self.sigint_received.is_set()

    def exit_code(self) -> Optional[int]:
        """Conventional exit status for the received signal, or None."""
        if self.sigpipe_received.is_set():
            return 141
        if self.sigint_received.is_set():
            return 130
        return None


# Shared by the writer and the main entry point
signal_handler = SignalHandler()


def setup_signal_handling() -> None:
    """Install the handlers for SIGPIPE (where available) and SIGINT."""
    if HAS_SIGPIPE:
        signal.signal(signal.SIGPIPE, signal_handler.handle_sigpipe)
    signal.signal(signal.SIGINT, signal_handler.handle_sigint)


def cleanup() -> None:
    """Point stdout at the null device after an interruption.

    This keeps the interpreter from reporting a broken pipe while flushing stdout at
    shutdown.
    """
    if signal_handler.interrupted():
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())


atexit.register(cleanup)
