"""Signal handling utilities for the checkignore CLI.

check-ignore is often run as a coprocess (``--stdin``) by another tool that may close
its end of the pipe or be interrupted at any time. SIGPIPE is recorded so that the
writer stops producing output, and SIGINT also breaks out of a blocking read on stdin.
"""

import atexit
import os
import signal
import sys
from threading import Event
from types import FrameType
from typing import Any, Optional

HAS_SIGPIPE = hasattr(signal, "SIGPIPE")

EXIT_SIGINT = 130
EXIT_SIGPIPE = 141


class SignalHandler:
    """Records SIGPIPE and SIGINT so the CLI can stop and pick the right exit status.

    Attributes:
        sigpipe_received: Event that is set when a SIGPIPE signal is received.
        sigint_received: Event that is set when a SIGINT signal is received.
        original_sigpipe_handler: Original SIGPIPE handler, or None without SIGPIPE.
        original_sigint_handler: Original SIGINT handler.
    """

    def __init__(self) -> None:
        self.sigpipe_received = Event()
        self.sigint_received = Event()
        self.original_sigpipe_handler: Any = signal.getsignal(signal.SIGPIPE) if HAS_SIGPIPE else None
        self.original_sigint_handler: Any = signal.getsignal(signal.SIGINT)

    def handle_sigpipe(self, signum: int, frame: Optional[FrameType]) -> None:
        """Note that the reader went away; the next write raises BrokenPipeError."""
        self.sigpipe_received.set()
        signal.signal(signal.SIGPIPE, self.original_sigpipe_handler)

    def handle_sigint(self, signum: int, frame: Optional[FrameType]) -> None:
        """Note the interruption and unwind, even out of a blocking stdin read."""
        self.sigint_received.set()
        signal.signal(signal.SIGINT, self.original_sigint_handler)
        raise KeyboardInterrupt

    @property
    def should_stop(self) -> bool:
        return self.sigpipe_received.is_set() or self.sigint_received.is_set()

    def exit_status(self) -> Optional[int]:
        """Exit status implied by the signals received so far, if any."""
        if self.sigpipe_received.is_set():
            return EXIT_SIGPIPE
        if self.sigint_received.is_set():
            return EXIT_SIGINT
        return None


# Create a singleton instance for the application
signal_handler = SignalHandler()


def setup_signal_handling() -> None:
    """Install the handlers for SIGINT and, where the platform has it, SIGPIPE."""
    if HAS_SIGPIPE:
        signal.signal(signal.SIGPIPE, signal_handler.handle_sigpipe)
    signal.signal(signal.SIGINT, signal_handler.handle_sigint)


def cleanup() -> None:
    """Cleanup function registered with atexit.

    Points stdout at the null device after SIGPIPE or SIGINT so the interpreter's own
    final flush cannot produce a second error.
    """
    if signal_handler.should_stop:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())


# Register the cleanup function
atexit.register(cleanup)
