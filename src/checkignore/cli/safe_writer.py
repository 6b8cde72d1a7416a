"""Safe output writing utilities for the checkignore CLI.

Records are raw bytes (paths need not be valid UTF-8) and are collected in a buffer
until flush() hands them to the file descriptor. One-shot runs flush once at the end;
``--stdin`` runs flush after every record.
"""

import errno
import os
import types
from pathlib import Path
from typing import Optional, Type, Union

from checkignore.cli.signal_handler import signal_handler
from checkignore.exceptions import OutputFlushError


class SafeWriter:
    """Buffered, signal-aware byte writer for a file path or file descriptor.

    Attributes:
        file: Either a file path or file descriptor for output.
        fd: The actual file descriptor being written to.
        name: How the destination is named in error messages.
    """

    def __init__(self, file: Union[int, Path, str], name: str = "stdout"):
        """Initialize the safe writer.

        Args:
            file: Either a file descriptor (int) or path for writing output.
            name: Destination name used in flush error messages.
        """
        self.file = file
        self.name = name
        self._closed = False
        self._buffer = bytearray()

        if isinstance(file, int):
            # It's already a file descriptor
            self.fd = file
            self._file_obj = None
        elif isinstance(file, (str, os.PathLike)):
            path = Path(file)
            self._file_obj = path.open("wb")
            self.fd = self._file_obj.fileno()
        else:
            raise TypeError(f"Expected int, str, or PathLike, got {type(file).__name__}")

    def write(self, data: bytes) -> None:
        """Queue data for the next flush.

        Raises:
            BrokenPipeError: If SIGPIPE or SIGINT was received.
            ValueError: If attempting to write to a closed writer.
        """
        if self._closed:
            raise ValueError("Cannot write to closed SafeWriter")

        if signal_handler.should_stop:
            raise BrokenPipeError()

        self._buffer += data

    def flush(self) -> None:
        """Write out everything buffered so far.

        Raises:
            BrokenPipeError: If SIGPIPE received or pipe is broken.
            OutputFlushError: If any other I/O error occurs.
        """
        if self._closed:
            raise ValueError("Cannot flush closed SafeWriter")

        if signal_handler.should_stop:
            raise BrokenPipeError()

        data = bytes(self._buffer)
        written = 0
        try:
            while written < len(data):
                written += os.write(self.fd, data[written:])
        except OSError as e:
            if e.errno == errno.EPIPE:
                raise BrokenPipeError()
            raise OutputFlushError(self.name, e) from e
        finally:
            del self._buffer[:written]

    def close(self, discard: bool = False) -> None:
        """Flush and close the file if it was opened by this class.

        Args:
            discard: Drop buffered output instead of flushing it.

        A broken pipe during the final flush or close still leaves the writer marked
        as closed.
        """
        if self._closed:
            return

        if discard:
            self._buffer.clear()

        try:
            if self._buffer:
                self.flush()
        except BrokenPipeError:
            self._buffer.clear()
        finally:
            if self._file_obj is not None:
                try:
                    self._file_obj.close()
                except OSError as e:
                    if e.errno != errno.EPIPE:
                        raise
            self._closed = True

    def __enter__(self) -> "SafeWriter":
        """Enter the context manager.

        Returns:
            self: The SafeWriter instance for use in the with block.
        """
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        """Exit the context manager and close resources.

        Output still buffered when an exception escapes the block is dropped: only
        records flushed before a fatal error ever reach the reader. If closing fails
        while another exception is already propagating, the original exception wins.
        """
        try:
            self.close(discard=exc_type is not None)
        except OSError:
            if exc_type is None:
                raise
