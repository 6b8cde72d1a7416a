"""Unit tests for the SafeWriter class in the checkignore CLI."""

import errno
import os
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from checkignore.cli.safe_writer import SafeWriter
from checkignore.exceptions import OutputFlushError


@pytest.fixture
def mock_signals():
    """Create a mock for signal handler checks."""
    with patch("checkignore.cli.safe_writer.signal_handler") as mock:
        mock.should_stop = False
        yield mock


@pytest.fixture
def pipe():
    """An OS pipe: (read_fd, write_fd)."""
    read_fd, write_fd = os.pipe()
    yield read_fd, write_fd
    for fd in (read_fd, write_fd):
        try:
            os.close(fd)
        except OSError:
            pass


def test_safe_writer_init_with_fd():
    """Test SafeWriter initialization with a file descriptor."""
    writer = SafeWriter(3)

    assert writer.file == 3
    assert writer.fd == 3
    assert writer.name == "stdout"
    assert writer._file_obj is None
    assert not writer._closed


def test_safe_writer_init_with_path(tmp_path):
    """Test SafeWriter initialization with a path."""
    target = tmp_path / "out.bin"
    writer = SafeWriter(target, name="out.bin")

    assert Path(writer.file) == target
    assert writer._file_obj is not None
    writer.close()
    assert writer._closed


def test_safe_writer_init_with_invalid_type():
    """Test SafeWriter initialization with an invalid type."""
    with pytest.raises(TypeError) as excinfo:
        SafeWriter(42.0)  # type: ignore[arg-type]

    assert "Expected int, str, or PathLike" in str(excinfo.value)


def test_write_is_buffered_until_flush(mock_signals, pipe):
    """Test that nothing reaches the descriptor before flush()."""
    read_fd, write_fd = pipe
    writer = SafeWriter(write_fd)

    with patch("os.write", wraps=os.write) as mock_write:
        writer.write(b"a.o\n")
        writer.write(b"b.o\n")
        mock_write.assert_not_called()

        writer.flush()
        mock_write.assert_called_once_with(write_fd, b"a.o\nb.o\n")

    assert os.read(read_fd, 100) == b"a.o\nb.o\n"


def test_flush_handles_partial_writes(mock_signals):
    """Test that flush() keeps writing until the buffer is drained."""
    writer = SafeWriter(7)
    writer.write(b"abcdef")

    with patch("os.write", side_effect=[2, 4]) as mock_write:
        writer.flush()

    assert mock_write.call_args_list[0][0] == (7, b"abcdef")
    assert mock_write.call_args_list[1][0] == (7, b"cdef")
    assert writer._buffer == bytearray()


def test_flush_empty_buffer_writes_nothing(mock_signals):
    writer = SafeWriter(7)

    with patch("os.write") as mock_write:
        writer.flush()

    mock_write.assert_not_called()


def test_flush_broken_pipe(mock_signals):
    """Test that EPIPE surfaces as BrokenPipeError."""
    writer = SafeWriter(7)
    writer.write(b"data")

    with patch("os.write", side_effect=OSError(errno.EPIPE, "Broken pipe")):
        with pytest.raises(BrokenPipeError):
            writer.flush()


def test_flush_other_io_error(mock_signals):
    """Test that other write failures become OutputFlushError."""
    writer = SafeWriter(7)
    writer.write(b"data")

    with patch("os.write", side_effect=OSError(errno.ENOSPC, "No space left on device")):
        with pytest.raises(OutputFlushError) as excinfo:
            writer.flush()

    assert excinfo.value.cause.errno == errno.ENOSPC
    assert "write failure on stdout" in str(excinfo.value)


def test_write_after_signal(mock_signals):
    """Test that writes stop once SIGPIPE or SIGINT was received."""
    writer = SafeWriter(7)
    mock_signals.should_stop = True

    with pytest.raises(BrokenPipeError):
        writer.write(b"data")
    with pytest.raises(BrokenPipeError):
        writer.flush()


def test_write_after_close(mock_signals):
    writer = SafeWriter(7)
    writer.close()

    with pytest.raises(ValueError):
        writer.write(b"data")
    with pytest.raises(ValueError):
        writer.flush()


def test_close_flushes_pending_output(mock_signals, pipe):
    read_fd, write_fd = pipe
    writer = SafeWriter(write_fd)
    writer.write(b"pending\n")

    writer.close()
    writer.close()  # closing twice is harmless

    assert os.read(read_fd, 100) == b"pending\n"


def test_close_swallows_broken_pipe(mock_signals):
    writer = SafeWriter(7)
    writer.write(b"data")

    with patch("os.write", side_effect=OSError(errno.EPIPE, "Broken pipe")):
        writer.close()

    assert writer._closed


def test_context_manager_discards_on_error(mock_signals):
    """Test that buffered output is dropped when the block raises."""
    with patch("os.write") as mock_write:
        with pytest.raises(RuntimeError):
            with SafeWriter(7) as writer:
                writer.write(b"never shown\n")
                raise RuntimeError("fatal")

    mock_write.assert_not_called()
    assert writer._closed


def test_context_manager_keeps_flushed_records(mock_signals, pipe):
    read_fd, write_fd = pipe

    with pytest.raises(RuntimeError):
        with SafeWriter(write_fd) as writer:
            writer.write(b"first\n")
            writer.flush()
            writer.write(b"second\n")
            raise RuntimeError("fatal")

    assert os.read(read_fd, 100) == b"first\n"


def test_context_manager_with_file(mock_signals, tmp_path):
    target = tmp_path / "out.bin"

    with SafeWriter(target) as writer:
        writer.write(b"\xff raw bytes\0")

    assert target.read_bytes() == b"\xff raw bytes\0"


def test_close_error_does_not_mask_original(mock_signals):
    writer = SafeWriter(7)
    writer._file_obj = MagicMock()
    writer._file_obj.close.side_effect = OSError(errno.EIO, "I/O error")

    with pytest.raises(RuntimeError):
        with writer:
            raise RuntimeError("original")
