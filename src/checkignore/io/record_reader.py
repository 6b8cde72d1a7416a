"""Tools for reading terminator-separated records from a binary stream."""

from typing import BinaryIO, Iterator


class RecordReader:
    """Iterator over records separated by a single-byte terminator.

    Input is read in chunks, but without waiting for a chunk to fill up when the stream
    supports ``read1``: whatever is available is split and handed out right away. That
    lets a process on the other end of a pipe write one path, read the answer, and only
    then write the next.

    A final record that is not followed by the terminator is still returned. The
    terminator itself is never part of a record.

    Args:
        file_obj: An opened binary stream to read from.
        terminator: The separating byte, ``b"\\n"`` or ``b"\\0"``.
        chunk_size: Upper bound on the bytes requested per read. Must be at least 4096.

    Raises:
        ValueError: If chunk_size is less than 4096 bytes or the terminator is not a
            single byte.

    Example:
        >>> import io
        >>> list(RecordReader(io.BytesIO(b"a\\0b c\\0last"), b"\\0"))
        [b'a', b'b c', b'last']
        >>> list(RecordReader(io.BytesIO(b""), b"\\n"))
        []
    """

    MINIMUM_CHUNK_SIZE = 4096  # 4 KB

    def __init__(self, file_obj: BinaryIO, terminator: bytes, chunk_size: int = 65536) -> None:
        """Initialize the reader with a stream, a terminator and a chunk size."""

        if chunk_size < self.MINIMUM_CHUNK_SIZE:
            raise ValueError(f"chunk_size must be at least {self.MINIMUM_CHUNK_SIZE} bytes, " f"got {chunk_size}")
        if len(terminator) != 1:
            raise ValueError(f"terminator must be a single byte, got {terminator!r}")

        self._file: BinaryIO = file_obj
        self._terminator: bytes = terminator
        self._chunk_size: int = chunk_size
        self._buffer: bytes = b""
        self._eof: bool = False
        self._read = getattr(file_obj, "read1", file_obj.read)

    def __iter__(self) -> Iterator[bytes]:
        """Return self as iterator."""
        return self

    def __next__(self) -> bytes:
        """Get the next record.

        Returns:
            The record bytes, without the terminator.

        Raises:
            StopIteration: When the stream is exhausted.
        """
        while True:
            record, sep, rest = self._buffer.partition(self._terminator)
            if sep:
                self._buffer = rest
                return record

            if self._eof:
                if self._buffer:
                    self._buffer = b""
                    return record
                raise StopIteration

            chunk: bytes = self._read(self._chunk_size)
            if not chunk:
                self._eof = True
            else:
                self._buffer += chunk
