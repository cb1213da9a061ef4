from __future__ import annotations

from typing import Union

from .constants import LENGTH_STRUCT, PATH_TERMINATOR
from .errors import (
    MissingTerminatorError,
    TruncatedLengthError,
    TruncatedPayloadError,
)

Buffer = Union[bytes, bytearray, memoryview]


class ArchiveCursor:
    """Forward-only read position over an in-memory archive buffer.

    Every read is bounds-checked against the end of the buffer and advances
    the position; nothing ever moves backwards or copies the unread tail.
    """

    def __init__(self, data: Buffer, pos: int = 0):
        # bytes.find needs a bytes-like object it can search in place
        self._buf = data if isinstance(data, (bytes, bytearray)) else bytes(data)
        self._view = memoryview(self._buf)
        self.pos = pos

    def remaining(self) -> int:
        return len(self._buf) - self.pos

    def at_end(self) -> bool:
        return self.pos >= len(self._buf)

    def read_cstring(self) -> bytes:
        """Read bytes up to the next NUL and step past the terminator."""
        start = self.pos
        end = self._buf.find(PATH_TERMINATOR, start)
        if end < 0:
            raise MissingTerminatorError("Truncated archive: path terminator not found", start)
        self.pos = end + 1
        return bytes(self._view[start:end])

    def read_u32(self) -> int:
        start = self.pos
        if self.remaining() < LENGTH_STRUCT.size:
            raise TruncatedLengthError(
                f"Truncated archive: need {LENGTH_STRUCT.size} length bytes, {self.remaining()} remain", start
            )
        (val,) = LENGTH_STRUCT.unpack_from(self._buf, start)
        self.pos = start + LENGTH_STRUCT.size
        return val

    def read_exact(self, n: int) -> memoryview:
        start = self.pos
        if n > self.remaining():
            raise TruncatedPayloadError(
                f"Truncated archive: payload declares {n} bytes, {self.remaining()} remain", start
            )
        self.pos = start + n
        return self._view[start:self.pos]
