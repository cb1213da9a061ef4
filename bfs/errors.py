from __future__ import annotations

from typing import Optional


class BfsError(Exception):
    """Base class for BFS-specific errors."""


class FormatError(BfsError):
    """The archive bytes do not follow the BFS layout."""

    def __init__(self, message: str, offset: Optional[int] = None):
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(message)
        self.offset = offset


# Framing
class SignatureError(FormatError):
    pass


class MissingTerminatorError(FormatError):
    pass


class TruncatedLengthError(FormatError):
    pass


class TruncatedPayloadError(FormatError):
    pass


class CorruptPayloadError(FormatError):
    pass


class UnsafePathError(FormatError):
    pass


class PayloadTooLargeError(FormatError):
    pass


# Filesystem
class ArchiveIOError(BfsError):
    pass


# Arguments
class ValidationError(BfsError):
    pass


class CodecError(BfsError):
    pass
