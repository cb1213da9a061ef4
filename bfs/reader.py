from __future__ import annotations

import zlib
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .codec import Codec
from .constants import ARCHIVE_MAGIC
from .cursor import ArchiveCursor, Buffer
from .errors import (
    ArchiveIOError,
    CodecError,
    CorruptPayloadError,
    SignatureError,
    UnsafePathError,
)
from .fswriter import FileSystemWriter
from .pathutil import safe_archive_path
from .progress import ArchiveObserver


@dataclass
class ArchiveEntry:
    path: str
    data: bytes
    offset: int
    packed_size: int


@dataclass
class ExtractStats:
    files: int = 0
    raw_bytes: int = 0
    packed_bytes: int = 0


def check_signature(data: Buffer) -> None:
    for i, expected in enumerate(ARCHIVE_MAGIC):
        if i >= len(data):
            raise SignatureError(
                f"Invalid signature: expected byte {chr(expected)!r}, but the data ends", i
            )
        actual = data[i]
        if actual != expected:
            raise SignatureError(
                f"Invalid signature: expected byte {chr(expected)!r} (0x{expected:02x}), "
                f"but got 0x{actual:02x}",
                i,
            )


class ArchiveReader:
    """Sequential BFS decoder.

    Entries are discovered by scanning from the magic onwards; there is no
    index. Each iteration reads a NUL-terminated path, a u32 length and
    exactly that many payload bytes, then decompresses them. Every bound is
    checked, so truncated or corrupt input raises a :class:`FormatError`
    instead of yielding a short entry.
    """

    def __init__(self, data: Buffer, codec: Optional[Codec] = None):
        self.data = data
        self.codec = codec if codec is not None else Codec()

    @classmethod
    def open(cls, path: str, codec: Optional[Codec] = None) -> "ArchiveReader":
        try:
            with open(path, "rb") as fh:
                data = fh.read()
        except OSError as exc:
            raise ArchiveIOError(f"Cannot read archive {path}: {exc}") from exc
        return cls(data, codec)

    def _frames(self) -> Iterator[Tuple[str, memoryview, int]]:
        check_signature(self.data)
        cur = ArchiveCursor(self.data, len(ARCHIVE_MAGIC))
        while not cur.at_end():
            offset = cur.pos
            raw_path = cur.read_cstring()
            try:
                path = raw_path.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise UnsafePathError(f"Path is not valid UTF-8: {raw_path!r}", offset) from exc
            path = safe_archive_path(path, offset)
            n = cur.read_u32()
            payload = cur.read_exact(n)
            yield path, payload, offset

    def iter_entries(self) -> Iterator[ArchiveEntry]:
        """Yield decoded entries in archive order."""
        for path, payload, offset in self._frames():
            try:
                raw = self.codec.decompress(bytes(payload))
            except (CodecError, zlib.error, ValueError, RuntimeError) as exc:
                raise CorruptPayloadError(f"Cannot decompress {path!r}: {exc}", offset) from exc
            yield ArchiveEntry(path=path, data=raw, offset=offset, packed_size=len(payload))

    def list(self) -> List[Tuple[str, int]]:
        """Return ``(path, packed_size)`` per entry without decompressing."""
        return [(path, len(payload)) for path, payload, _off in self._frames()]

    def verify(self) -> int:
        """Decode every entry without writing anything; returns the entry count."""
        count = 0
        for _entry in self.iter_entries():
            count += 1
        return count

    def extract_all(
        self,
        outdir: str,
        *,
        fs_writer: Optional[FileSystemWriter] = None,
        observer: Optional[ArchiveObserver] = None,
    ) -> ExtractStats:
        """Write every entry below ``outdir``, stopping at the first error."""
        check_signature(self.data)
        fs_writer = fs_writer or FileSystemWriter(outdir)
        observer = observer or ArchiveObserver()
        stats = ExtractStats()
        fs_writer.ensure_root()
        observer.on_start(None)
        for entry in self.iter_entries():
            fs_writer.write(entry.path, entry.data)
            stats.files += 1
            stats.raw_bytes += len(entry.data)
            stats.packed_bytes += entry.packed_size
            observer.on_entry(entry.path, len(entry.data), entry.packed_size)
        observer.on_finish(stats.files, stats.raw_bytes)
        return stats


def decode(data: Buffer, outdir: str, codec: Optional[Codec] = None, *, observer: Optional[ArchiveObserver] = None) -> ExtractStats:
    return ArchiveReader(data, codec).extract_all(outdir, observer=observer)
