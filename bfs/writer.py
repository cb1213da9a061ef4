from __future__ import annotations

import os
from typing import BinaryIO, Callable, Optional

from .codec import Codec
from .constants import ARCHIVE_MAGIC, LENGTH_STRUCT, MAX_PAYLOAD_LEN, PATH_TERMINATOR
from .errors import ArchiveIOError, PayloadTooLargeError, UnsafePathError
from .progress import ArchiveObserver
from .walker import iter_included


def _encode_path(arc_path: str) -> bytes:
    if not arc_path:
        raise UnsafePathError("Empty archive path")
    if "\x00" in arc_path:
        raise UnsafePathError(f"Archive path contains NUL: {arc_path!r}")
    if ".." in arc_path.split("/"):
        raise UnsafePathError(f"Archive path may not contain '..': {arc_path!r}")
    # Backslash is a separator on extract, so a POSIX name holding one cannot round-trip
    if "\\" in arc_path:
        raise UnsafePathError(f"Archive path may not contain a backslash: {arc_path!r}")
    try:
        return arc_path.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise UnsafePathError(f"File name is not valid UTF-8: {arc_path!r}") from exc


class ArchiveWriter:
    """Single-pass BFS writer.

    Writes the magic on open, then one framed entry per :meth:`add_bytes` or
    :meth:`add_file` call. With no ``out`` the archive accumulates in memory
    and :meth:`getvalue` returns it; otherwise it streams to the binary file.
    """

    def __init__(self, codec: Optional[Codec] = None, out: Optional[BinaryIO] = None, observer: Optional[ArchiveObserver] = None):
        self.codec = codec if codec is not None else Codec()
        self.observer = observer or ArchiveObserver()
        self.f = out
        self.buf: Optional[bytearray] = None if out is not None else bytearray()
        self.count = 0
        self.raw_bytes = 0
        self.size = 0
        self._opened = False

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def open(self):
        if self._opened:
            return
        self._opened = True
        self._emit(ARCHIVE_MAGIC)

    def close(self):
        if self.f is not None:
            self.f.flush()

    def getvalue(self) -> bytes:
        if self.buf is None:
            raise RuntimeError("Archive is being written to a file, not memory")
        return bytes(self.buf)

    def add_bytes(self, arc_path: str, data: bytes) -> int:
        """Compress ``data`` and append it as entry ``arc_path``; returns the packed size."""
        if not self._opened:
            raise RuntimeError("Archive not open")
        path_bytes = _encode_path(arc_path)
        packed = self.codec.compress(data)
        if len(packed) > MAX_PAYLOAD_LEN:
            raise PayloadTooLargeError(
                f"Compressed payload for {arc_path!r} is {len(packed)} bytes; the length field holds at most {MAX_PAYLOAD_LEN}"
            )
        self._emit(path_bytes)
        self._emit(bytes((PATH_TERMINATOR,)))
        self._emit(LENGTH_STRUCT.pack(len(packed)))
        self._emit(packed)
        self.count += 1
        self.raw_bytes += len(data)
        self.observer.on_entry(arc_path, len(data), len(packed))
        return len(packed)

    def add_file(self, arc_path: str, fs_path: str) -> int:
        """Read ``fs_path`` fully and append it as entry ``arc_path``."""
        try:
            with open(fs_path, "rb") as fh:
                data = fh.read()
        except OSError as exc:
            raise ArchiveIOError(f"Cannot read {fs_path}: {exc}") from exc
        return self.add_bytes(arc_path, data)

    # internals
    def _emit(self, chunk: bytes):
        if self.buf is not None:
            self.buf += chunk
        else:
            try:
                self.f.write(chunk)
            except OSError as exc:
                raise ArchiveIOError(f"Cannot write archive: {exc}") from exc
        self.size += len(chunk)


def encode_tree(
    root: str,
    codec: Optional[Codec] = None,
    *,
    include: Optional[Callable[[str], bool]] = None,
    observer: Optional[ArchiveObserver] = None,
) -> bytes:
    """Pack every included file under ``root`` into an in-memory archive."""
    observer = observer or ArchiveObserver()
    observer.on_start(None)
    with ArchiveWriter(codec, observer=observer) as w:
        for full, arc in iter_included(root, include):
            w.add_file(arc, full)
    observer.on_finish(w.count, w.raw_bytes)
    return w.getvalue()


def write_archive(
    root: str,
    out_path: str,
    codec: Optional[Codec] = None,
    *,
    include: Optional[Callable[[str], bool]] = None,
    observer: Optional[ArchiveObserver] = None,
) -> int:
    """Encode ``root`` and write the archive to ``out_path``; returns its size.

    The archive is built in memory first so a failed encode never leaves a
    partial file behind. ``out_path`` is skipped if it sits inside ``root``.
    """
    observer = observer or ArchiveObserver()
    files = list(iter_included(root, include, exclude_fs_paths=(out_path,)))
    observer.on_start(len(files))
    with ArchiveWriter(codec, observer=observer) as w:
        for full, arc in files:
            w.add_file(arc, full)
    data = w.getvalue()
    try:
        with open(out_path, "wb") as fh:
            fh.write(data)
    except OSError as exc:
        raise ArchiveIOError(f"Cannot write archive {out_path}: {exc}") from exc
    observer.on_finish(w.count, w.raw_bytes)
    return len(data)
