from __future__ import annotations

import os
import re

from .errors import UnsafePathError

_DRIVE_RE = re.compile(r"^[A-Za-z]:")


def _split_native(p: str):
    if os.sep != "/":
        p = p.replace(os.sep, "/")
    if os.altsep and os.altsep != "/":
        p = p.replace(os.altsep, "/")
    return p.split("/")


def _split_any(p: str):
    return _split_native(p.replace("\\", "/"))


def to_archive_path(p: str) -> str:
    """Canonicalise a root-relative path to the forward-slash wire form.

    Rules:
    - Convert the platform separators (``os.sep``, ``os.altsep``) to slashes
    - Remove empty and '.' segments

    A backslash is only a separator where the platform says so; on POSIX it
    stays part of the name. The same function is applied to walked files and
    to ignore-list lines so the two sides compare equal.
    """
    return "/".join(q for q in _split_native(p) if q not in ("", "."))


def safe_archive_path(p: str, offset=None) -> str:
    """Validate a path read from an archive before it touches the filesystem.

    Rejects NUL, empty paths, absolute paths, drive prefixes and '..'
    segments. Returns the canonical relative form.
    """
    if "\x00" in p:
        raise UnsafePathError("Path contains NUL", offset)
    if p.startswith(("/", "\\")) or _DRIVE_RE.match(p):
        raise UnsafePathError(f"Absolute path not allowed: {p!r}", offset)
    parts = [q for q in _split_any(p) if q not in ("", ".")]
    for q in parts:
        if q == "..":
            raise UnsafePathError(f"Path may not contain '..': {p!r}", offset)
    if not parts:
        raise UnsafePathError(f"Empty path: {p!r}", offset)
    return "/".join(parts)


def is_within(root: str, target: str) -> bool:
    root = os.path.realpath(root)
    target = os.path.realpath(target)
    return os.path.commonpath([root, target]) == root
