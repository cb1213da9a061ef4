from __future__ import annotations

import os
from typing import Callable, Iterator, Optional, Tuple

from .errors import ArchiveIOError
from .pathutil import to_archive_path


def walk_files(root: str) -> Iterator[Tuple[str, str]]:
    """Yield ``(fs_path, arc_path)`` for every file under ``root``.

    Order is whatever ``os.walk`` reports and is not sorted. Symlinked
    directories are not descended; symlinked files are yielded and read
    through by the writer.
    """
    if not os.path.isdir(root):
        raise ArchiveIOError(f"Input path is not a directory or doesn't exist: {root}")

    def _onerror(exc: OSError):
        raise ArchiveIOError(f"Cannot list directory {exc.filename}: {exc.strerror}") from exc

    for dirpath, _dirnames, filenames in os.walk(root, onerror=_onerror):
        for fn in filenames:
            full = os.path.join(dirpath, fn)
            rel = os.path.relpath(full, start=root)
            yield full, to_archive_path(rel)


def iter_included(
    root: str,
    include: Optional[Callable[[str], bool]] = None,
    exclude_fs_paths: Tuple[str, ...] = (),
) -> Iterator[Tuple[str, str]]:
    """Filter :func:`walk_files` through an ``include(arc_path)`` predicate.

    ``exclude_fs_paths`` drops specific files by real path, e.g. an archive
    being written inside the tree it packs.
    """
    skip = {os.path.realpath(p) for p in exclude_fs_paths}
    for full, arc in walk_files(root):
        if include is not None and not include(arc):
            continue
        if skip and os.path.realpath(full) in skip:
            continue
        yield full, arc
