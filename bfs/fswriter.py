from __future__ import annotations

import os

from .errors import ArchiveIOError, UnsafePathError
from .pathutil import is_within, safe_archive_path


class FileSystemWriter:
    """Materialise decoded entries under one output directory.

    Missing parent directories are created and existing files are
    overwritten. Targets that would land outside ``root`` (through '..' or a
    symlink already present in the output tree) are refused.
    """

    def __init__(self, root: str):
        self.root = os.path.abspath(root)

    def ensure_root(self) -> None:
        if os.path.exists(self.root) and not os.path.isdir(self.root):
            raise ArchiveIOError(f"Output path exists and is not a directory: {self.root}")
        try:
            os.makedirs(self.root, exist_ok=True)
        except OSError as exc:
            raise ArchiveIOError(f"Cannot create output directory {self.root}: {exc}") from exc

    def target_for(self, arc_path: str) -> str:
        rel = safe_archive_path(arc_path)
        dst = os.path.join(self.root, *rel.split("/"))
        if not is_within(self.root, dst):
            raise UnsafePathError(f"Path escapes output directory: {arc_path!r}")
        return dst

    def write(self, arc_path: str, data: bytes) -> str:
        dst = self.target_for(arc_path)
        try:
            os.makedirs(os.path.dirname(dst) or ".", exist_ok=True)
            # Re-check once the parents exist; a pre-existing symlinked parent resolves here
            if not is_within(self.root, dst):
                raise UnsafePathError(f"Path escapes output directory: {arc_path!r}")
            if os.path.isdir(dst) and not os.path.islink(dst):
                raise ArchiveIOError(f"Cannot overwrite directory with file: {dst}")
            with open(dst, "wb") as wf:
                wf.write(data)
        except OSError as exc:
            raise ArchiveIOError(f"Cannot write {dst}: {exc}") from exc
        return dst
