from __future__ import annotations

import os
from typing import Iterable, Iterator, List, Optional

from .constants import IGNORE_FILE_NAME
from .errors import ArchiveIOError
from .pathutil import to_archive_path


class IgnoreList:
    """Exact-match exclusion list, one root-relative path per line.

    Lines and candidate paths both go through :func:`to_archive_path`, so
    ``./sub/b.txt``, ``sub//b.txt`` and ``sub/b.txt`` all name the same file.
    There is no wildcard support.
    """

    def __init__(self, paths: Iterable[str] = (), source: Optional[str] = None):
        self.source = source
        self._order: List[str] = []
        self._set = set()
        for p in paths:
            self.add(p)

    def add(self, path: str) -> None:
        norm = to_archive_path(path)
        if not norm or norm in self._set:
            return
        self._set.add(norm)
        self._order.append(norm)

    def __contains__(self, path: str) -> bool:
        return to_archive_path(path) in self._set

    def __iter__(self) -> Iterator[str]:
        return iter(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def should_include(self, arc_path: str) -> bool:
        if self.source is not None and to_archive_path(arc_path) == self.source:
            return False
        return arc_path not in self

    @classmethod
    def load(cls, root: str, name: str = IGNORE_FILE_NAME) -> "IgnoreList":
        """Read ``<root>/<name>``; a missing file yields an empty list.

        Absolute lines that point inside ``root`` are made root-relative;
        absolute lines elsewhere can never match and are dropped. While the
        list is in use the sentinel file itself is excluded too.
        """
        path = os.path.join(root, name)
        if not os.path.isfile(path):
            return cls()
        try:
            with open(path, "r", encoding="utf-8") as fh:
                lines = fh.read().splitlines()
        except (OSError, UnicodeDecodeError) as exc:
            raise ArchiveIOError(f"Cannot read ignore file {path}: {exc}") from exc
        abs_root = os.path.abspath(root)
        out = cls(source=to_archive_path(name))
        for line in lines:
            if not line.strip():
                continue
            if os.path.isabs(line):
                rel = os.path.relpath(os.path.abspath(line), abs_root)
                if rel == os.pardir or rel.startswith(os.pardir + os.sep):
                    continue
                line = rel
            out.add(line)
        return out
