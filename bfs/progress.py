from __future__ import annotations

import sys
import time
from typing import Optional, TextIO


class ArchiveObserver:
    """Hooks called by the writer and reader at entry boundaries.

    The default implementation does nothing; subclass and override what you
    need. ``total`` is None when the entry count is not known up front.
    """

    def on_start(self, total: Optional[int] = None) -> None:
        pass

    def on_entry(self, path: str, raw_size: int, packed_size: int) -> None:
        pass

    def on_finish(self, count: int, raw_bytes: int) -> None:
        pass


class ConsoleProgress(ArchiveObserver):
    """Print one line per entry and a closing throughput summary."""

    def __init__(self, verb: str, *, quiet: bool = False, stream: Optional[TextIO] = None):
        self.verb = verb
        self.quiet = quiet
        self.stream = stream if stream is not None else sys.stdout
        self.total: Optional[int] = None
        self.count = 0
        self.t0 = time.time()

    def on_start(self, total: Optional[int] = None) -> None:
        self.total = total
        self.count = 0
        self.t0 = time.time()

    def on_entry(self, path: str, raw_size: int, packed_size: int) -> None:
        self.count += 1
        if self.quiet:
            return
        if self.total:
            print(f" {self.verb}: {self.count:>4}/{self.total:<4} {path}", file=self.stream)
        else:
            print(f" {self.verb}: {path}", file=self.stream)

    def on_finish(self, count: int, raw_bytes: int) -> None:
        dt = max(0.000001, time.time() - self.t0)
        mib = raw_bytes / (1024.0 * 1024.0)
        print(f"Done: {count} files ({mib:.2f} MiB) in {dt:.1f}s; {mib / dt:.2f} MiB/s", file=self.stream)
