"""
BFS: pack a directory tree into one self-describing archive and back.

Archive layout (little endian), parsed strictly front to back:

- 3-byte magic ``BFS``
- per file: UTF-8 relative path, a NUL terminator, a u32 compressed length,
  then the compressed bytes

There is no index or entry count; entry boundaries are discovered by the
sequential scan in :mod:`bfs.reader`. Each file is compressed on its own by a
pluggable codec (deflate by default, zstd or none via :mod:`bfs.codec`).
Paths are always stored with forward slashes and are validated on extract so
nothing is written outside the output directory.
"""

__version__ = "0.1"

__all__ = [
    "constants",
    "codec",
    "writer",
    "reader",
    "ignore",
    "errors",
]

# Importable programmatic API is available via bfs.writer (encode_tree/write_archive)
# and bfs.reader (ArchiveReader/decode); bfs.cli wraps them for the command line.
