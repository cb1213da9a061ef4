from __future__ import annotations

import zlib
from typing import Optional

import zstandard

from .constants import (
    CODEC_NAMES,
    CODEC_NONE,
    CODEC_DEFLATE,
    CODEC_ZSTD,
    DEFAULT_DEFLATE_LEVEL,
    DEFAULT_ZSTD_LEVEL,
)
from .errors import CodecError, ValidationError


class Codec:
    """Per-entry byte compressor used by the archive writer and reader.

    Any object exposing ``compress(bytes) -> bytes`` and
    ``decompress(bytes) -> bytes`` can stand in for this class; the
    container format never looks inside the payload.
    """

    def __init__(self, name: str = CODEC_DEFLATE, level: Optional[int] = None):
        if name not in CODEC_NAMES:
            raise ValidationError(f"unsupported codec: {name!r} (choose from {', '.join(CODEC_NAMES)})")
        if level is not None:
            if name == CODEC_DEFLATE and not -1 <= level <= 9:
                raise ValidationError(f"deflate level must be between -1 and 9, got {level}")
            if name == CODEC_ZSTD and level > zstandard.MAX_COMPRESSION_LEVEL:
                raise ValidationError(f"zstd level must be at most {zstandard.MAX_COMPRESSION_LEVEL}, got {level}")
        self.name = name
        self.level = level

    def __repr__(self) -> str:
        return f"Codec({self.name!r}, level={self.level!r})"

    def compress(self, data: bytes) -> bytes:
        if self.name == CODEC_NONE:
            return bytes(data)
        if self.name == CODEC_DEFLATE:
            return zlib.compress(data, self.level if self.level is not None else DEFAULT_DEFLATE_LEVEL)
        try:
            c = zstandard.ZstdCompressor(level=self.level if self.level is not None else DEFAULT_ZSTD_LEVEL)
            return c.compress(data)
        except zstandard.ZstdError as e:
            raise CodecError(f"zstd compression failed: {e}")

    def decompress(self, data: bytes) -> bytes:
        if self.name == CODEC_NONE:
            return bytes(data)
        if self.name == CODEC_DEFLATE:
            try:
                return zlib.decompress(data)
            except zlib.error as e:
                raise CodecError(f"deflate decompression failed: {e}")
        try:
            # Frames written by ZstdCompressor.compress() carry their content size
            d = zstandard.ZstdDecompressor()
            return d.decompress(data)
        except zstandard.ZstdError as e:
            raise CodecError(f"zstd decompression failed: {e}")
