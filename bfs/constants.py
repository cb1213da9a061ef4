import struct


# Magic and framing
ARCHIVE_MAGIC = b"BFS"  # 3 bytes: 'B' 'F' 'S'
PATH_TERMINATOR = 0x00

# Compressed payload length (little endian u32)
LENGTH_STRUCT = struct.Struct("<I")
MAX_PAYLOAD_LEN = 0xFFFFFFFF

# Ignore-list sentinel, looked up in the root being compressed
IGNORE_FILE_NAME = "BFS_IGNORE"

# Codec names (the archive carries no codec id; both ends must agree)
CODEC_NONE = "none"
CODEC_DEFLATE = "deflate"
CODEC_ZSTD = "zstd"

CODEC_NAMES = (CODEC_DEFLATE, CODEC_ZSTD, CODEC_NONE)
DEFAULT_CODEC = CODEC_DEFLATE

DEFAULT_DEFLATE_LEVEL = 6
DEFAULT_ZSTD_LEVEL = 3
