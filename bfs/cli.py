from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional

from bfs.codec import Codec
from bfs.constants import CODEC_NAMES, DEFAULT_CODEC, IGNORE_FILE_NAME
from bfs.errors import ArchiveIOError, BfsError, CodecError, FormatError, ValidationError
from bfs.ignore import IgnoreList
from bfs.progress import ConsoleProgress
from bfs.reader import ArchiveReader
from bfs.writer import write_archive


EXIT_ERROR = 1
EXIT_VALIDATION = 2
EXIT_IO = 3
EXIT_FORMAT = 4


def _str2bool(value: str) -> bool:
    v = value.strip().lower()
    if v in ("true", "yes", "1", "on"):
        return True
    if v in ("false", "no", "0", "off"):
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got {value!r}")


def _require_dir(path: str, what: str) -> None:
    if not os.path.exists(path):
        raise ArchiveIOError(f"The {what} path doesn't exist: {path}")
    if not os.path.isdir(path):
        raise ValidationError(f"The {what} path is not a folder: {path}")


def _require_file(path: str, what: str) -> None:
    if not os.path.exists(path):
        raise ArchiveIOError(f"The {what} path doesn't exist: {path}")
    if not os.path.isfile(path):
        raise ValidationError(f"The {what} path is not a file: {path}")


def cmd_compress(
    input_dir: str,
    output: str,
    *,
    use_ignore_file: bool = True,
    codec: str = DEFAULT_CODEC,
    level: Optional[int] = None,
    quiet: bool = False,
) -> int:
    """Compress a folder into a BFS archive.

    Args:
        input_dir: Folder to pack.
        output: Archive file to write (replaced if it exists).
        use_ignore_file: Skip paths listed in the folder's BFS_IGNORE file.
        codec: Per-entry codec name.
        level: Codec compression level; None uses the codec default.
        quiet: Only print the summary lines.

    Returns:
        The archive size in bytes.
    """
    _require_dir(input_dir, "input")
    if os.path.isdir(output):
        raise ValidationError(f"The output path is a folder, expected a file: {output}")
    c = Codec(codec, level)
    ignore = IgnoreList.load(input_dir) if use_ignore_file else IgnoreList()
    if use_ignore_file and len(ignore):
        print(f" ignoring {len(ignore)} path(s) listed in {IGNORE_FILE_NAME}")
    size = write_archive(
        input_dir,
        output,
        c,
        include=ignore.should_include,
        observer=ConsoleProgress("compressing", quiet=quiet),
    )
    print(f"Compressed to BFS with file size of {size}b, written to \"{output}\".")
    return size


def cmd_extract(archive: str, output: str, *, codec: str = DEFAULT_CODEC, quiet: bool = False) -> int:
    """Extract a BFS archive into a folder (created when missing).

    Returns:
        The number of files written.
    """
    _require_file(archive, "input")
    if os.path.exists(output) and not os.path.isdir(output):
        raise ValidationError(f"The output path is not a folder: {output}")
    r = ArchiveReader.open(archive, Codec(codec))
    if not quiet:
        print(f"Reading archive {os.path.basename(archive)}...")
    stats = r.extract_all(output, observer=ConsoleProgress("extracting", quiet=quiet))
    return stats.files


def cmd_list(archive: str) -> int:
    """Print each entry's packed size and path in archive order."""
    _require_file(archive, "input")
    r = ArchiveReader.open(archive)
    entries = r.list()
    for path, packed in entries:
        print(f"{packed}\t{path}")
    return len(entries)


def cmd_verify(archive: str, *, codec: str = DEFAULT_CODEC) -> int:
    """Decode every entry without writing; prints "OK" on success."""
    _require_file(archive, "input")
    count = ArchiveReader.open(archive, Codec(codec)).verify()
    print(f"OK ({count} files)")
    return count


def exit_code_for(exc: BaseException) -> int:
    if isinstance(exc, ValidationError):
        return EXIT_VALIDATION
    if isinstance(exc, (ArchiveIOError, OSError)):
        return EXIT_IO
    if isinstance(exc, (FormatError, CodecError)):
        return EXIT_FORMAT
    return EXIT_ERROR


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="bfs",
        description="BFS directory archiver",
        epilog=(
            f"Exit codes: {EXIT_VALIDATION} invalid arguments, {EXIT_IO} I/O error, "
            f"{EXIT_FORMAT} malformed or corrupt archive."
        ),
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    def _add_codec(p):
        p.add_argument("--codec", choices=list(CODEC_NAMES), default=DEFAULT_CODEC, help=f"Per-file codec (default {DEFAULT_CODEC}); must match on extract")

    ap_compress = sub.add_parser("compress", help="Compresses a folder to a BFS archive")
    ap_compress.add_argument("-i", "--input", required=True, help="The input folder")
    ap_compress.add_argument("-o", "--output", required=True, help="The output file")
    ap_compress.add_argument(
        "-I",
        "--useIgnoreFile",
        "--use-ignore-file",
        dest="use_ignore_file",
        type=_str2bool,
        nargs="?",
        const=True,
        default=True,
        metavar="true|false",
        help=f"Skip the files listed in the {IGNORE_FILE_NAME} file of the input folder (default true)",
    )
    _add_codec(ap_compress)
    ap_compress.add_argument("--level", type=int, help="Compression level for the codec")
    ap_compress.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_extract = sub.add_parser("extract", help="Extracts a BFS archive to the specified folder")
    ap_extract.add_argument("-i", "--input", required=True, help="The input file")
    ap_extract.add_argument("-o", "--output", required=True, help="The output folder")
    _add_codec(ap_extract)
    ap_extract.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_list = sub.add_parser("list", help="List archive entries (packed size and path)")
    ap_list.add_argument("-i", "--input", required=True, help="The input file")

    ap_verify = sub.add_parser("verify", help="Decode every entry without writing files")
    ap_verify.add_argument("-i", "--input", required=True, help="The input file")
    _add_codec(ap_verify)

    args = ap.parse_args(argv)
    try:
        if args.cmd == "compress":
            cmd_compress(
                args.input,
                args.output,
                use_ignore_file=args.use_ignore_file,
                codec=args.codec,
                level=args.level,
                quiet=args.quiet,
            )
        elif args.cmd == "extract":
            cmd_extract(args.input, args.output, codec=args.codec, quiet=args.quiet)
        elif args.cmd == "list":
            cmd_list(args.input)
        elif args.cmd == "verify":
            cmd_verify(args.input, codec=args.codec)
        else:
            raise ValidationError("Unknown command")
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_VALIDATION)
    except FormatError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_FORMAT)
    except (ArchiveIOError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_IO)
    except BfsError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(exit_code_for(e))


if __name__ == "__main__":
    main()
