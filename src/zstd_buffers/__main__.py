"""
zstd-buffers command line.

Inspect the loaded libzstd and decompress single-frame files.

Usage::

    python -m zstd_buffers info
    python -m zstd_buffers bound 1048576
    python -m zstd_buffers decompress data.zst data.bin
    python -m zstd_buffers decompress samples.zst samples.raw --dtype h

Commands:
    info        Print the codec version and maximum compression level
    bound       Print the worst-case compressed size of SIZE raw bytes
    decompress  Decompress one frame from INPUT into the raw file OUTPUT
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from zstd_buffers.codec import CompressionEngine, decompress, max_compressed_size
from zstd_buffers.codec.engine import default_engine
from zstd_buffers.codec.info import read_codec_info
from zstd_buffers.types import ZstdBufferError

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure the root logger for command line use."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog="python -m zstd_buffers",
        description="Zstandard buffer decompression",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("info", help="Print codec version and maximum compression level")

    bound = commands.add_parser("bound", help="Print worst-case compressed size")
    bound.add_argument("size", type=int, help="Number of raw input bytes")

    extract = commands.add_parser("decompress", help="Decompress one frame to a raw file")
    extract.add_argument("input", type=Path, help="Path to the compressed frame")
    extract.add_argument("output", type=Path, help="Path of the raw output file")
    extract.add_argument(
        "--dtype",
        default="B",
        help="array typecode of the output elements (default: B)",
    )
    return parser


def run(args: argparse.Namespace, engine: CompressionEngine) -> int:
    """Execute a parsed command. Returns the process exit status."""
    if args.command == "info":
        info = read_codec_info(engine)
        print(f"zstd {info.version_string}")
        print(f"max compression level: {info.max_compression_level}")
        return 0

    if args.command == "bound":
        try:
            print(max_compressed_size(args.size, engine=engine))
        except (ValueError, ZstdBufferError) as e:
            logger.error("Cannot compute bound for %d bytes: %s", args.size, e)
            return 1
        return 0

    # decompress
    try:
        data = args.input.read_bytes()
    except OSError as e:
        logger.error("Cannot read %s: %s", args.input, e)
        return 1

    try:
        buffer = decompress(args.dtype, data, engine=engine)
    except (TypeError, ZstdBufferError) as e:
        logger.error("Failed to decompress %s: %s", args.input, e)
        return 1

    try:
        args.output.write_bytes(buffer.tobytes())
    except OSError as e:
        logger.error("Cannot write %s: %s", args.output, e)
        return 1

    logger.info(
        "Decompressed %s (%d bytes) to %s (%d elements)",
        args.input,
        len(data),
        args.output,
        len(buffer),
    )
    return 0


def main(argv: list[str] | None = None, engine: CompressionEngine | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose)

    if engine is None:
        try:
            engine = default_engine()
        except ZstdBufferError as e:
            logger.error("%s", e)
            return 1

    return run(args, engine)


if __name__ == "__main__":
    sys.exit(main())
