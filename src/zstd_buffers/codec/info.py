"""
Process-wide codec metadata.

The maximum compression level and the library version never change while
a process runs. They are read from the native library once, on first use,
and cached as an immutable value.
"""

from __future__ import annotations

import threading

from zstd_buffers.types import StrictBaseModel

from .engine import CompressionEngine, default_engine


class CodecInfo(StrictBaseModel):
    """Immutable description of the loaded codec."""

    max_compression_level: int
    """Highest compression level the library accepts."""

    version: tuple[int, int, int]
    """Library version as (major, minor, patch)."""

    @property
    def version_string(self) -> str:
        """Dotted version, e.g. ``"1.5.6"``."""
        return ".".join(str(part) for part in self.version)


def split_version_number(number: int) -> tuple[int, int, int]:
    """
    Split a packed version number into its parts.

    The library packs its version as ``major * 10000 + minor * 100 + patch``.

    Example: 10506 -> (1, 5, 6)
    """
    major, rest = divmod(number, 10000)
    minor, patch = divmod(rest, 100)
    return major, minor, patch


def read_codec_info(engine: CompressionEngine) -> CodecInfo:
    """Query an engine for its metadata. Not cached."""
    return CodecInfo(
        max_compression_level=engine.max_compression_level(),
        version=split_version_number(engine.version_number()),
    )


_codec_info: CodecInfo | None = None
_codec_info_lock = threading.Lock()


def codec_info() -> CodecInfo:
    """
    Metadata of the process-wide engine, read once and then cached.

    Concurrent first callers block on the lock rather than racing.

    Raises:
        CodecUnavailableError: If libzstd cannot be loaded.
    """
    global _codec_info
    if _codec_info is None:
        with _codec_info_lock:
            if _codec_info is None:
                _codec_info = read_codec_info(default_engine())
    return _codec_info
