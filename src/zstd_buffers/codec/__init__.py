"""
Buffer decompression over the native Zstandard library.

Usage::

    import ctypes

    from zstd_buffers.codec import OutputBuffer, decompress, decompress_into

    # Decompress into a new buffer of 32-bit integers
    values = decompress(ctypes.c_uint32, frame)

    # Reuse one buffer across many frames
    buf = OutputBuffer(ctypes.c_double)
    for frame in frames:
        decompress_into(buf, frame)

Reference: https://facebook.github.io/zstd/zstd_manual.html
"""

from __future__ import annotations

from .buffer import OutputBuffer
from .config import DecompressConfig
from .constants import CONTENTSIZE_ERROR, CONTENTSIZE_UNKNOWN
from .contiguity import is_contiguous
from .decompress import decompress, decompress_into, max_compressed_size
from .engine import CompressionEngine, LibZstdEngine, default_engine
from .frame import FrameContentSize, KnownSize, SizeError, UnknownSize, resolve_content_size
from .info import CodecInfo, codec_info

__all__ = [
    # Core API
    "decompress",
    "decompress_into",
    "max_compressed_size",
    # Buffers and configuration
    "OutputBuffer",
    "DecompressConfig",
    # Native boundary
    "CompressionEngine",
    "LibZstdEngine",
    "default_engine",
    "CodecInfo",
    "codec_info",
    # Frame metadata
    "FrameContentSize",
    "KnownSize",
    "UnknownSize",
    "SizeError",
    "resolve_content_size",
    "is_contiguous",
    "CONTENTSIZE_UNKNOWN",
    "CONTENTSIZE_ERROR",
]
