"""
Memory-safe decompression of Zstandard frames into typed buffers.

Usage::

    import array
    import ctypes

    import zstd_buffers

    # Decompress a frame into a new buffer of 16-bit integers
    samples = zstd_buffers.decompress(ctypes.c_int16, frame)

    # Or into an array.array, reusing it across calls
    out = array.array("d")
    zstd_buffers.decompress_into(out, frame)

    # Codec metadata, read from the library on first access
    zstd_buffers.CODEC_VERSION          # (1, 5, 6)
    zstd_buffers.MAX_COMPRESSION_LEVEL  # 22
"""

from __future__ import annotations

from typing import Any

from .codec import (
    CodecInfo,
    CompressionEngine,
    DecompressConfig,
    LibZstdEngine,
    OutputBuffer,
    codec_info,
    decompress,
    decompress_into,
    default_engine,
    max_compressed_size,
)
from .types import (
    AlignmentError,
    AllocationError,
    BufferValidationError,
    CodecUnavailableError,
    FrameSizeError,
    NativeCodecError,
    ZstdBufferError,
)


def __getattr__(name: str) -> Any:
    # Codec constants load the native library, so they resolve on first access.
    if name == "MAX_COMPRESSION_LEVEL":
        return codec_info().max_compression_level
    if name == "CODEC_VERSION":
        return codec_info().version
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Core API
    "decompress",
    "decompress_into",
    "max_compressed_size",
    "OutputBuffer",
    "DecompressConfig",
    # Codec metadata
    "MAX_COMPRESSION_LEVEL",
    "CODEC_VERSION",
    "CodecInfo",
    "codec_info",
    # Native boundary
    "CompressionEngine",
    "LibZstdEngine",
    "default_engine",
    # Exceptions
    "ZstdBufferError",
    "BufferValidationError",
    "FrameSizeError",
    "AlignmentError",
    "AllocationError",
    "NativeCodecError",
    "CodecUnavailableError",
]
