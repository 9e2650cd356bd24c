"""
Frame content size resolution.

A Zstandard frame header may record the size of the data it decompresses
to. Reading it lets the destination be allocated exactly once, at exactly
the right size, before any decompression work happens.

The header query has three outcomes:

  KNOWN:   The header records the size. Zero is a real size: the frame
           decompresses to nothing.
  UNKNOWN: The frame was produced by a streaming compressor that never
           learned the input length. A size must be guessed.
  ERROR:   The bytes are not a parseable frame header.

For UNKNOWN frames the guess is ``ratio * compressed_length``, capped at a
ceiling and rounded down to whole elements. It is an upper bound in
practice, not a guarantee: highly repetitive data can compress far better
than the assumed ratio.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import DecompressConfig
from .constants import CONTENTSIZE_ERROR, CONTENTSIZE_UNKNOWN, GIB, KIB, MIB
from .engine import CompressionEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class KnownSize:
    """The frame header records the decompressed size."""

    byte_count: int
    """Number of bytes the frame decompresses to."""


@dataclass(frozen=True, slots=True)
class UnknownSize:
    """The frame header does not record the decompressed size."""


@dataclass(frozen=True, slots=True)
class SizeError:
    """The frame header could not be parsed."""


FrameContentSize = KnownSize | UnknownSize | SizeError
"""Union of all header query outcomes for pattern matching dispatch."""


def resolve_content_size(engine: CompressionEngine, src: memoryview) -> FrameContentSize:
    """
    Query and classify the content size recorded in a frame header.

    Args:
        engine: Native codec to query.
        src: Flat byte view of the compressed frame.

    Returns:
        The classified size. Never cached: every frame is queried afresh.
    """
    raw = engine.frame_content_size(src)
    if raw == CONTENTSIZE_ERROR:
        return SizeError()
    if raw == CONTENTSIZE_UNKNOWN:
        return UnknownSize()
    return KnownSize(raw)


def heuristic_target_bytes(compressed_size: int, itemsize: int, config: DecompressConfig) -> int:
    """
    Estimate a buffer size for a frame whose content size is unknown.

    Args:
        compressed_size: Length of the compressed frame in bytes.
        itemsize: Size of one destination element.
        config: Ratio and ceiling of the estimate.

    Returns:
        ``min(ceiling, ratio * compressed_size)`` rounded down to a
        multiple of ``itemsize``.

    Example:
        10 compressed bytes, ratio 100, 8-byte elements:
        min(2**30, 1000) = 1000 -> 1000 // 8 * 8 = 1000.

        10 compressed bytes, ratio 100, 3-byte elements:
        1000 // 3 * 3 = 999.
    """
    estimate = min(config.heuristic_ceiling, config.heuristic_ratio * compressed_size)
    return itemsize * (estimate // itemsize)


def format_bytes(byte_count: int) -> str:
    """Render a byte count with a binary unit, e.g. ``"1.00 GiB"`` or ``"512 B"``."""
    for unit, scale in (("GiB", GIB), ("MiB", MIB), ("KiB", KIB)):
        if byte_count >= scale:
            return f"{byte_count / scale:.2f} {unit}"
    return f"{byte_count} B"


def estimate_unknown_size(compressed_size: int, itemsize: int, config: DecompressConfig) -> int:
    """
    Apply the unknown-size heuristic and report it.

    Emits exactly one warning naming the chosen bound.
    """
    target = heuristic_target_bytes(compressed_size, itemsize, config)
    logger.warning(
        "Can't determine uncompressed size - setting buffer to %s", format_bytes(target)
    )
    return target
