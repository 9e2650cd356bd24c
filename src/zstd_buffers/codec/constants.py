"""
Constants of the Zstandard C API.

Reference: https://facebook.github.io/zstd/zstd_manual.html
"""

from __future__ import annotations

from typing import Final

# ===========================================================================
# Frame Content Size Sentinels
# ===========================================================================
#
# ZSTD_getFrameContentSize() returns an unsigned 64-bit value. The two
# largest values are reserved and can never be a real size.

CONTENTSIZE_UNKNOWN: Final = (1 << 64) - 1
"""The frame header does not record the decompressed size.

Produced by streaming compressors that did not know the input length
up front.
"""

CONTENTSIZE_ERROR: Final = (1 << 64) - 2
"""The input could not be parsed as a frame header.

Corrupt or truncated input, a wrong magic number, or too few bytes.
"""

# ===========================================================================
# Error Codes
# ===========================================================================
#
# Functions returning size_t encode failures as (size_t)-errorEnum.
# The enum values are stable across library versions.

SIZE_T_BITS: Final = 64
"""Width of size_t on the platforms the codec is built for."""

ERROR_GENERIC: Final = 1
"""ZSTD_error_GENERIC."""

ERROR_PREFIX_UNKNOWN: Final = 10
"""ZSTD_error_prefix_unknown: the input does not start with a frame magic number."""

ERROR_SRC_SIZE_WRONG: Final = 72
"""ZSTD_error_srcSize_wrong."""

ERROR_DST_SIZE_TOO_SMALL: Final = 70
"""ZSTD_error_dstSize_tooSmall: the destination cannot hold the decompressed frame."""

ERROR_MAX_CODE: Final = 120
"""ZSTD_error_maxCode. Every status above ``2**64 - ERROR_MAX_CODE`` is an error."""

# ===========================================================================
# Size Units
# ===========================================================================

KIB: Final = 1 << 10
"""One kibibyte."""

MIB: Final = 1 << 20
"""One mebibyte."""

GIB: Final = 1 << 30
"""One gibibyte."""
