"""
Global configuration for zstd-buffers.

This module contains environment-specific settings that apply across the package.
"""

import os

ZSTD_LIBRARY: str | None = os.environ.get("ZSTD_LIBRARY") or None
"""Explicit path to the libzstd shared library. Unset means search the system."""

if ZSTD_LIBRARY is not None and not os.path.isfile(ZSTD_LIBRARY):
    raise ValueError(
        f"Invalid ZSTD_LIBRARY environment variable: '{ZSTD_LIBRARY}' is not a file"
    )
