"""
The native codec boundary.

Every call into libzstd goes through a ``CompressionEngine``. The engine
exposes the handful of primitives the decompression logic needs and
nothing more: no sizing decisions, no validation, no error translation.
Production code binds it to the system libzstd through ctypes; tests bind
it to a scripted fake.

Buffers cross the boundary as flat byte ``memoryview`` objects. Capacities
and sizes are the views' byte lengths, so a caller can never pass a
capacity that disagrees with the memory behind it. Raw pointers exist only
inside ``LibZstdEngine``.
"""

from __future__ import annotations

import ctypes
import ctypes.util
import logging
import threading
from typing import Protocol, runtime_checkable

from zstd_buffers import config
from zstd_buffers.types import CodecUnavailableError

logger = logging.getLogger(__name__)

_LIBRARY_NAMES: tuple[str, ...] = (
    "libzstd.so.1",
    "libzstd.so",
    "libzstd.1.dylib",
    "libzstd.dylib",
    "zstd.dll",
    "libzstd.dll",
)
"""Fallback shared library names tried when ``find_library`` finds nothing."""


@runtime_checkable
class CompressionEngine(Protocol):
    """
    Capability interface over the native Zstandard primitives.

    Status-returning methods follow the C convention: the result is either
    a byte count or an error code, and only ``is_error`` can tell them apart.
    """

    def compress(self, dst: memoryview, src: memoryview, level: int) -> int:
        """Compress ``src`` into ``dst`` as one frame. Returns a size or error code."""
        ...

    def decompress(self, dst: memoryview, src: memoryview) -> int:
        """Decompress one frame from ``src`` into ``dst``. Returns a size or error code."""
        ...

    def frame_content_size(self, src: memoryview) -> int:
        """Read the content size from the frame header, or a sentinel."""
        ...

    def is_error(self, code: int) -> bool:
        """Whether a status returned by this engine is an error code."""
        ...

    def error_name(self, code: int) -> str:
        """Human-readable name of an error code."""
        ...

    def max_compression_level(self) -> int:
        """Highest supported compression level."""
        ...

    def version_number(self) -> int:
        """Library version as ``major * 10000 + minor * 100 + patch``."""
        ...

    def compress_bound(self, size: int) -> int:
        """Worst-case compressed size for ``size`` input bytes."""
        ...


def load_libzstd(path: str | None = None) -> ctypes.CDLL:
    """
    Locate and load the libzstd shared library.

    Args:
        path: Explicit library path. Defaults to the ``ZSTD_LIBRARY``
            setting, then a system search.

    Returns:
        The loaded library with argument and return types declared.

    Raises:
        CodecUnavailableError: If no candidate could be loaded.
    """
    explicit = path or config.ZSTD_LIBRARY
    if explicit is not None:
        candidates: list[str] = [explicit]
    else:
        found = ctypes.util.find_library("zstd")
        candidates = ([found] if found else []) + list(_LIBRARY_NAMES)

    errors: list[str] = []
    for name in candidates:
        try:
            lib = ctypes.CDLL(name)
        except OSError as e:
            errors.append(f"{name}: {e}")
            continue
        logger.debug("Loaded libzstd from %s", name)
        return _declare_signatures(lib)

    raise CodecUnavailableError(
        "Unable to load the libzstd shared library "
        f"(tried {', '.join(candidates)}). Install libzstd or set ZSTD_LIBRARY. "
        + "; ".join(errors)
    )


def _declare_signatures(lib: ctypes.CDLL) -> ctypes.CDLL:
    """Declare the C signatures of the primitives used by ``LibZstdEngine``."""
    size_t = ctypes.c_size_t
    void_p = ctypes.c_void_p

    lib.ZSTD_compress.argtypes = [void_p, size_t, void_p, size_t, ctypes.c_int]
    lib.ZSTD_compress.restype = size_t

    lib.ZSTD_decompress.argtypes = [void_p, size_t, void_p, size_t]
    lib.ZSTD_decompress.restype = size_t

    lib.ZSTD_getFrameContentSize.argtypes = [void_p, size_t]
    lib.ZSTD_getFrameContentSize.restype = ctypes.c_ulonglong

    lib.ZSTD_isError.argtypes = [size_t]
    lib.ZSTD_isError.restype = ctypes.c_uint

    lib.ZSTD_getErrorName.argtypes = [size_t]
    lib.ZSTD_getErrorName.restype = ctypes.c_char_p

    lib.ZSTD_maxCLevel.argtypes = []
    lib.ZSTD_maxCLevel.restype = ctypes.c_int

    lib.ZSTD_versionNumber.argtypes = []
    lib.ZSTD_versionNumber.restype = ctypes.c_uint

    lib.ZSTD_compressBound.argtypes = [size_t]
    lib.ZSTD_compressBound.restype = size_t

    return lib


def _readable(src: memoryview) -> object:
    """
    Convert a flat byte view into an argument for a ``const void*`` parameter.

    Writable memory is shared in place. Read-only memory cannot be wrapped
    by ``from_buffer``; a ``bytes`` object spanning the whole view is passed
    directly (ctypes hands out its internal pointer), anything else is copied.
    """
    if src.nbytes == 0:
        return None
    if not src.readonly:
        return (ctypes.c_char * src.nbytes).from_buffer(src)
    if type(src.obj) is bytes and len(src.obj) == src.nbytes:
        return src.obj
    return src.tobytes()


def _writable(dst: memoryview) -> object:
    """Convert a flat writable byte view into an argument for a ``void*`` parameter."""
    if dst.nbytes == 0:
        return None
    return (ctypes.c_char * dst.nbytes).from_buffer(dst)


class LibZstdEngine:
    """``CompressionEngine`` bound to the system libzstd through ctypes."""

    def __init__(self, path: str | None = None) -> None:
        """Load the library; see ``load_libzstd`` for the search order."""
        self._lib = load_libzstd(path)

    def compress(self, dst: memoryview, src: memoryview, level: int) -> int:
        """Call ``ZSTD_compress``."""
        return self._lib.ZSTD_compress(
            _writable(dst), dst.nbytes, _readable(src), src.nbytes, level
        )

    def decompress(self, dst: memoryview, src: memoryview) -> int:
        """Call ``ZSTD_decompress``."""
        return self._lib.ZSTD_decompress(_writable(dst), dst.nbytes, _readable(src), src.nbytes)

    def frame_content_size(self, src: memoryview) -> int:
        """Call ``ZSTD_getFrameContentSize``."""
        return self._lib.ZSTD_getFrameContentSize(_readable(src), src.nbytes)

    def is_error(self, code: int) -> bool:
        """Call ``ZSTD_isError``."""
        return bool(self._lib.ZSTD_isError(code))

    def error_name(self, code: int) -> str:
        """Call ``ZSTD_getErrorName``."""
        return self._lib.ZSTD_getErrorName(code).decode("utf-8", errors="replace")

    def max_compression_level(self) -> int:
        """Call ``ZSTD_maxCLevel``."""
        return int(self._lib.ZSTD_maxCLevel())

    def version_number(self) -> int:
        """Call ``ZSTD_versionNumber``."""
        return int(self._lib.ZSTD_versionNumber())

    def compress_bound(self, size: int) -> int:
        """Call ``ZSTD_compressBound``."""
        return self._lib.ZSTD_compressBound(size)


_default_engine: CompressionEngine | None = None
_default_engine_lock = threading.Lock()


def default_engine() -> CompressionEngine:
    """
    Return the process-wide engine, loading libzstd on first use.

    Concurrent first callers block on the lock; the library is loaded once.

    Raises:
        CodecUnavailableError: If libzstd cannot be loaded.
    """
    global _default_engine
    if _default_engine is None:
        with _default_engine_lock:
            if _default_engine is None:
                _default_engine = LibZstdEngine()
    return _default_engine
