"""
Scripted stand-in for the native codec.

``FakeEngine`` implements ``CompressionEngine`` without libzstd. Each test
programs what the "native" side reports (the header's content size, the
payload a decompress call produces, or raw status codes) and inspects the
calls that were made.
"""

from __future__ import annotations

from collections import Counter

from zstd_buffers.codec.constants import (
    ERROR_DST_SIZE_TOO_SMALL,
    ERROR_GENERIC,
    ERROR_MAX_CODE,
    ERROR_PREFIX_UNKNOWN,
    ERROR_SRC_SIZE_WRONG,
    SIZE_T_BITS,
)

ERROR_NAMES: dict[int, str] = {
    ERROR_GENERIC: "Error (generic)",
    ERROR_PREFIX_UNKNOWN: "Unknown frame descriptor",
    ERROR_DST_SIZE_TOO_SMALL: "Destination buffer is too small",
    ERROR_SRC_SIZE_WRONG: "Src size is incorrect",
}
"""Error names registered with every FakeEngine, keyed by error enum."""


def error_code(enum: int) -> int:
    """Encode an error enum the way the native library returns it."""
    return (1 << SIZE_T_BITS) - enum


class FakeEngine:
    """
    Mock CompressionEngine with programmed results and call counters.

    By default a frame decompresses to ``payload`` and its header reports
    ``len(payload)``. A decompress call whose destination is smaller than
    the payload fails with "destination too small", as the real codec does.
    """

    def __init__(
        self,
        payload: bytes = b"",
        *,
        content_size: int | None = None,
        decompress_codes: list[int] | None = None,
        version: int = 10506,
        max_level: int = 22,
    ) -> None:
        """
        Program the engine.

        Args:
            payload: Bytes produced by a successful decompress call.
            content_size: Raw header query result. Defaults to ``len(payload)``.
            decompress_codes: Status codes returned by successive decompress
                calls instead of writing the payload, consumed in order.
            version: Packed version number.
            max_level: Maximum compression level.
        """
        self.payload = payload
        self.content_size = len(payload) if content_size is None else content_size
        self.decompress_codes = list(decompress_codes or [])
        self.version = version
        self.max_level = max_level
        self.error_names = dict(ERROR_NAMES)
        self.calls: Counter[str] = Counter()
        self.capacities: list[int] = []
        self.sources: list[bytes] = []

    @property
    def native_calls(self) -> int:
        """Number of calls that touched buffer memory."""
        return self.calls["decompress"] + self.calls["frame_content_size"] + self.calls["compress"]

    def compress(self, dst: memoryview, src: memoryview, level: int) -> int:
        """Store ``src`` verbatim, as a level-0 codec would."""
        self.calls["compress"] += 1
        if src.nbytes > dst.nbytes:
            return error_code(ERROR_DST_SIZE_TOO_SMALL)
        dst[: src.nbytes] = src
        return src.nbytes

    def decompress(self, dst: memoryview, src: memoryview) -> int:
        """Write the payload into ``dst``, or return the next scripted code."""
        self.calls["decompress"] += 1
        self.capacities.append(dst.nbytes)
        self.sources.append(src.tobytes())
        if self.decompress_codes:
            return self.decompress_codes.pop(0)
        if len(self.payload) > dst.nbytes:
            return error_code(ERROR_DST_SIZE_TOO_SMALL)
        dst[: len(self.payload)] = self.payload
        return len(self.payload)

    def frame_content_size(self, src: memoryview) -> int:
        """Return the programmed header value."""
        self.calls["frame_content_size"] += 1
        return self.content_size

    def is_error(self, code: int) -> bool:
        """Same rule as the native library: the top of the size_t range."""
        self.calls["is_error"] += 1
        return code > (1 << SIZE_T_BITS) - ERROR_MAX_CODE

    def error_name(self, code: int) -> str:
        """Look up the registered name of an error code."""
        self.calls["error_name"] += 1
        return self.error_names.get((1 << SIZE_T_BITS) - code, "Unspecified error code")

    def max_compression_level(self) -> int:
        """Return the programmed maximum level."""
        self.calls["max_compression_level"] += 1
        return self.max_level

    def version_number(self) -> int:
        """Return the programmed version."""
        self.calls["version_number"] += 1
        return self.version

    def compress_bound(self, size: int) -> int:
        """The library's ZSTD_COMPRESSBOUND formula."""
        self.calls["compress_bound"] += 1
        margin = ((128 << 10) - size) >> 11 if size < (128 << 10) else 0
        return size + (size >> 8) + margin
