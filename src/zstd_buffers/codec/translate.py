"""Translation of native status codes into byte counts or exceptions."""

from __future__ import annotations

from zstd_buffers.types import NativeCodecError

from .constants import SIZE_T_BITS
from .engine import CompressionEngine


def check_result(engine: CompressionEngine, code: int) -> int:
    """
    Return a native status as a byte count, or raise if it is an error code.

    Args:
        engine: The engine that produced ``code``.
        code: Raw ``size_t`` status of a native call.

    Returns:
        ``code`` itself, now known to be a byte count.

    Raises:
        NativeCodecError: If ``code`` is an error. The message is the
            engine's error name, verbatim.
    """
    if engine.is_error(code):
        raise NativeCodecError(engine.error_name(code), code=code)
    return code


def error_enum(code: int) -> int:
    """
    Recover the error enum from an error status.

    Errors are returned as ``(size_t)-enum``, so the enum is the distance
    from the top of the ``size_t`` range. Only meaningful for codes that
    ``is_error`` accepted.
    """
    return (1 << SIZE_T_BITS) - code
