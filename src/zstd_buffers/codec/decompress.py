"""
Decompression into typed, caller-owned buffers.

This module sits between the caller and the native decompressor. The
native call itself is one line; everything around it is about making that
line safe:

  1. VALIDATE: both buffers must be contiguous, and the destination's
     elements must be plain data. Nothing native runs until this passes.

  2. SIZE: read the decompressed size from the frame header. Zero means
     an empty payload and no native call at all. A missing size falls back
     to an estimate (see ``frame``).

  3. ALLOCATE: resize the destination to exactly the target size, which
     must be a whole number of elements.

  4. DECOMPRESS: hand the flat byte ranges to the native codec.

  5. FINALIZE: translate the status, then trim the destination to the
     bytes actually written (an estimate is usually too large).


Example:
-------
A frame of 12 decompressed bytes into a ``c_uint32`` buffer:

    header says 12       -> KnownSize(12)
    12 / 4 = 3 elements  -> resize to 3
    native writes 12     -> trim to 12 / 4 = 3 elements

The same frame into a ``c_uint64`` buffer fails at step 3:
12 is not a multiple of 8, so ``AlignmentError`` is raised.
"""

from __future__ import annotations

import logging
from typing import Any

from zstd_buffers.types import (
    AllocationError,
    BufferValidationError,
    ElementType,
    FrameSizeError,
    element_type_of,
)

from .buffer import (
    DestinationBuffer,
    allocate,
    buffer_element,
    destination_view,
    element_count,
    resize_buffer,
    shares_storage,
)
from .config import DEFAULT_CONFIG, DecompressConfig
from .constants import ERROR_DST_SIZE_TOO_SMALL, SIZE_T_BITS
from .contiguity import flat_bytes, open_view, require_contiguous
from .engine import CompressionEngine, default_engine
from .frame import KnownSize, SizeError, UnknownSize, estimate_unknown_size, resolve_content_size
from .translate import check_result, error_enum

logger = logging.getLogger(__name__)


def decompress_into(
    buffer: DestinationBuffer,
    compressed: Any,
    *,
    engine: CompressionEngine | None = None,
    config: DecompressConfig | None = None,
) -> int:
    """
    Decompress one frame into a pre-allocated destination buffer.

    The buffer is resized in place to hold exactly the decompressed data.
    Its previous contents and length do not matter.

    Args:
        buffer: Destination, an ``OutputBuffer`` or an ``array.array``.
        compressed: The compressed frame, any buffer-protocol object.
        engine: Native codec. Defaults to the process-wide libzstd engine.
        config: Sizing policy for frames of unknown size.

    Returns:
        Number of bytes written to the buffer.

    Raises:
        BufferValidationError: A buffer is non-contiguous or the element
            type is not plain data.
        FrameSizeError: The frame header cannot be parsed.
        AlignmentError: The decompressed size is not a whole number of elements.
        AllocationError: The destination cannot grow to the decompressed size.
        NativeCodecError: The native decompressor failed.
    """
    element = buffer_element(buffer)

    # Step 1: Validate contiguity of both sides, then the element type.
    #
    # Views are released immediately so the destination can be resized.
    with destination_view(buffer) as dst_view:
        require_contiguous(dst_view, "destination")

    with open_view(compressed, "source") as src_view:
        require_contiguous(src_view, "source")

        if shares_storage(buffer, src_view):
            raise BufferValidationError("source", "memory is shared with the destination buffer")

        if not element.is_plain:
            raise BufferValidationError(
                "destination", f"element type {element.name} is not plain data"
            )

        with flat_bytes(src_view) as src:
            return _decompress_validated(
                buffer,
                element,
                src,
                engine if engine is not None else default_engine(),
                config if config is not None else DEFAULT_CONFIG,
            )


def _decompress_validated(
    buffer: DestinationBuffer,
    element: ElementType,
    src: memoryview,
    engine: CompressionEngine,
    config: DecompressConfig,
) -> int:
    """Steps 2-5 of ``decompress_into``, on inputs that passed validation."""
    # Step 2: Resolve the target size.
    match resolve_content_size(engine, src):
        case SizeError():
            raise FrameSizeError("Error while reading frame content size")
        case KnownSize(byte_count=0):
            # Empty payload: nothing to decompress.
            _resize(buffer, 0, element)
            return 0
        case KnownSize(byte_count=byte_count):
            target, estimated = byte_count, False
        case UnknownSize():
            target, estimated = estimate_unknown_size(src.nbytes, element.itemsize, config), True

    logger.debug("Decompressing %d bytes into %d-byte buffer", src.nbytes, target)

    # Step 3: Allocate exactly the target size.
    _resize(buffer, target, element)

    # Step 4: Decompress, regrowing an estimated buffer only if allowed.
    code = _native_decompress(engine, buffer, src)
    while estimated and config.regrow_on_overflow and _too_small(engine, code):
        grown = _grown_capacity(target, element, config)
        if grown is None:
            break
        logger.debug("Buffer of %d bytes too small, retrying with %d bytes", target, grown)
        target = grown
        _resize(buffer, target, element)
        code = _native_decompress(engine, buffer, src)

    # Step 5: Translate the status and trim to the bytes actually written.
    written = check_result(engine, code)
    _resize(buffer, written, element)
    return written


def _resize(buffer: DestinationBuffer, byte_count: int, element: ElementType) -> None:
    """
    Resize a destination to hold exactly ``byte_count`` bytes.

    Raises:
        AlignmentError: If ``byte_count`` is not a whole number of elements.
        AllocationError: If the storage cannot grow that large.
        BufferValidationError: If another view still exports the destination.
    """
    count = element_count(byte_count, element)
    try:
        resize_buffer(buffer, count)
    except (OverflowError, MemoryError) as e:
        raise AllocationError(byte_count) from e
    except BufferError as e:
        raise BufferValidationError(
            "destination", f"memory is exported by another view and cannot be resized: {e}"
        ) from e


def _native_decompress(
    engine: CompressionEngine, buffer: DestinationBuffer, src: memoryview
) -> int:
    """Run the native call over the destination's full current length."""
    with destination_view(buffer) as dst_view, dst_view.cast("B") as dst:
        return engine.decompress(dst, src)


def _too_small(engine: CompressionEngine, code: int) -> bool:
    """Whether a status is the "destination buffer too small" error."""
    return engine.is_error(code) and error_enum(code) == ERROR_DST_SIZE_TOO_SMALL


def _grown_capacity(current: int, element: ElementType, config: DecompressConfig) -> int | None:
    """
    Double a buffer size, capped at the regrow ceiling.

    Returns:
        The next size in bytes, a whole number of elements, or None when
        the ceiling leaves no room to grow.
    """
    doubled = min(max(2 * current, element.itemsize), config.regrow_ceiling)
    grown = element.itemsize * (doubled // element.itemsize)
    return grown if grown > current else None


def decompress(
    element_type: Any,
    compressed: Any,
    *,
    engine: CompressionEngine | None = None,
    config: DecompressConfig | None = None,
) -> DestinationBuffer:
    """
    Decompress one frame into a new buffer of the given element type.

    Args:
        element_type: A ctypes type (returns an ``OutputBuffer``) or an
            ``array`` typecode (returns an ``array.array``).
        compressed: The compressed frame, any buffer-protocol object.
        engine: Native codec. Defaults to the process-wide libzstd engine.
        config: Sizing policy for frames of unknown size.

    Returns:
        A buffer holding exactly the decompressed elements.

    Raises:
        TypeError: If ``element_type`` is not a ctypes type or array typecode.
        ZstdBufferError: As for ``decompress_into``.
    """
    buffer = allocate(element_type_of(element_type))
    decompress_into(buffer, compressed, engine=engine, config=config)
    return buffer


def max_compressed_size(input_size: int, *, engine: CompressionEngine | None = None) -> int:
    """
    Worst-case compressed size of ``input_size`` raw bytes.

    Raises:
        ValueError: If ``input_size`` is negative or does not fit in a size_t.
        NativeCodecError: If the codec rejects the size as too large.
    """
    if input_size < 0:
        raise ValueError(f"input_size must be non-negative, got {input_size}")
    if input_size >= 1 << SIZE_T_BITS:
        raise ValueError(f"input_size must be below 2**{SIZE_T_BITS}, got {input_size}")
    engine = engine if engine is not None else default_engine()
    return check_result(engine, engine.compress_bound(input_size))
