"""Reusable type definitions for buffer decompression."""

from .base import StrictBaseModel
from .element import ElementType, element_type_of, is_plain_ctype
from .exceptions import (
    AllocationError,
    AlignmentError,
    BufferValidationError,
    CodecUnavailableError,
    FrameSizeError,
    NativeCodecError,
    ZstdBufferError,
)

__all__ = [
    # Core types
    "StrictBaseModel",
    "ElementType",
    "element_type_of",
    "is_plain_ctype",
    # Exceptions
    "ZstdBufferError",
    "BufferValidationError",
    "FrameSizeError",
    "AlignmentError",
    "AllocationError",
    "NativeCodecError",
    "CodecUnavailableError",
]
