"""Exception hierarchy for buffer decompression."""

from __future__ import annotations


class ZstdBufferError(Exception):
    """
    Base exception for all errors raised by this package.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class BufferValidationError(ZstdBufferError):
    """
    Raised when a source or destination buffer cannot be handed to the codec.

    Either the memory is not contiguous or the destination element type
    is not plain data. Detected before any native call is made.

    Attributes:
        role: Which side failed the check ("source" or "destination").
        detail: Description of what was wrong.
    """

    def __init__(self, role: str, detail: str) -> None:
        self.role = role
        self.detail = detail
        super().__init__(f"Invalid {role} buffer: {detail}")


class FrameSizeError(ZstdBufferError):
    """
    Raised when the frame header cannot be parsed for its content size.

    The compressed input is corrupt, truncated, or not a frame at all.
    """


class AlignmentError(ZstdBufferError):
    """
    Raised when a byte count is not a whole number of elements.

    Attributes:
        byte_count: The offending number of bytes.
        itemsize: Size in bytes of one destination element.
        type_name: Name of the destination element type.
    """

    def __init__(self, byte_count: int, itemsize: int, type_name: str) -> None:
        self.byte_count = byte_count
        self.itemsize = itemsize
        self.type_name = type_name
        super().__init__(
            f"Uncompressed data ({byte_count} bytes) is not a multiple of "
            f"sizeof({type_name}) = {itemsize}"
        )


class AllocationError(ZstdBufferError):
    """
    Raised when the destination cannot be grown to the required size.

    A frame header may claim any size up to the content size sentinels.
    Sizes beyond the address space or the available memory end here.

    Attributes:
        byte_count: The number of bytes that could not be allocated.
    """

    def __init__(self, byte_count: int) -> None:
        self.byte_count = byte_count
        super().__init__(f"Cannot allocate {byte_count} bytes for the decompressed data")


class NativeCodecError(ZstdBufferError):
    """
    Raised when the native codec reports a failure.

    The message is the codec's own error name, passed through verbatim.

    Attributes:
        code: The raw status code returned by the native call.
    """

    def __init__(self, message: str, *, code: int | None = None) -> None:
        self.code = code
        super().__init__(message)


class CodecUnavailableError(ZstdBufferError):
    """Raised when the native codec library cannot be located or loaded."""
