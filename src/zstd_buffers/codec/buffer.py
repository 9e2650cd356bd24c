"""
Destination buffers and their sizing.

A destination is a resizable, contiguous sequence of plain-data elements
owned by the caller. Two kinds are supported:

- ``OutputBuffer``: elements of a ctypes type over ``bytearray`` storage.
- ``array.array``: elements of an ``array`` typecode.

Shrinking keeps the existing allocation, so a buffer reused across calls
only reallocates when it has to grow. New elements are zero-filled.

Growth cost differs between the two kinds. An ``OutputBuffer`` allocates
its new zeroed storage in one step and copies the old bytes over, so the
peak is old plus new size. An ``array.array`` must stay the same object
and can only be extended from a zero-filled temporary, so its peak
includes one extra copy of the added bytes.

Resizing fails with ``BufferError`` while any view of the storage is
alive; every view opened during a decompression call is released before
the final resize.
"""

from __future__ import annotations

import array
import ctypes
from collections.abc import Iterator
from typing import Any

from zstd_buffers.types import (
    AlignmentError,
    BufferValidationError,
    ElementType,
    element_type_of,
)


class OutputBuffer:
    """
    A resizable sequence of ctypes elements backed by a ``bytearray``.

    Usage::

        buf = OutputBuffer(ctypes.c_uint32)
        decompress_into(buf, frame)
        values = list(buf)
    """

    def __init__(self, element_type: Any, count: int = 0) -> None:
        """
        Create a zero-filled buffer.

        Args:
            element_type: A ctypes type, or an ``ElementType`` resolved from one.
            count: Initial number of elements.

        Raises:
            TypeError: If the element type is not a ctypes type.
            ValueError: If ``count`` is negative.
        """
        element = element_type_of(element_type)
        if element.ctype is None:
            raise TypeError(
                f"OutputBuffer holds ctypes elements, got {element.name}; "
                "use array.array for array typecodes"
            )
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        self._element = element
        self._storage = bytearray(count * element.itemsize)

    @property
    def element(self) -> ElementType:
        """Element type of the buffer."""
        return self._element

    @property
    def nbytes(self) -> int:
        """Length of the buffer in bytes."""
        return len(self._storage)

    def __len__(self) -> int:
        """Number of elements."""
        if self._element.itemsize == 0:
            return 0
        return len(self._storage) // self._element.itemsize

    def resize(self, count: int) -> None:
        """Set the length to exactly ``count`` elements, zero-filling growth."""
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        target = count * self._element.itemsize
        current = len(self._storage)
        if target < current:
            del self._storage[target:]
        elif target > current:
            # Allocate zeroed storage directly and move the old bytes over.
            #
            # Clearing the old storage raises BufferError while it is exported,
            # so a live view still blocks the resize.
            grown = bytearray(target)
            grown[:current] = self._storage
            self._storage.clear()
            self._storage = grown

    def view(self) -> memoryview:
        """Writable flat byte view of the storage. Release it before resizing."""
        return memoryview(self._storage)

    def tobytes(self) -> bytes:
        """Copy of the raw element bytes."""
        return bytes(self._storage)

    def __getitem__(self, index: int) -> Any:
        """
        Return one element.

        Simple ctypes types yield their Python value; structures, unions
        and arrays yield a ctypes instance copied out of the buffer.
        """
        count = len(self)
        if index < 0:
            index += count
        if not 0 <= index < count:
            raise IndexError(f"OutputBuffer index {index} out of range for length {count}")
        ctype = self._element.ctype
        item = ctype.from_buffer_copy(self._storage, index * self._element.itemsize)
        if isinstance(item, ctypes._SimpleCData):
            return item.value
        return item

    def __iter__(self) -> Iterator[Any]:
        for index in range(len(self)):
            yield self[index]

    def __repr__(self) -> str:
        return f"OutputBuffer({self._element.name}, len={len(self)})"


DestinationBuffer = OutputBuffer | array.array
"""A destination: an ``OutputBuffer`` or an ``array.array``."""


def buffer_element(buffer: DestinationBuffer) -> ElementType:
    """
    Resolve the element type of a destination buffer.

    Raises:
        BufferValidationError: If the object is not a supported destination.
    """
    if isinstance(buffer, OutputBuffer):
        return buffer.element
    if isinstance(buffer, array.array):
        return element_type_of(buffer.typecode)
    raise BufferValidationError(
        "destination",
        f"expected OutputBuffer or array.array, got {type(buffer).__name__}",
    )


def destination_view(buffer: DestinationBuffer) -> memoryview:
    """Open a view of a destination's memory as its elements are laid out."""
    if isinstance(buffer, OutputBuffer):
        return buffer.view()
    return memoryview(buffer)


def shares_storage(buffer: DestinationBuffer, view: memoryview) -> bool:
    """Whether a view exports the destination's own storage."""
    if isinstance(buffer, OutputBuffer):
        return view.obj is buffer or view.obj is buffer._storage
    return view.obj is buffer


def element_count(byte_count: int, element: ElementType) -> int:
    """
    Convert a byte count to a whole number of elements.

    Raises:
        AlignmentError: If ``byte_count`` is not a multiple of the element size.
    """
    count, remainder = divmod(byte_count, element.itemsize)
    if remainder != 0:
        raise AlignmentError(byte_count, element.itemsize, element.name)
    return count


def resize_buffer(buffer: DestinationBuffer, count: int) -> None:
    """Resize a destination to exactly ``count`` elements, reusing its storage."""
    if isinstance(buffer, OutputBuffer):
        buffer.resize(count)
        return

    current = len(buffer)
    if count < current:
        del buffer[count:]
    elif count > current:
        buffer.frombytes(bytes((count - current) * buffer.itemsize))


def allocate(element: ElementType) -> DestinationBuffer:
    """Create an empty destination buffer for an element type."""
    if element.typecode is not None:
        return array.array(element.typecode)
    return OutputBuffer(element)
