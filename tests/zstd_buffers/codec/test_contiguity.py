"""Tests for buffer contiguity checks."""

from __future__ import annotations

import array
import ctypes

import pytest

from zstd_buffers.codec.contiguity import (
    flat_bytes,
    is_contiguous,
    open_view,
    require_contiguous,
)
from zstd_buffers.types import BufferValidationError


class TestIsContiguous:
    """Stride walk over memoryview layouts."""

    def test_bytes_are_contiguous(self) -> None:
        """A fresh linear buffer is trivially contiguous."""
        assert is_contiguous(memoryview(b"hello"))
        assert is_contiguous(memoryview(bytearray(16)))

    def test_empty_buffer_is_contiguous(self) -> None:
        """Zero-length buffers have no gaps."""
        assert is_contiguous(memoryview(b""))

    def test_typed_array_is_contiguous(self) -> None:
        """Multi-byte items with unit element stride are contiguous."""
        assert is_contiguous(memoryview(array.array("d", [1.0, 2.0, 3.0])))

    def test_strided_view_is_not_contiguous(self) -> None:
        """Every other byte leaves gaps."""
        view = memoryview(bytes(range(10)))[::2]
        assert view.strides == (2,)
        assert not is_contiguous(view)

    def test_strided_typed_view_is_not_contiguous(self) -> None:
        """Every other element of a typed array leaves gaps."""
        view = memoryview(array.array("i", range(8)))[::2]
        assert not is_contiguous(view)

    def test_reversed_view_is_not_contiguous(self) -> None:
        """Negative strides are rejected."""
        view = memoryview(b"abcdef")[::-1]
        assert not is_contiguous(view)

    def test_contiguous_slice(self) -> None:
        """A unit-step slice is still contiguous."""
        assert is_contiguous(memoryview(b"abcdef")[1:4])

    def test_c_ordered_matrix(self) -> None:
        """Row-major 2-D layout is contiguous."""
        view = memoryview(bytearray(24)).cast("B", shape=[4, 6])
        assert view.strides == (6, 1)
        assert is_contiguous(view)

    def test_ctypes_matrix(self) -> None:
        """A nested ctypes array exports a contiguous 2-D layout."""
        matrix = ((ctypes.c_uint16 * 3) * 2)()
        view = memoryview(matrix)
        assert view.ndim == 2
        assert is_contiguous(view)

    def test_scalar_view(self) -> None:
        """0-d views are a single element."""
        view = memoryview(ctypes.c_int64(7))
        assert view.ndim == 0
        assert is_contiguous(view)


class TestRequireContiguous:
    """Validation errors for non-compliant buffers."""

    def test_accepts_contiguous(self) -> None:
        """Contiguous memory passes silently."""
        with open_view(b"abc", "source") as view:
            require_contiguous(view, "source")

    def test_rejects_strided_source(self) -> None:
        """Strided memory raises a validation error naming the role."""
        view = memoryview(b"abcdef")[::2]
        with pytest.raises(BufferValidationError, match="not contiguous") as excinfo:
            require_contiguous(view, "source")
        assert excinfo.value.role == "source"

    def test_open_view_rejects_non_buffers(self) -> None:
        """Objects without the buffer protocol are refused."""
        with pytest.raises(BufferValidationError, match="does not expose a buffer"):
            open_view("text", "source")

    def test_open_view_does_not_share_callers_view(self) -> None:
        """Releasing the opened view leaves the caller's view usable."""
        caller_view = memoryview(b"abc")
        with open_view(caller_view, "source"):
            pass
        assert caller_view.tobytes() == b"abc"


class TestFlatBytes:
    """Flattening contiguous memory to unsigned bytes."""

    def test_cast_shares_memory(self) -> None:
        """Native-format C-ordered views are recast without copying."""
        storage = bytearray(b"\x01\x02\x03\x04")
        flat = flat_bytes(memoryview(storage))
        flat[0] = 0xFF
        assert storage[0] == 0xFF

    def test_typed_array_flattens_to_item_bytes(self) -> None:
        """A typed array becomes its raw bytes."""
        values = array.array("H", [1, 2])
        assert flat_bytes(memoryview(values)).nbytes == 2 * values.itemsize

    def test_ctypes_formats_flatten_to_bytes(self) -> None:
        """Explicit-endian ctypes formats flatten to their raw bytes."""
        values = (ctypes.c_uint32 * 2)(1, 2)
        flat = flat_bytes(memoryview(values))
        assert flat.format == "B"
        assert flat.tobytes() == bytes(values)
