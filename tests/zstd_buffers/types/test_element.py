"""Tests for element type resolution and the plain-data check."""

from __future__ import annotations

import array
import ctypes

import pytest

from zstd_buffers.types import ElementType, element_type_of, is_plain_ctype


class Point(ctypes.Structure):
    """Plain structure."""

    _fields_ = [("x", ctypes.c_float), ("y", ctypes.c_float)]


class Segment(ctypes.Structure):
    """Nested plain structure."""

    _fields_ = [("start", Point), ("end", Point), ("tags", ctypes.c_uint8 * 4)]


class Word(ctypes.Union):
    """Plain union."""

    _fields_ = [("u32", ctypes.c_uint32), ("bytes", ctypes.c_uint8 * 4)]


class Named(ctypes.Structure):
    """Structure holding a string pointer."""

    _fields_ = [("id", ctypes.c_int), ("name", ctypes.c_char_p)]


class Outer(ctypes.Structure):
    """Plain-looking structure with a pointer nested one level down."""

    _fields_ = [("inner", Named), ("count", ctypes.c_int)]


class Empty(ctypes.Structure):
    """Structure without fields."""


CALLBACK = ctypes.CFUNCTYPE(ctypes.c_int, ctypes.c_int)


class TestIsPlainCtype:
    """Plain-data classification of ctypes types."""

    @pytest.mark.parametrize(
        "ctype",
        [
            ctypes.c_int8,
            ctypes.c_uint16,
            ctypes.c_int64,
            ctypes.c_float,
            ctypes.c_double,
            ctypes.c_bool,
            ctypes.c_char,
            ctypes.c_wchar,
            ctypes.c_size_t,
        ],
    )
    def test_scalars(self, ctype: type) -> None:
        """Numeric and character scalars are plain."""
        assert is_plain_ctype(ctype)

    def test_composites(self) -> None:
        """Structures, unions and arrays of plain data are plain."""
        assert is_plain_ctype(Point)
        assert is_plain_ctype(Segment)
        assert is_plain_ctype(Word)
        assert is_plain_ctype(ctypes.c_int32 * 8)
        assert is_plain_ctype(Point * 2)

    @pytest.mark.parametrize(
        "ctype",
        [
            ctypes.c_void_p,
            ctypes.c_char_p,
            ctypes.c_wchar_p,
            ctypes.py_object,
            ctypes.POINTER(ctypes.c_int),
            CALLBACK,
        ],
    )
    def test_pointers(self, ctype: type) -> None:
        """Anything holding an address is not plain."""
        assert not is_plain_ctype(ctype)

    def test_pointer_fields(self) -> None:
        """A pointer anywhere inside a composite taints it."""
        assert not is_plain_ctype(Named)
        assert not is_plain_ctype(Outer)
        assert not is_plain_ctype(Named * 3)
        assert not is_plain_ctype(ctypes.c_void_p * 2)

    def test_zero_sized(self) -> None:
        """Zero-sized types cannot be counted."""
        assert not is_plain_ctype(Empty)
        assert not is_plain_ctype(ctypes.c_int * 0)

    def test_non_types(self) -> None:
        """Instances and unrelated classes are rejected."""
        assert not is_plain_ctype(ctypes.c_int(3))
        assert not is_plain_ctype(int)


class TestElementTypeOf:
    """Resolution of element type specifications."""

    def test_typecode(self) -> None:
        """Typecodes resolve to plain array elements."""
        element = element_type_of("d")
        assert element.typecode == "d"
        assert element.ctype is None
        assert element.itemsize == array.array("d").itemsize
        assert element.is_plain
        assert element.name == "array('d')"

    @pytest.mark.parametrize("typecode", list(array.typecodes))
    def test_every_typecode_is_plain(self, typecode: str) -> None:
        """The array module only stores plain values."""
        assert element_type_of(typecode).is_plain

    def test_ctype(self) -> None:
        """ctypes types resolve with their size and name."""
        element = element_type_of(Segment)
        assert element.ctype is Segment
        assert element.typecode is None
        assert element.itemsize == ctypes.sizeof(Segment)
        assert element.is_plain
        assert element.name == "Segment"

    def test_non_plain_ctype_resolves(self) -> None:
        """Pointer types resolve, flagged as not plain."""
        element = element_type_of(ctypes.c_char_p)
        assert not element.is_plain
        assert element.itemsize == ctypes.sizeof(ctypes.c_char_p)

    def test_zero_sized_ctype_is_not_plain(self) -> None:
        """A zero itemsize never counts as plain."""
        element = element_type_of(Empty)
        assert element.itemsize == 0
        assert not element.is_plain

    def test_element_type_passes_through(self) -> None:
        """A resolved element type is returned unchanged."""
        element = ElementType(name="custom", itemsize=4, is_plain=True, typecode="i")
        assert element_type_of(element) is element

    def test_unknown_typecode(self) -> None:
        """Strings that are not typecodes are rejected."""
        with pytest.raises(TypeError, match="typecode"):
            element_type_of("x")

    @pytest.mark.parametrize("value", [int, float, 4, None, ctypes.c_int(1)])
    def test_unsupported(self, value: object) -> None:
        """Python types and instances are not element types."""
        with pytest.raises(TypeError, match="Unsupported element type"):
            element_type_of(value)

    def test_frozen(self) -> None:
        """Resolved element types are immutable."""
        element = element_type_of(ctypes.c_int)
        with pytest.raises(AttributeError):
            element.itemsize = 8  # type: ignore[misc]
