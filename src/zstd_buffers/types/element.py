"""
Element types for decompression destinations.

A destination buffer holds a sequence of fixed-size elements. The codec
writes raw bytes into that memory, so the element type must be plain
data: a fixed layout with no pointers or Python object references.
Anything else would let arbitrary decompressed bytes masquerade as
addresses.

Two families of element types are understood:

- ctypes types (``ctypes.c_uint32``, a ``ctypes.Structure`` subclass, a
  ``ctypes`` array type, ...), stored in an ``OutputBuffer``.
- ``array`` module typecodes (``"B"``, ``"i"``, ``"d"``, ...), stored in
  an ``array.array``. These are always plain data.
"""

from __future__ import annotations

import array
import ctypes
from dataclasses import dataclass
from typing import Any

_POINTER_TYPE_CODES: frozenset[str] = frozenset({"z", "Z", "P", "O", "X"})
"""Simple ctypes codes that hold addresses: char*, wchar_t*, void*, PyObject*, BSTR."""

_CTYPES_BASES: tuple[type, ...] = (
    ctypes._SimpleCData,
    ctypes.Structure,
    ctypes.Union,
    ctypes.Array,
    ctypes._Pointer,
    ctypes._CFuncPtr,
)
"""Base classes of every concrete ctypes data type."""


@dataclass(frozen=True, slots=True)
class ElementType:
    """Resolved description of a destination element type."""

    name: str
    """Display name used in error messages."""

    itemsize: int
    """Size in bytes of one element."""

    is_plain: bool
    """Whether the type is fixed-size and pointer-free."""

    ctype: Any = None
    """The ctypes type, for ctypes-backed elements."""

    typecode: str | None = None
    """The array typecode, for ``array.array``-backed elements."""


def is_plain_ctype(ctype: Any) -> bool:
    """
    Check whether a ctypes type is plain data.

    Structures and unions are plain when every field is; arrays are plain
    when their element type is. Pointers, function pointers and the
    pointer-valued simple types (``c_char_p``, ``c_void_p``, ...) are not.
    Zero-sized types are rejected since no element count can be derived
    from them.
    """
    if not isinstance(ctype, type):
        return False
    if issubclass(ctype, (ctypes._Pointer, ctypes._CFuncPtr)):
        return False
    if issubclass(ctype, ctypes._SimpleCData):
        return ctype._type_ not in _POINTER_TYPE_CODES and ctypes.sizeof(ctype) > 0
    if issubclass(ctype, ctypes.Array):
        return is_plain_ctype(ctype._type_) and ctypes.sizeof(ctype) > 0
    if issubclass(ctype, (ctypes.Structure, ctypes.Union)):
        fields = getattr(ctype, "_fields_", None)
        if not fields or ctypes.sizeof(ctype) == 0:
            return False
        return all(is_plain_ctype(field[1]) for field in fields)
    return False


def element_type_of(value: Any) -> ElementType:
    """
    Resolve an element type description.

    Args:
        value: A ctypes type, an ``array`` typecode, or an ``ElementType``.

    Returns:
        The resolved element type. Non-plain ctypes types resolve
        successfully; callers decide whether ``is_plain`` is required.

    Raises:
        TypeError: If the value is not a recognized element type.
    """
    if isinstance(value, ElementType):
        return value

    if isinstance(value, str):
        if value not in array.typecodes:
            raise TypeError(f"Unknown array typecode: {value!r}")
        return ElementType(
            name=f"array({value!r})",
            itemsize=array.array(value).itemsize,
            is_plain=True,
            typecode=value,
        )

    if isinstance(value, type) and issubclass(value, _CTYPES_BASES):
        itemsize = ctypes.sizeof(value)
        return ElementType(
            name=value.__name__,
            itemsize=itemsize,
            is_plain=itemsize > 0 and is_plain_ctype(value),
            ctype=value,
        )

    raise TypeError(f"Unsupported element type: {value!r}")
