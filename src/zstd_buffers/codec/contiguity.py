"""
Contiguity checks for buffers handed to the native codec.

The codec sees memory as a flat byte range starting at one address. A
buffer may only be handed over if its logical elements fill that range
with no gaps, otherwise the codec would read or write the padding between
elements.

A layout is contiguous when, after sorting dimensions by stride, each
stride equals the size of everything nested inside it::

    shape (2, 3), itemsize 4, strides (12, 4)  -> contiguous (C order)
    shape (2, 3), itemsize 4, strides (4, 8)   -> contiguous (Fortran order)
    shape (6,),   itemsize 1, strides (2,)     -> NOT contiguous (every other byte)
"""

from __future__ import annotations

from typing import Any

from zstd_buffers.types import BufferValidationError


def is_contiguous(view: memoryview) -> bool:
    """
    Check that the strides of a view describe gap-free memory.

    Args:
        view: Any buffer view. Strides are in bytes.

    Returns:
        True iff every dimension's stride is the running product of the
        itemsize and the extents of the dimensions with smaller strides.
    """
    # A scalar view is a single element.
    if view.ndim == 0:
        return True

    # Walk dimensions from the innermost (smallest stride) outwards.
    #
    # The innermost stride must be one item; each next stride must skip
    # exactly one full copy of everything inside it.
    dims = sorted(zip(view.strides, view.shape))
    expected = view.itemsize
    for stride, extent in dims:
        if stride != expected:
            return False
        expected *= extent
    return True


def flat_bytes(view: memoryview) -> memoryview:
    """
    Return a one-dimensional unsigned byte view of contiguous memory.

    C-ordered views are recast in place. ``memoryview`` only casts C-ordered
    memory; the bytes of Fortran-ordered views are copied in memory order.
    """
    if view.c_contiguous:
        return view.cast("B")
    return memoryview(view.tobytes(order="A"))


def open_view(obj: Any, role: str) -> memoryview:
    """
    Open a new view of a buffer-protocol object.

    The caller owns the returned view and should release it (``with``
    statement) so the underlying storage can be resized again.

    Raises:
        BufferValidationError: If the object exposes no buffer.
    """
    try:
        return memoryview(obj)
    except TypeError as e:
        raise BufferValidationError(role, f"object does not expose a buffer: {e}") from e


def require_contiguous(view: memoryview, role: str) -> None:
    """
    Reject a view whose memory has gaps.

    Args:
        view: View of the buffer to check.
        role: "source" or "destination", used in the error message.

    Raises:
        BufferValidationError: If the memory is not contiguous.
    """
    if not is_contiguous(view):
        raise BufferValidationError(
            role,
            f"memory is not contiguous (shape={view.shape}, strides={view.strides}, "
            f"itemsize={view.itemsize})",
        )
