"""
Shapes & Tensors
================

A ``Tensor`` is a flat buffer of single-precision floats paired with a
``Shape`` describing up to 5 axes.  Axis 0 is conventionally the sample
(or unit) count, so a batch of 30 RGB images of 25×25 pixels is
``Shape(30, 25, 25, 3)``.

Ownership
---------
A freshly built tensor owns its buffer.  ``tensor[n]`` returns a
*borrowed view*: a tensor whose buffer is the ``n``-th contiguous block of
its parent's buffer (a NumPy view, no copy) and which keeps a reference to
the parent.  Views can be read and written but never resized, and a
parent cannot be reallocated (resized to another element count) while
any of its views is still alive.

::

    parent buffer:  [ item 0 | item 1 | item 2 | ... ]
                               ▲
                               └── parent[1].raw_data
"""

from __future__ import annotations

import weakref
from typing import Iterator, Sequence

import numpy as np
from numpy.typing import NDArray

from ..errors import BorrowedViewError, ShapeError, ShapeMismatchError

MAX_DIMENSIONS = 5
DTYPE = np.float32


# ────────────────────────────────────────────────────────────────────
# Shape
# ────────────────────────────────────────────────────────────────────
class Shape:
    """Size of a 1D to 5D array.

    Parameters
    ----------
    dim0 .. dim4 : int
        Axis sizes; trailing axes default to 1.

    A shape is *valid* when every axis is ≥ 1.  ``INVALID_SHAPE`` (all
    axes −1) stands for "not known yet".
    """

    __slots__ = ("_dimension",)

    def __init__(
        self,
        dim0: int,
        dim1: int = 1,
        dim2: int = 1,
        dim3: int = 1,
        dim4: int = 1,
    ) -> None:
        self._dimension: tuple[int, ...] = (
            int(dim0), int(dim1), int(dim2), int(dim3), int(dim4),
        )

    @classmethod
    def from_dims(cls, dims: Sequence[int]) -> "Shape":
        """Build a shape from a sequence of at most 5 axis sizes."""
        if len(dims) > MAX_DIMENSIONS:
            raise ShapeError(
                f"at most {MAX_DIMENSIONS} dimensions are supported, got {len(dims)}"
            )
        if len(dims) == 0:
            return cls(1)
        return cls(*dims)

    @property
    def dimension(self) -> tuple[int, ...]:
        return self._dimension

    @property
    def batch_size(self) -> int:
        """Size of axis 0."""
        return self._dimension[0]

    def is_valid(self) -> bool:
        return all(d >= 1 for d in self._dimension)

    def num_dimensions(self) -> int:
        """Index + 1 of the highest axis larger than 1 (0 for all-ones)."""
        for axis in range(MAX_DIMENSIONS - 1, -1, -1):
            if self._dimension[axis] > 1:
                return axis + 1
        return 0

    def is_1d(self) -> bool:
        return self.num_dimensions() == 1

    def is_2d(self) -> bool:
        return self.num_dimensions() == 2

    def is_3d(self) -> bool:
        return self.num_dimensions() == 3

    def is_4d(self) -> bool:
        return self.num_dimensions() == 4

    def is_5d(self) -> bool:
        return self.num_dimensions() == 5

    def elem_count(self) -> int:
        """Number of scalars needed to represent this shape."""
        count = 1
        for d in self._dimension:
            count *= d
        return count

    def item_stride(self) -> int:
        """Number of scalars in one slice along axis 0."""
        count = 1
        for d in self._dimension[1:]:
            count *= d
        return count

    def item_dimension(self) -> "Shape":
        """Shape of one slice along axis 0 (remaining axes shifted down)."""
        return Shape(*self._dimension[1:], 1)

    def with_batch_size(self, n: int) -> "Shape":
        """Same shape with axis 0 replaced by ``n``."""
        return Shape(n, *self._dimension[1:])

    def batched(self, n: int) -> "Shape":
        """Shape of ``n`` stacked items of this shape (inverse of ``item_dimension``)."""
        if self._dimension[4] != 1:
            raise ShapeError(f"cannot stack items of 5D shape {self}")
        return Shape(n, *self._dimension[:4])

    def as_tuple(self) -> tuple[int, ...]:
        """Significant axes, suitable for ``numpy.reshape``."""
        return self._dimension[: max(self.num_dimensions(), 1)]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shape):
            return NotImplemented
        return self._dimension == other._dimension

    def __hash__(self) -> int:
        return hash(self._dimension)

    def __repr__(self) -> str:
        return f"Shape{self._dimension}"


INVALID_SHAPE = Shape(-1, -1, -1, -1, -1)


# ────────────────────────────────────────────────────────────────────
# Tensor
# ────────────────────────────────────────────────────────────────────
class Tensor:
    """Flat float32 buffer + ``Shape``; owning or borrowed.

    Parameters
    ----------
    shape : Shape | None
        If given, allocate a zero-filled buffer of that shape.
        Otherwise the tensor starts unallocated with ``INVALID_SHAPE``.
    """

    def __init__(self, shape: Shape | None = None) -> None:
        self._shape: Shape = INVALID_SHAPE
        self._data: NDArray = np.zeros(0, dtype=DTYPE)
        self._base: Tensor | None = None
        self._views: weakref.WeakSet | None = None
        if shape is not None:
            self.resize(shape)

    @classmethod
    def from_array(cls, data, shape: Shape | None = None) -> "Tensor":
        """Build an owning tensor holding a float32 copy of ``data``.

        The shape defaults to the array's own shape (at most 5 axes).
        """
        array = np.asarray(data, dtype=DTYPE)
        if shape is None:
            shape = Shape.from_dims(array.shape)
        if array.size != shape.elem_count():
            raise ShapeMismatchError(shape, array.shape, "Tensor.from_array")
        t = cls(shape)
        t._data[:] = array.ravel()
        return t

    # ── shape & buffer ───────────────────────────────────────────
    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def raw_data(self) -> NDArray:
        """Flat, mutable float32 buffer (a view for borrowed tensors)."""
        return self._data

    @property
    def base(self) -> "Tensor | None":
        """Parent tensor for borrowed views, ``None`` for owning tensors."""
        return self._base

    @property
    def is_view(self) -> bool:
        return self._base is not None

    def resize(self, shape: Shape) -> None:
        """Give this tensor ``shape``, reallocating the buffer if needed.

        Owning tensors keep their buffer when the element count is
        unchanged; a new buffer is zero-filled.  Borrowed views only accept
        their current shape.  Reallocating a tensor that still has live
        views raises ``BorrowedViewError``.
        """
        if not shape.is_valid():
            raise ShapeError(f"cannot resize tensor to invalid shape {shape}")
        if self._base is not None:
            if shape != self._shape:
                raise BorrowedViewError(
                    f"cannot resize borrowed view of shape {self._shape} to {shape}"
                )
            return
        if self._data.size != shape.elem_count():
            if self._views:
                raise BorrowedViewError(
                    f"cannot reallocate tensor of shape {self._shape} to {shape} "
                    f"while {len(self._views)} view(s) borrow its buffer"
                )
            self._data = np.zeros(shape.elem_count(), dtype=DTYPE)
        self._shape = shape

    def fill_with(self, x: float) -> None:
        self._data[:] = x

    def to_numpy(self) -> NDArray:
        """Copy of the data shaped by the significant axes."""
        return self._data.reshape(self._shape.as_tuple()).copy()

    # ── sub-indexing along axis 0 ────────────────────────────────
    def __getitem__(self, n: int) -> "Tensor":
        if not self._shape.is_valid():
            raise ShapeError("cannot index an unallocated tensor")
        count = self._shape.batch_size
        if not 0 <= n < count:
            raise IndexError(f"index {n} out of range for axis 0 of size {count}")
        stride = self._shape.item_stride()
        view = Tensor()
        view._shape = self._shape.item_dimension()
        view._data = self._data[n * stride:(n + 1) * stride]
        view._base = self
        if self._views is None:
            self._views = weakref.WeakSet()
        self._views.add(view)
        return view

    def __len__(self) -> int:
        return self._shape.batch_size if self._shape.is_valid() else 0

    def __iter__(self) -> Iterator["Tensor"]:
        for n in range(len(self)):
            yield self[n]

    def __repr__(self) -> str:
        kind = "view" if self.is_view else "owned"
        return f"Tensor({self._shape}, {kind})"


# ────────────────────────────────────────────────────────────────────
# Constructors
# ────────────────────────────────────────────────────────────────────
def tensor_constant(value: float, shape: Shape) -> Tensor:
    t = Tensor(shape)
    t.fill_with(value)
    return t


def tensor_zeros(shape: Shape) -> Tensor:
    return tensor_constant(0.0, shape)


def tensor_ones(shape: Shape) -> Tensor:
    return tensor_constant(1.0, shape)


def tensor_random_uniform(
    shape: Shape,
    rng: np.random.Generator | None = None,
) -> Tensor:
    """Tensor filled with independent draws from U[0, 1)."""
    if rng is None:
        rng = np.random.default_rng()
    t = Tensor(shape)
    t.raw_data[:] = rng.random(shape.elem_count(), dtype=DTYPE)
    return t


# ────────────────────────────────────────────────────────────────────
# Element-wise operations  (equal-shape precondition)
# ────────────────────────────────────────────────────────────────────
def _check_same_shape(dest: Tensor, source: Tensor, op: str) -> None:
    if dest.shape != source.shape:
        raise ShapeMismatchError(dest.shape, source.shape, op)


def tensor_copy(dest: Tensor, source: Tensor) -> None:
    """Copy ``source`` into the already allocated ``dest``."""
    _check_same_shape(dest, source, "tensor_copy")
    dest.raw_data[:] = source.raw_data


def tensor_assign(dest: Tensor, source: Tensor) -> None:
    """Resize ``dest`` to ``source.shape``, then copy."""
    dest.resize(source.shape)
    tensor_copy(dest, source)


def tensor_add(dest: Tensor, source: Tensor) -> None:
    """dest += source"""
    _check_same_shape(dest, source, "tensor_add")
    dest.raw_data[:] += source.raw_data


def tensor_sub(dest: Tensor, source: Tensor) -> None:
    """dest -= source"""
    _check_same_shape(dest, source, "tensor_sub")
    dest.raw_data[:] -= source.raw_data


def axpy(a: float, x: NDArray, y: NDArray) -> None:
    """y += a · x, in place on raw buffers."""
    y += DTYPE(a) * x
