"""
The vector variants.

======================  =========  =============================================
Class                   Owns data  Operations
======================  =========  =============================================
:class:`Vector`         yes        always return new storage (the default type)
:class:`MutVector`      yes        may write in place and may be resized
:class:`VectorSlice`    no         read-only view of another vector
:class:`MutVectorSlice` no         writeable view of fixed length, exclusive
======================  =========  =============================================

All variants support ``+`` (elementwise addition), ``-`` (elementwise
subtraction) and ``*`` (dot product) with each other. When one of the
operands is mutable its storage receives the result, see
:mod:`AdvLinalg.dispatch`.

Example
-------
>>> a = Vector([1, 2, 3])
>>> b = Vector([3, 2, 1])
>>> a + b
Vector([4, 4, 4])
>>> int(a * b)
10
>>> buffer = MutVector([0, 0, 0, 1])
>>> buffer += Vector([0, 0, 1, 0])
>>> buffer
MutVector([0, 0, 1, 1])
"""

from __future__ import annotations

import functools
import weakref
from typing import Any, ClassVar, Iterator, Self

import numpy as np

from . import config, dispatch
from ._typing import Elements
from .conversion import copy_elements, into_owned
from .dispatch import Kind, Operator
from .exceptions import BorrowConflict
from .storage import Region
from .transforms import Combine, CombineMut, Map, MapMut
from .util import as_elements, check_index, check_range, range_from_slice, zero_of


@functools.total_ordering
class VectorType(Map, Combine):
    """Operations shared by every variant."""

    kind: ClassVar[Kind]
    _region: Region

    __hash__ = None

    def _read(self) -> Elements:
        return self._region.read()

    def __len__(self) -> int:
        return self._region.length()

    def __iter__(self) -> Iterator[Any]:
        return iter(self._read())

    def __getitem__(self, key: int | slice) -> Any:
        if isinstance(key, slice):
            return self.slice(*range_from_slice(key, len(self)))
        values = self._read()
        return values[check_index(key, len(values))]

    def slice(self, start: int = 0, stop: int | None = None) -> VectorSlice:
        """Read-only view of ``[start, stop)``, without copying."""
        start, stop = check_range(start, stop, len(self))
        return VectorSlice._borrowed(self._region.borrow(start, stop, exclusive=False))

    @property
    def dtype(self) -> np.dtype:
        return self._read().dtype

    def tolist(self) -> list[Any]:
        return self._read().tolist()

    def to_numpy(self) -> Elements:
        """A copy of the elements."""
        return np.array(self._read())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VectorType):
            return NotImplemented
        return bool(np.array_equal(self._read(), other._read()))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, VectorType):
            return NotImplemented
        return self.tolist() < other.tolist()

    def __repr__(self):
        if not self._region.alive or self._region.buffer.moved:
            return f"<{type(self).__name__} (released)>"
        try:
            values = self.tolist()
        except BorrowConflict:
            return f"<{type(self).__name__} (mutably borrowed)>"
        return f"{type(self).__name__}({values!r})"

    def __add__(self, other: Any) -> Any:
        return dispatch.apply(Operator.ADD, self, other)

    def __sub__(self, other: Any) -> Any:
        return dispatch.apply(Operator.SUB, self, other)

    def __mul__(self, other: Any) -> Any:
        return dispatch.apply(Operator.DOT, self, other)

    def add(self, other: VectorType) -> Any:
        """Elementwise sum, see `AdvLinalg.dispatch.add`."""
        return dispatch.add(self, other)

    def sub(self, other: VectorType) -> Any:
        """Elementwise difference, see `AdvLinalg.dispatch.sub`."""
        return dispatch.sub(self, other)

    def dot(self, other: VectorType) -> Any:
        """Dot product, see `AdvLinalg.dispatch.dot`."""
        return dispatch.dot(self, other)


class MutVectorType(VectorType, MapMut, CombineMut):
    """Operations of the variants that can be written in place."""

    def _write(self) -> Elements:
        return self._region.write()

    def __setitem__(self, index: int, value: Any) -> None:
        out = self._write()
        out[check_index(index, len(out))] = value

    def slice_mut(self, start: int = 0, stop: int | None = None) -> MutVectorSlice:
        """Exclusive writeable view of ``[start, stop)``.

        While the view is alive, this vector cannot be written, and it can
        only be read outside of the view's range.
        """
        start, stop = check_range(start, stop, len(self))
        return MutVectorSlice._borrowed(self._region.borrow(start, stop, exclusive=True))


class _Owned(VectorType):
    def __init__(self, values: Any = ()):
        config.require_allocation(f"Creating a {type(self).__name__}")
        self._region = Region.owner(into_owned(values, self.kind.mutable), self.kind.mutable)

    @classmethod
    def _from_array(cls, values: Elements) -> Self:
        obj = cls.__new__(cls)
        obj._region = Region.owner(values, cls.kind.mutable)
        return obj

    def copy(self) -> Self:
        """A new vector with a duplicate of every element."""
        config.require_allocation("copy")
        return type(self)._from_array(np.array(self._read()))


class _Borrowed(VectorType):
    _finalizer: weakref.finalize

    def __init__(self, values: Any):
        exclusive = self.kind.mutable
        if isinstance(values, VectorType):
            region = values._region
        else:
            region = Region.owner(as_elements(values, writeable=exclusive), exclusive)
        self._bind(region.borrow(0, len(region), exclusive))

    @classmethod
    def _borrowed(cls, region: Region) -> Self:
        obj = cls.__new__(cls)
        obj._bind(region)
        return obj

    def _bind(self, region: Region) -> None:
        self._region = region
        self._finalizer = weakref.finalize(self, region.release)

    def release(self) -> None:
        """End the lifetime of this view."""
        self._finalizer()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.release()

    def to_vector(self) -> Vector:
        """Copy the viewed elements into a new `Vector`."""
        config.require_allocation("to_vector")
        return Vector._from_array(copy_elements(self._read()))


class Vector(_Owned):
    """The basic vector type.

    Every operation on a `Vector` returns new storage. `Vector` is also the
    result of `map` and `combine` on any variant.

    Parameters
    ----------
    values: iterable, numpy array or vector, optional
        Elements. Owned vectors are moved, borrowed views are copied.
    """

    kind = Kind.OWNED


class MutVector(_Owned, MutVectorType):
    """An owned vector that can be written in place.

    Arithmetic with a `MutVector` writes the result into its storage
    instead of allocating, which avoids reallocations in repeated
    operations:

    >>> buffer = MutVector(Vector([0, 0, 0, 1]) + Vector([0, 0, 1, 0]))
    >>> _ = buffer + Vector([0, 1, 0, 0]) + Vector([1, 0, 0, 0])
    >>> buffer
    MutVector([1, 1, 1, 1])
    """

    kind = Kind.MUT_OWNED

    def resize(self, length: int, fill: Any = None) -> Self:
        """Change the number of elements.

        Existing elements are kept, new positions are set to ``fill``
        (the zero of the element type if not given).
        """
        if length < 0:
            raise ValueError(f"Length must be non negative, got {length}")
        old = self._read()
        new = np.empty(length, dtype=old.dtype)
        kept = min(length, len(old))
        new[:kept] = old[:kept]
        new[kept:] = zero_of(old) if fill is None else fill
        self._region.resize(new)
        return self

    def assign(self, values: Any) -> Self:
        """Replace the content, possibly changing the length."""
        if values is self:
            return self
        self._region.check_unborrowed("reallocate")
        self._region.resize(into_owned(values, mutable=True))
        return self


class VectorSlice(_Borrowed):
    """A read-only view of (part of) another vector.

    >>> v = Vector([1, 2, 3, 4])
    >>> v.slice(2, 4)
    VectorSlice([3, 4])

    Parameters
    ----------
    values: vector, numpy array or sequence
        Vectors are reborrowed. Arrays are viewed without copying, but
        writes made to them elsewhere are not tracked.
    """

    kind = Kind.BORROWED


class MutVectorSlice(_Borrowed, MutVectorType):
    """An exclusive, writeable view of fixed length.

    No other view of the same elements can be created while this one is
    alive. Release it (or use it as a context manager) to regain access
    through the vector it was taken from.
    """

    kind = Kind.MUT_BORROWED
