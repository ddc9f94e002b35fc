"""
Elementwise (map) and pairwise (combine) transformations.

The capabilities are mixins shared by the vector variants. They only rely
on ``_read()``, which returns the elements as a read-only array, and, for
the in-place variants, on ``_write()``, which returns the same elements
as a writeable array.

A transformation given as a numpy ufunc is evaluated in a single
vectorised call. Any other callable is applied once per element, in
ascending index order. In-place transformations compute every result
before the first element is overwritten, so a call that fails leaves
its target untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Self

import numpy as np

from . import config
from ._typing import BinaryFunc, Elements, UnaryFunc
from .exceptions import BorrowConflict, SizeMismatch
from .util import as_elements, from_results

if TYPE_CHECKING:
    from .vectors import MutVectorType, Vector, VectorType


def new_vector(values: Elements) -> Vector:
    """Wrap freshly allocated values in an owned, immutable vector."""
    from .vectors import Vector

    return Vector._from_array(values)


def check_same_length(lhs: Elements, rhs: Elements, operation: str = "combine") -> None:
    if len(lhs) != len(rhs):
        raise SizeMismatch(len(lhs), len(rhs), operation)


def check_no_alias(target: MutVectorType, source: VectorType) -> None:
    """The target of an in-place operation cannot also be read as the source."""
    if target._region.overlaps(source._region):
        raise BorrowConflict(
            "Cannot write into a vector while reading an overlapping view of it"
        )


def commit(out: Elements, results: list[Any]) -> None:
    """Write every result into ``out`` at once, or nothing if one cannot be cast."""
    if not results:
        return
    np.copyto(out, from_results(results, like=out), casting="same_kind")


def _is_ufunc(f: Any) -> bool:
    if not isinstance(f, np.ufunc):
        return False
    if f.nout != 1:
        raise ValueError(f"Transformations must have a single output, {f.__name__} has {f.nout}")
    return True


def map_values(values: Elements, f: UnaryFunc) -> Elements:
    if _is_ufunc(f):
        return as_elements(f(values))
    return from_results([f(value) for value in values], like=values)


def combine_values(
    lhs: Elements, rhs: Elements, f: BinaryFunc, operation: str = "combine"
) -> Elements:
    """Pairwise results of ``f(lhs[i], rhs[i])`` in new storage."""
    check_same_length(lhs, rhs, operation)
    if _is_ufunc(f):
        return as_elements(f(lhs, rhs))
    return from_results([f(left, right) for left, right in zip(lhs, rhs)], like=lhs)


def combine_into(
    out: Elements, lhs: Elements, rhs: Elements, f: BinaryFunc, operation: str = "combine"
) -> None:
    """Write ``f(lhs[i], rhs[i])`` into ``out``, which is either ``lhs`` or ``rhs``."""
    check_same_length(lhs, rhs, operation)
    if _is_ufunc(f):
        f(lhs, rhs, out=out)
    else:
        commit(out, [f(left, right) for left, right in zip(lhs, rhs)])


def _values_of(other: Any) -> Elements:
    try:
        read = other._read
    except AttributeError:
        raise TypeError(
            f"Can only combine with another vector, not {type(other).__name__}"
        ) from None
    return read()


class Map:
    """Read-only elementwise transformations, always into a new vector."""

    def map(self, f: UnaryFunc) -> Vector:
        """Apply ``f`` to every element.

        Parameters
        ----------
        f: callable or numpy ufunc
            Function of the element value. Its return type may differ from
            the element type.

        Returns
        -------
        Vector
            A new vector of the same length.
        """
        config.require_allocation("map")
        return new_vector(map_values(self._read(), f))

    def map_index(self, f: Callable[[int], Any]) -> Vector:
        """Build a new vector from ``f(index)`` for every position."""
        config.require_allocation("map_index")
        values = self._read()
        return new_vector(from_results([f(ndx) for ndx in range(len(values))], like=values))

    def map_enumerate(self, f: Callable[[int, Any], Any]) -> Vector:
        """Build a new vector from ``f(index, value)`` for every element."""
        config.require_allocation("map_enumerate")
        values = self._read()
        return new_vector(
            from_results([f(ndx, value) for ndx, value in enumerate(values)], like=values)
        )


class Combine:
    """Read-only pairwise transformations, always into a new vector."""

    def combine(self, other: VectorType, f: BinaryFunc) -> Vector:
        """Combine two vectors of the same length pairwise by index.

        Parameters
        ----------
        other: any vector variant
            Right hand side values. Its ownership and mutability do not
            matter, it is only read.
        f: callable or numpy ufunc
            Function of ``(lhs_value, rhs_value)``.

        Returns
        -------
        Vector
            A new vector with ``f(self[i], other[i])``.

        Raises
        ------
        SizeMismatch
            If the lengths differ.
        """
        config.require_allocation("combine")
        return new_vector(combine_values(self._read(), _values_of(other), f))

    def combine_enumerate(self, other: VectorType, f: Callable[[int, Any, Any], Any]) -> Vector:
        """Like `combine`, with ``f(index, lhs_value, rhs_value)``."""
        config.require_allocation("combine_enumerate")
        lhs, rhs = self._read(), _values_of(other)
        check_same_length(lhs, rhs)
        return new_vector(
            from_results(
                [f(ndx, left, right) for ndx, (left, right) in enumerate(zip(lhs, rhs))],
                like=lhs,
            )
        )


class MapMut:
    """Elementwise transformations that overwrite the vector in place."""

    def map_mut(self, f: UnaryFunc) -> Self:
        """Replace every element by ``f(element)`` and return this same vector."""
        out = self._write()
        if _is_ufunc(f):
            f(out, out=out)
        else:
            commit(out, [f(value) for value in out])
        return self

    def map_index_mut(self, f: Callable[[int], Any]) -> Self:
        """Replace every element by ``f(index)``."""
        out = self._write()
        commit(out, [f(ndx) for ndx in range(len(out))])
        return self

    def map_enumerate_mut(self, f: Callable[[int, Any], Any]) -> Self:
        """Replace every element by ``f(index, element)``."""
        out = self._write()
        commit(out, [f(ndx, value) for ndx, value in enumerate(out)])
        return self


class CombineMut:
    """Pairwise transformations that overwrite the vector in place."""

    def combine_mut(self, other: VectorType, f: BinaryFunc) -> Self:
        """Replace ``self[i]`` by ``f(self[i], other[i])`` and return this same vector.

        The length is never changed. On a size mismatch nothing is written.
        """
        rhs = _values_of(other)
        check_no_alias(self, other)
        out = self._write()
        combine_into(out, out, rhs, f)
        return self

    def combine_enumerate_mut(
        self, other: VectorType, f: Callable[[int, Any, Any], Any]
    ) -> Self:
        """Like `combine_mut`, with ``f(index, lhs_value, rhs_value)``."""
        rhs = _values_of(other)
        check_no_alias(self, other)
        out = self._write()
        check_same_length(out, rhs)
        commit(out, [f(ndx, left, right) for ndx, (left, right) in enumerate(zip(out, rhs))])
        return self
