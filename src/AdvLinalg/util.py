"""
Useful general functions.
"""

from __future__ import annotations

from collections import abc
from typing import Any

import numpy as np

from ._typing import Elements
from .exceptions import IndexOutOfRange


def as_elements(values: Any, writeable: bool = False) -> Elements:
    """Turn a sequence of elements into one dimensional contiguous storage.

    Arrays that already satisfy the storage requirements are used as they
    are, anything else is converted. Text dtypes and sequences of nested
    elements (tuples, lists, ...) are stored with ``dtype=object`` so that
    every element keeps its Python value.

    Parameters
    ----------
    values: numpy array or iterable
        Elements, in order.
    writeable: bool, optional (default=False)
        If True, the returned array can be written in place.
    """

    if isinstance(values, np.ndarray):
        if values.ndim != 1:
            raise ValueError(
                f"Vectors are one dimensional, got an array with shape {values.shape}"
            )
        if values.dtype.kind in "US":
            values = values.astype(object)
        requirements = ["C", "W"] if writeable else ["C"]
        return np.require(values, requirements=requirements)

    if not isinstance(values, abc.Sequence):
        values = list(values)

    try:
        arr = np.asarray(values) if len(values) else np.asarray(values, dtype=np.float64)
    except ValueError:
        arr = None
    if arr is None or arr.ndim != 1 or arr.dtype.kind in "US":
        arr = np.empty(len(values), dtype=object)
        for ndx, value in enumerate(values):
            arr[ndx] = value
    return arr


def from_results(results: list[Any], like: Elements | None = None) -> Elements:
    """Storage for values produced by a transformation."""
    if like is not None and like.dtype == object:
        arr = np.empty(len(results), dtype=object)
        for ndx, value in enumerate(results):
            arr[ndx] = value
        return arr
    return as_elements(results)


def zero_of(elements: Elements) -> Any:
    """The zero (default) value of the element type."""
    return np.zeros((), dtype=elements.dtype)[()]


def check_index(index: Any, length: int) -> int:
    """Validate a position, without wrap-around of negative values."""
    if isinstance(index, (bool, np.bool_)) or not isinstance(index, (int, np.integer)):
        raise TypeError(f"Vector indices must be integers, not {type(index).__name__}")
    if not 0 <= index < length:
        raise IndexOutOfRange(f"Index {index} out of range for vector of length {length}")
    return int(index)


def check_range(start: int, stop: int | None, length: int) -> tuple[int, int]:
    """Validate a half-open range ``[start, stop)``."""
    if stop is None:
        stop = length
    if not 0 <= start <= stop <= length:
        raise IndexOutOfRange(
            f"Range [{start}, {stop}) out of bounds for vector of length {length}"
        )
    return int(start), int(stop)


def range_from_slice(key: slice, length: int) -> tuple[int, int]:
    if key.step not in (None, 1):
        raise ValueError(f"Vector slices must be contiguous, got step {key.step}")
    start = 0 if key.start is None else key.start
    return check_range(start, key.stop, length)
