"""
Literal construction of vectors.

>>> vector(1, 2, 3)
Vector([1, 2, 3])
>>> full(0, 3)
Vector([0, 0, 0])

In the ``no_alloc`` feature set both functions build a `VectorSlice`
instead.
"""

from __future__ import annotations

from typing import Any

from . import config
from .util import as_elements
from .vectors import Vector, VectorSlice


def _literal(values: list[Any]) -> Vector | VectorSlice:
    if config.CONFIG.features.allocates:
        return Vector._from_array(as_elements(values))
    return VectorSlice(as_elements(values))


def vector(*values: Any) -> Vector | VectorSlice:
    """A vector holding the given elements, in order."""
    return _literal(list(values))


def full(value: Any, n: int) -> Vector | VectorSlice:
    """A vector holding ``value`` repeated ``n`` times."""
    if n < 0:
        raise ValueError(f"Cannot repeat an element {n} times")
    return _literal([value] * n)
