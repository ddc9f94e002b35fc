"""
Arithmetic between any two vector variants.

Every operator is resolved through a table keyed by
``(operator, left kind, right kind)``. The entry tells which operand, if
any, receives the result:

- ``Reuse.NONE``: neither operand is mutable, the result is a new `Vector`.
- ``Reuse.LEFT``: the left operand is mutable, the result is written into
  it and the left operand itself is returned. This also applies when
  both operands are mutable.
- ``Reuse.RIGHT``: only the right operand is mutable, the result is
  written into it and the right operand itself is returned.

The dot product always evaluates to a scalar and never writes to either
operand, whatever the table says.
"""

from __future__ import annotations

import enum
import functools
import itertools
import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, TypeAlias

import numpy as np

from . import config
from .config import FeatureSet
from .transforms import check_no_alias, check_same_length, combine_into, combine_values, new_vector
from .util import zero_of

if TYPE_CHECKING:
    from ._typing import Elements
    from .vectors import VectorType

logger = logging.getLogger(__name__)


class Kind(enum.Enum):
    """Ownership and mutability of a vector variant."""

    OWNED = (True, False)
    MUT_OWNED = (True, True)
    BORROWED = (False, False)
    MUT_BORROWED = (False, True)

    @property
    def owned(self) -> bool:
        return self.value[0]

    @property
    def mutable(self) -> bool:
        return self.value[1]


class Operator(enum.Enum):
    ADD = "add"
    SUB = "subtract"
    DOT = "take the dot product of"

    @property
    def ufunc(self) -> np.ufunc:
        return _UFUNCS[self]


_UFUNCS = {Operator.ADD: np.add, Operator.SUB: np.subtract, Operator.DOT: np.multiply}


class Reuse(enum.Enum):
    NONE = "none"
    LEFT = "left"
    RIGHT = "right"


DispatchTable: TypeAlias = Mapping[tuple[Operator, Kind, Kind], Reuse]


def select_reuse(lhs: Kind, rhs: Kind) -> Reuse:
    """Which operand supplies the output storage, left preferred."""
    if lhs.mutable:
        return Reuse.LEFT
    elif rhs.mutable:
        return Reuse.RIGHT
    else:
        return Reuse.NONE


@functools.cache
def dispatch_table(features: FeatureSet) -> DispatchTable:
    """All supported operand pairings for a feature set.

    The full feature set supports every pairing of the four variants. The
    ``no_alloc`` feature set only has borrowed variants and, as nothing can
    be allocated, only the pairings where the left operand is mutable.
    """
    table = {}
    for op, lhs, rhs in itertools.product(Operator, Kind, Kind):
        if features is FeatureSet.NO_ALLOC and (lhs.owned or rhs.owned or not lhs.mutable):
            continue
        table[op, lhs, rhs] = select_reuse(lhs, rhs)
    return MappingProxyType(table)


def dot_product(lhs: Elements, rhs: Elements) -> Any:
    """Sum of pairwise products, folded from the element type's zero."""
    check_same_length(lhs, rhs, Operator.DOT.value)
    total = zero_of(lhs)
    for left, right in zip(lhs, rhs):
        total = total + left * right
    return total


def apply(op: Operator, lhs: VectorType, rhs: Any) -> Any:
    """Evaluate ``lhs op rhs``.

    Returns NotImplemented when the pairing is not supported, so that the
    Python operators raise TypeError.
    """
    rhs_kind = getattr(rhs, "kind", None)
    if not isinstance(rhs_kind, Kind):
        return NotImplemented

    reuse = dispatch_table(config.CONFIG.features).get((op, lhs.kind, rhs_kind))
    if reuse is None:
        return NotImplemented
    logger.debug("%s %s with %s: reuse %s", op.name, lhs.kind.name, rhs_kind.name, reuse.name)

    if op is Operator.DOT:
        return dot_product(lhs._read(), rhs._read())

    if reuse is Reuse.NONE:
        return new_vector(combine_values(lhs._read(), rhs._read(), op.ufunc, op.value))

    target, source = (lhs, rhs) if reuse is Reuse.LEFT else (rhs, lhs)
    check_no_alias(target, source)
    source_values = source._read()
    check_same_length(target._read(), source_values, op.value)
    out = target._write()
    if reuse is Reuse.LEFT:
        combine_into(out, out, source_values, op.ufunc, op.value)
    else:
        combine_into(out, source_values, out, op.ufunc, op.value)
    return target


def _named(op: Operator, lhs: VectorType, rhs: VectorType) -> Any:
    result = apply(op, lhs, rhs)
    if result is NotImplemented:
        raise TypeError(
            f"Cannot {op.value} {type(lhs).__name__} and {type(rhs).__name__} "
            f"in the {config.CONFIG.features.value!r} feature set"
        )
    return result


def add(lhs: VectorType, rhs: VectorType) -> Any:
    """Elementwise ``lhs[i] + rhs[i]``."""
    return _named(Operator.ADD, lhs, rhs)


def sub(lhs: VectorType, rhs: VectorType) -> Any:
    """Elementwise ``lhs[i] - rhs[i]``."""
    return _named(Operator.SUB, lhs, rhs)


def dot(lhs: VectorType, rhs: VectorType) -> Any:
    """Dot product of two vectors of the same length."""
    return _named(Operator.DOT, lhs, rhs)
