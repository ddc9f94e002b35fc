"""
Exceptions raised by AdvLinalg.

Every error is fatal to the call that raised it: nothing is retried and
no partial result is returned.
"""

from __future__ import annotations


class AdvLinalgError(Exception):
    """Base class for all library errors."""


class SizeMismatch(AdvLinalgError, ValueError):
    """Operands of a pairwise operation have different lengths."""

    def __init__(self, lhs_len: int, rhs_len: int, operation: str = "combine"):
        self.lhs_len = lhs_len
        self.rhs_len = rhs_len
        self.operation = operation
        super().__init__(
            f"Cannot {operation} vectors of different lengths ({lhs_len} vs {rhs_len})"
        )


class IndexOutOfRange(AdvLinalgError, IndexError):
    """Element access or slicing outside of ``[0, len)``."""


class BorrowConflict(AdvLinalgError, RuntimeError):
    """A view was created or used while a conflicting view is alive."""


class MovedValueError(BorrowConflict):
    """The storage of an owned vector was moved into another vector."""


class FeatureUnavailable(AdvLinalgError, TypeError):
    """The operation is not part of the configured feature set."""
