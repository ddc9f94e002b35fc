"""
AdvLinalg
~~~~~~~~~

Vector arithmetic over owned and borrowed, mutable and immutable vectors.


"""

import logging

from . import config, dispatch
from .config import CONFIG, FeatureSet
from .construct import full, vector
from .exceptions import (
    AdvLinalgError,
    BorrowConflict,
    FeatureUnavailable,
    IndexOutOfRange,
    MovedValueError,
    SizeMismatch,
)
from .vectors import MutVector, MutVectorSlice, Vector, VectorSlice

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "config",
    "dispatch",
    "vector",
    "full",
    "VectorSlice",
    "MutVectorSlice",
    "AdvLinalgError",
    "BorrowConflict",
    "FeatureUnavailable",
    "IndexOutOfRange",
    "MovedValueError",
    "SizeMismatch",
]

if CONFIG.features is FeatureSet.FULL:
    __all__ += ["Vector", "MutVector"]
