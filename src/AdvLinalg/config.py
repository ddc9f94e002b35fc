"""
Build configuration.

The switches are read once, when the package is imported, from the
environment:

- ``ADVLINALG_FEATURES``: ``full`` (default) or ``no_alloc``.
  ``no_alloc`` keeps only the two borrowed variants and every operation
  that does not need fresh storage.
- ``ADVLINALG_MOVES_ONLY``: when true, conversions that would copy a
  borrowed view into an owned vector are removed.
"""

from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass
from typing import Mapping

from .exceptions import FeatureUnavailable

logger = logging.getLogger(__name__)

FEATURES_VAR = "ADVLINALG_FEATURES"
MOVES_ONLY_VAR = "ADVLINALG_MOVES_ONLY"

_TRUE = frozenset(("1", "true", "yes", "on"))
_FALSE = frozenset(("", "0", "false", "no", "off"))


class FeatureSet(enum.Enum):
    FULL = "full"
    NO_ALLOC = "no_alloc"

    @property
    def allocates(self) -> bool:
        return self is FeatureSet.FULL


@dataclass(frozen=True)
class Config:
    """Feature switches of the library.

    Parameters
    ----------
    features: FeatureSet
        Which variants and operations are available.
    moves_only: bool
        If True, borrowed views cannot be converted (copied) into owned vectors.
    """

    features: FeatureSet = FeatureSet.FULL
    moves_only: bool = False


def _parse_flag(name: str, value: str) -> bool:
    value = value.strip().lower()
    if value in _TRUE:
        return True
    elif value in _FALSE:
        return False
    else:
        raise ValueError(f"{name} must be a boolean flag, got {value!r}")


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """Read the build configuration from the environment."""

    if environ is None:
        environ = os.environ

    raw = environ.get(FEATURES_VAR, FeatureSet.FULL.value).strip().lower()
    try:
        features = FeatureSet(raw)
    except ValueError:
        valid = tuple(f.value for f in FeatureSet)
        raise ValueError(f"{FEATURES_VAR} must be one of {valid}, got {raw!r}") from None

    moves_only = _parse_flag(MOVES_ONLY_VAR, environ.get(MOVES_ONLY_VAR, ""))

    return Config(features=features, moves_only=moves_only)


CONFIG = load_config()
logger.debug("Loaded configuration %s", CONFIG)


def require_allocation(operation: str) -> None:
    """Fail if the configured feature set cannot allocate new storage."""
    if not CONFIG.features.allocates:
        raise FeatureUnavailable(
            f"{operation} allocates new storage, which is unavailable in the "
            f"{CONFIG.features.value!r} feature set"
        )
