"""
Conversions into owned storage.

- A plain sequence or numpy array is taken over: arrays that already are
  one dimensional and contiguous are not copied.
- An owned vector is moved: its storage changes hands and the source can
  no longer be used.
- A borrowed view is copied, unless the ``moves_only`` switch is set, in
  which case the conversion is not available.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from . import config
from ._typing import Elements
from .dispatch import Kind
from .exceptions import FeatureUnavailable
from .util import as_elements

logger = logging.getLogger(__name__)


def _make_writeable(data: Elements) -> Elements:
    try:
        data.flags.writeable = True
    except ValueError:
        logger.debug("Storage of %d elements is read-only, copying it", len(data))
        return data.copy()
    return data


def copy_elements(values: Elements) -> Elements:
    """Duplicate every element into new storage."""
    if config.CONFIG.moves_only:
        raise FeatureUnavailable(
            "Copying a borrowed view into an owned vector is disabled (moves_only)"
        )
    logger.debug("Copying %d elements", len(values))
    return np.array(values)


def into_owned(source: Any, mutable: bool) -> Elements:
    """Storage for a new owned vector built from ``source``.

    Parameters
    ----------
    source: vector, numpy array or iterable
        Elements of the new vector.
    mutable: bool
        If True, the returned storage is writeable.
    """

    kind = getattr(source, "kind", None)
    if not isinstance(kind, Kind):
        return as_elements(source, writeable=mutable)

    if kind.owned:
        data = source._region.take()
        return _make_writeable(data) if mutable else data

    return copy_elements(source._read())
