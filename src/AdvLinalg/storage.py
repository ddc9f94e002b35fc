"""
Backing storage of vectors and runtime tracking of the views over it.

A :class:`Buffer` owns a one dimensional numpy array. The owner of the
buffer and every view handed out over it are :class:`Region` objects,
arranged as a tree: the owner's region is the root and each view is a
child of the region it was taken from. Any number of shared regions may
overlap, while an exclusive region must be the only live accessor of its
elements; this is checked whenever a region is created or used and a
violation raises :class:`~AdvLinalg.exceptions.BorrowConflict`.
"""

from __future__ import annotations

import logging
from typing import Iterator

from ._typing import Elements
from .exceptions import BorrowConflict, MovedValueError

logger = logging.getLogger(__name__)


class Buffer:
    """Contiguous storage plus the regions currently borrowed from it."""

    __slots__ = ("data", "borrows", "moved", "__weakref__")

    def __init__(self, data: Elements, writeable: bool):
        if writeable:
            self.data = data
        else:
            self.data = data.view()
            self.data.flags.writeable = False
        self.borrows: list[Region] = []
        self.moved = False
        logger.debug("Buffer of %d %s elements", len(data), data.dtype)

    def __len__(self) -> int:
        return len(self.data)

    def reallocate(self, data: Elements) -> None:
        logger.debug("Reallocating buffer from %d to %d elements", len(self.data), len(data))
        self.data = data


class Region:
    """A half-open range ``[start, stop)`` of a buffer.

    Parameters
    ----------
    buffer: Buffer
        Storage the region refers to.
    start, stop: int
        Bounds in buffer coordinates.
    exclusive: bool
        If True, the region may write its elements and no other
        region may access them while it is alive.
    parent: Region, optional
        Region this one was borrowed from. None for the owner.
    """

    __slots__ = ("buffer", "start", "stop", "exclusive", "parent", "alive", "__weakref__")

    def __init__(
        self,
        buffer: Buffer,
        start: int,
        stop: int,
        exclusive: bool,
        parent: Region | None = None,
    ):
        self.buffer = buffer
        self.start = start
        self.stop = stop
        self.exclusive = exclusive
        self.parent = parent
        self.alive = True

    @classmethod
    def owner(cls, data: Elements, exclusive: bool) -> Region:
        """The root region of a new buffer."""
        return cls(Buffer(data, writeable=exclusive), 0, len(data), exclusive)

    def __len__(self) -> int:
        return self.stop - self.start

    def length(self) -> int:
        self._check_alive()
        return len(self)

    def __repr__(self):
        kind = "exclusive" if self.exclusive else "shared"
        state = "" if self.alive else ", released"
        return f"<Region [{self.start}, {self.stop}) {kind}{state}>"

    @property
    def is_owner(self) -> bool:
        return self.parent is None

    def ancestors(self) -> Iterator[Region]:
        region = self.parent
        while region is not None:
            yield region
            region = region.parent

    def descends_from(self, other: Region) -> bool:
        return any(region is other for region in self.ancestors())

    def overlaps(self, other: Region) -> bool:
        return (
            self.buffer is other.buffer
            and len(self) > 0
            and len(other) > 0
            and self.start < other.stop
            and other.start < self.stop
        )

    def descendants(self) -> Iterator[Region]:
        for region in self.buffer.borrows:
            if region.descends_from(self):
                yield region

    def _check_alive(self) -> None:
        if self.buffer.moved:
            raise MovedValueError("The storage of this vector has been moved")
        if not self.alive:
            raise BorrowConflict(f"{self!r} has been released")

    def borrow(self, start: int, stop: int, exclusive: bool) -> Region:
        """Borrow ``[start, stop)``, relative to this region, as a new view."""
        self._check_alive()
        if exclusive and not self.exclusive:
            raise BorrowConflict("Cannot borrow mutably from a read-only vector")

        child = Region(self.buffer, self.start + start, self.start + stop, exclusive, self)
        for other in self.buffer.borrows:
            if other is self or child.descends_from(other):
                continue
            if (exclusive or other.exclusive) and child.overlaps(other):
                logger.debug("Borrow of %r conflicts with live %r", child, other)
                raise BorrowConflict(
                    f"Cannot borrow [{child.start}, {child.stop}) "
                    f"{'mutably' if exclusive else 'immutably'}: "
                    f"it overlaps the live {'mutable' if other.exclusive else 'immutable'} "
                    f"view [{other.start}, {other.stop})"
                )

        self.buffer.borrows.append(child)
        logger.debug("Borrowed %r", child)
        return child

    def release(self) -> None:
        """End the lifetime of this view, and of every view taken from it."""
        if not self.alive or self.is_owner:
            return
        for region in list(self.descendants()):
            region.alive = False
            self.buffer.borrows.remove(region)
        self.alive = False
        self.buffer.borrows.remove(self)
        logger.debug("Released %r", self)

    def check_read(self) -> None:
        self._check_alive()
        for region in self.descendants():
            if region.exclusive and region.overlaps(self):
                raise BorrowConflict(
                    f"Cannot read while the mutable view [{region.start}, {region.stop}) is alive"
                )

    def check_write(self) -> None:
        self._check_alive()
        if not self.exclusive:
            raise BorrowConflict("Cannot write through a read-only vector")
        for region in self.descendants():
            if region.overlaps(self):
                raise BorrowConflict(
                    f"Cannot write while the view [{region.start}, {region.stop}) is alive"
                )

    def check_unborrowed(self, action: str) -> None:
        """Fail unless the owner has no live view at all."""
        self._check_alive()
        if self.buffer.borrows:
            raise BorrowConflict(
                f"Cannot {action} while {len(self.buffer.borrows)} view(s) are alive"
            )

    def read(self) -> Elements:
        """Read-only array over the region's elements."""
        self.check_read()
        view = self.buffer.data[self.start : self.stop]
        view.flags.writeable = False
        return view

    def write(self) -> Elements:
        """Writeable array over the region's elements."""
        self.check_write()
        return self.buffer.data[self.start : self.stop]

    def resize(self, data: Elements) -> None:
        """Replace the owner's storage."""
        self.check_unborrowed("reallocate")
        self.buffer.reallocate(data)
        self.stop = len(data)

    def take(self) -> Elements:
        """Move the storage out of this owner."""
        self.check_unborrowed("move")
        self.buffer.moved = True
        logger.debug("Moved %d elements out of %r", len(self), self)
        return self.buffer.data
