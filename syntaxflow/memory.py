"""
syntaxflow - Storage Tracking
Every node slot and name buffer in a tree is drawn from an Allocator, so
leaks, double releases and storage exhaustion are observable.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)


class SyntaxFlowError(Exception):
    """Base class for all syntaxflow errors."""
    pass


class AllocationError(SyntaxFlowError):
    def __init__(self, kind: str, size: int, capacity: Optional[int] = None):
        message = f"Cannot allocate {kind} of size {size}"
        if capacity is not None:
            message += f" (capacity {capacity} exhausted)"
        super().__init__(f"[AllocationError] {message}")
        self.kind = kind
        self.size = size


class OwnershipError(SyntaxFlowError):
    def __init__(self, message: str):
        super().__init__(f"[OwnershipError] {message}")


@dataclass(frozen=True)
class Allocation:
    """One tracked unit of storage: a node slot or a text buffer."""
    serial: int
    kind: str
    size: int = 1


class Allocator:
    def __init__(self, capacity: Optional[int] = None):
        """
        capacity – maximum number of simultaneously live allocations,
                   None for unlimited
        """
        self.capacity = capacity
        self._live: Dict[int, Allocation] = {}
        self._next_serial = 0
        self.allocated = 0
        self.released = 0

    @property
    def live(self) -> int:
        return len(self._live)

    def allocate(self, kind: str, size: int = 1) -> Allocation:
        if self.capacity is not None and len(self._live) >= self.capacity:
            logger.debug("allocation of %s (size %d) refused: %d/%d live",
                         kind, size, len(self._live), self.capacity)
            raise AllocationError(kind, size, self.capacity)
        self._next_serial += 1
        allocation = Allocation(serial=self._next_serial, kind=kind, size=size)
        self._live[allocation.serial] = allocation
        self.allocated += 1
        return allocation

    def release(self, allocation: Allocation) -> None:
        owned = self._live.get(allocation.serial)
        if owned is not allocation:
            raise OwnershipError(
                f"{allocation.kind} #{allocation.serial} is not live in this allocator"
            )
        del self._live[allocation.serial]
        self.released += 1

    def leaks(self) -> List[Allocation]:
        """Live allocations, oldest first."""
        return sorted(self._live.values(), key=lambda a: a.serial)

    @contextmanager
    def limited(self, capacity: int) -> Iterator["Allocator"]:
        """Temporarily cap the number of live allocations."""
        previous = self.capacity
        self.capacity = capacity
        try:
            yield self
        finally:
            self.capacity = previous


_default = Allocator()


def default_allocator() -> Allocator:
    return _default
