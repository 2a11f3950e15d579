"""Physical memory manager combining the buddy and slab allocators."""

from __future__ import annotations

import os

from .buddy import BuddyAllocator
from .pages import MAXSIZE, PGSIZE, AllocationError, PageKind, PageTable, mem_request2_size
from .slab import MINSIZE, SlabAllocator

HEAP_START = MAXSIZE
HEAP_SIZE = 128 << 20


class PhysicalMemory:
    """A simulated heap: page-sized requests go to the buddy system, smaller ones to slabs."""

    def __init__(self, heap_size: int = HEAP_SIZE, cpu_count: int | None = None) -> None:
        if heap_size <= 0:
            raise ValueError("heap size must be positive")
        if cpu_count is None:
            cpu_count = os.cpu_count() or 1
        self.heap_start = HEAP_START
        self.heap_end = HEAP_START + heap_size
        self.pages = PageTable(self.heap_start, -(-heap_size // PGSIZE))
        self.buddy = BuddyAllocator(self.pages, self.heap_start, self.heap_end)
        self.slab = SlabAllocator(self.buddy, self.pages, cpu_count)

    @property
    def cpu_count(self) -> int:
        return self.slab.cpu_count

    def alloc(self, size: int, cpu: int = 0) -> int:
        """Allocate at least ``size`` bytes and return the address."""
        actual = max(mem_request2_size(size), MINSIZE)
        if actual >= PGSIZE:
            return self.buddy.alloc(actual)
        return self.slab.alloc(actual, cpu)

    def free(self, address: int, cpu: int = 0) -> None:
        """Release memory previously returned by :meth:`alloc`."""
        if address not in self.pages:
            raise AllocationError(f"address {address!r} is not in the heap")
        if self.pages.get(address).kind is PageKind.SLAB:
            self.slab.free(address, cpu)
        else:
            self.buddy.free(address)