"""Per-CPU slab allocator for objects smaller than a page."""

from __future__ import annotations

import threading

from .buddy import BuddyAllocator
from .pages import PGSIZE, AllocationError, PageKind, PageTable, log_n, mem_request2_size

MINSIZE = 64


class SlabAllocator:
    """Carves whole pages taken from a buddy allocator into equal power-of-two chunks.

    Each CPU keeps one free list per chunk order.  A request is served from the
    requesting CPU's list first and then from the other CPUs' lists in turn;
    only when every list is empty is a fresh page taken from the buddy allocator.
    """

    def __init__(self, buddy: BuddyAllocator, pages: PageTable, cpu_count: int) -> None:
        if cpu_count < 1:
            raise ValueError("cpu count must be at least 1")
        self.buddy = buddy
        self.pages = pages
        self.cpu_count = cpu_count
        self.orders = log_n(PGSIZE)
        # Free lists are stacks: the most recently inserted chunk is handed out first.
        self._free: list[list[list[int]]] = [
            [[] for _ in range(self.orders)] for _ in range(cpu_count)
        ]
        self._allocated: set[int] = set()
        self._lock = threading.Lock()

    def _check_cpu(self, cpu: int) -> None:
        if not 0 <= cpu < self.cpu_count:
            raise ValueError(f"cpu {cpu} is outside [0, {self.cpu_count - 1}]")

    def alloc(self, size: int, cpu: int) -> int:
        """Allocate a chunk of at least ``size`` bytes on behalf of ``cpu``; return its address."""
        self._check_cpu(cpu)
        actual = mem_request2_size(size)
        if not MINSIZE <= actual < PGSIZE:
            raise ValueError(
                f"size {size} does not round to a slab size in [{MINSIZE}, {PGSIZE})"
            )
        order = log_n(size)
        with self._lock:
            for offset in range(self.cpu_count):
                free_list = self._free[(cpu + offset) % self.cpu_count][order]
                if free_list:
                    chunk = free_list.pop()
                    break
            else:
                chunk = self._carve(order, cpu)
            self._allocated.add(chunk)
            return chunk

    def _carve(self, order: int, cpu: int) -> int:
        page = self.buddy.alloc(PGSIZE)
        self.pages.set(page, order=order, kind=PageKind.SLAB)
        step = 1 << order
        self._free[cpu][order].extend(range(page + step, page + PGSIZE, step))
        return page

    def free(self, address: int, cpu: int) -> None:
        """Return the chunk at ``address`` to the free list of ``cpu``."""
        self._check_cpu(cpu)
        with self._lock:
            if address not in self._allocated:
                raise AllocationError(f"address {address:#x} is not an allocated slab chunk")
            info = self.pages.get(address)
            self._allocated.remove(address)
            self._free[cpu][info.order].append(address)