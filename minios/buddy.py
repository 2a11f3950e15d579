"""Buddy allocator handing out power-of-two runs of pages."""

from __future__ import annotations

import threading

from .pages import (
    MAXSIZE,
    PAGE_SHIFT,
    PGSIZE,
    AllocationError,
    PageKind,
    PageTable,
    log_n,
)


def _round_up(value: int, align: int) -> int:
    return -(-value // align) * align


class BuddyAllocator:
    """Buddy system over the MAXSIZE-aligned blocks of a heap."""

    def __init__(self, pages: PageTable, heap_start: int, heap_end: int) -> None:
        self.pages = pages
        self.levels = log_n(MAXSIZE // PGSIZE) + 1
        self.top_order = self.levels - 1
        self.base = _round_up(heap_start, MAXSIZE)
        # Each free list keeps insertion order; the most recent entry is the head.
        self._free: list[dict[int, None]] = [{} for _ in range(self.levels)]
        self._lock = threading.Lock()

        address = self.base
        while address + MAXSIZE < heap_end:
            if address not in pages or address + MAXSIZE - PGSIZE not in pages:
                raise ValueError(
                    f"page table does not cover block at {address:#x}"
                )
            pages.set(address, order=self.top_order, kind=PageKind.BUDDY, in_use=False)
            self._free[self.top_order][address] = None
            address += MAXSIZE

    def _check_order(self, order: int) -> None:
        if not 0 <= order < self.levels:
            raise ValueError(f"order {order} is outside [0, {self.top_order}]")

    def free_blocks(self, order: int) -> list[int]:
        """Addresses of the free blocks of ``order``, most recently freed first."""
        self._check_order(order)
        with self._lock:
            return list(reversed(self._free[order]))

    def alloc(self, size: int) -> int:
        """Allocate a block of at least ``size`` bytes (at least one page) and return its address."""
        baseline = log_n(size) - PAGE_SHIFT
        if baseline < 0:
            raise ValueError(f"size {size} is smaller than a page")
        with self._lock:
            order = next(
                (o for o in range(baseline, self.levels) if self._free[o]), None
            )
            if order is None:
                raise AllocationError(f"no free block for {size} bytes")
            block = next(reversed(self._free[order]))
            del self._free[order][block]
            self.pages.set(block, order=baseline, kind=PageKind.BUDDY, in_use=True)
            for level in range(baseline, order):
                half = block + (PGSIZE << level)
                self.pages.set(half, order=level, kind=PageKind.BUDDY, in_use=False)
                self._free[level][half] = None
            return block

    def free(self, address: int) -> None:
        """Return the block at ``address``, merging it with free buddies."""
        with self._lock:
            try:
                info = self.pages.get(address)
            except IndexError as exc:
                raise AllocationError(f"address {address:#x} is not in the heap") from exc
            if address % PGSIZE or info.kind is not PageKind.BUDDY or not info.in_use:
                raise AllocationError(f"address {address:#x} is not an allocated block")
            self.pages.set(address, in_use=False)

            block, order = address, info.order
            while order < self.top_order:
                buddy = block ^ (PGSIZE << order)
                buddy_info = self.pages.get(buddy)
                if (
                    buddy_info.in_use
                    or buddy_info.order != order
                    or buddy not in self._free[order]
                ):
                    break
                del self._free[order][buddy]
                self.pages.set(block, order=order + 1)
                self.pages.set(buddy, order=order + 1)
                block = min(block, buddy)
                self.pages.set(block, in_use=False)
                order += 1
            self._free[order][block] = None