"""Page metadata for the physical heap: size helpers and the per-page table."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace

PGSIZE = 4096
PAGE_SHIFT = 12
MAXSIZE = 16 << 20


class AllocationError(Exception):
    """Raised when memory cannot be handed out or an address cannot be freed."""


class PageKind(enum.IntEnum):
    """Which allocator owns a page."""

    SLAB = 0
    BUDDY = 1


@dataclass(frozen=True)
class PageInfo:
    """Metadata kept for one page: block order, owner and usage."""

    order: int = 0
    kind: PageKind = PageKind.SLAB
    in_use: bool = False


def log_n(n: int) -> int:
    """Return the smallest ``i`` with ``2 ** i >= n``; ``n`` must lie in [0, MAXSIZE]."""
    if not 0 <= n <= MAXSIZE:
        raise ValueError(f"size {n} is outside [0, {MAXSIZE}]")
    return max(n - 1, 0).bit_length()


def mem_request2_size(n: int) -> int:
    """Round ``n`` up to the next power of two."""
    return 1 << log_n(n)


class PageTable:
    """Metadata for a contiguous run of pages starting at ``base``."""

    def __init__(self, base: int, page_count: int) -> None:
        if base < 0 or base % PGSIZE:
            raise ValueError(f"base {base:#x} is not a page-aligned address")
        if page_count < 0:
            raise ValueError("page count must not be negative")
        self.base = base
        self.page_count = page_count
        self._entries: list[PageInfo] = [PageInfo()] * page_count

    def __len__(self) -> int:
        return self.page_count

    @property
    def end(self) -> int:
        """First address past the covered range."""
        return self.base + self.page_count * PGSIZE

    def __contains__(self, address: object) -> bool:
        return isinstance(address, int) and self.base <= address < self.end

    def index_of(self, address: int) -> int:
        """Return the index of the page holding ``address``."""
        index = address // PGSIZE - self.base // PGSIZE
        if not 0 <= index < self.page_count:
            raise IndexError(f"address {address:#x} is outside the page table")
        return index

    def get(self, address: int) -> PageInfo:
        """Return the metadata of the page holding ``address``."""
        return self._entries[self.index_of(address)]

    def set(self, address: int, *, order=None, kind=None, in_use=None) -> PageInfo:
        """Update the given fields of the page holding ``address``; return the new metadata."""
        index = self.index_of(address)
        changes = {}
        if order is not None:
            if order < 0:
                raise ValueError("order must not be negative")
            changes["order"] = order
        if kind is not None:
            changes["kind"] = PageKind(kind)
        if in_use is not None:
            changes["in_use"] = bool(in_use)
        info = replace(self._entries[index], **changes)
        self._entries[index] = info
        return info