import random
import threading

import pytest
from hypothesis import given, settings, strategies as st

from minios.buddy import BuddyAllocator
from minios.pages import (
    MAXSIZE,
    PGSIZE,
    AllocationError,
    PageKind,
    PageTable,
    log_n,
    mem_request2_size,
)


def make(blocks=2):
    pages = PageTable(0, blocks * MAXSIZE // PGSIZE)
    return BuddyAllocator(pages, 0, blocks * MAXSIZE + 1), pages


def snapshot(allocator):
    return {o: sorted(allocator.free_blocks(o)) for o in range(allocator.levels)}


def test_initial_blocks_are_top_order():
    allocator, _ = make(2)
    assert allocator.top_order == log_n(MAXSIZE // PGSIZE)
    assert sorted(allocator.free_blocks(allocator.top_order)) == [0, MAXSIZE]
    assert all(not allocator.free_blocks(o) for o in range(allocator.top_order))


def test_heap_end_bound_is_strict():
    pages = PageTable(0, 2 * MAXSIZE // PGSIZE)
    allocator = BuddyAllocator(pages, 0, 2 * MAXSIZE)
    assert allocator.free_blocks(allocator.top_order) == [0]


def test_heap_start_rounded_up_to_block():
    pages = PageTable(0, 3 * MAXSIZE // PGSIZE)
    allocator = BuddyAllocator(pages, PGSIZE, 3 * MAXSIZE + 1)
    assert sorted(allocator.free_blocks(allocator.top_order)) == [MAXSIZE, 2 * MAXSIZE]


def test_page_table_must_cover_heap():
    with pytest.raises(ValueError):
        BuddyAllocator(PageTable(0, 10), 0, 2 * MAXSIZE + 1)


def test_single_page_splits_every_level():
    allocator, pages = make(2)
    address = allocator.alloc(PGSIZE)
    info = pages.get(address)
    assert info.order == 0
    assert info.kind is PageKind.BUDDY
    assert info.in_use
    for order in range(allocator.top_order):
        assert len(allocator.free_blocks(order)) == 1
    assert len(allocator.free_blocks(allocator.top_order)) == 1


def test_free_merges_back_to_initial_state():
    allocator, pages = make(2)
    before = snapshot(allocator)
    address = allocator.alloc(PGSIZE)
    allocator.free(address)
    assert snapshot(allocator) == before
    assert not pages.get(address).in_use


def test_order_follows_requested_size():
    allocator, pages = make(1)
    address = allocator.alloc(PGSIZE + 1)
    assert pages.get(address).order == log_n(PGSIZE + 1) - 12
    assert address % mem_request2_size(PGSIZE + 1) == 0


def test_most_recent_free_block_is_reused():
    allocator, _ = make(1)
    first = allocator.alloc(PGSIZE)
    second = allocator.alloc(PGSIZE)
    allocator.free(first)
    assert allocator.alloc(PGSIZE) == first
    assert second != first


def test_request_larger_than_block_rejected():
    allocator, _ = make(1)
    with pytest.raises(ValueError):
        allocator.alloc(MAXSIZE + 1)


def test_exhaustion_raises():
    allocator, _ = make(1)
    whole = allocator.alloc(MAXSIZE)
    assert whole == 0
    with pytest.raises(AllocationError):
        allocator.alloc(PGSIZE)


def test_double_free_raises():
    allocator, _ = make(1)
    address = allocator.alloc(PGSIZE)
    allocator.free(address)
    with pytest.raises(AllocationError):
        allocator.free(address)


@pytest.mark.parametrize("address", [5 * MAXSIZE, 1])
def test_free_of_foreign_address_raises(address):
    allocator, _ = make(1)
    allocator.alloc(PGSIZE)
    with pytest.raises(AllocationError):
        allocator.free(address)


def test_free_blocks_rejects_bad_order():
    allocator, _ = make(1)
    with pytest.raises(ValueError):
        allocator.free_blocks(allocator.levels)


@settings(max_examples=40, deadline=None)
@given(
    sizes=st.lists(st.integers(min_value=PGSIZE, max_value=1 << 20), max_size=12),
    data=st.data(),
)
def test_allocations_disjoint_and_fully_returned(sizes, data):
    allocator, _ = make(2)
    before = snapshot(allocator)
    blocks = []
    for size in sizes:
        address = allocator.alloc(size)
        length = mem_request2_size(size)
        assert address % length == 0
        assert 0 <= address and address + length <= 2 * MAXSIZE
        blocks.append((address, length))
    spans = sorted(blocks)
    for (a, la), (b, _) in zip(spans, spans[1:]):
        assert a + la <= b
    for address, _ in data.draw(st.permutations(blocks)):
        allocator.free(address)
    assert snapshot(allocator) == before


def test_concurrent_alloc_and_free():
    allocator, _ = make(2)
    before = snapshot(allocator)
    errors = []

    def worker(seed):
        rng = random.Random(seed)
        try:
            for _ in range(200):
                size = (rng.randrange(16) + 1) * PGSIZE + rng.randrange(16)
                address = allocator.alloc(size)
                allocator.free(address)
        except Exception as exc:  # collected for the assertion below
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(seed,)) for seed in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert errors == []
    assert snapshot(allocator) == before