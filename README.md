# minios

Small, readable models of classic operating-system components, with three
command-line tools beside them. Everything is pure Python with no runtime
dependencies.

## Components

- `minios.pages`: the per-page metadata table (`PageTable`, holding a
  `PageInfo` with `order`, `kind` and `in_use` for each page; `PageKind` is
  `SLAB` or `BUDDY`), the helpers `log_n` (smallest `i` with `2 ** i >= n`)
  and `mem_request2_size` (round up to a power of two), and the
  `AllocationError` exception.
- `minios.buddy`: `BuddyAllocator` hands out power-of-two runs of 4 KiB pages
  from the 16 MiB-aligned blocks of a heap. It splits blocks on `alloc` and
  merges them with free buddies on `free`. `free_blocks(order)` lists the free
  blocks of one order.
- `minios.slab`: `SlabAllocator` keeps per-CPU free lists of chunks from 64
  bytes up to half a page. When every list for a size is empty, it carves a
  fresh page taken from the buddy allocator.
- `minios.pmm`: `PhysicalMemory` is a simulated heap that puts the two
  together. Requests of a page or more go to the buddy allocator and smaller
  ones to the slab allocator. Addresses are plain integers.
- `minios.irq`: `IrqTable` registers handlers with `on_irq(seq, event, handler)`
  and keeps them ordered by sequence number. `trap(event, context)` runs the
  matching handlers and returns the single context they produce. It raises
  `TrapError` when they produce none, or more than one.
- `minios.keyboard`: `Keyboard.handle(key, keydown)` tracks shift, caps lock,
  ctrl and alt and queues `InputEvent`s. `Keyboard.read()` waits for the next
  event and returns it.
- `minios.tty`: `Terminal` is a character grid that handles CR, LF, backspace
  and scrolling. `render(show_cursor)` returns the dirty cells as `Sprite`s.
  `cook` and `read` give line-cooked input through a `CookQueue`.
- `minios.disk`: `Disk` performs byte-addressed `read` and `write` through
  whole-block transfers on an in-memory `BlockDevice`.

```python
from minios.pmm import PhysicalMemory

memory = PhysicalMemory(heap_size=64 << 20, cpu_count=2)
small = memory.alloc(100, cpu=0)     # 128-byte slab chunk
large = memory.alloc(20000, cpu=0)   # 8-page buddy block
memory.free(small, cpu=0)
memory.free(large)
```

## Commands

Install with `pip install .`. This provides three commands.

### `minios-sperf`

```
strace -T some-program 2>&1 | minios-sperf
```

Reads a timed `strace` log from standard input and prints one
`name (percent%)` line per system call, largest share first. The total time
counts every line, but the last two distinct names in the log are left out of
the listing; in a complete log these are the exit call and the trailer line.

### `minios-pstree`

```
minios-pstree
```

Reads `/proc/*/stat` and prints one summary line per process. It then prints
the tree rooted at pid 1, with `----` joining parents to children. The
`-V`/`--version` option prints the version to standard error in place of the
tree. `-p`/`--show-pids` and `-n`/`--numeric-sort ARG` are accepted, but the
output does not change with them.

### `minios-plcs`

```
echo "ABCBDAB BDCABA" | minios-plcs 4
```

Prints the length of the longest common subsequence of the first two words on
standard input. The optional argument is the number of worker threads, from 1
to 16. Threads compute the table one anti-diagonal at a time.

## What is not included

The allocators, devices and interrupt table are models to call from Python.
There is no task scheduler, no semaphore layer and no bootable kernel to run
them in. Nothing draws to a screen: `Terminal.render` returns the sprites and
stops there, and there is no font or framebuffer device.

## Tests

```
pip install .[test]
pytest
```