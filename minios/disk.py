"""Block storage and a byte-addressed disk on top of it."""

from __future__ import annotations

import threading


class BlockDevice:
    """In-memory storage of ``block_count`` blocks of ``block_size`` bytes."""

    def __init__(self, block_size: int, block_count: int) -> None:
        if block_size < 1 or block_count < 0:
            raise ValueError("block size must be positive and block count not negative")
        self.block_size = block_size
        self.block_count = block_count
        self._data = bytearray(block_size * block_count)

    def _span(self, blkno: int) -> slice:
        if not 0 <= blkno < self.block_count:
            raise IndexError(f"block {blkno} is outside [0, {self.block_count})")
        start = blkno * self.block_size
        return slice(start, start + self.block_size)

    def read_block(self, blkno: int) -> bytes:
        """Return the contents of block ``blkno``."""
        return bytes(self._data[self._span(blkno)])

    def write_block(self, blkno: int, data: bytes) -> None:
        """Replace block ``blkno`` with exactly one block of ``data``."""
        span = self._span(blkno)
        if len(data) != self.block_size:
            raise ValueError(f"a block write takes exactly {self.block_size} bytes")
        self._data[span] = data


class Disk:
    """Reads and writes arbitrary byte ranges through whole-block transfers."""

    def __init__(self, device: BlockDevice | None) -> None:
        self.device = device
        self._lock = threading.Lock()

    def _require(self) -> BlockDevice:
        if self.device is None:
            raise RuntimeError("no disk")
        return self.device

    def _chunks(self, offset: int, count: int):
        """Yield (block number, offset within block, length) covering the range."""
        if offset < 0 or count < 0:
            raise ValueError("offset and count must not be negative")
        size = self._require().block_size
        pos = 0
        while pos < count:
            start = offset - offset % size
            n = min(size - (offset - start), count - pos)
            yield start // size, offset - start, n, pos
            pos += n
            offset = start + size

    def read(self, offset: int, count: int) -> bytes:
        """Return ``count`` bytes starting at byte ``offset``."""
        device = self._require()
        out = bytearray()
        with self._lock:
            for blkno, within, n, _ in self._chunks(offset, count):
                out += device.read_block(blkno)[within:within + n]
        return bytes(out)

    def write(self, offset: int, data: bytes) -> int:
        """Store ``data`` at byte ``offset`` and return the number of bytes written."""
        device = self._require()
        data = bytes(data)
        with self._lock:
            for blkno, within, n, pos in self._chunks(offset, len(data)):
                if n < device.block_size:
                    block = bytearray(device.read_block(blkno))
                else:
                    block = bytearray(device.block_size)
                block[within:within + n] = data[pos:pos + n]
                device.write_block(blkno, bytes(block))
        return len(data)