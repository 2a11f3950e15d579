"""Virtual text console: a character grid with dirty marks and a line-cooking input queue."""

from __future__ import annotations

import threading
from dataclasses import dataclass

TTY_COOK_BUF_SZ = 1024
TEXTURE_W = 8
TEXTURE_H = 8
CURSOR_GLYPH = 0xDB
NUL = "\0"

_WELCOME_TEXT = (
    " 1111112 11111112112      111112 1111112 \n"
    "11533311211533336114     1153311211533112\n"
    "114   11411111112114     1111111411111156\n"
    "114   11473333114114     1153311411533112\n"
    "7111111561111111411111112114  11411111156\n"
    " 7333336 7333333673333336736  7367333336 \n"
)
# Box-drawing glyphs of the console font.
_WELCOME_GLYPHS = str.maketrans(
    {
        "1": chr(219),
        "2": chr(187),
        "3": chr(205),
        "4": chr(186),
        "5": chr(201),
        "6": chr(188),
        "7": chr(200),
    }
)


@dataclass(frozen=True)
class Sprite:
    """One 8x8 tile placed on a display."""

    texture: int
    x: int
    y: int
    display: int = 0
    z: int = 0


class CookQueue:
    """Ring buffer of typed characters; a NUL character ends each cooked line."""

    def __init__(self, size: int = TTY_COOK_BUF_SZ) -> None:
        if size < 2:
            raise ValueError("queue size must be at least 2")
        self.size = size
        self._buf = [NUL] * size
        self._front = 0
        self._rear = 0

    def enqueue(self, ch: str) -> None:
        """Append one character; raise OverflowError when the ring is full."""
        if len(ch) != 1:
            raise ValueError("exactly one character is enqueued at a time")
        self._buf[self._rear] = ch
        self._rear = (self._rear + 1) % self.size
        if self._rear == self._front:
            raise OverflowError("tty queue full")
        self._buf[self._rear] = NUL

    def pop_back(self) -> bool:
        """Remove the last character of the line being typed; False if there is none."""
        pos = self._rear or self.size
        if self._buf[pos - 1] != NUL:
            self._rear = pos - 1
            self._buf[self._rear] = NUL
            return True
        return False

    def read_line(self, count: int) -> str:
        """Consume one line up to its NUL terminator, returning at most ``count`` characters."""
        out: list[str] = []
        while True:
            ch = self._buf[self._front]
            if len(out) < count and ch != NUL:
                out.append(ch)
            self._front = (self._front + 1) % self.size
            if ch == NUL:
                return "".join(out)


class Terminal:
    """A console of ``lines`` rows by ``columns`` columns drawn as sprites."""

    def __init__(self, lines: int, columns: int) -> None:
        if lines < 1 or columns < 1:
            raise ValueError("terminal dimensions must be positive")
        self.lines = lines
        self.columns = columns
        self.size = lines * columns
        self.cells = [NUL] * self.size
        self.dirty = [False] * self.size
        self.cursor = 0
        self.display = 0
        self.show_cursor = True
        self.last_frame: list[Sprite] = []
        self.queue = CookQueue(TTY_COOK_BUF_SZ)
        self._lock = threading.Lock()
        self._cooked = threading.Semaphore(0)
        self.write(_WELCOME_TEXT.translate(_WELCOME_GLYPHS))

    # --- marking -----------------------------------------------------------

    def _mark(self, index: int) -> None:
        if 0 <= index < self.size:
            self.dirty[index] = True

    def _mark_line(self, index: int) -> None:
        start = index - index % self.columns
        for i in range(start, start + self.columns):
            self._mark(i)

    def mark_all(self) -> None:
        """Mark every cell for redrawing."""
        self.dirty = [True] * self.size

    # --- state changes -----------------------------------------------------

    def _scroll_up(self) -> None:
        keep = self.size - self.columns
        self.cells[:keep] = self.cells[self.columns:]
        self.dirty[:keep] = self.dirty[self.columns:]
        self.cursor -= self.columns
        self.cells[self.cursor:self.cursor + self.columns] = [NUL] * self.columns

    def putc(self, ch: str) -> None:
        """Apply one character to the screen, handling CR, LF and backspace."""
        if ch == "\r":
            self.cursor -= self.cursor % self.columns
            self._mark_line(self.cursor)
        elif ch == "\b":
            if self.cursor > 0:
                self.cursor -= 1
                self.cells[self.cursor] = NUL
            self._mark(self.cursor)
            self._mark(self.cursor + 1)
        elif ch == "\n":
            self.cursor -= self.cursor % self.columns
            self.cursor += self.columns
            if self.cursor == self.size:
                self._scroll_up()
                self.mark_all()
            else:
                self._mark_line(self.cursor - self.columns)
                self._mark_line(self.cursor)
        else:
            self.cells[self.cursor] = ch
            self.cursor += 1
            if self.cursor == self.size:
                self._scroll_up()
                self.mark_all()
            else:
                self._mark(self.cursor - 1)
                self._mark(self.cursor)

    def write(self, data) -> int:
        """Put every character of ``data`` on screen, redraw, and return how many were written."""
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("latin-1")
        with self._lock:
            for ch in data:
                self.putc(ch)
        self.last_frame = self.render(self.show_cursor)
        return len(data)

    def render(self, show_cursor: bool) -> list[Sprite]:
        """Sprites for the dirty cells, two per cell; clears the dirty marks."""
        sprites: list[Sprite] = []
        with self._lock:
            for index, (ch, dirty) in enumerate(zip(self.cells, self.dirty)):
                if not dirty:
                    continue
                y, x = divmod(index, self.columns)
                draw = CURSOR_GLYPH if index == self.cursor and show_cursor else ord(ch)
                sprites.append(Sprite(draw * 2 + 1, x * 8, y * 16, self.display))
                sprites.append(Sprite(draw * 2 + 2, x * 8, y * 16 + 8, self.display))
            self.dirty = [False] * self.size
        return sprites

    # --- input -------------------------------------------------------------

    def cook(self, ch: str) -> bool:
        """Feed one typed character to the line queue; True when it should be echoed."""
        with self._lock:
            if ch == "\n":
                self.queue.enqueue(ch)
                self.queue.enqueue(NUL)
                self._cooked.release()
                return True
            if ch == "\b":
                return self.queue.pop_back()
            self.queue.enqueue(ch)
            return True

    def read(self, count: int) -> str:
        """Wait for a completed line and return up to ``count`` characters of it."""
        self._cooked.acquire()
        with self._lock:
            return self.queue.read_line(count)