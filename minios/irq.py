"""Interrupt handler table: handlers run in sequence order and one returns the next context."""

from __future__ import annotations

import threading
from bisect import bisect_right
from dataclasses import dataclass
from typing import Any, Callable

EVENT_NULL = 0

Handler = Callable[[Any, Any], Any]


class TrapError(RuntimeError):
    """Raised when the handlers do not yield exactly one context."""


@dataclass(frozen=True)
class _Entry:
    seq: int
    event: Any
    handler: Handler


class IrqTable:
    """Registered handlers, ordered by sequence number and then by registration."""

    def __init__(self) -> None:
        self._entries: list[_Entry] = []
        self._lock = threading.Lock()

    @property
    def handlers(self) -> list[tuple[int, Any, Handler]]:
        """The registered ``(seq, event, handler)`` triples in call order."""
        with self._lock:
            return [(e.seq, e.event, e.handler) for e in self._entries]

    def on_irq(self, seq: int, event: Any, handler: Handler) -> None:
        """Register ``handler`` for ``event``; ``EVENT_NULL`` matches every event."""
        entry = _Entry(seq, event, handler)
        with self._lock:
            position = bisect_right([e.seq for e in self._entries], seq)
            self._entries.insert(position, entry)

    def trap(self, event: Any, context: Any) -> Any:
        """Run the matching handlers and return the one context they produced."""
        with self._lock:
            entries = list(self._entries)
        chosen = None
        for entry in entries:
            if entry.event != EVENT_NULL and entry.event != event:
                continue
            result = entry.handler(event, context)
            if result is None:
                continue
            if chosen is not None:
                raise TrapError("returning multiple contexts")
            chosen = result
        if chosen is None:
            raise TrapError("returning NULL context")
        return chosen