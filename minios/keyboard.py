"""Keyboard input device: turns key presses into a queue of character events."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass

NEVENTS = 128


def _build_keymap() -> dict[str, tuple[str, str]]:
    keymap: dict[str, tuple[str, str]] = {}
    for digit, shifted in zip("0123456789", ")!@#$%^&*("):
        keymap[digit] = (digit, shifted)
    for letter in "abcdefghijklmnopqrstuvwxyz":
        keymap[letter.upper()] = (letter, letter.upper())
    keymap.update(
        {
            "GRAVE": ("`", "~"),
            "MINUS": ("-", "_"),
            "EQUALS": ("=", "+"),
            "LEFTBRACKET": ("[", "{"),
            "RIGHTBRACKET": ("]", "}"),
            "BACKSLASH": ("\\", "|"),
            "SEMICOLON": (";", ":"),
            "APOSTROPHE": ("'", '"'),
            "RETURN": ("\n", "\n"),
            "COMMA": (",", "<"),
            "PERIOD": (".", ">"),
            "SLASH": ("/", "?"),
            "SPACE": (" ", " "),
            "BACKSPACE": ("\b", "\b"),
        }
    )
    return keymap


_KEYMAP = _build_keymap()

# Modifier key -> (modifier, side)
_MODIFIERS = {
    "LCTRL": ("ctrl", 0),
    "RCTRL": ("ctrl", 1),
    "LALT": ("alt", 0),
    "RALT": ("alt", 1),
    "LSHIFT": ("shift", 0),
    "RSHIFT": ("shift", 1),
}


@dataclass(frozen=True)
class InputEvent:
    """One character event, with the state of the control and alt keys."""

    ctrl: bool = False
    alt: bool = False
    data: str = "\0"


class Keyboard:
    """Tracks modifier state and queues the characters typed."""

    def __init__(self) -> None:
        self.capslock = False
        self._down = {"ctrl": [False, False], "alt": [False, False], "shift": [False, False]}
        self._events: deque[InputEvent] = deque()
        self._ready = threading.Condition()

    def __len__(self) -> int:
        with self._ready:
            return len(self._events)

    def _push(self, event: InputEvent) -> None:
        with self._ready:
            # One slot of the ring stays empty, as in a circular buffer.
            if len(self._events) >= NEVENTS - 1:
                raise OverflowError("input queue full")
            self._events.append(event)
            self._ready.notify()

    def handle(self, key: str, keydown: bool) -> InputEvent | None:
        """Process a key press or release; return the event queued, if any."""
        key = key.upper()
        if not keydown:
            if key in _MODIFIERS:
                modifier, side = _MODIFIERS[key]
                self._down[modifier][side] = False
            return None
        if key == "CAPSLOCK":
            self.capslock = not self.capslock
            return None
        if key in _MODIFIERS:
            modifier, side = _MODIFIERS[key]
            self._down[modifier][side] = True
            return None
        chars = _KEYMAP.get(key)
        if chars is None:
            return None
        normal, shifted = chars
        shift = any(self._down["shift"])
        ctrl = any(self._down["ctrl"])
        alt = any(self._down["alt"])
        if ctrl or alt:
            event = InputEvent(ctrl, alt, normal)
        else:
            if "a" <= normal <= "z":
                shift ^= self.capslock
            event = InputEvent(data=shifted if shift else normal)
        self._push(event)
        return event

    def read(self) -> InputEvent:
        """Remove and return the oldest event, waiting until one is queued."""
        with self._ready:
            self._ready.wait_for(lambda: bool(self._events))
            return self._events.popleft()