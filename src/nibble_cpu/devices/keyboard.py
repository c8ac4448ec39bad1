"""Key sources feeding the console device's input side."""

from __future__ import annotations

import enum
import sys
from collections import deque
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol, TextIO


class Key(enum.Enum):
    """Input events that are not plain characters."""

    NONE = "none"
    BACKSPACE = "backspace"
    ESCAPE = "escape"
    ENTER = "enter"
    INTERRUPT = "interrupt"


KeyEvent = str | Key


class KeySource(Protocol):
    """Anything that can block for, and return, one key event."""

    def read_key(self) -> KeyEvent:
        ...


# Raw terminal control characters -> named events
_CONTROL_KEYS: dict[str, Key] = {
    "": Key.INTERRUPT,       # end of stream
    "\x03": Key.INTERRUPT,   # Ctrl-C
    "\x04": Key.INTERRUPT,   # Ctrl-D
    "\x00": Key.NONE,
    "\x08": Key.BACKSPACE,
    "\x7f": Key.BACKSPACE,   # DEL, sent by most terminals for Backspace
    "\x1b": Key.ESCAPE,
    "\r": Key.ENTER,
    "\n": Key.ENTER,
}


class StreamKeys:
    """Reads key events one character at a time from a text stream.

    With a terminal in cbreak/raw mode each read returns as soon as a
    key is pressed. End of stream is reported as an interrupt.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdin

    def read_key(self) -> KeyEvent:
        ch = self._stream.read(1)
        return _CONTROL_KEYS.get(ch, ch)


class QueuedKeys:
    """Key events pushed programmatically, e.g. by the debugger.

    Reading from an empty queue is an interrupt: there is nothing that
    could ever unblock it.
    """

    def __init__(self) -> None:
        self._queue: deque[KeyEvent] = deque()

    def push(self, text: str) -> None:
        """Queue each character of ``text``, translating control characters."""
        for ch in text:
            self._queue.append(_CONTROL_KEYS.get(ch, ch))

    def push_key(self, key: KeyEvent) -> None:
        self._queue.append(key)

    def pending(self) -> int:
        return len(self._queue)

    def read_key(self) -> KeyEvent:
        if not self._queue:
            return Key.INTERRUPT
        return self._queue.popleft()


@contextmanager
def raw_mode(stream: TextIO | None = None) -> Iterator[None]:
    """Put a terminal into cbreak mode for the duration of the block.

    Keys are delivered without waiting for Enter and without local echo
    (the console device echoes). Ctrl-C still raises KeyboardInterrupt.
    Does nothing when the stream is not a tty or termios is unavailable.
    """
    stream = stream if stream is not None else sys.stdin
    if not stream.isatty():
        yield
        return
    try:
        import termios
        import tty
    except ImportError:  # Windows
        yield
        return

    fd = stream.fileno()
    old_settings = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
