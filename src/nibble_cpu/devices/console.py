"""Console device: a single memory-mapped character I/O port."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from ..errors import DeviceError, InputAborted
from .keyboard import Key, KeyEvent, KeySource, StreamKeys

logger = logging.getLogger(__name__)

# Default port address and size
CONSOLE_PORT = 0xFFFF
CONSOLE_SIZE = 1

# Named key events -> byte codes delivered to the program
KEY_CODES: dict[Key, int] = {
    Key.NONE: 0x00,
    Key.BACKSPACE: 0x08,
    Key.ESCAPE: 0x1B,
    Key.ENTER: 0x0A,
}


class ConsoleDevice:
    """Character console mapped at one address.

    Write: the byte is emitted as a character on the output stream,
    which is flushed immediately. Read: blocks for one key event from
    the key source, echoes it and returns its byte code. An interrupt
    event raises InputAborted.
    """

    def __init__(
        self,
        port: int = CONSOLE_PORT,
        tx_stream: TextIO | None = None,
        keys: KeySource | None = None,
    ) -> None:
        self.port = port
        self.tx_stream = tx_stream if tx_stream is not None else sys.stdout
        self.keys = keys if keys is not None else StreamKeys()

    def read8(self, addr: int) -> int:
        """Block for one key event and return its byte code."""
        key = self.keys.read_key()
        code = key_to_byte(key)
        logger.debug("console read %r -> 0x%02X", key, code)
        if key is not Key.NONE:
            self._emit(code)
        return code

    def write8(self, addr: int, value: int) -> None:
        """Emit ``value`` as a character."""
        if not 0 <= value <= 0xFF:
            raise DeviceError(f"Invalid character code for output: {value!r}")
        self._emit(value)

    def _emit(self, code: int) -> None:
        try:
            self.tx_stream.write(chr(code))
        except UnicodeEncodeError as e:
            raise DeviceError(
                f"Output stream cannot encode character 0x{code:02X}"
            ) from e
        self.tx_stream.flush()


def key_to_byte(key: KeyEvent) -> int:
    """Map a key event to the byte the program sees.

    Raises:
        InputAborted: For the interrupt event.
        DeviceError: For characters outside the 8-bit (Latin-1) range.
    """
    if key is Key.INTERRUPT:
        raise InputAborted("Input interrupted")
    if isinstance(key, Key):
        return KEY_CODES[key]
    if len(key) != 1:
        raise DeviceError(f"Expected a single character, got {key!r}")
    code = ord(key)
    if code > 0xFF:
        raise DeviceError(f"Character {key!r} has no 8-bit code")
    return code
