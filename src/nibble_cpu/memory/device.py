"""Protocol for peripherals mapped onto the memory bus."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Device(Protocol):
    """A byte-wide port reached through LOAD and STOR.

    The bus passes the full 16-bit address so one device can answer at
    several ports. Reads may block (the console waits for a key) and
    writes may have side effects outside the machine.
    """

    def read8(self, addr: int) -> int: ...

    def write8(self, addr: int, value: int) -> None: ...
