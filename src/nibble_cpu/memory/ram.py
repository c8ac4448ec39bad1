"""Main memory: one bytearray spanning the whole 16-bit address space."""

from __future__ import annotations

from ..errors import LoadError

ADDR_MASK = 0xFFFF
RAM_SIZE = ADDR_MASK + 1


class RAM:
    """Flat 64 KiB byte store.

    Every address is backed, and addresses are taken modulo 64 KiB, so
    no access can fault. The console port is layered on top by the bus;
    the cell underneath it still exists here.
    """

    def __init__(self) -> None:
        self._data = bytearray(RAM_SIZE)

    def __len__(self) -> int:
        return RAM_SIZE

    def read8(self, addr: int) -> int:
        return self._data[addr & ADDR_MASK]

    def write8(self, addr: int, value: int) -> None:
        self._data[addr & ADDR_MASK] = value & 0xFF

    def read_block(self, addr: int, length: int) -> bytes:
        """Copy ``length`` bytes starting at ``addr``, wrapping past 0xFFFF."""
        start = addr & ADDR_MASK
        end = start + length
        if end <= RAM_SIZE:
            return bytes(self._data[start:end])
        return bytes(self._data[start:]) + bytes(self._data[: end - RAM_SIZE])

    def load(self, image: bytes) -> None:
        """Copy a program image to address 0.

        Bytes past the end of the image keep their previous contents.

        Raises:
            LoadError: If the image is larger than the address space.
        """
        if len(image) > RAM_SIZE:
            raise LoadError(
                f"Image of {len(image)} bytes exceeds memory size of {RAM_SIZE} bytes"
            )
        self._data[: len(image)] = image
