"""Tests for the 64 KiB main memory."""

import pytest

from nibble_cpu.errors import LoadError
from nibble_cpu.memory.ram import RAM, RAM_SIZE


class TestRAM:
    def test_size_covers_address_space(self) -> None:
        assert len(RAM()) == RAM_SIZE == 0x10000

    def test_read_write(self) -> None:
        ram = RAM()
        ram.write8(0x1234, 0xAB)
        assert ram.read8(0x1234) == 0xAB

    def test_initially_zero(self) -> None:
        assert RAM().read_block(0, 64) == bytes(64)

    def test_write_masks_to_8_bits(self) -> None:
        ram = RAM()
        ram.write8(0, 0x1FF)
        assert ram.read8(0) == 0xFF

    def test_last_address(self) -> None:
        ram = RAM()
        ram.write8(0xFFFF, 0x42)
        assert ram.read8(0xFFFF) == 0x42

    def test_addresses_wrap(self) -> None:
        ram = RAM()
        ram.write8(0x10005, 0x77)
        assert ram.read8(0x0005) == 0x77
        assert ram.read8(-1) == ram.read8(0xFFFF)

    def test_read_block_wraps(self) -> None:
        ram = RAM()
        ram.write8(0xFFFF, 0x11)
        ram.write8(0x0000, 0x22)
        assert ram.read_block(0xFFFF, 2) == b"\x11\x22"


class TestLoad:
    def test_load_at_zero(self) -> None:
        ram = RAM()
        ram.write8(5, 0x99)
        ram.load(b"\x01\x02\x03")
        assert ram.read_block(0, 6) == b"\x01\x02\x03\x00\x00\x99"

    def test_full_size_image(self) -> None:
        ram = RAM()
        ram.load(bytes([0x5A]) * RAM_SIZE)
        assert ram.read8(0xFFFF) == 0x5A

    def test_oversized_image_rejected(self) -> None:
        ram = RAM()
        with pytest.raises(LoadError):
            ram.load(bytes(RAM_SIZE + 1))
        assert ram.read8(0) == 0
