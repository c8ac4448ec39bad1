"""Memory bus: routes device ports ahead of backing storage."""

from __future__ import annotations

from .device import Device
from .ram import RAM


class DeviceMapping:
    """A device registered on the bus with its address range."""

    __slots__ = ("base", "size", "device")

    def __init__(self, base: int, size: int, device: Device) -> None:
        self.base = base
        self.size = size
        self.device = device

    def covers(self, addr: int) -> bool:
        return self.base <= addr < self.base + self.size


class MemoryBus:
    """Routes byte accesses to devices, falling back to backing RAM.

    Devices are registered over address ranges and intercept every
    access in their range; the RAM cell underneath is never touched.
    All other addresses read and write the backing RAM directly, so
    there is no unmapped address inside the RAM's span.
    """

    def __init__(self, backing: RAM) -> None:
        self.backing = backing
        self._devices: list[DeviceMapping] = []

    def register(self, base: int, size: int, device: Device) -> None:
        """Register a device at the given address range.

        Args:
            base: Start address of the device's address space.
            size: Number of bytes the device occupies.
            device: The device to register.

        Raises:
            ValueError: If the new range overlaps an existing device.
        """
        new_end = base + size
        for mapping in self._devices:
            existing_end = mapping.base + mapping.size
            if base < existing_end and new_end > mapping.base:
                raise ValueError(
                    f"Address range [0x{base:04X}, 0x{new_end:04X}) overlaps "
                    f"existing device at [0x{mapping.base:04X}, 0x{existing_end:04X})"
                )
        self._devices.append(DeviceMapping(base=base, size=size, device=device))

    def find_device(self, addr: int) -> Device | None:
        """Return the device claiming ``addr``, or None for plain storage."""
        for mapping in self._devices:
            if mapping.covers(addr):
                return mapping.device
        return None

    def is_device(self, addr: int) -> bool:
        return self.find_device(addr) is not None

    def read8(self, addr: int) -> int:
        """Read a byte from the claiming device or from backing RAM."""
        device = self.find_device(addr)
        if device is not None:
            return device.read8(addr) & 0xFF
        return self.backing.read8(addr)

    def write8(self, addr: int, value: int) -> None:
        """Write a byte to the claiming device or to backing RAM."""
        device = self.find_device(addr)
        if device is not None:
            device.write8(addr, value)
        else:
            self.backing.write8(addr, value)
