"""Shared fixtures for CPU tests."""

import io

import pytest

from nibble_cpu.cpu.cpu import CPU
from nibble_cpu.cpu.decode import encode
from nibble_cpu.cpu.isa import RICH, InstructionSet
from nibble_cpu.devices.console import ConsoleDevice
from nibble_cpu.devices.keyboard import QueuedKeys


@pytest.fixture
def make_cpu():
    """Factory fixture: returns a function that creates a fresh CPU.

    The console writes to a StringIO and reads from a QueuedKeys, both
    reachable as ``cpu.console.tx_stream`` and ``cpu.console.keys``.
    """
    def _make(program: bytes = b"", isa: InstructionSet = RICH) -> CPU:
        console = ConsoleDevice(tx_stream=io.StringIO(), keys=QueuedKeys())
        cpu = CPU(console, isa=isa)
        cpu.load(program)
        return cpu
    return _make


@pytest.fixture
def asm():
    """Encode one instruction by mnemonic (asm("LOAD", 0, addr=5))."""
    def _asm(mnemonic: str, reg_a: int = 0, reg_b: int = 0,
             addr: int | None = None, isa: InstructionSet = RICH) -> bytes:
        return encode(isa.opcode(mnemonic), reg_a, reg_b, addr)
    return _asm


@pytest.fixture
def set_regs():
    """Set named registers (e.g., set_regs(cpu, r0=5, r1=10))."""
    def _set(cpu: CPU, **kwargs: int) -> None:
        for name, value in kwargs.items():
            if not name.startswith("r"):
                raise ValueError(f"Register name must start with 'r': {name}")
            cpu.registers.set(int(name[1:]), value)
    return _set
