"""CPU core: fetch-decode-execute loop."""

from __future__ import annotations

import logging

from ..devices.console import CONSOLE_SIZE, ConsoleDevice
from ..memory.bus import MemoryBus
from ..memory.ram import RAM, RAM_SIZE
from .decode import Instruction, decode
from .execute import execute
from .isa import RICH, InstructionSet
from .registers import RegisterFile

logger = logging.getLogger(__name__)

MEM_SIZE = RAM_SIZE


class CPU:
    """Execution core owning memory, registers and the console port.

    Instruction bytes are fetched straight from RAM. LOAD and STOR go
    through the bus, where the console port intercepts its address.
    """

    def __init__(
        self,
        console: ConsoleDevice | None = None,
        isa: InstructionSet = RICH,
    ) -> None:
        self.ram = RAM()
        self.memory = MemoryBus(self.ram)
        self.console = console if console is not None else ConsoleDevice()
        self.memory.register(self.console.port, CONSOLE_SIZE, self.console)
        self.registers = RegisterFile()
        self.isa = isa
        self.halted: bool = False
        self.cycle_count: int = 0
        self.instruction_stats: dict[str, int] = {}

    def load(self, data: bytes) -> None:
        """Copy a program image into memory starting at address 0.

        The console port is bypassed; a full-size image places its last
        byte in the RAM cell under the port.

        Raises:
            LoadError: If the image is larger than memory.
        """
        self.ram.load(bytes(data))
        logger.debug("loaded %d bytes at 0x0000", len(data))

    def mem_read(self, addr: int) -> int:
        """Read a byte, blocking on the console port for input."""
        return self.memory.read8(addr & 0xFFFF)

    def mem_write(self, addr: int, value: int) -> None:
        """Write a byte, or emit a character at the console port."""
        self.memory.write8(addr & 0xFFFF, value)

    def next_byte(self) -> int:
        """Fetch the byte at ip from RAM and advance ip (wrapping)."""
        value = self.ram.read8(self.registers.ip)
        self.registers.ip += 1
        return value

    def next_short(self) -> int:
        """Fetch a big-endian 16-bit operand."""
        high = self.next_byte()
        low = self.next_byte()
        return (high << 8) | low

    def peek(self, addr: int) -> Instruction:
        """Decode the instruction at ``addr`` without changing any state."""
        addr &= 0xFFFF
        inst = decode(self.ram.read8(addr), self.isa)
        if inst.has_operand:
            high = self.ram.read8((addr + 1) & 0xFFFF)
            low = self.ram.read8((addr + 2) & 0xFFFF)
            inst = inst.with_operand((high << 8) | low)
        return inst

    def step(self) -> None:
        """Execute one instruction cycle: fetch, decode, execute.

        Stepping a halted CPU does nothing.
        """
        if self.halted:
            logger.debug("step ignored: CPU is halted")
            return

        inst = decode(self.next_byte(), self.isa)
        if inst.has_operand:
            inst = inst.with_operand(self.next_short())

        logger.debug("OP=%s A=%d B=%d ADDR=0x%04X",
                     inst.mnemonic, inst.reg_a, inst.reg_b, inst.addr)

        execute(inst, self)
        self.instruction_stats[inst.mnemonic] = (
            self.instruction_stats.get(inst.mnemonic, 0) + 1
        )
        self.cycle_count += 1

        logger.debug("REGS: %r", self.registers)

    def run(self, max_cycles: int | None = None) -> None:
        """Run until halted or, if given, the cycle limit is reached."""
        while not self.halted:
            if max_cycles is not None and self.cycle_count >= max_cycles:
                break
            self.step()
