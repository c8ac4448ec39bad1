"""TUI disassembly panel: converts decoded instructions to human-readable text."""

from __future__ import annotations

from dataclasses import dataclass

from ..cpu.cpu import CPU
from ..cpu.decode import Instruction
from ..errors import DecodeError


@dataclass(frozen=True)
class DisassemblyLine:
    """A single line of disassembly output."""

    addr: int
    raw: bytes
    text: str
    is_current: bool


# Operand shapes by mnemonic
_NO_OPERANDS: set[str] = {"HALT", "RET"}
_UNARY: set[str] = {"SHL", "SHR", "ROL", "ROR", "NOT"}
_BINARY: set[str] = {"NAND", "AND", "OR", "XOR"}
_MEMORY: set[str] = {"LOAD", "STOR"}
_ABSOLUTE: set[str] = {"JUMP", "CALL"}
_CONDITIONAL: set[str] = {"BREQ", "BRNE", "CREQ", "CRNE"}


def _reg(index: int) -> str:
    return f"r{index}"


def disassemble_instruction(inst: Instruction) -> str:
    """Render a decoded instruction as assembly text.

    Examples: ``HALT``, ``SHL r2``, ``XOR r0, r1``, ``LOAD r0, [0x0005]``,
    ``JUMP 0x0010``, ``CREQ r1, r2, 0x0040``.
    """
    name = inst.mnemonic
    if name in _NO_OPERANDS:
        return name
    if name in _UNARY:
        return f"{name} {_reg(inst.reg_a)}"
    if name in _BINARY:
        return f"{name} {_reg(inst.reg_a)}, {_reg(inst.reg_b)}"
    if name in _MEMORY:
        return f"{name} {_reg(inst.reg_a)}, [0x{inst.addr:04X}]"
    if name in _ABSOLUTE:
        return f"{name} 0x{inst.addr:04X}"
    if name in _CONDITIONAL:
        return f"{name} {_reg(inst.reg_a)}, {_reg(inst.reg_b)}, 0x{inst.addr:04X}"
    # Mnemonic from a custom instruction set: show every field
    text = f"{name} {_reg(inst.reg_a)}, {_reg(inst.reg_b)}"
    if inst.has_operand:
        text += f", 0x{inst.addr:04X}"
    return text


def disassemble_region(
    cpu: CPU, start_addr: int, count: int, current: int | None = None
) -> list[DisassemblyLine]:
    """Disassemble ``count`` instructions walking forward from start_addr.

    Instructions are 1 or 3 bytes long, so the walk cannot go backwards
    reliably; callers start at ip (or any known instruction boundary).
    Bytes whose opcode is unassigned are shown as ``.byte 0xNN`` and the
    walk resumes at the next byte. Addresses wrap at 0xFFFF.

    Args:
        cpu: CPU whose memory and instruction set are used.
        start_addr: Address of the first instruction.
        count: Number of lines to produce.
        current: Address to flag as current (defaults to ip).

    Returns:
        A list of DisassemblyLine objects, one per instruction.
    """
    if current is None:
        current = cpu.registers.ip
    addr = start_addr & 0xFFFF
    lines: list[DisassemblyLine] = []

    for _ in range(count):
        try:
            inst = cpu.peek(addr)
            size = inst.size
            text = disassemble_instruction(inst)
        except DecodeError:
            size = 1
            text = f".byte 0x{cpu.ram.read8(addr):02X}"
        raw = bytes(cpu.ram.read8((addr + i) & 0xFFFF) for i in range(size))
        lines.append(DisassemblyLine(addr=addr, raw=raw, text=text,
                                     is_current=addr == current))
        addr = (addr + size) & 0xFFFF

    return lines
