"""Instruction decoder: splits the opcode byte into its fields."""

from __future__ import annotations

from dataclasses import dataclass, replace

from ..errors import DecodeError
from .isa import InstructionSet


@dataclass(frozen=True)
class Instruction:
    """Decoded instruction.

    ``addr`` is only meaningful when ``has_operand`` is set; it holds the
    big-endian 16-bit operand that followed the opcode byte.
    """

    opcode: int
    mnemonic: str
    reg_a: int = 0
    reg_b: int = 0
    has_operand: bool = False
    addr: int = 0

    @property
    def size(self) -> int:
        """Encoded length in bytes (1, or 3 with an operand)."""
        return 3 if self.has_operand else 1

    def with_operand(self, addr: int) -> Instruction:
        """Return a copy carrying the fetched operand."""
        return replace(self, addr=addr & 0xFFFF)


def split_fields(byte: int) -> tuple[int, int, int]:
    """Split an instruction byte into (opcode, reg_a, reg_b)."""
    opcode = (byte >> 4) & 0xF
    reg_a = (byte >> 2) & 0x3
    reg_b = byte & 0x3
    return opcode, reg_a, reg_b


def decode(byte: int, isa: InstructionSet) -> Instruction:
    """Decode an opcode byte against an instruction set.

    The operand, if any, is not fetched here; the caller reads it and
    attaches it with ``Instruction.with_operand``.

    Raises:
        DecodeError: If the opcode is not assigned in ``isa``.
    """
    opcode, reg_a, reg_b = split_fields(byte)
    mnemonic = isa.mnemonic(opcode)
    if mnemonic is None:
        raise DecodeError(
            f"Unknown opcode: 0x{opcode:X} (byte=0x{byte:02X}, isa={isa.name})"
        )
    return Instruction(
        opcode=opcode,
        mnemonic=mnemonic,
        reg_a=reg_a,
        reg_b=reg_b,
        has_operand=isa.takes_operand(opcode),
    )


def encode(opcode: int, reg_a: int = 0, reg_b: int = 0, addr: int | None = None) -> bytes:
    """Encode one instruction. ``addr`` appends a big-endian operand."""
    head = bytes([((opcode & 0xF) << 4) | ((reg_a & 0x3) << 2) | (reg_b & 0x3)])
    if addr is None:
        return head
    return head + (addr & 0xFFFF).to_bytes(2, "big")
