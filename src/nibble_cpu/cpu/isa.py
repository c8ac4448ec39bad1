"""Instruction-set tables: which mnemonic each 4-bit opcode selects.

An instruction set is pure data. Semantics for every mnemonic live in
``execute.HANDLERS``; adding a variant means supplying a new table.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# Opcodes at or above this value carry a 16-bit big-endian operand
OPERAND_THRESHOLD = 0xA


@dataclass(frozen=True)
class InstructionSet:
    """A named opcode -> mnemonic table."""

    name: str
    mnemonics: dict[int, str] = field(default_factory=dict)
    operand_threshold: int = OPERAND_THRESHOLD

    def mnemonic(self, opcode: int) -> str | None:
        """Mnemonic assigned to ``opcode``, or None if unassigned."""
        return self.mnemonics.get(opcode)

    def takes_operand(self, opcode: int) -> bool:
        """True if ``opcode`` is followed by a 16-bit operand."""
        return opcode >= self.operand_threshold

    def opcode(self, mnemonic: str) -> int:
        """Reverse lookup. Raises KeyError for unknown mnemonics."""
        for op, name in self.mnemonics.items():
            if name == mnemonic:
                return op
        raise KeyError(f"{mnemonic} is not part of instruction set {self.name!r}")


# Conditional calls and NAND; no unconditional jump/call
RICH = InstructionSet(
    name="rich",
    mnemonics={
        0x0: "HALT",
        0x1: "RET",
        0x2: "SHL",
        0x3: "SHR",
        0x4: "ROL",
        0x5: "ROR",
        0x6: "NAND",
        0x7: "AND",
        0x8: "OR",
        0x9: "XOR",
        0xA: "LOAD",
        0xB: "STOR",
        0xC: "BREQ",
        0xD: "BRNE",
        0xE: "CREQ",
        0xF: "CRNE",
    },
)

# Unconditional JUMP/CALL and NOT; not binary-compatible with RICH
MINIMAL = InstructionSet(
    name="minimal",
    mnemonics={
        0x0: "HALT",
        0x1: "RET",
        0x2: "SHL",
        0x3: "SHR",
        0x4: "ROL",
        0x5: "ROR",
        0x6: "NOT",
        0x7: "AND",
        0x8: "OR",
        0x9: "XOR",
        0xA: "JUMP",
        0xB: "CALL",
        0xC: "LOAD",
        0xD: "STOR",
        0xE: "BREQ",
        0xF: "BRNE",
    },
)

INSTRUCTION_SETS: dict[str, InstructionSet] = {
    RICH.name: RICH,
    MINIMAL.name: MINIMAL,
}

DEFAULT_ISA = RICH.name


def get_instruction_set(name: str) -> InstructionSet:
    """Look up a built-in instruction set by name.

    Raises:
        KeyError: If no instruction set has that name.
    """
    try:
        return INSTRUCTION_SETS[name]
    except KeyError:
        known = ", ".join(sorted(INSTRUCTION_SETS))
        raise KeyError(f"Unknown instruction set {name!r} (known: {known})") from None
