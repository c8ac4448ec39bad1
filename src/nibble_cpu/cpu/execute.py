"""Instruction execution: one handler per mnemonic across all variants."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from ..errors import DecodeError
from .decode import Instruction

if TYPE_CHECKING:
    from .cpu import CPU

Handler = Callable[[Instruction, "CPU"], None]


def execute(inst: Instruction, cpu: CPU) -> None:
    """Apply an instruction's effect to the CPU.

    By the time this runs ip already points past the instruction and
    its operand; only control-flow handlers reassign it.
    """
    handler = HANDLERS.get(inst.mnemonic)
    if handler is None:
        raise DecodeError(f"No handler for mnemonic {inst.mnemonic!r}")
    handler(inst, cpu)


# -- Control ---------------------------------------------------------------

def _exec_halt(inst: Instruction, cpu: CPU) -> None:
    cpu.halted = True


def _exec_ret(inst: Instruction, cpu: CPU) -> None:
    cpu.registers.ip = cpu.registers.rp


# -- Shifts and rotates (reg_a only) ---------------------------------------

def _exec_shl(inst: Instruction, cpu: CPU) -> None:
    regs = cpu.registers
    regs.set(inst.reg_a, (regs.get(inst.reg_a) << 1) & 0xFF)


def _exec_shr(inst: Instruction, cpu: CPU) -> None:
    regs = cpu.registers
    regs.set(inst.reg_a, regs.get(inst.reg_a) >> 1)


def _exec_rol(inst: Instruction, cpu: CPU) -> None:
    regs = cpu.registers
    value = regs.get(inst.reg_a)
    regs.set(inst.reg_a, ((value << 1) | (value >> 7)) & 0xFF)


def _exec_ror(inst: Instruction, cpu: CPU) -> None:
    regs = cpu.registers
    value = regs.get(inst.reg_a)
    regs.set(inst.reg_a, ((value >> 1) | (value << 7)) & 0xFF)


# -- Bitwise logic ----------------------------------------------------------

def _binary(op: Callable[[int, int], int]) -> Handler:
    """Build a handler computing reg_a <- op(reg_a, reg_b)."""
    def _exec(inst: Instruction, cpu: CPU) -> None:
        regs = cpu.registers
        regs.set(inst.reg_a, op(regs.get(inst.reg_a), regs.get(inst.reg_b)) & 0xFF)
    return _exec


def _exec_not(inst: Instruction, cpu: CPU) -> None:
    regs = cpu.registers
    regs.set(inst.reg_a, ~regs.get(inst.reg_a) & 0xFF)


# -- Memory -----------------------------------------------------------------

def _exec_load(inst: Instruction, cpu: CPU) -> None:
    cpu.registers.set(inst.reg_a, cpu.mem_read(inst.addr))


def _exec_stor(inst: Instruction, cpu: CPU) -> None:
    cpu.mem_write(inst.addr, cpu.registers.get(inst.reg_a))


# -- Jumps, branches and calls ----------------------------------------------

def _exec_jump(inst: Instruction, cpu: CPU) -> None:
    cpu.registers.ip = inst.addr


def _exec_call(inst: Instruction, cpu: CPU) -> None:
    # ip already points past the operand, so RET resumes after the call
    regs = cpu.registers
    regs.rp = regs.ip
    regs.ip = inst.addr


def _branch(taken_when_equal: bool, link: bool) -> Handler:
    """Build a conditional branch (or call, when ``link``) handler."""
    def _exec(inst: Instruction, cpu: CPU) -> None:
        regs = cpu.registers
        equal = regs.get(inst.reg_a) == regs.get(inst.reg_b)
        if equal != taken_when_equal:
            return
        if link:
            regs.rp = regs.ip
        regs.ip = inst.addr
    return _exec


HANDLERS: dict[str, Handler] = {
    "HALT": _exec_halt,
    "RET": _exec_ret,
    "SHL": _exec_shl,
    "SHR": _exec_shr,
    "ROL": _exec_rol,
    "ROR": _exec_ror,
    "NOT": _exec_not,
    "NAND": _binary(lambda a, b: ~(a & b)),
    "AND": _binary(lambda a, b: a & b),
    "OR": _binary(lambda a, b: a | b),
    "XOR": _binary(lambda a, b: a ^ b),
    "LOAD": _exec_load,
    "STOR": _exec_stor,
    "JUMP": _exec_jump,
    "CALL": _exec_call,
    "BREQ": _branch(taken_when_equal=True, link=False),
    "BRNE": _branch(taken_when_equal=False, link=False),
    "CREQ": _branch(taken_when_equal=True, link=True),
    "CRNE": _branch(taken_when_equal=False, link=True),
}
