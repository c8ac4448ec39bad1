"""TUI register display: control and general registers with change highlighting."""

from __future__ import annotations

from ..cpu.registers import RegisterFile

# Order matches RegisterFile.snapshot()
REGISTER_NAMES: list[str] = ["ip", "rp", "r0", "r1", "r2", "r3"]


def format_registers(regs: RegisterFile, prev_values: list[int] | None = None) -> str:
    """Format all registers for display with change highlighting.

    ip and rp are shown as 16-bit values on the first line, r0-r3 as
    bytes (hex, decimal and printable character) on the lines below.
    Registers whose values changed since the previous snapshot are
    wrapped in ``[bold yellow]...[/bold yellow]``.

    Args:
        regs: The current register file.
        prev_values: Optional previous snapshot from ``snapshot_registers``.

    Returns:
        A string with Rich markup suitable for display in a Rich Panel.
    """
    values = snapshot_registers(regs)
    entries: list[str] = []

    for idx, (name, val) in enumerate(zip(REGISTER_NAMES, values)):
        if idx < 2:
            entry = f"{name} 0x{val:04X}"
        else:
            char = chr(val) if 0x20 <= val <= 0x7E else "."
            entry = f"{name} 0x{val:02X} {val:3d} '{char}'"

        if prev_values is not None and val != prev_values[idx]:
            entry = f"[bold yellow]{entry}[/bold yellow]"
        entries.append(entry)

    lines = ["    ".join(entries[:2])]
    lines.extend(entries[2:])
    return "\n".join(lines)


def snapshot_registers(regs: RegisterFile) -> list[int]:
    """Capture a snapshot of all register values.

    Returns:
        [ip, rp, r0, r1, r2, r3]
    """
    return regs.snapshot()
