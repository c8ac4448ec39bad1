"""TUI application: main debugger interface using Rich Live display."""

from __future__ import annotations

import readline  # noqa: F401  # pyright: ignore[reportUnusedImport]

from rich.console import Console
from rich.layout import Layout
from rich.panel import Panel
from rich.text import Text

from ..cpu.isa import RICH, InstructionSet
from .debugger import DebuggerState, new_session, process_command
from .disasm import disassemble_region
from .memory import format_hex_dump
from .registers import format_registers
from .stats import format_instruction_stats


def render_debugger(state: DebuggerState) -> Layout:
    """Build the Rich Layout with all debugger panels.

    Layout structure:
        +------------------+------------------+
        |   Registers      |   Disassembly    |
        +------------------+------------------+
        |   Memory         |   Output         |
        +------------------+------------------+
        |   Instruction Statistics            |
        +-------------------------------------+
        |   Status bar (full width)           |
        +-------------------------------------+

    Args:
        state: The current debugger state.

    Returns:
        A Rich Layout object ready for display.
    """
    layout = Layout()
    cpu = state.cpu

    # Status panel height: 2 (border) + 1 info line + message lines
    msg_lines = state.message.count("\n") + 1
    status_height = 2 + 1 + msg_lines

    layout.split_column(
        Layout(name="top", ratio=2),
        Layout(name="bottom", ratio=2),
        Layout(name="stats", size=6),
        Layout(name="status", size=status_height),
    )
    layout["top"].split_row(
        Layout(name="registers", ratio=1),
        Layout(name="disassembly", ratio=2),
    )
    layout["bottom"].split_row(
        Layout(name="memory", ratio=2),
        Layout(name="output", ratio=1),
    )

    reg_text = format_registers(cpu.registers, state.prev_regs)
    layout["registers"].update(Panel(reg_text, title="Registers"))

    # Disassembly panel
    disasm_text = Text()
    for line in disassemble_region(cpu, cpu.registers.ip, 12):
        marker = ">>>" if line.is_current else "   "
        bp_marker = " *" if line.addr in state.breakpoints else "  "
        raw = line.raw.hex(" ").upper().ljust(8)
        entry = f"{marker}{bp_marker} 0x{line.addr:04X}: {raw}  {line.text}"
        if line.is_current:
            disasm_text.append(entry + "\n", style="bold green")
        elif line.addr in state.breakpoints:
            disasm_text.append(entry + "\n", style="bold red")
        else:
            disasm_text.append(entry + "\n")
    layout["disassembly"].update(Panel(disasm_text, title=f"Disassembly ({cpu.isa.name})"))

    mem_text = format_hex_dump(cpu.memory, state.mem_view_addr, num_rows=8)
    layout["memory"].update(
        Panel(Text(mem_text), title=f"Memory @ 0x{state.mem_view_addr:04X}")
    )

    # Output panel: last 8 lines of console output
    out_lines = state.console_capture.getvalue().split("\n")
    if len(out_lines) > 8:
        out_lines = out_lines[-8:]
    layout["output"].update(Panel(Text("\n".join(out_lines)), title="Output"))

    stats_text = format_instruction_stats(cpu.instruction_stats)
    layout["stats"].update(Panel(stats_text, title="Instruction Statistics"))

    # Status bar
    if state.fault is not None:
        run_state = "FAULTED"
    elif cpu.halted:
        run_state = "HALTED"
    else:
        run_state = "RUNNING"
    bp_str = ", ".join(f"0x{a:04X}" for a in sorted(state.breakpoints))
    status_text = (
        f"IP: 0x{cpu.registers.ip:04X}  |  "
        f"Cycles: {cpu.cycle_count}  |  "
        f"State: {run_state}  |  "
        f"Input queued: {state.keys.pending()}  |  "
        f"Breakpoints: {bp_str if bp_str else 'none'}\n"
        f"{state.message}"
    )
    layout["status"].update(Panel(Text(status_text), title="Status"))

    return layout


def run_debugger(image: bytes, isa: InstructionSet = RICH) -> None:
    """Launch the TUI debugger for a raw program image.

    Loads the image into a CPU whose console is captured, and enters the
    command loop with Rich console output. Returns when the user quits.

    Args:
        image: Program image bytes, loaded at address 0.
        isa: Instruction set to decode with.
    """
    state = new_session(isa, image)

    console = Console()

    def _render(st: DebuggerState) -> None:
        console.clear()
        console.print(render_debugger(st))

    state.render_fn = _render

    _render(state)

    while True:
        try:
            cmd = input("dbg> ")
        except (EOFError, KeyboardInterrupt):
            console.print("\nExiting debugger.")
            break

        if not process_command(state, cmd):
            console.print("Exiting debugger.")
            break

        _render(state)
