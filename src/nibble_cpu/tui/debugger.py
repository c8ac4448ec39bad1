"""TUI debugger controller: state management and command processing."""

from __future__ import annotations

import io
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from ..cpu.cpu import CPU
from ..cpu.isa import RICH, InstructionSet
from ..devices.console import ConsoleDevice
from ..devices.keyboard import Key, QueuedKeys
from ..errors import DecodeError, MachineError
from .registers import snapshot_registers


@dataclass
class DebuggerState:
    """Mutable state for the TUI debugger session.

    Holds the CPU, the queued console input, breakpoint set, previous
    register snapshot for change tracking, memory view address, console
    capture buffer, and status message.
    """

    cpu: CPU
    keys: QueuedKeys = field(default_factory=QueuedKeys)
    breakpoints: set[int] = field(default_factory=set)
    prev_regs: list[int] = field(default_factory=lambda: [0] * 6)
    mem_view_addr: int = 0x0000
    console_capture: io.StringIO = field(default_factory=io.StringIO)
    fault: str | None = None
    message: str = "Ready. Type 's' to step, 'c' to continue, 'q' to quit."
    render_fn: Callable[[DebuggerState], None] | None = None


def new_session(isa: InstructionSet = RICH, image: bytes = b"") -> DebuggerState:
    """Create a CPU whose console is wired to a debugger input queue.

    Console output is captured for the Output panel instead of going
    to the terminal the debugger itself draws on.

    Args:
        isa: Instruction set the CPU decodes.
        image: Program image to load at address 0.

    Returns:
        A fresh DebuggerState owning the CPU.
    """
    keys = QueuedKeys()
    capture = io.StringIO()
    cpu = CPU(ConsoleDevice(tx_stream=capture, keys=keys), isa=isa)
    cpu.load(image)
    return DebuggerState(cpu=cpu, keys=keys, console_capture=capture)


def _stopped_reason(state: DebuggerState) -> str | None:
    """Why the CPU cannot be stepped right now, or None if it can."""
    if state.fault is not None:
        return f"CPU faulted: {state.fault}"
    if state.cpu.halted:
        return "CPU is halted."
    if waiting_for_input(state):
        return "Waiting for console input. Use 'i <text>' to type."
    return None


def waiting_for_input(state: DebuggerState) -> bool:
    """True if the next instruction reads the console with nothing queued."""
    if state.keys.pending():
        return False
    try:
        inst = state.cpu.peek(state.cpu.registers.ip)
    except DecodeError:
        return False
    return inst.mnemonic == "LOAD" and state.cpu.memory.is_device(inst.addr)


def _guarded_step(state: DebuggerState) -> bool:
    """Step once, recording a machine error as a fault. Returns success."""
    try:
        state.cpu.step()
    except MachineError as e:
        state.fault = f"{type(e).__name__}: {e}"
        state.message = f"CPU faulted: {state.fault}"
        return False
    return True


def debugger_step(state: DebuggerState) -> None:
    """Execute one instruction and update register snapshot.

    Takes a snapshot of the current registers before stepping, so the
    display can highlight which registers changed.

    Args:
        state: The current debugger state (modified in place).
    """
    reason = _stopped_reason(state)
    if reason is not None:
        state.message = reason
        return

    state.prev_regs = snapshot_registers(state.cpu.registers)
    if _guarded_step(state):
        state.message = (
            f"Stepped to 0x{state.cpu.registers.ip:04X} "
            f"(cycle {state.cpu.cycle_count})"
        )


def debugger_continue(state: DebuggerState, max_cycles: int = 10000) -> None:
    """Run until breakpoint, halt, input wait, fault, or cycle limit.

    Args:
        state: The current debugger state (modified in place).
        max_cycles: Maximum number of cycles to execute before stopping.
    """
    reason = _stopped_reason(state)
    if reason is not None:
        state.message = reason
        return

    state.prev_regs = snapshot_registers(state.cpu.registers)
    cycles_run = 0

    while cycles_run < max_cycles:
        reason = _stopped_reason(state)
        if reason is not None:
            state.message = f"{reason} (ran {cycles_run} cycles)"
            return
        if not _guarded_step(state):
            return
        cycles_run += 1

        if state.cpu.registers.ip in state.breakpoints:
            state.message = (
                f"Breakpoint hit at 0x{state.cpu.registers.ip:04X} "
                f"(ran {cycles_run} cycles)"
            )
            return

    if state.cpu.halted:
        state.message = f"CPU halted after {cycles_run} cycles."
    else:
        state.message = f"Stopped after {max_cycles} cycles (limit reached)."


def debugger_run_at_speed(
    state: DebuggerState,
    hz: int,
    max_steps: int | None = None,
) -> None:
    """Run at a fixed speed with live display updates.

    Executes instructions at the given rate (steps per second), calling
    ``state.render_fn`` to redraw the display between frames. For rates
    above 30 Hz, batches multiple steps per frame to cap redraws at ~30 fps.

    Stops on breakpoint, halt, input wait, fault, max_steps limit, or
    KeyboardInterrupt.

    Args:
        state: The current debugger state (modified in place).
        hz: Target steps per second (must be >= 1).
        max_steps: Optional maximum number of steps before stopping.
    """
    reason = _stopped_reason(state)
    if reason is not None:
        state.message = reason
        return

    steps_per_frame = max(1, hz // 30)
    frame_interval = steps_per_frame / hz
    total_steps = 0

    def _finish(message: str) -> None:
        state.message = message
        if state.render_fn is not None:
            state.render_fn(state)

    try:
        while True:
            frame_start = time.monotonic()
            state.prev_regs = snapshot_registers(state.cpu.registers)

            for _ in range(steps_per_frame):
                if max_steps is not None and total_steps >= max_steps:
                    break
                reason = _stopped_reason(state)
                if reason is not None:
                    _finish(f"{reason} (ran {total_steps} steps)")
                    return
                if not _guarded_step(state):
                    _finish(state.message)
                    return
                total_steps += 1

                if state.cpu.registers.ip in state.breakpoints:
                    _finish(
                        f"Breakpoint hit at 0x{state.cpu.registers.ip:04X} "
                        f"(ran {total_steps} steps at {hz} Hz)"
                    )
                    return

            if max_steps is not None and total_steps >= max_steps:
                _finish(f"Stopped after {total_steps} steps (limit reached).")
                return

            _finish(
                f"Running at {hz} Hz: step {total_steps}, "
                f"IP 0x{state.cpu.registers.ip:04X} (Ctrl+C to stop)"
            )

            elapsed = time.monotonic() - frame_start
            remaining = frame_interval - elapsed
            if remaining > 0:
                time.sleep(remaining)

    except KeyboardInterrupt:
        state.message = f"Paused after {total_steps} steps at {hz} Hz."


HELP_TEXT = (
    "s, step                  - step one instruction\n"
    "c, continue              - run until breakpoint/halt\n"
    "r, run <hz> [max_steps]  - run at fixed speed (Ctrl+C to pause)\n"
    "b <addr>                 - toggle breakpoint (hex address)\n"
    "g <addr>                 - set memory view address (hex)\n"
    "i [text]                 - queue console input (no text = Enter)\n"
    "h, help                  - show this help\n"
    "q, quit                  - exit debugger"
)


def _parse_addr(state: DebuggerState, parts: list[str], usage: str) -> int | None:
    """Parse a hex address argument, setting an error message on failure."""
    if len(parts) < 2:
        state.message = usage
        return None
    try:
        return int(parts[1], 16) & 0xFFFF
    except ValueError:
        state.message = f"Invalid address: {parts[1]}"
        return None


def process_command(state: DebuggerState, cmd: str) -> bool:
    """Parse and execute a debugger command.

    Supported commands:
        s, step                  -- execute one instruction
        c, continue              -- run until breakpoint/halt/limit
        r, run <hz> [max_steps]  -- run at fixed speed (steps/sec)
        b <addr>                 -- toggle breakpoint at hex address
        g <addr>                 -- set memory view address
        i [text]                 -- queue console input
        h, help                  -- show command help
        q, quit                  -- exit the debugger

    Args:
        state: The current debugger state (modified in place).
        cmd: The raw command string from the user.

    Returns:
        True to continue the debugger loop, False to quit.
    """
    parts = cmd.strip().split()
    if not parts:
        state.message = HELP_TEXT
        return True

    verb = parts[0].lower()

    if verb in ("s", "step"):
        debugger_step(state)

    elif verb in ("c", "continue"):
        debugger_continue(state)

    elif verb in ("r", "run"):
        if len(parts) < 2:
            debugger_continue(state)
            return True
        try:
            hz = int(parts[1])
        except ValueError:
            state.message = f"Invalid hz: {parts[1]}"
            return True
        if hz < 1:
            state.message = "Hz must be >= 1."
            return True

        max_steps: int | None = None
        if len(parts) >= 3:
            try:
                max_steps = int(parts[2])
            except ValueError:
                state.message = f"Invalid max_steps: {parts[2]}"
                return True
            if max_steps < 1:
                state.message = "max_steps must be >= 1."
                return True

        debugger_run_at_speed(state, hz, max_steps)

    elif verb in ("b", "breakpoint"):
        addr = _parse_addr(state, parts, "Usage: b <hex_address>")
        if addr is None:
            return True
        if addr in state.breakpoints:
            state.breakpoints.discard(addr)
            state.message = f"Breakpoint removed at 0x{addr:04X}"
        else:
            state.breakpoints.add(addr)
            state.message = f"Breakpoint set at 0x{addr:04X}"

    elif verb in ("g", "goto"):
        addr = _parse_addr(state, parts, "Usage: g <hex_address>")
        if addr is None:
            return True
        state.mem_view_addr = addr
        state.message = f"Memory view set to 0x{addr:04X}"

    elif verb in ("i", "input"):
        text = cmd.strip()[len(parts[0]):].lstrip()
        if text:
            state.keys.push(text)
        else:
            state.keys.push_key(Key.ENTER)
        state.message = f"Queued input ({state.keys.pending()} keys pending)."

    elif verb in ("h", "help"):
        state.message = HELP_TEXT

    elif verb in ("q", "quit"):
        return False

    else:
        state.message = f"Unknown command: {verb}\n\n{HELP_TEXT}"

    return True
