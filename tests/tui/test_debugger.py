"""Tests for the TUI debugger controller."""

from nibble_cpu.cpu.decode import encode
from nibble_cpu.cpu.isa import MINIMAL, RICH
from nibble_cpu.devices.keyboard import Key
from nibble_cpu.tui.debugger import (
    DebuggerState,
    debugger_continue,
    debugger_run_at_speed,
    debugger_step,
    new_session,
    process_command,
    waiting_for_input,
)

SHL_R0 = encode(RICH.opcode("SHL"), 0)
HALT = encode(RICH.opcode("HALT"))
ECHO = (
    encode(RICH.opcode("LOAD"), 1, addr=0xFFFF)
    + encode(RICH.opcode("STOR"), 1, addr=0x0100)
    + HALT
)


def _make_state(program: bytes = SHL_R0 * 10 + HALT) -> DebuggerState:
    return new_session(image=program)


class TestNewSession:
    def test_console_wired_to_queue(self) -> None:
        state = _make_state()
        assert state.cpu.console.keys is state.keys
        assert state.cpu.console.tx_stream is state.console_capture

    def test_isa_selectable(self) -> None:
        state = new_session(MINIMAL)
        assert state.cpu.isa is MINIMAL

    def test_image_loaded(self) -> None:
        state = _make_state(b"\x20\x00")
        assert state.cpu.ram.read_block(0, 2) == b"\x20\x00"


class TestDebuggerStep:
    """Tests for debugger_step function."""

    def test_step_advances_ip(self) -> None:
        state = _make_state()
        debugger_step(state)
        assert state.cpu.registers.ip == 1

    def test_step_updates_prev_regs(self) -> None:
        state = _make_state()
        state.cpu.registers.set(0, 0x41)
        debugger_step(state)
        # prev_regs holds values from BEFORE the step: [ip, rp, r0, ...]
        assert state.prev_regs[2] == 0x41
        assert state.cpu.registers.get(0) == 0x82

    def test_step_increments_cycle_count(self) -> None:
        state = _make_state()
        debugger_step(state)
        assert state.cpu.cycle_count == 1

    def test_step_on_halted_cpu_does_nothing(self) -> None:
        state = _make_state()
        state.cpu.halted = True
        debugger_step(state)
        assert state.cpu.registers.ip == 0
        assert "halted" in state.message.lower()

    def test_step_updates_message(self) -> None:
        state = _make_state()
        debugger_step(state)
        assert "Stepped" in state.message

    def test_step_refused_while_waiting_for_input(self) -> None:
        state = _make_state(ECHO)
        debugger_step(state)
        assert state.cpu.registers.ip == 0
        assert "input" in state.message.lower()

    def test_step_reads_queued_input(self) -> None:
        state = _make_state(ECHO)
        state.keys.push("q")
        debugger_step(state)
        assert state.cpu.registers.get(1) == ord("q")
        assert state.console_capture.getvalue() == "q"

    def test_fault_is_recorded(self) -> None:
        state = _make_state(encode(RICH.opcode("LOAD"), 0, addr=0xFFFF))
        state.keys.push_key(Key.INTERRUPT)
        debugger_step(state)
        assert state.fault is not None
        assert "InputAborted" in state.message

    def test_step_after_fault_refused(self) -> None:
        state = _make_state()
        state.fault = "DecodeError: bad"
        debugger_step(state)
        assert state.cpu.cycle_count == 0
        assert "faulted" in state.message.lower()


class TestWaitingForInput:
    def test_not_waiting_on_plain_instruction(self) -> None:
        assert waiting_for_input(_make_state()) is False

    def test_waiting_on_console_load(self) -> None:
        assert waiting_for_input(_make_state(ECHO)) is True

    def test_not_waiting_once_queued(self) -> None:
        state = _make_state(ECHO)
        state.keys.push("a")
        assert waiting_for_input(state) is False

    def test_storage_load_does_not_wait(self) -> None:
        state = _make_state(encode(RICH.opcode("LOAD"), 0, addr=0x0010))
        assert waiting_for_input(state) is False


class TestDebuggerContinue:
    """Tests for debugger_continue function."""

    def test_continue_stops_at_breakpoint(self) -> None:
        state = _make_state()
        state.breakpoints.add(5)
        debugger_continue(state)
        assert state.cpu.registers.ip == 5
        assert "Breakpoint" in state.message

    def test_continue_stops_at_halt(self) -> None:
        state = _make_state()
        debugger_continue(state)
        assert state.cpu.halted is True
        assert "halted" in state.message.lower()

    def test_continue_stops_at_max_cycles(self) -> None:
        state = _make_state(encode(RICH.opcode("BREQ"), 0, 0, addr=0))
        debugger_continue(state, max_cycles=100)
        assert state.cpu.cycle_count == 100
        assert "limit" in state.message.lower()

    def test_continue_on_halted_cpu_does_nothing(self) -> None:
        state = _make_state()
        state.cpu.halted = True
        debugger_continue(state)
        assert "halted" in state.message.lower()

    def test_continue_stops_when_input_needed(self) -> None:
        state = _make_state(SHL_R0 * 2 + ECHO)
        debugger_continue(state)
        assert state.cpu.registers.ip == 2
        assert "input" in state.message.lower()

    def test_continue_updates_prev_regs(self) -> None:
        state = _make_state()
        state.cpu.registers.set(3, 0xAA)
        debugger_continue(state)
        assert state.prev_regs[5] == 0xAA


class TestRunAtSpeed:
    def test_runs_until_halt(self) -> None:
        state = _make_state()
        frames: list[int] = []
        state.render_fn = lambda st: frames.append(st.cpu.cycle_count)
        debugger_run_at_speed(state, hz=100_000)
        assert state.cpu.halted is True
        assert "halted" in state.message.lower()
        assert frames

    def test_max_steps(self) -> None:
        state = _make_state()
        debugger_run_at_speed(state, hz=100_000, max_steps=4)
        assert state.cpu.cycle_count == 4
        assert "limit" in state.message.lower()

    def test_breakpoint(self) -> None:
        state = _make_state()
        state.breakpoints.add(3)
        debugger_run_at_speed(state, hz=100_000)
        assert state.cpu.registers.ip == 3
        assert "Breakpoint" in state.message


class TestProcessCommand:
    """Tests for process_command function."""

    def test_step_command(self) -> None:
        state = _make_state()
        assert process_command(state, "s") is True
        assert state.cpu.registers.ip == 1

    def test_step_full_word(self) -> None:
        state = _make_state()
        assert process_command(state, "step") is True
        assert state.cpu.registers.ip == 1

    def test_continue_command(self) -> None:
        state = _make_state()
        assert process_command(state, "c") is True
        assert state.cpu.halted is True

    def test_run_without_speed_continues(self) -> None:
        state = _make_state()
        assert process_command(state, "r") is True
        assert state.cpu.halted is True

    def test_run_invalid_hz(self) -> None:
        state = _make_state()
        process_command(state, "r fast")
        assert "Invalid hz" in state.message

    def test_run_zero_hz(self) -> None:
        state = _make_state()
        process_command(state, "r 0")
        assert ">= 1" in state.message

    def test_run_invalid_max_steps(self) -> None:
        state = _make_state()
        process_command(state, "r 10 many")
        assert "Invalid max_steps" in state.message

    def test_breakpoint_set(self) -> None:
        state = _make_state()
        assert process_command(state, "b 0010") is True
        assert 0x0010 in state.breakpoints
        assert "set" in state.message.lower()

    def test_breakpoint_masked_to_16_bits(self) -> None:
        state = _make_state()
        process_command(state, "b 1FFFF")
        assert 0xFFFF in state.breakpoints

    def test_breakpoint_toggle_remove(self) -> None:
        state = _make_state()
        process_command(state, "b 10")
        process_command(state, "b 10")
        assert 0x10 not in state.breakpoints
        assert "removed" in state.message.lower()

    def test_breakpoint_missing_address(self) -> None:
        state = _make_state()
        process_command(state, "b")
        assert "Usage" in state.message

    def test_breakpoint_invalid_address(self) -> None:
        state = _make_state()
        process_command(state, "b not_hex")
        assert "Invalid" in state.message

    def test_goto_command(self) -> None:
        state = _make_state()
        process_command(state, "g 0100")
        assert state.mem_view_addr == 0x0100

    def test_goto_missing_address(self) -> None:
        state = _make_state()
        process_command(state, "g")
        assert "Usage" in state.message

    def test_input_command_queues_text(self) -> None:
        state = _make_state()
        process_command(state, "i hello world")
        assert state.keys.pending() == len("hello world")
        assert "Queued" in state.message

    def test_input_without_text_queues_enter(self) -> None:
        state = _make_state()
        process_command(state, "i")
        assert state.keys.read_key() is Key.ENTER

    def test_help_command(self) -> None:
        state = _make_state()
        process_command(state, "help")
        assert "step" in state.message

    def test_empty_command_shows_help(self) -> None:
        state = _make_state()
        process_command(state, "   ")
        assert "quit" in state.message

    def test_quit_command(self) -> None:
        state = _make_state()
        assert process_command(state, "q") is False
        assert process_command(state, "quit") is False

    def test_unknown_command(self) -> None:
        state = _make_state()
        assert process_command(state, "xyzzy") is True
        assert "Unknown command" in state.message
