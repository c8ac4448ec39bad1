"""Command-line interface for the nibble CPU emulator."""

from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from .cpu.cpu import CPU
from .cpu.isa import DEFAULT_ISA, INSTRUCTION_SETS, InstructionSet, get_instruction_set
from .devices.console import ConsoleDevice
from .devices.keyboard import StreamKeys, raw_mode
from .errors import InputAborted, MachineError
from .loader.image import load_image, read_image

logger = logging.getLogger(__name__)

EXIT_HALT = 0
EXIT_ERROR = 1
EXIT_CYCLE_LIMIT = 2
EXIT_ABORTED = 130


def _parse_hex(value: str) -> int:
    """Parse a 16-bit address given in hex (with or without 0x)."""
    try:
        addr = int(value, 16)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid hex address '{value}'") from None
    if not 0 <= addr <= 0xFFFF:
        raise argparse.ArgumentTypeError(f"address '{value}' is outside 0000-FFFF")
    return addr


def configure_logging(trace: bool) -> None:
    """Send log records to stderr through Rich; DEBUG when tracing."""
    logging.basicConfig(
        level=logging.DEBUG if trace else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Nibble CPU Emulator")
    sub = parser.add_subparsers(dest="command")

    def _add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("image", help="Path to raw program image")
        p.add_argument(
            "--isa", choices=sorted(INSTRUCTION_SETS), default=DEFAULT_ISA,
            help=f"Instruction set variant (default: {DEFAULT_ISA})",
        )
        p.add_argument("--trace", action="store_true",
                       help="Log every executed instruction to stderr")

    run_parser = sub.add_parser("run", help="Run an image until it halts")
    _add_common(run_parser)
    run_parser.add_argument("--max-cycles", type=int, default=None, metavar="N",
                            help="Stop after N instructions")

    debug_parser = sub.add_parser("debug", help="Run with TUI debugger")
    _add_common(debug_parser)

    disasm_parser = sub.add_parser("disasm", help="Print a disassembly listing")
    _add_common(disasm_parser)
    disasm_parser.add_argument("--start", type=_parse_hex, default=0,
                               metavar="ADDR", help="First address (hex)")
    disasm_parser.add_argument("--count", type=int, default=None, metavar="N",
                               help="Number of instructions (default: whole image)")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for the emulator CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(EXIT_ERROR)

    configure_logging(args.trace)
    isa = get_instruction_set(args.isa)

    if args.command == "run":
        sys.exit(run_image(args.image, isa, args.max_cycles))
    elif args.command == "debug":
        sys.exit(debug_image(args.image, isa))
    elif args.command == "disasm":
        sys.exit(disasm_image(args.image, isa, args.start, args.count))


def run_image(path: str, isa: InstructionSet, max_cycles: int | None = None) -> int:
    """Load an image and run it until halt.

    Console input comes from stdin, switched to cbreak mode when it is a
    terminal. Machine errors end the run; nothing is retried.

    Args:
        path: Path to the program image.
        isa: Instruction set to decode with.
        max_cycles: Optional instruction limit.

    Returns:
        Process exit status.
    """
    cpu = CPU(ConsoleDevice(keys=StreamKeys(sys.stdin)), isa=isa)

    try:
        size = load_image(path, cpu)
        logger.info("Loaded %d bytes from %s", size, path)
        with raw_mode(sys.stdin):
            cpu.run(max_cycles)
    except OSError as e:
        print(f"Error: cannot read '{path}': {e}", file=sys.stderr)
        return EXIT_ERROR
    except (InputAborted, KeyboardInterrupt):
        print("\nAborted by input interrupt.", file=sys.stderr)
        return EXIT_ABORTED
    except MachineError as e:
        print(f"\nError: {type(e).__name__}: {e}", file=sys.stderr)
        print(f"  at ip=0x{cpu.registers.ip:04X} after {cpu.cycle_count} cycles",
              file=sys.stderr)
        return EXIT_ERROR

    regs = cpu.registers
    if cpu.halted:
        print(f"\nHalted after {cpu.cycle_count} cycles.", file=sys.stderr)
    else:
        print(f"\nStopped after {cpu.cycle_count} cycles (limit reached).",
              file=sys.stderr)
    print(f"  ip=0x{regs.ip:04X} rp=0x{regs.rp:04X} "
          + " ".join(f"r{i}=0x{regs.get(i):02X}" for i in range(4)),
          file=sys.stderr)
    return EXIT_HALT if cpu.halted else EXIT_CYCLE_LIMIT


def debug_image(path: str, isa: InstructionSet) -> int:
    """Open the interactive debugger on an image."""
    from .tui import run_debugger

    try:
        data = read_image(path)
    except (OSError, MachineError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    run_debugger(data, isa)
    return EXIT_HALT


def disasm_image(path: str, isa: InstructionSet, start: int = 0,
                 count: int | None = None) -> int:
    """Print a disassembly listing of an image to stdout.

    Without ``count``, instructions are listed until the end of the image.
    """
    from .tui.disasm import disassemble_region

    try:
        data = read_image(path)
    except (OSError, MachineError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    cpu = CPU(isa=isa)
    cpu.load(data)

    if count is None:
        lines = []
        addr = start
        while addr < len(data):
            line = disassemble_region(cpu, addr, 1, current=-1)[0]
            lines.append(line)
            addr += len(line.raw)
    else:
        lines = disassemble_region(cpu, start, count, current=-1)

    for line in lines:
        print(f"{line.addr:04X}:  {line.raw.hex(' ').upper():<8}  {line.text}")
    return EXIT_HALT


if __name__ == "__main__":
    main()
