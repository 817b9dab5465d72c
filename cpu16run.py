#!/usr/bin/env python3
"""
cpu16run - run a program on the CPU16 emulator

Usage:
    python cpu16run.py [program] [--delay-ms 50] [--registers 5]
                       [--max-cycles N] [--trace] [--disasm] [--dump-regs]
                       [--seed N] [--verbose] [--log-dir DIR]

Program format is picked from the file extension:
    .bin       -> raw big-endian 16-bit words
    anything   -> hex word text (see cpu16/loader.py)

Without a program, the built-in Fibonacci demo runs at 50 ms per
instruction. --demo picks another built-in program.

Examples:
    python cpu16run.py                          # Fibonacci demo
    python cpu16run.py fib.hex --delay-ms 0
    python cpu16run.py fib.hex --disasm         # listing only, no run
    python cpu16run.py prog.bin --trace -v      # trace to stderr

Exit status: 0 on HLT, 1 on load/usage errors, 2 on ILLEGAL/FAULT/TIMEOUT.
"""

import argparse
import logging
import sys

from cpu16 import __version__
from cpu16.config import MachineConfig, DEMO_MS_PER_INSTRUCTION, MIN_REGISTERS, MAX_REGISTERS
from cpu16.disasm import disassemble
from cpu16.emu import CPU16Emulator, StopReason
from cpu16.errors import ProgramLoadError
from cpu16.loader import read_program
from cpu16.log_setup import setup_logging
from cpu16.programs import PROGRAMS

log = logging.getLogger('cpu16.run')

EXIT_OK = 0
EXIT_LOAD_ERROR = 1
EXIT_ABNORMAL_STOP = 2


def parse_int_arg(value: str) -> int:
    """Parse an integer argument that may be hex (0x...), $ prefix, or decimal."""
    value = value.strip()
    if value.startswith("0x") or value.startswith("0X"):
        return int(value, 16)
    if value.startswith("$"):
        return int(value[1:], 16)
    return int(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpu16run",
        description="Run a program on the hypothetical 16-bit CPU emulator",
        epilog="Built-in demos: " + ", ".join(PROGRAMS.keys()),
    )
    parser.add_argument("program", nargs="?",
                        help="Program file (.bin or hex word text)")
    parser.add_argument("--demo", default="fibonacci", choices=list(PROGRAMS.keys()),
                        help="Built-in program to run when no file is given")
    parser.add_argument("--delay-ms", type=float, default=None,
                        help=f"Milliseconds per instruction (default: 0 for files, "
                             f"{DEMO_MS_PER_INSTRUCTION} for demos)")
    parser.add_argument("--registers", type=int, default=MachineConfig.num_registers,
                        help=f"Register file size, {MIN_REGISTERS}..{MAX_REGISTERS}")
    parser.add_argument("--max-cycles", type=parse_int_arg, default=None,
                        help="Stop with TIMEOUT after this many instructions")
    parser.add_argument("--seed", type=parse_int_arg, default=None,
                        help="Seed for the power-up contents of the data store")
    parser.add_argument("--trace", action="store_true",
                        help="Print an instruction trace to stderr after the run")
    parser.add_argument("--disasm", action="store_true",
                        help="Print a disassembly listing and exit")
    parser.add_argument("--dump-regs", action="store_true",
                        help="Print final register state to stderr")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log DEBUG detail to the console")
    parser.add_argument("--log-dir", default=None,
                        help="Also write a full DEBUG log file into this directory")
    parser.add_argument("--version", action="version",
                        version=f"cpu16run {__version__}")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging("cpu16",
                  console_level=logging.DEBUG if args.verbose else logging.WARNING,
                  log_dir=args.log_dir)

    # Program: file or built-in demo
    if args.program:
        try:
            words = read_program(args.program)
        except ProgramLoadError as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_LOAD_ERROR
        default_delay = 0
    else:
        words = list(PROGRAMS[args.demo])
        default_delay = DEMO_MS_PER_INSTRUCTION

    if args.disasm:
        for inst in disassemble(words):
            print(inst.format(show_description=True))
        return EXIT_OK

    config = MachineConfig(
        num_registers=args.registers,
        ms_per_instruction=default_delay if args.delay_ms is None else args.delay_ms,
        max_cycles=args.max_cycles,
        data_seed=args.seed,
        trace=args.trace,
    )
    try:
        config.validate()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_LOAD_ERROR

    emu = CPU16Emulator(config, output=sys.stdout)
    try:
        emu.load_program(words)
    except ProgramLoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_LOAD_ERROR

    log.debug("Running %d words, %s ms/instruction, %d registers",
              len(words), config.ms_per_instruction, config.num_registers)
    try:
        reason = emu.run()
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        print(emu.dump_state(), file=sys.stderr)
        return EXIT_ABNORMAL_STOP

    if args.trace:
        print(emu.get_trace(), file=sys.stderr)
    if args.dump_regs:
        print(emu.dump_state(), file=sys.stderr)

    if reason is StopReason.HALT:
        return EXIT_OK
    print(f"Stopped: {reason.value} after {emu.regs.cycles} cycles"
          + (f" ({emu.fault})" if emu.fault else ""), file=sys.stderr)
    return EXIT_ABNORMAL_STOP


if __name__ == "__main__":
    sys.exit(main())
