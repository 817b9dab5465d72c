"""
CPU16 - Emulator for a Hypothetical 16-bit CPU
==============================================
A fetch-decode-execute emulator for a tiny Harvard-architecture machine:
16-bit words, a 64K-word program store, a 64K-word data store, 5 to 16
registers (r0 = PC, r1 = flags) and a 13-instruction set.

Architecture:
    ┌─────────┐    ┌─────────┐    ┌──────────┐    ┌──────────────────────┐
    │   ROM   │───>│  Fetch  │───>│  Decode  │───>│ Execute              │
    │ (words) │    │ PC += 2 │    │ 4 nibble │    │ regs / flags / RAM / │
    └─────────┘    └─────────┘    └──────────┘    │ OUT stream           │
                                                  └──────────────────────┘

    - cpu/regs.py:     register file, bounds-checked
    - cpu/alu.py:      16-bit arithmetic + flag bit helpers
    - cpu/decoder.py:  nibble decoder + opcode table
    - mem/memory.py:   64K-word memory bank
    - emu.py:          run loop, dispatch, halt state
    - loader.py:       program files (.bin / hex text)
    - disasm.py:       word pairs back to assembly text
"""

__version__ = "0.1.0"

from .config import MachineConfig
from .errors import (
    CPU16Error, CPU16Fault, InvalidRegister, ReservedRegister, ReadOnlyMemory, ProgramLoadError,
)
from .emu import CPU16Emulator, StopReason
from .pacing import NoDelay, SleepDelay


def run_program(words, *, config: MachineConfig = None, output=None):
    """Load ``words`` into a fresh emulator, run it, return the emulator."""
    emu = CPU16Emulator(config, output=output)
    emu.load_program(words)
    emu.run()
    return emu
