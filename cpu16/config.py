"""
CPU16 Emulator - Machine Constants and Run Configuration

Everything about the machine that is fixed lives here as a module constant:
word width, memory size, flag layout, register limits. The few knobs that
are tunable per run are collected in MachineConfig.

Memory map (both banks, word-addressed):
  $0000-$FFFF  65536 x 16-bit words
  Program store is filled with HLT_SENTINEL outside the loaded program.
  Data store powers up with arbitrary contents.
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
#  WORD / MEMORY GEOMETRY
# =============================================================================
WORD_MASK = 0xFFFF
MEMORY_WORDS = 0x10000         # 64K words per bank
INSTRUCTION_WORDS = 2          # opcode word + literal word

# All-ones decodes to opcode $F (HLT); stray jumps into unloaded ROM stop.
HLT_SENTINEL = 0xFFFF


# =============================================================================
#  REGISTER FILE
# =============================================================================
REG_PC = 0
REG_FLAGS = 1
MIN_REGISTERS = 5
MAX_REGISTERS = 16             # 4-bit register selector field
DEFAULT_REGISTERS = 5


# =============================================================================
#  FLAG BITS (positions inside the flags register)
# =============================================================================
FLAG_GT = 0
FLAG_EQ = 1
FLAG_LT = 2
COMPARE_FLAGS = (FLAG_GT, FLAG_EQ, FLAG_LT)


# =============================================================================
#  PACING
# =============================================================================
# Demo programs run at 50 ms per instruction so OUT lines scroll visibly.
DEMO_MS_PER_INSTRUCTION = 50


# =============================================================================
#  TRACE
# =============================================================================
# Trace keeps only the newest lines so an endless traced run stays bounded.
DEFAULT_TRACE_LIMIT = 10000


@dataclass
class MachineConfig:
    """Per-run tunables. Everything else about the machine is fixed."""
    num_registers: int = DEFAULT_REGISTERS
    ms_per_instruction: float = 0
    max_cycles: Optional[int] = None
    data_seed: Optional[int] = None
    trace: bool = False
    trace_limit: int = DEFAULT_TRACE_LIMIT

    def validate(self) -> "MachineConfig":
        if not MIN_REGISTERS <= self.num_registers <= MAX_REGISTERS:
            raise ValueError(
                f"num_registers must be {MIN_REGISTERS}..{MAX_REGISTERS}, "
                f"got {self.num_registers}")
        if self.ms_per_instruction < 0:
            raise ValueError(
                f"ms_per_instruction must be >= 0, got {self.ms_per_instruction}")
        if self.max_cycles is not None and self.max_cycles <= 0:
            raise ValueError(f"max_cycles must be positive, got {self.max_cycles}")
        if self.trace_limit <= 0:
            raise ValueError(f"trace_limit must be positive, got {self.trace_limit}")
        return self
