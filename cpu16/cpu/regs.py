"""
CPU16 Emulator - Register File

Register model:
  r0  - program counter (word address into program store)
  r1  - flags
          bit 0: GT (last compare: A > B)
          bit 1: EQ (last compare: A == B)
          bit 2: LT (last compare: A < B)
          bits 3-15: reserved, never touched by flag-setting instructions
  r2+ - general purpose (at least r2-r4, at most r2-r15)

All registers are 16-bit and power up as zero. Indexing outside the
register file raises InvalidRegister instead of aliasing anything else.
Instructions write through set_general(), which refuses r0/r1 with
ReservedRegister; only the fetch increment and J move the PC, and only
CMP/AND/OR change the flags.
"""

from typing import List

from ..config import (
    WORD_MASK, REG_PC, REG_FLAGS, FLAG_GT, FLAG_EQ, FLAG_LT,
    MIN_REGISTERS, MAX_REGISTERS, DEFAULT_REGISTERS,
)
from ..errors import InvalidRegister, ReservedRegister
from .alu import get_bit


class Registers:
    """CPU16 register file with bounds-checked indexed access."""

    __slots__ = ('_slots', 'cycles')

    def __init__(self, count: int = DEFAULT_REGISTERS):
        if not MIN_REGISTERS <= count <= MAX_REGISTERS:
            raise ValueError(
                f"Register file size must be {MIN_REGISTERS}..{MAX_REGISTERS}, got {count}")
        self._slots: List[int] = [0] * count
        self.cycles: int = 0  # instructions executed since reset

    def __len__(self) -> int:
        return len(self._slots)

    # --- Indexed access ---

    def get(self, index: int) -> int:
        if not 0 <= index < len(self._slots):
            raise InvalidRegister(index, len(self._slots))
        return self._slots[index]

    def set(self, index: int, value: int):
        if not 0 <= index < len(self._slots):
            raise InvalidRegister(index, len(self._slots))
        self._slots[index] = value & WORD_MASK

    def set_general(self, index: int, value: int):
        """Instruction write path: r0 and r1 are only written through PC/flags."""
        if 0 <= index <= REG_FLAGS:
            raise ReservedRegister(index)
        self.set(index, value)

    # --- Named slots ---

    @property
    def PC(self) -> int:
        return self._slots[REG_PC]

    @PC.setter
    def PC(self, value: int):
        self._slots[REG_PC] = value & WORD_MASK

    @property
    def flags(self) -> int:
        return self._slots[REG_FLAGS]

    @flags.setter
    def flags(self, value: int):
        self._slots[REG_FLAGS] = value & WORD_MASK

    @property
    def greater(self) -> bool:
        return get_bit(self.flags, FLAG_GT)

    @property
    def equal(self) -> bool:
        return get_bit(self.flags, FLAG_EQ)

    @property
    def less(self) -> bool:
        return get_bit(self.flags, FLAG_LT)

    def snapshot(self) -> tuple:
        """Immutable copy of every slot, r0 first."""
        return tuple(self._slots)

    # --- Display ---

    def display(self) -> str:
        """Format register state for trace output."""
        flag_str = ''.join(
            c if get_bit(self.flags, bit) else '.'
            for c, bit in (('L', FLAG_LT), ('E', FLAG_EQ), ('G', FLAG_GT))
        )
        gprs = ' '.join(f"r{i}={v:04X}" for i, v in enumerate(self._slots) if i > REG_FLAGS)
        return f"PC={self.PC:04X} FL={self.flags:04X} [{flag_str}] {gprs}"

    def reset(self):
        """Reset every register to zero."""
        for i in range(len(self._slots)):
            self._slots[i] = 0
        self.cycles = 0
