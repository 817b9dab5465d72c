"""
CPU16 Emulator - ALU Operations + Flag Bit Helpers

All functions are pure: they take register values and return new values.
The engine decides where results land. Every result is a 16-bit word;
arithmetic wraps modulo 2^16 (two's complement) and never traps.

Flag layout (flags register, bit positions):
  0: GT   1: EQ   2: LT   3-15: reserved
"""

from ..config import WORD_MASK, FLAG_GT, FLAG_EQ, FLAG_LT, COMPARE_FLAGS


# ══════════════════════════════════════════════
# Flag unit - bit access on a flags value
# ══════════════════════════════════════════════

def get_bit(word: int, pos: int) -> bool:
    """True if bit ``pos`` (0 = LSB) of ``word`` is set."""
    return bool(word & (1 << pos))


def set_bit(word: int, pos: int, value: bool) -> int:
    """Return ``word`` with bit ``pos`` set or cleared."""
    mask = 1 << pos
    if value:
        return (word | mask) & WORD_MASK
    return word & ~mask & WORD_MASK


def clear_compare_flags(flags: int) -> int:
    """Clear GT, EQ and LT. Reserved bits 3-15 pass through."""
    for bit in COMPARE_FLAGS:
        flags = set_bit(flags, bit, False)
    return flags


# ══════════════════════════════════════════════
# 16-bit arithmetic
# ══════════════════════════════════════════════

def add16(a: int, b: int) -> int:
    return (a + b) & WORD_MASK


def sub16(a: int, b: int) -> int:
    """A - B with two's-complement wrap (0 - 1 = $FFFF)."""
    return (a - b) & WORD_MASK


def not16(a: int) -> int:
    return ~a & WORD_MASK


def and16(a: int, b: int) -> int:
    return a & b & WORD_MASK


def or16(a: int, b: int) -> int:
    return (a | b) & WORD_MASK


# ══════════════════════════════════════════════
# Flag-producing operations - return the new flags value
# ══════════════════════════════════════════════

def compare16(flags: int, a: int, b: int) -> int:
    """Unsigned compare of A to B. Exactly one of GT/EQ/LT ends up set."""
    flags = clear_compare_flags(flags)
    if a > b:
        flags = set_bit(flags, FLAG_GT, True)
    elif a == b:
        flags = set_bit(flags, FLAG_EQ, True)
    else:
        flags = set_bit(flags, FLAG_LT, True)
    return flags


def logic_flags(flags: int, result: int) -> int:
    """Flags after AND/OR: EQ set means the result is nonzero ("true").

    GT and LT are always cleared; a zero result leaves all three clear.
    """
    flags = clear_compare_flags(flags)
    if result & WORD_MASK:
        flags = set_bit(flags, FLAG_EQ, True)
    return flags
