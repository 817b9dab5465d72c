"""
CPU16 Emulator - Instruction Decoder / Opcode Table

Every instruction is two 16-bit words:

  word 1:  oooo aaaa bbbb cccc
           |    |    |    +-- field 4 (register C)
           |    |    +------- field 3 (register B / flag bit)
           |    +------------ field 2 (register A / jump mode)
           +----------------- opcode
  word 2:  16-bit literal (RAM address, ROM address or immediate value)

Instructions that do not need the literal still occupy it.

Operand layouts:
  NONE   no fields used                     HLT
  A      field 2 is a register              NOT, OUT
  AB     fields 2, 3 are registers          AND, OR, CMP, CPY
  ABC    fields 2, 3, 4 are registers       ADD, SUB
  AL     field 2 register + literal         MOV, LD, LDV
  JUMP   field 2 mode, field 3 flag, lit    J
"""

from typing import NamedTuple, Optional

from ..config import WORD_MASK


# ──────────────────────────────────────────────
# Operand layouts
# ──────────────────────────────────────────────

NONE = 'NONE'
A    = 'A'
AB   = 'AB'
ABC  = 'ABC'
AL   = 'AL'
JUMP = 'JUMP'


# ──────────────────────────────────────────────
# Opcode numbers
# ──────────────────────────────────────────────

OP_ADD = 0x0
OP_SUB = 0x1
OP_NOT = 0x2
OP_AND = 0x3
OP_OR  = 0x4
OP_CMP = 0x5
OP_CPY = 0x6
OP_OUT = 0x7
OP_MOV = 0x8
OP_LD  = 0x9
OP_LDV = 0xA
OP_J   = 0xE
OP_HLT = 0xF

# Jump modes (field 2 of J)
JUMP_IF_CLEAR = 0
JUMP_IF_SET = 1
# any mode >= 2 jumps unconditionally


class OpcodeInfo(NamedTuple):
    mnemonic: str
    layout: str
    description: str


# Format: opcode -> (mnemonic, operand layout, description)
# $B, $C and $D are reserved and have no entry.
OPCODES = {
    OP_ADD: OpcodeInfo('ADD', ABC,  'rC = rA + rB'),
    OP_SUB: OpcodeInfo('SUB', ABC,  'rC = rA - rB'),
    OP_NOT: OpcodeInfo('NOT', A,    'rA = ~rA'),
    OP_AND: OpcodeInfo('AND', AB,   'EQ = (rA & rB) != 0'),
    OP_OR:  OpcodeInfo('OR',  AB,   'EQ = (rA | rB) != 0'),
    OP_CMP: OpcodeInfo('CMP', AB,   'set GT/EQ/LT from rA ? rB'),
    OP_CPY: OpcodeInfo('CPY', AB,   'rB = rA'),
    OP_OUT: OpcodeInfo('OUT', A,    'print rA'),
    OP_MOV: OpcodeInfo('MOV', AL,   'RAM[lit] = rA'),
    OP_LD:  OpcodeInfo('LD',  AL,   'rA = RAM[lit]'),
    OP_LDV: OpcodeInfo('LDV', AL,   'rA = lit'),
    OP_J:   OpcodeInfo('J',   JUMP, 'PC = lit if condition'),
    OP_HLT: OpcodeInfo('HLT', NONE, 'halt until reset'),
}


class Decoded(NamedTuple):
    opcode: int
    f2: int
    f3: int
    f4: int


def decode(word: int) -> Decoded:
    """Split an instruction word into its four nibbles. No validation."""
    word &= WORD_MASK
    return Decoded(
        (word >> 12) & 0xF,
        (word >> 8) & 0xF,
        (word >> 4) & 0xF,
        word & 0xF,
    )


def encode(opcode: int, f2: int = 0, f3: int = 0, f4: int = 0) -> int:
    """Pack four nibbles back into an instruction word."""
    return ((opcode & 0xF) << 12) | ((f2 & 0xF) << 8) | ((f3 & 0xF) << 4) | (f4 & 0xF)


def lookup(opcode: int) -> Optional[OpcodeInfo]:
    """Opcode table entry, or None for a reserved/undefined opcode."""
    return OPCODES.get(opcode & 0xF)
