"""
CPU16 Disassembler

Turns instruction word pairs back into the assembly notation used in the
program listings:

    ADD 2 3 4        LDV 3, 0x0001        J 1 0, 0x0006        HLT

Reserved opcodes ($B-$D) come out as ``DW`` data lines.

API Usage:
    from cpu16.disasm import disassemble

    for inst in disassemble([0xA200, 0x0000, 0xF000, 0x0000]):
        print(inst.format())   # "$0000: A200 0000  LDV 2, 0x0000"
"""

from dataclasses import dataclass
from typing import List, Sequence

from .config import WORD_MASK, INSTRUCTION_WORDS
from .cpu.decoder import decode, lookup, NONE, A, AB, ABC, AL, JUMP


@dataclass
class DisassembledInstruction:
    """One decoded instruction with all formatting data."""
    address: int
    word: int
    literal: int
    mnemonic: str
    operand_str: str
    description: str = ""

    @property
    def hex_str(self) -> str:
        return f"{self.word:04X} {self.literal:04X}"

    @property
    def text(self) -> str:
        return f"{self.mnemonic} {self.operand_str}".strip()

    def format(self, show_description: bool = False) -> str:
        """Format as a single disassembly line."""
        line = f"${self.address:04X}: {self.hex_str}  {self.text}"
        if show_description and self.description:
            line = f"{line:<40s}; {self.description}"
        return line


def _format_operand(layout: str, f2: int, f3: int, f4: int, literal: int) -> str:
    if layout == NONE:
        return ""
    if layout == A:
        return f"{f2}"
    if layout == AB:
        return f"{f2} {f3}"
    if layout == ABC:
        return f"{f2} {f3} {f4}"
    if layout == AL:
        return f"{f2}, 0x{literal:04X}"
    if layout == JUMP:
        return f"{f2} {f3}, 0x{literal:04X}"
    raise ValueError(f"Unknown operand layout: {layout}")


def disassemble_one(word: int, literal: int = 0,
                    address: int = 0) -> DisassembledInstruction:
    """Decode exactly one instruction."""
    word &= WORD_MASK
    literal &= WORD_MASK
    opcode, f2, f3, f4 = decode(word)
    info = lookup(opcode)
    if info is None:
        return DisassembledInstruction(
            address=address, word=word, literal=literal,
            mnemonic='DW', operand_str=f"0x{word:04X}, 0x{literal:04X}",
            description=f"undefined opcode ${opcode:X}",
        )
    return DisassembledInstruction(
        address=address, word=word, literal=literal,
        mnemonic=info.mnemonic,
        operand_str=_format_operand(info.layout, f2, f3, f4, literal),
        description=info.description,
    )


def disassemble(words: Sequence[int], base_addr: int = 0) -> List[DisassembledInstruction]:
    """Disassemble a word sequence laid out as instruction pairs.

    A trailing odd word is decoded with a zero literal.
    """
    results = []
    for offset in range(0, len(words), INSTRUCTION_WORDS):
        word = words[offset]
        literal = words[offset + 1] if offset + 1 < len(words) else 0
        results.append(disassemble_one(word, literal, (base_addr + offset) & WORD_MASK))
    return results
