"""
CPU16 Program Files

Two on-disk formats:

  .bin   raw big-endian 16-bit words, instruction word then literal word
  other  hex word text, e.g.

           ; fibonacci
           A200 0000     ; LDV 2, 0x0000
           0xA300, $0001 # LDV 3, 0x0001

         Words are separated by whitespace or commas and may carry a
         ``0x`` or ``$`` prefix. ``;`` and ``#`` start a comment.
"""

import logging
import string
import struct
from pathlib import Path
from typing import List, Sequence

from .config import WORD_MASK, MEMORY_WORDS
from .errors import ProgramLoadError

log = logging.getLogger('cpu16.loader')

BINARY_SUFFIXES = ('.bin',)
HEX_DIGITS = frozenset(string.hexdigits)


def parse_word(token: str, line_num: int = 0) -> int:
    """Parse one hex word token ('A200', '0xA200', '$A200')."""
    text = token.strip()
    if text[:2].lower() == '0x':
        text = text[2:]
    elif text.startswith('$'):
        text = text[1:]
    # int() would also take a sign or underscores
    if not text or not HEX_DIGITS.issuperset(text):
        raise ProgramLoadError(f"invalid hex word '{token}'", line_num)
    value = int(text, 16)
    if value > WORD_MASK:
        raise ProgramLoadError(f"word '{token}' does not fit in 16 bits", line_num)
    return value


def parse_words(text: str) -> List[int]:
    """Parse hex word text into a word list."""
    words = []
    for line_num, line in enumerate(text.splitlines(), start=1):
        for marker in (';', '#'):
            line = line.split(marker, 1)[0]
        for token in line.replace(',', ' ').split():
            words.append(parse_word(token, line_num))
    return words


def unpack_words(data: bytes) -> List[int]:
    """Big-endian bytes -> words."""
    if len(data) % 2:
        raise ProgramLoadError(f"binary program has odd length ({len(data)} bytes)")
    return list(struct.unpack(f'>{len(data) // 2}H', data))


def pack_words(words: Sequence[int]) -> bytes:
    return struct.pack(f'>{len(words)}H', *(w & WORD_MASK for w in words))


def read_program(path) -> List[int]:
    """Read a program file; the format is picked from the suffix."""
    path = Path(path)
    try:
        if path.suffix.lower() in BINARY_SUFFIXES:
            words = unpack_words(path.read_bytes())
        else:
            words = parse_words(path.read_text(encoding='utf-8'))
    except ProgramLoadError as e:
        raise ProgramLoadError(str(e), source=str(path)) from e
    except OSError as e:
        raise ProgramLoadError(f"cannot read program: {e.strerror}", source=str(path)) from e
    if len(words) > MEMORY_WORDS:
        raise ProgramLoadError(f"program has {len(words)} words, limit is {MEMORY_WORDS}",
                               source=str(path))
    log.info("Read %d words from %s", len(words), path)
    return words


def write_program(path, words: Sequence[int], listing: bool = True):
    """Write words to a program file (.bin or hex word text).

    Text output puts one instruction per line, with its disassembly as a
    comment when ``listing`` is set.
    """
    path = Path(path)
    if path.suffix.lower() in BINARY_SUFFIXES:
        path.write_bytes(pack_words(words))
        return
    from .disasm import disassemble
    lines = []
    for inst in disassemble(list(words)):
        line = inst.hex_str
        if listing:
            line += f"    ; {inst.text}"
        lines.append(line)
    path.write_text('\n'.join(lines) + '\n', encoding='utf-8')
