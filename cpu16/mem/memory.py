"""
CPU16 Emulator - 64K-Word Memory Bank

The machine is Harvard: two independent banks of 65536 16-bit words.

  ROM  program store. Written only by the program loader (load() bypasses
       protection); any write during execution raises ReadOnlyMemory.
  RAM  data store. Read-write; contents are arbitrary at power-up, like
       real uninitialized RAM.

Addresses and values are masked to 16 bits, so there is no out-of-range
access: the address space and the bank are the same size.
"""

from array import array
from random import Random
from typing import Dict, Iterable, Optional

from ..config import WORD_MASK, MEMORY_WORDS
from ..errors import ReadOnlyMemory


class MemoryBank:
    """Flat 64K-word memory bank."""

    def __init__(self, name: str, writable: bool = True, initial: int = 0x0000):
        self.name = name
        self.writable = writable
        self._mem = array('H', [initial & WORD_MASK]) * MEMORY_WORDS

    def __len__(self) -> int:
        return len(self._mem)

    # --- Core read/write ---

    def read(self, addr: int) -> int:
        return self._mem[addr & WORD_MASK]

    def write(self, addr: int, value: int):
        """Write one word. Read-only banks refuse with ReadOnlyMemory."""
        addr &= WORD_MASK
        if not self.writable:
            raise ReadOnlyMemory(self.name, addr)
        self._mem[addr] = value & WORD_MASK

    # --- Bulk load ---

    def load(self, words: Iterable[int], base_addr: int = 0,
             fill: Optional[int] = None) -> int:
        """Copy words into the bank starting at base_addr.

        Bypasses write protection (this is how ROM gets programmed).
        If ``fill`` is given, every word is first set to that value.
        Returns the number of words written.
        """
        if fill is not None:
            self.fill(fill)
        count = 0
        for i, word in enumerate(words):
            self._mem[(base_addr + i) & WORD_MASK] = word & WORD_MASK
            count += 1
        return count

    def fill(self, value: int):
        self._mem = array('H', [value & WORD_MASK]) * MEMORY_WORDS

    def randomize(self, rng: Optional[Random] = None):
        """Fill with pseudo-random words (power-up garbage)."""
        rng = rng or Random()
        self._mem = array('H', (rng.getrandbits(16) for _ in range(MEMORY_WORDS)))

    # --- Snapshots ---

    def snapshot(self, start: int = 0x0000, end: int = WORD_MASK) -> tuple:
        """Copy of words start..end (inclusive) for later diffing."""
        return tuple(self._mem[start:end + 1])

    @staticmethod
    def diff_snapshots(snap_a: tuple, snap_b: tuple,
                       base_addr: int = 0x0000) -> Dict[int, tuple]:
        """Compare two snapshots, return {addr: (old, new)} for changes."""
        changes = {}
        for i in range(min(len(snap_a), len(snap_b))):
            if snap_a[i] != snap_b[i]:
                changes[base_addr + i] = (snap_a[i], snap_b[i])
        return changes

    # --- Hex dump ---

    def hexdump(self, start: int, length: int = 64) -> str:
        """Hex dump, eight words per line."""
        lines = []
        for offset in range(0, length, 8):
            addr = (start + offset) & WORD_MASK
            words = ' '.join(f'{self._mem[(addr + i) & WORD_MASK]:04X}'
                             for i in range(min(8, length - offset)))
            lines.append(f'{addr:04X}  {words}')
        return '\n'.join(lines)
