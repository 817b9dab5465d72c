"""
CPU16 Emulator - Main Emulator Class

This is the top-level class that integrates:
  - Register file + flags (cpu/regs.py)
  - Program store and data store (mem/memory.py)
  - Instruction decoder (cpu/decoder.py)
  - ALU operations (cpu/alu.py)
  - Instruction pacing (pacing.py)

Execution model, one cycle:
  1. Fetch instruction word at PC and literal word at PC+1 (program store)
  2. Advance PC by 2 (before dispatch, so a jump fully overrides it)
  3. Decode instruction word into opcode + three fields
  4. Execute handler -> update registers, flags, data store, output
  5. Check halt; otherwise pace and go again

Termination reasons:
  - HALT:     HLT instruction
  - ILLEGAL:  reserved opcode ($B-$D); treated as a halt, but tagged
  - FAULT:    invalid register selector, instruction write to r0/r1,
              or write to program store
  - BREAK:    breakpoint address reached
  - TIMEOUT:  max_cycles exceeded

HALT, ILLEGAL and FAULT are terminal until reset(). BREAK and TIMEOUT just
return control to the caller; run() can be called again to continue.
"""

import logging
import sys
from collections import deque
from enum import Enum
from pathlib import Path
from random import Random
from typing import Deque, Iterable, List, Optional, Set

from .config import MachineConfig, HLT_SENTINEL, INSTRUCTION_WORDS, MEMORY_WORDS, WORD_MASK
from .cpu.regs import Registers
from .cpu.decoder import (
    decode,
    OP_ADD, OP_SUB, OP_NOT, OP_AND, OP_OR, OP_CMP, OP_CPY, OP_OUT,
    OP_MOV, OP_LD, OP_LDV, OP_J, OP_HLT,
    JUMP_IF_CLEAR, JUMP_IF_SET,
)
from .cpu import alu
from .mem.memory import MemoryBank
from .disasm import disassemble_one
from .errors import CPU16Fault, ProgramLoadError
from .pacing import make_pacer

log = logging.getLogger('cpu16.emu')


class StopReason(Enum):
    HALT = 'HALT'
    ILLEGAL = 'ILLEGAL'
    FAULT = 'FAULT'
    BREAK = 'BREAK'
    TIMEOUT = 'TIMEOUT'


class CPU16Emulator:
    """Hypothetical 16-bit CPU emulator.

    Every instance owns its own registers, memories, halt state, output
    sink and pacer, so any number of machines can run side by side.

    Usage:
        emu = CPU16Emulator()
        emu.load_program([0xA200, 0x002A, 0x7200, 0x0000, 0xF000, 0x0000])
        reason = emu.run()       # prints "42", returns StopReason.HALT
        emu.output               # [42]
    """

    def __init__(self, config: Optional[MachineConfig] = None,
                 output=None, pacer=None):
        self.config = (config or MachineConfig()).validate()

        # Core components
        self.regs = Registers(self.config.num_registers)
        self.rom = MemoryBank('ROM', writable=False, initial=HLT_SENTINEL)
        self.ram = MemoryBank('RAM')
        self._rng = Random(self.config.data_seed)
        self.ram.randomize(self._rng)

        # OUT sink: text stream (None = sys.stdout at write time) + value log
        self.out_stream = output
        self.output: List[int] = []

        self.pacer = pacer if pacer is not None else make_pacer(self.config.ms_per_instruction)

        # Halt state
        self.halted = False
        self.halt_reason: Optional[StopReason] = None
        self.fault: Optional[CPU16Fault] = None

        # Breakpoints: set of PC addresses that trigger BREAK
        self._breakpoints: Set[int] = set()

        # Trace output, newest trace_limit lines
        self._trace = self.config.trace
        self._trace_output: Deque[str] = deque(maxlen=self.config.trace_limit)

        # Instruction dispatch table
        self._dispatch = self._build_dispatch()

    # ══════════════════════════════════════════════
    # Loading
    # ══════════════════════════════════════════════

    def load_program(self, words: Iterable[int]):
        """Copy a program into the program store at $0000.

        Every word past the program is set to HLT_SENTINEL, so a stray
        jump into unloaded memory halts instead of running garbage.
        """
        words = list(words)
        if len(words) > MEMORY_WORDS:
            raise ProgramLoadError(
                f"Program has {len(words)} words, program store holds {MEMORY_WORDS}")
        for i, word in enumerate(words):
            if not isinstance(word, int) or not 0 <= word <= WORD_MASK:
                raise ProgramLoadError(f"Word {i} is not a 16-bit value: {word!r}")
        self.rom.load(words, 0, fill=HLT_SENTINEL)
        log.info("Loaded %d words into program store", len(words))

    def load_file(self, path):
        """Load a program file (see loader.read_program for formats)."""
        from .loader import read_program
        self.load_program(read_program(Path(path)))

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> Optional[StopReason]:
        """Execute one instruction. Returns StopReason if halted, else None."""
        if self.halted:
            return self.halt_reason

        pc = self.regs.PC
        word = self.rom.read(pc)
        literal = self.rom.read((pc + 1) & WORD_MASK)

        if self._trace:
            line = f"${pc:04X}: {disassemble_one(word, literal, pc).text:18s} {self.regs.display()}"
            self._trace_output.append(line)
            log.debug(line)

        self.regs.PC = pc + INSTRUCTION_WORDS

        opcode, f2, f3, f4 = decode(word)

        try:
            self.execute(opcode, f2, f3, f4, literal)
        except CPU16Fault as e:
            self.fault = e
            self._halt(StopReason.FAULT)
            log.error("Fault at $%04X (%04X %04X): %s", pc, word, literal, e)

        self.regs.cycles += 1
        return self.halt_reason if self.halted else None

    def run(self, max_cycles: Optional[int] = None) -> StopReason:
        """Run until halted, a breakpoint, or max_cycles instructions.

        A breakpoint on the instruction PC points at when run() is called
        does not fire, so run() after BREAK continues past it.
        """
        if max_cycles is None:
            max_cycles = self.config.max_cycles

        executed = 0
        while not self.halted:
            if max_cycles is not None and executed >= max_cycles:
                return StopReason.TIMEOUT
            if executed and self.regs.PC in self._breakpoints:
                return StopReason.BREAK

            reason = self.step()
            executed += 1
            if reason is not None:
                return reason

            self.pacer.wait()

        return self.halt_reason

    def execute(self, opcode: int, f2: int, f3: int, f4: int, literal: int):
        """Apply one decoded instruction. PC must already be advanced.

        Raises InvalidRegister / ReservedRegister / ReadOnlyMemory on a fault. Every handler
        does all of its reads before its single write, so a fault never
        leaves an instruction half applied.
        """
        handler = self._dispatch.get(opcode)
        if handler is None:
            log.warning("Undefined opcode $%X at $%04X, halting",
                        opcode, (self.regs.PC - INSTRUCTION_WORDS) & WORD_MASK)
            self._halt(StopReason.ILLEGAL)
            return
        handler(f2, f3, f4, literal)

    def _halt(self, reason: StopReason):
        self.halted = True
        self.halt_reason = reason

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════
    # Handler signature: handler(f2, f3, f4, literal)

    def _build_dispatch(self) -> dict:
        """Build opcode -> handler dispatch table."""
        return {
            OP_ADD: self._op_add,
            OP_SUB: self._op_sub,
            OP_NOT: self._op_not,
            OP_AND: self._op_and,
            OP_OR:  self._op_or,
            OP_CMP: self._op_cmp,
            OP_CPY: self._op_cpy,
            OP_OUT: self._op_out,
            OP_MOV: self._op_mov,
            OP_LD:  self._op_ld,
            OP_LDV: self._op_ldv,
            OP_J:   self._op_j,
            OP_HLT: self._op_hlt,
        }

    # ── Arithmetic ──

    def _op_add(self, a, b, c, lit):
        self.regs.set_general(c, alu.add16(self.regs.get(a), self.regs.get(b)))

    def _op_sub(self, a, b, c, lit):
        self.regs.set_general(c, alu.sub16(self.regs.get(a), self.regs.get(b)))

    # ── Logic ──

    def _op_not(self, a, b, c, lit):
        self.regs.set_general(a, alu.not16(self.regs.get(a)))

    def _op_and(self, a, b, c, lit):
        result = alu.and16(self.regs.get(a), self.regs.get(b))
        self.regs.flags = alu.logic_flags(self.regs.flags, result)

    def _op_or(self, a, b, c, lit):
        result = alu.or16(self.regs.get(a), self.regs.get(b))
        self.regs.flags = alu.logic_flags(self.regs.flags, result)

    # ── Compare ──

    def _op_cmp(self, a, b, c, lit):
        self.regs.flags = alu.compare16(self.regs.flags, self.regs.get(a), self.regs.get(b))

    # ── Transfer ──

    def _op_cpy(self, a, b, c, lit):
        self.regs.set_general(b, self.regs.get(a))

    def _op_mov(self, a, b, c, lit):
        self.ram.write(lit, self.regs.get(a))

    def _op_ld(self, a, b, c, lit):
        value = self.ram.read(lit)
        self.regs.set_general(a, value)

    def _op_ldv(self, a, b, c, lit):
        self.regs.set_general(a, lit)

    # ── Output ──

    def _op_out(self, a, b, c, lit):
        value = self.regs.get(a)
        self.output.append(value)
        print(value, file=self.out_stream if self.out_stream is not None else sys.stdout)

    # ── Control ──

    def _op_j(self, mode, flag_bit, c, lit):
        if mode == JUMP_IF_CLEAR:
            taken = not alu.get_bit(self.regs.flags, flag_bit)
        elif mode == JUMP_IF_SET:
            taken = alu.get_bit(self.regs.flags, flag_bit)
        else:
            taken = True
        if taken:
            self.regs.PC = lit

    def _op_hlt(self, a, b, c, lit):
        self._halt(StopReason.HALT)

    # ══════════════════════════════════════════════
    # Breakpoint API
    # ══════════════════════════════════════════════

    def add_breakpoint(self, addr: int):
        """Add a breakpoint at PC address. run() stops when PC hits this."""
        self._breakpoints.add(addr & WORD_MASK)

    def remove_breakpoint(self, addr: int):
        self._breakpoints.discard(addr & WORD_MASK)

    def clear_breakpoints(self):
        self._breakpoints.clear()

    # ══════════════════════════════════════════════
    # Trace / Debug
    # ══════════════════════════════════════════════

    def enable_trace(self, enable: bool = True):
        """Enable instruction trace logging."""
        self._trace = enable

    def get_trace(self) -> str:
        """Traced lines, oldest first. Only the last trace_limit are kept."""
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()

    def dump_state(self) -> str:
        status = self.halt_reason.value if self.halted else 'RUNNING'
        line = f"{self.regs.display()} cycles={self.regs.cycles} [{status}]"
        if self.fault is not None:
            line += f" fault: {self.fault}"
        return line

    def reset(self, clear_data: bool = False):
        """Full emulator reset. The loaded program stays in ROM.

        With clear_data, the data store is refilled with fresh garbage.
        """
        self.regs.reset()
        self.halted = False
        self.halt_reason = None
        self.fault = None
        self.output.clear()
        self._breakpoints.clear()
        self._trace_output.clear()
        if clear_data:
            self.ram.randomize(self._rng)
        log.info("Emulator reset")
