"""
CPU16 Emulator - Exception Hierarchy

  CPU16Error
   ├── CPU16Fault          machine fault, terminal for that emulator instance
   │    ├── InvalidRegister
   │    ├── ReservedRegister
   │    └── ReadOnlyMemory
   └── ProgramLoadError    bad program words or program file (also a ValueError)
"""


class CPU16Error(Exception):
    """Base class for every error raised by the emulator package."""


class CPU16Fault(CPU16Error):
    """A fault raised while executing an instruction.

    The run loop catches these and halts the machine with StopReason.FAULT,
    keeping the exception on ``emu.fault`` for inspection.
    """


class InvalidRegister(CPU16Fault):
    """Register selector outside the register file."""
    def __init__(self, index: int, num_registers: int):
        self.index = index
        self.num_registers = num_registers
        super().__init__(
            f"Register r{index} does not exist (register file has "
            f"{num_registers} registers: r0-r{num_registers - 1})")


class ReservedRegister(CPU16Fault):
    """Instruction tried to write r0 (PC) or r1 (flags) as a general register."""
    def __init__(self, index: int):
        self.index = index
        name = "PC" if index == 0 else "flags"
        super().__init__(f"Register r{index} ({name}) is not a general-purpose destination")


class ReadOnlyMemory(CPU16Fault):
    """Write to a memory bank that is read-only during execution."""
    def __init__(self, bank: str, addr: int):
        self.bank = bank
        self.addr = addr
        super().__init__(f"Write to read-only {bank} at ${addr:04X}")


class ProgramLoadError(CPU16Error, ValueError):
    """Raised on malformed program input."""
    def __init__(self, message: str, line_num: int = 0, source: str = ""):
        self.line_num = line_num
        self.source = source
        prefix = f"{source}: " if source else ""
        if line_num:
            prefix += f"line {line_num}: "
        super().__init__(prefix + message)
