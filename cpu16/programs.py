"""
CPU16 Demo Programs

Hand-assembled machine code. Each instruction is two words; the comment
on each pair is its assembly.
"""

# Fibonacci sequence, stops when the 16-bit sum wraps.
#
#         LDV 2, 0x0000
#         LDV 3, 0x0001
#         ADD 2 3 4
# loop:   OUT 4            ; $0006
#         CPY 3 2
#         CPY 4 3
#         ADD 2 3 4
#         CMP 4 3
#         J 1 0, loop      ; jump while r4 > r3 (GT flag set)
#                          ; falls through into $FFFF sentinel -> HLT
FIBONACCI = (
    0xA200, 0x0000,
    0xA300, 0x0001,
    0x0234, 0x0000,
    0x7400, 0x0000,
    0x6320, 0x0000,
    0x6430, 0x0000,
    0x0234, 0x0000,
    0x5430, 0x0000,
    0xE100, 0x0006,
)

# Count r2 down from 5 to 1 using SUB and a jump-if-clear on EQ.
#
#         LDV 2, 0x0005
#         LDV 3, 0x0001
#         LDV 4, 0x0000
# loop:   OUT 2            ; $0006
#         SUB 2 3 2
#         CMP 2 4
#         J 0 1, loop      ; jump while r2 != 0 (EQ clear)
#         HLT
COUNTDOWN = (
    0xA200, 0x0005,
    0xA300, 0x0001,
    0xA400, 0x0000,
    0x7200, 0x0000,
    0x1232, 0x0000,
    0x5240, 0x0000,
    0xE010, 0x0006,
    0xF000, 0x0000,
)

PROGRAMS = {
    'fibonacci': FIBONACCI,
    'countdown': COUNTDOWN,
}
