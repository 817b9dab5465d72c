"""
CPU16 Emulator - Instruction Pacing

The run loop calls ``pacer.wait()`` between cycles. Pacing is cosmetic
(it makes OUT output scroll at a watchable speed) and never affects what
the program computes, so tests run with NoDelay.
"""

import time


class NoDelay:
    """Run as fast as the host allows."""

    ms_per_instruction = 0

    def wait(self):
        pass


class SleepDelay:
    """Block the host thread for a fixed time after every instruction."""

    def __init__(self, ms_per_instruction: float, sleep=time.sleep):
        if ms_per_instruction < 0:
            raise ValueError(f"ms_per_instruction must be >= 0, got {ms_per_instruction}")
        self.ms_per_instruction = ms_per_instruction
        self._sleep = sleep

    def wait(self):
        self._sleep(self.ms_per_instruction / 1000.0)


def make_pacer(ms_per_instruction: float):
    """NoDelay for zero, SleepDelay otherwise."""
    if ms_per_instruction:
        return SleepDelay(ms_per_instruction)
    return NoDelay()
