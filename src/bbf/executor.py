from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
from numba import njit

from .errors import BBFExecutionError

logger = logging.getLogger(__name__)

PROGRAM_CHARS = '><+-.,[]~&'

STOP_OUTPUT = 1
STOP_INPUT = 2
STOP_END = 3
STOP_STEPS = 4
STOP_CHAR_OUTPUT = 5
STOP_DUMP = 6

DUMP_WIDTH = 32


@dataclass(frozen=True)
class ExecutorOptions:
    tape_size: int = 30000
    bits: int = 8
    number_input: bool = False  # read ',' input as single decimal digits
    step_limit: Optional[int] = None


@njit(cache=True)
def run_until_io(program_arr, memory, pc, pointer, bracket_map_arr, cell_mask, max_steps):
    """
    Execute until an I/O or dump instruction, the end of the program, or
    `max_steps` instructions. I/O instructions are left for the caller:
    `pc` is returned pointing at them.
    """
    stop_reason = 0
    mem_len = len(memory)
    prog_len = len(program_arr)
    steps = 0

    while pc < prog_len and steps < max_steps:
        command = program_arr[pc]

        if command == 62:  # '>'
            pointer = (pointer + 1) % mem_len
        elif command == 60:  # '<'
            pointer = (pointer - 1) % mem_len
        elif command == 43:  # '+'
            memory[pointer] = (memory[pointer] + 1) & cell_mask
        elif command == 45:  # '-'
            memory[pointer] = (memory[pointer] - 1) & cell_mask
        elif command == 46:  # '.'
            stop_reason = STOP_OUTPUT
            break
        elif command == 126:  # '~'
            stop_reason = STOP_CHAR_OUTPUT
            break
        elif command == 44:  # ','
            stop_reason = STOP_INPUT
            break
        elif command == 38:  # '&'
            stop_reason = STOP_DUMP
            break
        elif command == 91:  # '['
            if memory[pointer] == 0:
                pc = bracket_map_arr[pc]
        elif command == 93:  # ']'
            if memory[pointer] != 0:
                pc = bracket_map_arr[pc]

        pc += 1
        steps += 1

    if stop_reason == 0:
        if pc >= prog_len:
            stop_reason = STOP_END
        else:
            stop_reason = STOP_STEPS

    return pc, pointer, stop_reason, steps


class TapeMachine:
    """
    Runs compiled programs on a fixed-size tape of wrap-around cells.

    `.` prints the cell as decimal text, `~` as a single character, `,` reads
    the next input character (or digit, in number mode; 0 once input runs
    out) and `&` records a dump of the start of the tape.
    """

    CHUNK_STEPS = 1_000_000

    def __init__(self, options: Optional[ExecutorOptions] = None):
        self.options = options or ExecutorOptions()
        if not 1 <= self.options.bits <= 32:
            raise BBFExecutionError(f"Cell width must be between 1 and 32 bits, got {self.options.bits}")
        if self.options.tape_size <= 0:
            raise BBFExecutionError(f"Tape size must be positive, got {self.options.tape_size}")
        self.cell_mask = (1 << self.options.bits) - 1
        self.reset()

    def reset(self):
        self.memory = np.zeros(self.options.tape_size, dtype=np.int64)
        self.pointer = 0
        self.pc = 0
        self.step_count = 0
        self.output_buffer: List[str] = []
        self.dumps: List[List[int]] = []
        self.program = ''
        self.program_arr = np.array([], dtype=np.int32)
        self.bracket_map_arr = np.array([], dtype=np.int32)

    def load_program(self, program_text: str) -> None:
        self.reset()
        self.program = ''.join(ch for ch in program_text if ch in PROGRAM_CHARS)
        self.program_arr = np.array([ord(c) for c in self.program], dtype=np.int32)
        self._preprocess_brackets()

    def _preprocess_brackets(self):
        self.bracket_map_arr = np.arange(len(self.program), dtype=np.int32)
        stack = []
        for i, char in enumerate(self.program):
            if char == '[':
                stack.append(i)
            elif char == ']':
                if not stack:
                    raise BBFExecutionError(f"Unmatched ']' bracket at instruction {i}")
                start = stack.pop()
                self.bracket_map_arr[start] = i
                self.bracket_map_arr[i] = start
        if stack:
            raise BBFExecutionError(f"Unmatched '[' bracket at instruction {stack[-1]}")

    def _read_input(self, input_text: str, cursor: int) -> int:
        if cursor >= len(input_text):
            return 0
        ch = input_text[cursor]
        if self.options.number_input:
            if not ch.isdigit():
                raise BBFExecutionError(f"Expected a digit in numeric input, got {ch!r}")
            return int(ch)
        return ord(ch)

    def run(self, program_text: str, input_text: str = '') -> str:
        self.load_program(program_text)
        cursor = 0
        limit = self.options.step_limit

        while True:
            budget = self.CHUNK_STEPS
            if limit is not None:
                budget = min(budget, limit - self.step_count)
                if budget <= 0:
                    raise BBFExecutionError(f"Step limit of {limit} exceeded")

            self.pc, self.pointer, stop_reason, steps = run_until_io(
                self.program_arr, self.memory, self.pc, self.pointer,
                self.bracket_map_arr, self.cell_mask, budget,
            )
            self.step_count += steps

            if stop_reason == STOP_END:
                break
            if stop_reason == STOP_STEPS:
                continue

            value = int(self.memory[self.pointer])
            if stop_reason == STOP_OUTPUT:
                self.output_buffer.append(str(value))
            elif stop_reason == STOP_CHAR_OUTPUT:
                if value > 0x10FFFF:
                    raise BBFExecutionError(f"Cell value {value} is not a valid code point")
                self.output_buffer.append(chr(value))
            elif stop_reason == STOP_INPUT:
                self.memory[self.pointer] = self._read_input(input_text, cursor) & self.cell_mask
                cursor += 1
            elif stop_reason == STOP_DUMP:
                snapshot = [int(v) for v in self.memory[:DUMP_WIDTH]]
                self.dumps.append(snapshot)
                logger.info("Tape dump at pointer %d: %s", self.pointer, snapshot)
            self.pc += 1
            self.step_count += 1

        return ''.join(self.output_buffer)


def execute(program_text: str, input_text: str = '', options: Optional[ExecutorOptions] = None) -> str:
    return TapeMachine(options).run(program_text, input_text)
