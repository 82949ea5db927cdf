from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import BinaryIO, Optional, Union

from .brackets import JumpTable, resolve_brackets
from .config import CELL_MODULUS, TAPE_SIZE
from .sanitizer import Program

log = logging.getLogger(__name__)

_BYTES = [bytes((i,)) for i in range(CELL_MODULUS)]


@dataclass
class MachineState:
    tape: bytearray
    data_pointer: int = 0
    instruction_pointer: int = 0
    steps: int = 0
    bytes_read: int = 0
    bytes_written: int = 0
    eof_reads: int = 0

    @property
    def tape_size(self) -> int:
        return len(self.tape)

    @property
    def cell(self) -> int:
        return self.tape[self.data_pointer]


def new_state(tape_size: int = TAPE_SIZE) -> MachineState:
    if tape_size <= 0:
        raise ValueError(f"tape_size must be positive, got {tape_size}")
    return MachineState(tape=bytearray(tape_size))


def _read_byte(stdin: BinaryIO) -> Optional[int]:
    try:
        data = stdin.read(1)
    except (OSError, ValueError) as exc:
        log.debug("input read failed (%s), storing 0", exc)
        return None
    if not data:
        return None
    if isinstance(data, str):
        return ord(data) % CELL_MODULUS
    return data[0]


def execute(program: Union[Program, str], jumps: Optional[JumpTable] = None, *,
            tape_size: int = TAPE_SIZE, stdin: Optional[BinaryIO] = None,
            stdout: Optional[BinaryIO] = None, state: Optional[MachineState] = None) -> MachineState:
    """Run ``program`` to completion and return the final machine state.

    ``stdin``/``stdout`` are binary streams (standard input and output by
    default). ``,`` at end of input stores 0 and carries on. When ``state``
    is given its tape and data pointer are reused and ``tape_size`` is
    ignored.
    """
    code = program.code if isinstance(program, Program) else program
    if jumps is None:
        jumps = resolve_brackets(code)
    if state is None:
        state = new_state(tape_size)
    if stdin is None:
        stdin = sys.stdin.buffer
    if stdout is None:
        stdout = sys.stdout.buffer
    flush = getattr(stdout, "flush", None)

    open_to_close = jumps.open_to_close.tolist()
    close_to_open = jumps.close_to_open.tolist()

    tape = state.tape
    mem_len = len(tape)
    length = len(code)
    ptr = state.data_pointer
    i = 0
    steps = 0

    try:
        while i < length:
            cmd = code[i]
            steps += 1

            if cmd == '>':
                ptr = (ptr + 1) % mem_len
            elif cmd == '<':
                ptr = (ptr - 1 + mem_len) % mem_len
            elif cmd == '+':
                tape[ptr] = (tape[ptr] + 1) % CELL_MODULUS
            elif cmd == '-':
                tape[ptr] = (tape[ptr] - 1 + CELL_MODULUS) % CELL_MODULUS
            elif cmd == '.':
                stdout.write(_BYTES[tape[ptr]])
                if flush is not None:
                    flush()
                state.bytes_written += 1
            elif cmd == ',':
                value = _read_byte(stdin)
                if value is None:
                    tape[ptr] = 0
                    state.eof_reads += 1
                else:
                    tape[ptr] = value
                    state.bytes_read += 1
            elif cmd == '[':
                if tape[ptr] == 0:
                    i = open_to_close[i] + 1
                    continue
            elif cmd == ']':
                if tape[ptr] != 0:
                    i = close_to_open[i] + 1
                    continue
            i += 1
    finally:
        state.data_pointer = ptr
        state.instruction_pointer = i
        state.steps += steps

    log.debug(
        "run finished: %d steps, %d bytes out, %d bytes in, dp=%d",
        state.steps, state.bytes_written, state.bytes_read, state.data_pointer,
    )
    return state
