from __future__ import annotations

import io
from dataclasses import dataclass
from typing import BinaryIO, Optional, Tuple, Union

from .brackets import JumpTable, resolve_brackets
from .config import InterpreterConfig, PROGRAM_MAX, TAPE_SIZE
from .engine import MachineState, execute
from .sanitizer import Program, Source, sanitize, sanitize_stream


@dataclass(frozen=True)
class RunOptions:
    tape_size: int = TAPE_SIZE
    program_max: int = PROGRAM_MAX
    strict: bool = False

    @classmethod
    def from_config(cls, config: InterpreterConfig) -> "RunOptions":
        return cls(tape_size=config.tape_size, program_max=config.program_max, strict=config.strict)


@dataclass(frozen=True)
class RunResult:
    output: bytes
    state: MachineState
    program: Program


def _options(options: Optional[RunOptions]) -> RunOptions:
    opts = RunOptions() if options is None else options
    InterpreterConfig(program_max=opts.program_max, tape_size=opts.tape_size, strict=opts.strict).validate()
    return opts


def load_program(source: Source, *, options: Optional[RunOptions] = None) -> Tuple[Program, JumpTable]:
    opts = _options(options)
    program = sanitize(source, capacity=opts.program_max, strict=opts.strict)
    return program, resolve_brackets(program)


def run_string(source: Source, *, input_data: Union[str, bytes] = b"",
               options: Optional[RunOptions] = None) -> RunResult:
    opts = _options(options)
    program, jumps = load_program(source, options=opts)

    if isinstance(input_data, str):
        input_data = input_data.encode("utf-8")
    stdin = io.BytesIO(input_data)
    stdout = io.BytesIO()

    state = execute(program, jumps, tape_size=opts.tape_size, stdin=stdin, stdout=stdout)
    return RunResult(output=stdout.getvalue(), state=state, program=program)


def run_stream(source_stream: BinaryIO, *, stdin: Optional[BinaryIO] = None, stdout: Optional[BinaryIO] = None,
               options: Optional[RunOptions] = None) -> MachineState:
    opts = _options(options)
    program = sanitize_stream(source_stream, capacity=opts.program_max, strict=opts.strict)
    jumps = resolve_brackets(program)
    return execute(program, jumps, tape_size=opts.tape_size, stdin=stdin, stdout=stdout)
