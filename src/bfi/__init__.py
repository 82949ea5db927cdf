
from .brackets import JumpTable, resolve_brackets
from .config import InterpreterConfig, PROGRAM_MAX, TAPE_SIZE
from .engine import MachineState, execute, new_state
from .errors import (
    BFError,
    BracketError,
    ProgramCapacityExceeded,
    UnmatchedCloseBracket,
    UnmatchedOpenBracket,
)
from .sanitizer import Program, Sanitizer, is_code_char, sanitize, sanitize_stream
from .api import RunOptions, RunResult, load_program, run_stream, run_string

__all__ = [
    'JumpTable',
    'resolve_brackets',
    'InterpreterConfig',
    'PROGRAM_MAX',
    'TAPE_SIZE',
    'MachineState',
    'execute',
    'new_state',
    'BFError',
    'BracketError',
    'ProgramCapacityExceeded',
    'UnmatchedCloseBracket',
    'UnmatchedOpenBracket',
    'Program',
    'Sanitizer',
    'is_code_char',
    'sanitize',
    'sanitize_stream',
    'RunOptions',
    'RunResult',
    'load_program',
    'run_stream',
    'run_string',
]
