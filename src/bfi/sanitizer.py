"""Reduce raw source to the eight Brainfuck instructions.

Everything that is not one of ``> < + - . , [ ]`` is a comment and is
dropped without a diagnostic. Sources may arrive in one piece (a literal
program string) or as a stream read in chunks; either way the filtered
instructions are compacted onto the end of a single buffer bounded by the
configured capacity.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import BinaryIO, Union

from .config import INSTRUCTIONS, PROGRAM_MAX
from .errors import make_capacity_exceeded

log = logging.getLogger(__name__)

Source = Union[str, bytes, bytearray]

_CODE_BYTES = frozenset(INSTRUCTIONS.encode("ascii"))
_DROP = bytes(b for b in range(256) if b not in _CODE_BYTES)


def is_code_char(ch: Union[str, int]) -> bool:
    if isinstance(ch, int):
        return ch in _CODE_BYTES
    return len(ch) == 1 and ch in INSTRUCTIONS


def _as_bytes(chunk: Source) -> bytes:
    if isinstance(chunk, str):
        return chunk.encode("utf-8", "surrogatepass")
    return bytes(chunk)


@dataclass(frozen=True)
class Program:
    code: str
    truncated: bool = False
    capacity: int = PROGRAM_MAX

    def __len__(self) -> int:
        return len(self.code)

    def __str__(self) -> str:
        return self.code


class Sanitizer:
    """Incremental filter with a fixed instruction capacity.

    ``feed`` may be called any number of times; it returns ``False`` once
    the buffer is full so callers reading from a stream know to stop. In
    strict mode an instruction that does not fit raises
    ``ProgramCapacityExceeded`` instead of being dropped.
    """

    def __init__(self, capacity: int = PROGRAM_MAX, *, strict: bool = False):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.strict = strict
        self.truncated = False
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def full(self) -> bool:
        return len(self._buffer) >= self.capacity

    def feed(self, chunk: Source) -> bool:
        filtered = _as_bytes(chunk).translate(None, _DROP)
        room = self.capacity - len(self._buffer)

        if len(filtered) > room:
            if self.strict:
                raise make_capacity_exceeded(capacity=self.capacity)
            if not self.truncated:
                log.debug("program exceeds %d instructions, truncating", self.capacity)
            self.truncated = True
            filtered = filtered[:room]

        self._buffer += filtered
        return not self.full

    def program(self) -> Program:
        return Program(
            code=self._buffer.decode("ascii"),
            truncated=self.truncated,
            capacity=self.capacity,
        )


def sanitize(source: Source, *, capacity: int = PROGRAM_MAX, strict: bool = False) -> Program:
    sanitizer = Sanitizer(capacity, strict=strict)
    sanitizer.feed(source)
    program = sanitizer.program()
    log.debug("sanitized %d instructions from literal source", len(program))
    return program


def sanitize_stream(stream: BinaryIO, *, capacity: int = PROGRAM_MAX, strict: bool = False,
                    chunk_size: int = 4096) -> Program:
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    sanitizer = Sanitizer(capacity, strict=strict)
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        if not sanitizer.feed(chunk) and not strict:
            # Full: the rest of the stream is left unread.
            break

    program = sanitizer.program()
    log.debug("sanitized %d instructions from stream", len(program))
    return program
