from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Union

import numpy as np

from .errors import make_unmatched_close, make_unmatched_open
from .sanitizer import Program

log = logging.getLogger(__name__)

UNMATCHED = -1


@dataclass(frozen=True)
class JumpTable:
    """Matching bracket positions, one slot per instruction.

    ``open_to_close[i]`` is the position of the ``]`` closing the ``[`` at
    ``i``; ``close_to_open`` is the reverse. Slots that do not hold the
    corresponding bracket are ``UNMATCHED``.
    """

    open_to_close: np.ndarray
    close_to_open: np.ndarray

    def __len__(self) -> int:
        return len(self.open_to_close)

    @property
    def pairs(self) -> int:
        return int(np.count_nonzero(self.open_to_close != UNMATCHED))

    def match(self, position: int) -> int:
        if not 0 <= position < len(self):
            raise KeyError(position)
        target = int(self.open_to_close[position])
        if target == UNMATCHED:
            target = int(self.close_to_open[position])
        if target == UNMATCHED:
            raise KeyError(position)
        return target


def resolve_brackets(program: Union[Program, str]) -> JumpTable:
    code = program.code if isinstance(program, Program) else program
    length = len(code)

    open_to_close = np.full(length, UNMATCHED, dtype=np.int64)
    close_to_open = np.full(length, UNMATCHED, dtype=np.int64)
    stack: List[int] = []

    for pos, cmd in enumerate(code):
        if cmd == '[':
            stack.append(pos)
        elif cmd == ']':
            if not stack:
                raise make_unmatched_close(code=code, position=pos)
            start = stack.pop()
            open_to_close[start] = pos
            close_to_open[pos] = start

    if stack:
        raise make_unmatched_open(code=code, position=stack[-1], unclosed=len(stack))

    table = JumpTable(open_to_close=open_to_close, close_to_open=close_to_open)
    log.debug("resolved %d bracket pairs", table.pairs)
    return table
