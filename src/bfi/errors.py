from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


def _build_context(code: str, position: int, *, context: int = 20) -> str:
    start = max(0, position - context)
    end = min(len(code), position + context + 1)

    excerpt = code[start:end]
    prefix = "..." if start > 0 else ""
    suffix = "..." if end < len(code) else ""
    caret = " " * (len(prefix) + position - start) + "^"
    return f"  {prefix}{excerpt}{suffix}\n  {caret}"


def _hint_for(kind: str) -> Optional[str]:
    if kind == 'open':
        return "Every '[' needs a matching ']' later in the program."
    if kind == 'close':
        return "This ']' closes a loop that was never opened. Check for a missing '[' before it."
    if kind == 'capacity':
        return 'Shorten the program or raise the limit with --program-max / BFI_PROGRAM_MAX.'
    return None


@dataclass
class BFError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class BracketError(BFError):
    position: int
    context: str


@dataclass
class UnmatchedOpenBracket(BracketError):
    unclosed: int = 1


@dataclass
class UnmatchedCloseBracket(BracketError):
    pass


@dataclass
class ProgramCapacityExceeded(BFError):
    capacity: int


def _render(headline: str, detail: str, ctx: str, kind: str) -> str:
    hint = _hint_for(kind)
    hint_block = f"\nHint: {hint}" if hint else ""
    body = f"\n{ctx}" if ctx else ""
    return f"{headline}\n{detail}{body}{hint_block}"


def make_unmatched_open(*, code: str, position: int, unclosed: int = 1) -> UnmatchedOpenBracket:
    ctx = _build_context(code, position)
    detail = f"'[' at position {position} is never closed"
    if unclosed > 1:
        detail += f" ({unclosed} unclosed brackets)"
    return UnmatchedOpenBracket(
        message=_render("Error: unmatched '['", detail, ctx, 'open'),
        position=position,
        context=ctx,
        unclosed=unclosed,
    )


def make_unmatched_close(*, code: str, position: int) -> UnmatchedCloseBracket:
    ctx = _build_context(code, position)
    return UnmatchedCloseBracket(
        message=_render("Error: unmatched ']'", f"']' at position {position} has no opening '['", ctx, 'close'),
        position=position,
        context=ctx,
    )


def make_capacity_exceeded(*, capacity: int) -> ProgramCapacityExceeded:
    return ProgramCapacityExceeded(
        message=_render(
            "Error: program too large",
            f"more than {capacity} instructions after sanitization",
            "",
            'capacity',
        ),
        capacity=capacity,
    )
