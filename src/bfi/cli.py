from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from .brackets import resolve_brackets
from .config import InterpreterConfig
from .engine import execute
from .errors import BFError
from .sanitizer import sanitize, sanitize_stream

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bfi",
        description="Brainfuck interpreter. Runs PROGRAM, or the program read from stdin if it is omitted.",
    )
    parser.add_argument("program", nargs="?", help="literal Brainfuck program text")
    parser.add_argument("--tape-size", type=int, default=None, help="number of tape cells (default 30000)")
    parser.add_argument("--program-max", type=int, default=None,
                        help="maximum instructions kept after filtering (default 65536)")
    parser.add_argument("--strict", action="store_true", default=None,
                        help="fail instead of truncating programs over --program-max")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging on stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    # Programs such as "-." look like options to argparse; a single leftover
    # token is taken as the program text.
    args, extra = parser.parse_known_args(argv)
    if extra:
        if args.program is None and len(extra) == 1:
            args.program = extra[0]
        else:
            parser.error(f"unrecognized arguments: {' '.join(extra)}")

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    try:
        config = InterpreterConfig.from_env().with_overrides(
            program_max=args.program_max,
            tape_size=args.tape_size,
            strict=args.strict,
        )
    except ValueError as e:
        parser.error(str(e))

    try:
        if args.program is not None:
            program = sanitize(args.program, capacity=config.program_max, strict=config.strict)
        else:
            program = sanitize_stream(sys.stdin.buffer, capacity=config.program_max, strict=config.strict)
        jumps = resolve_brackets(program)
    except BFError as e:
        sys.stderr.write(f"{e}\n")
        return 1

    if program.truncated:
        log.debug("running the first %d instructions only", len(program))

    try:
        execute(program, jumps, tape_size=config.tape_size, stdin=sys.stdin.buffer, stdout=sys.stdout.buffer)
    except BrokenPipeError:
        log.debug("output closed by reader, stopping")
        # Interpreter shutdown flushes stdout again; send that to devnull.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        os.close(devnull)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
