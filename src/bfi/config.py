from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

INSTRUCTIONS = "><+-.,[]"

PROGRAM_MAX = 65536
TAPE_SIZE = 30000
CELL_MODULUS = 256

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class InterpreterConfig:
    program_max: int = PROGRAM_MAX
    tape_size: int = TAPE_SIZE
    strict: bool = False

    def validate(self) -> "InterpreterConfig":
        if self.program_max <= 0:
            raise ValueError(f"program_max must be positive, got {self.program_max}")
        if self.tape_size <= 0:
            raise ValueError(f"tape_size must be positive, got {self.tape_size}")
        return self

    def with_overrides(self, *, program_max: Optional[int] = None, tape_size: Optional[int] = None,
                       strict: Optional[bool] = None) -> "InterpreterConfig":
        cfg = self
        if program_max is not None:
            cfg = replace(cfg, program_max=program_max)
        if tape_size is not None:
            cfg = replace(cfg, tape_size=tape_size)
        if strict is not None:
            cfg = replace(cfg, strict=strict)
        return cfg.validate()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "InterpreterConfig":
        env = os.environ if environ is None else environ
        strict_raw = env.get("BFI_STRICT", "")
        return cls(
            program_max=_env_int(env, "BFI_PROGRAM_MAX", PROGRAM_MAX),
            tape_size=_env_int(env, "BFI_TAPE_SIZE", TAPE_SIZE),
            strict=strict_raw.strip().lower() in _TRUE_VALUES,
        ).validate()
