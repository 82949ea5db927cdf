#!/usr/bin/env python3
"""
Test the bfi command line: program sources, diagnostics and exit status.
"""

import io
import subprocess
import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from bfi.cli import main

ROOT = os.path.join(os.path.dirname(os.path.abspath(__file__)), '..')


def feed_stdin(monkeypatch, data=b""):
    """Replace standard input with a byte-backed stream holding data."""
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data)))


def test_literal_program(capsysbinary, monkeypatch):
    feed_stdin(monkeypatch)
    assert main(["+++."]) == 0
    assert capsysbinary.readouterr().out == b"\x03"


def test_literal_program_reads_input(capsysbinary, monkeypatch):
    feed_stdin(monkeypatch, b"hi")
    assert main([",.,."]) == 0
    assert capsysbinary.readouterr().out == b"hi"


def test_program_from_stdin(capsysbinary, monkeypatch):
    feed_stdin(monkeypatch, b"++[>++<-]>.\n")
    assert main([]) == 0
    assert capsysbinary.readouterr().out == b"\x04"


def test_stdin_program_leaves_eof_for_input(capsysbinary, monkeypatch):
    feed_stdin(monkeypatch, b"+++,.")
    assert main([]) == 0
    assert capsysbinary.readouterr().out == b"\x00"


def test_program_starting_with_minus(capsysbinary, monkeypatch):
    feed_stdin(monkeypatch)
    assert main(["-."]) == 0
    assert capsysbinary.readouterr().out == b"\xff"


def test_program_starting_with_minus_after_flags(capsysbinary, monkeypatch):
    feed_stdin(monkeypatch)
    assert main(["--tape-size", "4", "-[.-]"]) == 0
    assert capsysbinary.readouterr().out == bytes(range(255, 0, -1))


def test_double_dash_still_accepted(capsysbinary, monkeypatch):
    feed_stdin(monkeypatch)
    assert main(["--", "--."]) == 0
    assert capsysbinary.readouterr().out == b"\xfe"


def test_extra_arguments_are_usage_error(capsysbinary, monkeypatch):
    feed_stdin(monkeypatch)
    with pytest.raises(SystemExit) as excinfo:
        main(["+.", "-."])
    assert excinfo.value.code == 2
    assert b"unrecognized arguments" in capsysbinary.readouterr().err


def test_unmatched_open(capsysbinary, monkeypatch):
    feed_stdin(monkeypatch)
    assert main(["+.["]) == 1
    captured = capsysbinary.readouterr()
    assert captured.out == b""
    assert captured.err.startswith(b"Error: unmatched '['")


def test_unmatched_close(capsysbinary, monkeypatch):
    feed_stdin(monkeypatch)
    assert main(["]"]) == 1
    captured = capsysbinary.readouterr()
    assert captured.out == b""
    assert captured.err.startswith(b"Error: unmatched ']'")


def test_tape_size_flag(capsysbinary, monkeypatch):
    feed_stdin(monkeypatch)
    assert main(["--tape-size", "3", "+>>>."]) == 0
    assert capsysbinary.readouterr().out == b"\x01"


def test_program_max_truncates(capsysbinary, monkeypatch):
    feed_stdin(monkeypatch)
    assert main(["--program-max", "2", "+.+."]) == 0
    assert capsysbinary.readouterr().out == b"\x01"


def test_strict_capacity(capsysbinary, monkeypatch):
    feed_stdin(monkeypatch)
    assert main(["--program-max", "2", "--strict", "+.+."]) == 1
    captured = capsysbinary.readouterr()
    assert captured.out == b""
    assert b"program too large" in captured.err


def test_environment_limits(capsysbinary, monkeypatch):
    feed_stdin(monkeypatch)
    monkeypatch.setenv("BFI_TAPE_SIZE", "2")
    assert main(["+>>."]) == 0
    assert capsysbinary.readouterr().out == b"\x01"


def test_flag_overrides_environment(capsysbinary, monkeypatch):
    feed_stdin(monkeypatch)
    monkeypatch.setenv("BFI_TAPE_SIZE", "2")
    assert main(["--tape-size", "30000", "+>>."]) == 0
    assert capsysbinary.readouterr().out == b"\x00"


def test_bad_tape_size_is_usage_error(capsysbinary, monkeypatch):
    feed_stdin(monkeypatch)
    with pytest.raises(SystemExit) as excinfo:
        main(["--tape-size", "0", "+"])
    assert excinfo.value.code == 2


def test_closed_output_pipe(monkeypatch, tmp_path):
    """A reader that goes away mid-run ends the run without a traceback."""
    class ClosedPipe:
        def write(self, data):
            raise BrokenPipeError(32, "Broken pipe")

        def flush(self):
            pass

    class Stdout:
        buffer = ClosedPipe()

        def __init__(self, fd):
            self._fd = fd

        def fileno(self):
            return self._fd

    with open(tmp_path / "stdout", "wb") as f:
        monkeypatch.setattr(sys, "stdout", Stdout(f.fileno()))
        feed_stdin(monkeypatch)
        assert main(["+[.]"]) == 1


def test_module_entry_point():
    env = dict(os.environ)
    env["PYTHONPATH"] = os.path.join(ROOT, 'src') + os.pathsep + env.get("PYTHONPATH", "")
    result = subprocess.run(
        [sys.executable, '-m', 'bfi', '++++++++[>++++++++<-]>+.'],
        capture_output=True,
        cwd=ROOT,
        env=env,
    )
    assert result.returncode == 0
    assert result.stdout == b"A"

    result = subprocess.run(
        [sys.executable, '-m', 'bfi'],
        input=b"[",
        capture_output=True,
        cwd=ROOT,
        env=env,
    )
    assert result.returncode == 1
    assert result.stdout == b""
    assert b"unmatched '['" in result.stderr


def test_module_entry_point_minus_program():
    env = dict(os.environ)
    env["PYTHONPATH"] = os.path.join(ROOT, 'src') + os.pathsep + env.get("PYTHONPATH", "")
    result = subprocess.run(
        [sys.executable, '-m', 'bfi', '-.'],
        capture_output=True,
        cwd=ROOT,
        env=env,
    )
    assert result.returncode == 0
    assert result.stdout == b"\xff"
