#!/usr/bin/env python3

import os
import subprocess
import sys


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


def _run_example(path: str, *, input_data: bytes | None, timeout_s: float = 10.0) -> dict:
    """Feed the program file to ``python -m bfi`` as its literal argument."""
    with open(os.path.join(ROOT, path), 'r', encoding='utf-8') as f:
        program = f.read()

    env = dict(os.environ)
    env['PYTHONPATH'] = os.path.join(ROOT, 'src') + os.pathsep + env.get('PYTHONPATH', '')
    cmd = [sys.executable, '-m', 'bfi', '--', program]
    try:
        p = subprocess.run(
            cmd,
            input=input_data or b"",
            capture_output=True,
            cwd=ROOT,
            env=env,
            timeout=timeout_s,
        )
        return {
            "ok": p.returncode == 0,
            "returncode": p.returncode,
            "stdout": p.stdout,
            "stderr": p.stderr.decode('utf-8', 'replace'),
            "timeout": False,
        }
    except subprocess.TimeoutExpired as e:
        return {
            "ok": False,
            "returncode": None,
            "stdout": e.stdout or b"",
            "stderr": (e.stderr or b"").decode('utf-8', 'replace') + "\n[TIMEOUT]",
            "timeout": True,
        }


def main() -> int:
    examples = [
        {
            "file": "examples/hello_world.bf",
            "input": None,
            "expect": b"Hello World!\n",
        },
        {
            "file": "examples/cat.bf",
            "input": b"echo \xff me",
            "expect": b"echo \xff me",
        },
        {
            "file": "examples/cell_wrap.bf",
            "input": None,
            "expect": b"W",
        },
    ]

    print("=== bfi Examples Verification ===")

    any_fail = False
    for ex in examples:
        r = _run_example(ex["file"], input_data=ex["input"])
        passed = r["ok"] and r["stdout"] == ex["expect"]
        status = "PASS" if passed else "FAIL"
        print(f"\n[{status}] {ex['file']}")

        if passed:
            continue

        any_fail = True
        print(f"Expected: {ex['expect']!r}")
        print(f"Return code: {r['returncode']}  Timeout: {r['timeout']}")
        print("--- program output ---")
        print(repr(r["stdout"][:2000]))
        print("--- stderr ---")
        print(r["stderr"][:2000])

    if any_fail:
        print("\nSome examples FAILED.")
        return 1

    print("\nAll examples passed (output checks).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
