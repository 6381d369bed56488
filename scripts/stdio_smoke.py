#!/usr/bin/env python3
"""End-to-end smoke check: run `debugrelay serve` against the echo mediator.

Usage:
  python scripts/stdio_smoke.py
  python scripts/stdio_smoke.py --timeout 5
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

MEDIATOR = Path(__file__).resolve().parent / "echo_mediator.py"

CHECKS: list[tuple[dict, str]] = [
    ({"jsonrpc": "2.0", "id": 1, "method": "health"}, "result"),
    ({"jsonrpc": "2.0", "id": 2, "method": "debug.launch", "params": {"program": "app.py", "stopAtEntry": True}}, "result"),
    ({"jsonrpc": "2.0", "id": 3, "method": "debug.setBreakpoint", "params": {"file": "app.py", "line": 10}}, "result"),
    ({"jsonrpc": "2.0", "id": 4, "method": "debug.getThreads"}, "result"),
    ({"jsonrpc": "2.0", "id": 5, "method": "debug.getStackTrace", "params": {"threadId": 1}}, "result"),
    ({"jsonrpc": "2.0", "id": 6, "method": "debug.evaluate", "params": {"expression": "boom"}}, "error"),
    ({"jsonrpc": "2.0", "id": 7, "method": "debug.nope"}, "error"),
    ({"method": "debug.getStatus"}, "result"),
    ({"jsonrpc": "2.0", "id": 8, "method": "debug.terminate"}, "result"),
]


async def run_smoke(timeout: float) -> list[str]:
    errors: list[str] = []
    proc = await asyncio.create_subprocess_exec(
        sys.executable, "-m", "debugrelay.cli.commands", "serve",
        "--bridge-cmd", sys.executable, "--bridge-cmd", str(MEDIATOR),
        "--timeout", str(timeout), "--log-level", "WARNING",
        stdin=asyncio.subprocess.PIPE,
        stdout=asyncio.subprocess.PIPE,
    )
    assert proc.stdin is not None and proc.stdout is not None
    try:
        for request, expected in CHECKS:
            proc.stdin.write((json.dumps(request) + "\n").encode())
            await proc.stdin.drain()
            line = await asyncio.wait_for(proc.stdout.readline(), timeout=timeout * 2)
            reply = json.loads(line)
            if expected not in reply:
                errors.append(f"{request['method']}: expected {expected}, got {reply}")
    finally:
        proc.stdin.close()
        await asyncio.wait_for(proc.wait(), timeout=timeout * 2)
    return errors


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--timeout", type=float, default=5.0, help="Bridge request timeout in seconds")
    args = parser.parse_args()

    errors = asyncio.run(run_smoke(args.timeout))
    if errors:
        print("stdio smoke errors:")
        for err in errors:
            print(f"  ERROR: {err}")
        return 1
    print(f"stdio_smoke: PASS ({len(CHECKS)} checks)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
