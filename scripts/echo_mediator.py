#!/usr/bin/env python3
"""Minimal debugger mediator for smoke and integration checks.

Speaks the mediator side of the bridge channel on stdin/stdout with canned
debugger answers. Unknown methods are answered with an error frame.

Usage:
  debugrelay serve --bridge-cmd python --bridge-cmd scripts/echo_mediator.py
"""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from typing import Any

SESSION_ID = "echo-session-1"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _send(frame: dict[str, Any]) -> None:
    frame.setdefault("timestamp", _now())
    sys.stdout.write(json.dumps(frame) + "\n")
    sys.stdout.flush()


def _event(name: str, data: dict[str, Any] | None = None) -> None:
    _send({"id": None, "type": "event", "method": name, "data": data or {}})


def _handle(method: str, data: dict[str, Any]) -> tuple[Any, list[tuple[str, dict[str, Any]]]]:
    """Return (reply data, events to emit after replying)."""
    thread_id = data.get("threadId", 1)
    if method in ("attach", "launch"):
        events = [("stopped", {"reason": "entry", "threadId": 1})] if data.get("stopAtEntry") else []
        return {"sessionId": SESSION_ID, "method": method}, events
    if method in ("disconnect", "terminate"):
        return {"ok": True}, [("terminated", {})]
    if method == "continue":
        return {"allThreadsContinued": True}, [("continued", {"threadId": thread_id})]
    if method == "pause":
        return {}, [("stopped", {"reason": "pause", "threadId": thread_id})]
    if method in ("next", "stepIn", "stepOut"):
        return {}, [("stopped", {"reason": "step", "threadId": thread_id})]
    if method == "threads":
        return {"threads": [{"id": 1, "name": "main"}, {"id": 2, "name": "worker"}]}, []
    if method == "selectThread":
        return {"threadId": thread_id}, []
    if method == "stackTrace":
        frames = [{"id": 1000 + i, "name": f"frame{i}", "line": 10 + i, "column": 1} for i in range(3)]
        return {"stackFrames": frames, "totalFrames": len(frames)}, []
    if method == "variables":
        return {"variables": [{"name": "x", "value": "42", "type": "int"}]}, []
    if method == "evaluate":
        expression = str(data.get("expression", ""))
        if expression == "boom":
            raise ValueError("evaluation failed: boom")
        return {"result": expression, "type": "string"}, []
    if method in ("setBreakpoint", "removeBreakpoint"):
        return {"ok": True}, []
    raise ValueError(f"unsupported method: {method}")


def main() -> int:
    print("echo mediator ready", file=sys.stderr, flush=True)
    for line in sys.stdin:
        text = line.strip()
        if not text:
            continue
        try:
            frame = json.loads(text)
        except json.JSONDecodeError:
            print(f"ignoring invalid JSON: {text[:80]}", file=sys.stderr, flush=True)
            continue
        if frame.get("type") != "request":
            continue
        method = str(frame.get("method") or "")
        data = frame.get("data") if isinstance(frame.get("data"), dict) else {}
        reply: dict[str, Any] = {"id": frame.get("id"), "type": "response", "method": method}
        try:
            result, events = _handle(method, data)
        except ValueError as exc:
            reply["error"] = str(exc)
            _send(reply)
            continue
        reply["data"] = result
        _send(reply)
        for name, payload in events:
            _event(name, payload)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
