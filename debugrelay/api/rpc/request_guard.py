"""Inbound line validation: turn one raw JSON line into a Call or an error."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any

from debugrelay.api.rpc.contracts import Call, CallError, Protocol
from debugrelay.utils import codes

JSONRPC_VERSION = "2.0"
_JSONRPC_RESERVED = ("jsonrpc", "id", "method")


@dataclass(slots=True)
class RequestGuardResult:
    """Prepared call after shape checks; exactly one of call/error is set."""

    call: Call | None
    error: CallError | None


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"number {text} is out of range")
    return value


def _parse_error(reason: str) -> RequestGuardResult:
    return RequestGuardResult(call=None, error=CallError(codes.JSON_PARSE_ERROR, f"Invalid JSON: {reason}"))


def prepare_call(raw: str) -> RequestGuardResult:
    """Validate envelope shape and build the Call for the router."""
    try:
        frame = json.loads(raw, parse_constant=_reject_constant, parse_float=_finite_float)
    except json.JSONDecodeError as exc:
        return _parse_error(exc.msg)
    except ValueError as exc:
        return _parse_error(str(exc))
    except RecursionError:
        return _parse_error("nesting too deep")

    if not isinstance(frame, dict):
        return RequestGuardResult(
            call=None,
            error=CallError(codes.INVALID_REQUEST, "Request must be a JSON object"),
        )

    method = frame.get("method")
    if not isinstance(method, str) or not method:
        return RequestGuardResult(
            call=None,
            error=CallError(codes.INVALID_REQUEST, "Missing or empty method property"),
        )

    if frame.get("jsonrpc") == JSONRPC_VERSION:
        if "params" in frame:
            params: Any = frame["params"]
        else:
            params = {k: v for k, v in frame.items() if k not in _JSONRPC_RESERVED}
        call = Call(
            method=method,
            raw_params=json.dumps(params, ensure_ascii=False),
            protocol=Protocol.JSONRPC2,
            id=frame.get("id"),
            has_id="id" in frame,
        )
        return RequestGuardResult(call=call, error=None)

    params = {k: v for k, v in frame.items() if k != "method"}
    call = Call(
        method=method,
        raw_params=json.dumps(params, ensure_ascii=False),
        protocol=Protocol.LEGACY,
        id=frame.get("id"),
        has_id="id" in frame,
    )
    return RequestGuardResult(call=call, error=None)
