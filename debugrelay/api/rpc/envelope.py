"""
Envelope translation between wire lines and router calls.

Two caller dialects share the channel:

- JSON-RPC 2.0 (``"jsonrpc": "2.0"``): errors carry a numeric code and keep
  the domain code under ``error.data.mcpCode``.
- Legacy: ``{"method": ..., <inline params>}`` answered with
  ``{"success": ..., "result"|"error": ...}``.
"""

from __future__ import annotations

import json
from typing import Any

from loguru import logger
from pydantic_core import to_jsonable_python

from debugrelay.api.rpc.contracts import Call, CallError, CallOutcome, Protocol
from debugrelay.api.rpc.error_mapping import map_to_transport_code
from debugrelay.api.rpc.request_guard import JSONRPC_VERSION, prepare_call
from debugrelay.api.rpc.router import RequestRouter
from debugrelay.utils import codes

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


def to_jsonable(value: Any) -> Any:
    """Serialize by runtime type so subclass fields and aliases survive."""
    return to_jsonable_python(value, by_alias=True, serialize_as_any=True, fallback=str)


def _dumps(frame: dict[str, Any]) -> str:
    return json.dumps(frame, ensure_ascii=False, separators=(",", ":"), allow_nan=False)


def encode_legacy_error(error: CallError) -> str:
    return _dumps(
        {
            "success": False,
            "message": None,
            "error": {
                "code": error.domain_code,
                "message": error.message,
                "details": to_jsonable(error.details),
            },
        }
    )


def encode_outcome(call: Call, outcome: CallOutcome) -> str:
    """Encode one router outcome in the caller's dialect."""
    if call.protocol is Protocol.JSONRPC2:
        if isinstance(outcome, CallError):
            frame: dict[str, Any] = {
                "jsonrpc": JSONRPC_VERSION,
                "id": call.id,
                "error": {
                    "code": map_to_transport_code(outcome.domain_code),
                    "message": outcome.message,
                    "data": {
                        "mcpCode": outcome.domain_code,
                        "details": to_jsonable(outcome.details),
                    },
                },
            }
        else:
            frame = {
                "jsonrpc": JSONRPC_VERSION,
                "id": call.id,
                "result": {
                    "success": outcome.success,
                    "data": to_jsonable(outcome.payload),
                    "message": outcome.message,
                },
            }
        return _dumps(frame)

    if isinstance(outcome, CallError):
        return encode_legacy_error(outcome)
    return _dumps(
        {
            "success": outcome.success,
            "message": outcome.message,
            "result": to_jsonable(outcome.payload),
        }
    )


class EnvelopeTranslator:
    """Translate raw inbound lines into router calls and outcomes back into lines."""

    def __init__(self, router: RequestRouter):
        self._router = router

    async def handle_line(self, raw: str) -> str:
        try:
            guarded = prepare_call(raw)
            if guarded.error is not None:
                logger.debug("Rejected inbound line: {}", guarded.error.message)
                return encode_legacy_error(guarded.error)
            call = guarded.call
            if call is None:
                return encode_legacy_error(CallError(codes.INTERNAL_ERROR, UNEXPECTED_ERROR_MESSAGE))
            outcome = await self._router.route(call)
            try:
                return encode_outcome(call, outcome)
            except ValueError as exc:
                # NaN/Infinity in a handler result has no JSON spelling.
                logger.warning("Result for {} is not encodable: {}", call.method, exc)
                return encode_outcome(call, CallError(codes.INTERNAL_ERROR, "Result is not JSON-encodable"))
        except Exception:
            logger.exception("Envelope translation failed")
            return encode_legacy_error(CallError(codes.INTERNAL_ERROR, UNEXPECTED_ERROR_MESSAGE))
