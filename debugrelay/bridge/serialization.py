"""Serialization helpers for mediator frames."""

from __future__ import annotations

import json
from typing import Any

from pydantic_core import to_jsonable_python

from debugrelay.bridge.protocol import MESSAGE_TYPES, REQUEST, BridgeMessage
from debugrelay.utils.exceptions import BridgeProtocolError


def safe_dict(value: Any) -> dict[str, Any]:
    """Return the value when dict-like, otherwise an empty dict."""
    return value if isinstance(value, dict) else {}


def encode_message_line(message: BridgeMessage) -> str:
    """Encode a frame into one line of JSON (no trailing newline)."""
    payload: dict[str, Any] = {
        "id": message.id,
        "type": message.type,
        "method": message.method,
        "data": to_jsonable_python(message.data, by_alias=True),
        "timestamp": message.timestamp,
    }
    if message.error is not None:
        payload["error"] = message.error
    return json.dumps(payload, ensure_ascii=False)


def request_message(request_id: str, method: str, payload: Any = None) -> BridgeMessage:
    return BridgeMessage(id=request_id, type=REQUEST, method=method, data=payload)


def normalize_error(error: Any) -> str | None:
    """Reduce whatever the mediator put in ``error`` to a message string."""
    if error is None or error == "":
        return None
    if isinstance(error, str):
        return error
    row = safe_dict(error)
    if row:
        return str(row.get("message") or row.get("code") or "bridge request failed")
    return str(error)


def decode_message_line(line: str) -> BridgeMessage:
    """
    Decode one inbound line.

    Raises:
        json.JSONDecodeError: If the line is not JSON.
        BridgeProtocolError: If the frame is not an object or has no valid type.
    """
    payload = json.loads(line)
    if not isinstance(payload, dict):
        raise BridgeProtocolError("bridge frame must be a JSON object")
    msg_type = payload.get("type")
    if msg_type not in MESSAGE_TYPES:
        raise BridgeProtocolError(f"unknown bridge frame type: {msg_type!r}")
    raw_id = payload.get("id")
    msg_id = str(raw_id) if raw_id not in (None, "") else None
    method = payload.get("method")
    return BridgeMessage(
        id=msg_id,
        type=msg_type,
        method=str(method) if method is not None else None,
        data=payload.get("data"),
        error=normalize_error(payload.get("error")),
        timestamp=str(payload.get("timestamp") or ""),
    )
