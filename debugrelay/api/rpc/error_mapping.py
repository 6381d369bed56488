"""Map stable domain error codes onto JSON-RPC 2.0 numeric codes."""

from __future__ import annotations

from debugrelay.utils import codes

SERVER_ERROR = -32000

_TRANSPORT_CODES: dict[str, int] = {
    codes.JSON_PARSE_ERROR: -32700,
    codes.INVALID_REQUEST: -32600,
    codes.METHOD_NOT_FOUND: -32601,
    codes.INVALID_PARAMS: -32602,
    codes.INTERNAL_ERROR: -32603,
    codes.TOOL_NOT_FOUND: -32001,
    codes.TOOL_ERROR: -32002,
    codes.NOT_IMPLEMENTED: -32003,
    codes.BRIDGE_TIMEOUT: -32004,
    codes.BRIDGE_CONNECTION_FAILED: -32005,
    codes.BRIDGE_PROTOCOL_ERROR: -32006,
}


def map_to_transport_code(domain_code: str | None) -> int:
    """Return the JSON-RPC code for a domain code; unknown codes fall into -32000."""
    if not domain_code:
        return SERVER_ERROR
    return _TRANSPORT_CODES.get(domain_code, SERVER_ERROR)
