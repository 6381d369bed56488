"""Line-delimited JSON-RPC request routing and envelope translation."""

from debugrelay.api.rpc.contracts import Call, CallError, CallResult, Protocol
from debugrelay.api.rpc.envelope import EnvelopeTranslator
from debugrelay.api.rpc.error_mapping import map_to_transport_code
from debugrelay.api.rpc.router import RequestRouter

__all__ = [
    "Call",
    "CallError",
    "CallResult",
    "Protocol",
    "EnvelopeTranslator",
    "RequestRouter",
    "map_to_transport_code",
]
