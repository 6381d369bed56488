"""Client side of the debugger mediator channel."""

from debugrelay.bridge.client import BridgeClient, PendingRequest, PendingTable
from debugrelay.bridge.process import MediatorProcess, spawn_bridge
from debugrelay.bridge.protocol import BridgeMessage
from debugrelay.bridge.retry import RetryPolicy, with_retry

__all__ = [
    "BridgeClient",
    "BridgeMessage",
    "MediatorProcess",
    "PendingRequest",
    "PendingTable",
    "RetryPolicy",
    "spawn_bridge",
    "with_retry",
]
