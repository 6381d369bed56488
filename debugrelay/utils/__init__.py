"""Utility functions for debugrelay."""

from debugrelay.utils.exceptions import (
    BreakpointNotFoundError,
    BridgeConnectionError,
    BridgeError,
    BridgeProtocolError,
    BridgeRemoteError,
    BridgeTimeoutError,
    DebugRelayError,
    DuplicateMethodError,
    ErrorCategory,
    InvalidParamsError,
    NoDebugSessionError,
    NotImplementedFeatureError,
    RegistryFrozenError,
    classify_exception,
    sanitize_error_message,
)

__all__ = [
    "DebugRelayError",
    "InvalidParamsError",
    "NotImplementedFeatureError",
    "NoDebugSessionError",
    "BreakpointNotFoundError",
    "DuplicateMethodError",
    "RegistryFrozenError",
    "BridgeError",
    "BridgeTimeoutError",
    "BridgeConnectionError",
    "BridgeRemoteError",
    "BridgeProtocolError",
    "ErrorCategory",
    "classify_exception",
    "sanitize_error_message",
]
