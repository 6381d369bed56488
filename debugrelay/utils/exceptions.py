"""
Exception hierarchy and error handling utilities for debugrelay.

Provides:
- Custom exception classes carrying stable domain codes
- Error categorization (recoverable, retryable, fatal)
- Safe error message formatting (no sensitive data leak)
"""

from __future__ import annotations

import asyncio
import json
import re
from enum import Enum
from typing import Any

from debugrelay.utils import codes


class ErrorCategory(Enum):
    """Error categories for classification."""
    RECOVERABLE = "recoverable"
    RETRYABLE = "retryable"
    FATAL = "fatal"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    UNAVAILABLE = "unavailable"


class DebugRelayError(Exception):
    """Base exception for all debugrelay errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class InvalidParamsError(DebugRelayError):
    """Request decoded fine but a field value is not acceptable."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code=codes.INVALID_PARAMS, category=ErrorCategory.VALIDATION, details=details)


class NotImplementedFeatureError(DebugRelayError):
    """Feature is recognized but not implemented."""

    def __init__(self, feature: str):
        super().__init__(
            f"{feature} is not implemented",
            code=codes.NOT_IMPLEMENTED,
            category=ErrorCategory.FATAL,
            details={"feature": feature},
        )


class NoDebugSessionError(DebugRelayError):
    """Operation needs a live debug session."""

    def __init__(self):
        super().__init__(
            "No active debug session. Use debug.attach() or debug.launch() first.",
            code=codes.NO_DEBUG_SESSION,
            category=ErrorCategory.UNAVAILABLE,
        )


class BreakpointNotFoundError(DebugRelayError):
    """Breakpoint id is not in the store."""

    def __init__(self, breakpoint_id: str):
        super().__init__(
            f"Breakpoint {breakpoint_id} not found",
            code=codes.BREAKPOINT_NOT_FOUND,
            category=ErrorCategory.NOT_FOUND,
            details={"breakpointId": breakpoint_id},
        )


class DuplicateMethodError(DebugRelayError):
    """Two registrations claimed the same method name."""

    def __init__(self, method: str):
        super().__init__(
            f"Method {method} is already registered",
            code=codes.DUPLICATE_METHOD,
            category=ErrorCategory.FATAL,
            details={"method": method},
        )


class RegistryFrozenError(DebugRelayError):
    """Registration attempted after startup."""

    def __init__(self, method: str):
        super().__init__(
            f"Cannot register {method}: tool registry is frozen",
            code=codes.REGISTRY_FROZEN,
            category=ErrorCategory.FATAL,
            details={"method": method},
        )


class BridgeError(DebugRelayError):
    """Base class for failures talking to the debugger mediator."""

    def __init__(
        self,
        message: str,
        code: str = codes.BRIDGE_PROTOCOL_ERROR,
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, category=category, details=details)


class BridgeTimeoutError(BridgeError):
    """Mediator did not reply within the request deadline."""

    def __init__(self, method: str, timeout_seconds: float):
        super().__init__(
            f"Bridge request '{method}' timed out after {timeout_seconds}s",
            code=codes.BRIDGE_TIMEOUT,
            category=ErrorCategory.TIMEOUT,
            details={"method": method, "timeoutSeconds": timeout_seconds},
        )


class BridgeConnectionError(BridgeError):
    """Mediator channel is missing, closed or lost."""

    def __init__(self, message: str = "connection lost"):
        super().__init__(
            f"Debug bridge {message}",
            code=codes.BRIDGE_CONNECTION_FAILED,
            category=ErrorCategory.RETRYABLE,
        )


class BridgeRemoteError(BridgeError):
    """Mediator answered the request with an error string."""

    def __init__(self, method: str, message: str):
        super().__init__(
            message,
            code=codes.BRIDGE_REMOTE_ERROR,
            category=ErrorCategory.RECOVERABLE,
            details={"method": method},
        )
        self.method = method


class BridgeProtocolError(BridgeError):
    """Mediator sent a frame that violates the message contract."""

    def __init__(self, message: str):
        super().__init__(message, code=codes.BRIDGE_PROTOCOL_ERROR, category=ErrorCategory.FATAL)


_SENSITIVE_PATTERNS = [
    re.compile(r"(api[_-]?key|token|secret|password|auth)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE),
    re.compile(r"[a-zA-Z0-9]{32,}"),
    re.compile(r"sk-[a-zA-Z0-9]{20,}"),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove sensitive information from error messages."""
    sanitized = message
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def classify_exception(exc: Exception) -> tuple[str, ErrorCategory, bool]:
    """
    Classify an exception and return (error_code, category, should_retry).

    Returns:
        Tuple of (error_code, category, should_retry)
    """
    exc_str = str(exc).lower()

    if isinstance(exc, DebugRelayError):
        return exc.code, exc.category, exc.category in (ErrorCategory.RETRYABLE, ErrorCategory.TIMEOUT)

    if isinstance(exc, FileNotFoundError):
        return "FILE_NOT_FOUND", ErrorCategory.NOT_FOUND, False

    if isinstance(exc, asyncio.TimeoutError):
        return "TIMEOUT", ErrorCategory.TIMEOUT, True

    if isinstance(exc, ConnectionError):
        return "CONNECTION_ERROR", ErrorCategory.RETRYABLE, True

    if isinstance(exc, json.JSONDecodeError):
        return codes.JSON_PARSE_ERROR, ErrorCategory.VALIDATION, False

    if isinstance(exc, ValueError):
        return "INVALID_VALUE", ErrorCategory.VALIDATION, False

    if isinstance(exc, KeyError):
        return "MISSING_KEY", ErrorCategory.VALIDATION, False

    if isinstance(exc, TypeError):
        return "TYPE_ERROR", ErrorCategory.VALIDATION, False

    if "timeout" in exc_str or "timed out" in exc_str:
        return "TIMEOUT", ErrorCategory.TIMEOUT, True

    if "connection" in exc_str or "broken pipe" in exc_str:
        return "CONNECTION_ERROR", ErrorCategory.RETRYABLE, True

    return codes.INTERNAL_ERROR, ErrorCategory.FATAL, False
