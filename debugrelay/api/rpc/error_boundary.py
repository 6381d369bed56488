"""Common error-boundary helpers for request dispatch."""

from __future__ import annotations

from typing import Any

from loguru import logger
from pydantic import ValidationError

from debugrelay.api.rpc.contracts import CallError
from debugrelay.utils import codes
from debugrelay.utils.exceptions import (
    DebugRelayError,
    classify_exception,
    sanitize_error_message,
)


def invalid_request_result(message: str, details: Any = None) -> CallError:
    """Build a standardized INVALID_REQUEST error."""
    return CallError(codes.INVALID_REQUEST, message, details)


def unknown_method_result(*, method: str) -> CallError:
    """Build standardized unknown-method response."""
    return CallError(codes.METHOD_NOT_FOUND, f"Unknown method: {method}")


def disabled_method_result(*, method: str) -> CallError:
    """Method is known but no enabled tool serves it."""
    return CallError(codes.TOOL_NOT_FOUND, f"No tool registered for method {method}")


def validation_error_result(*, method: str, exc: ValidationError) -> CallError:
    """Map a pydantic decode failure to INVALID_REQUEST with structured details."""
    logger.debug("Request for {} failed validation: {} error(s)", method, exc.error_count())
    details = exc.errors(include_url=False, include_context=False, include_input=False)
    return invalid_request_result(f"Invalid parameters for {method}: {_first_error(exc)}", details)


def relay_error_result(*, method: str, exc: DebugRelayError) -> CallError:
    """Map DebugRelayError to an error outcome with its own code."""
    logger.warning("Method {} failed with {}: {}", method, exc.code, exc.message)
    return CallError(exc.code, exc.message, exc.details or None)


def unhandled_exception_result(*, method: str, exc: Exception) -> CallError:
    """Map unexpected exceptions to standardized INTERNAL_ERROR responses."""
    code, category, _ = classify_exception(exc)
    sanitized = sanitize_error_message(str(exc)) or type(exc).__name__
    logger.opt(exception=exc).error("Method {} failed with [{}]: {}", method, code, sanitized)
    details = {"errorCode": code, "category": category.value}
    return CallError(codes.INTERNAL_ERROR, sanitized, details)


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors(include_url=False)
    if not errors:
        return "invalid input"
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    return f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
