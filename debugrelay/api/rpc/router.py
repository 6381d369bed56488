"""Resolve a Call to its tool, decode typed params and invoke the handler."""

from __future__ import annotations

from typing import Any

from loguru import logger
from pydantic import ValidationError

from debugrelay.api.rpc.contracts import Call, CallError, CallOutcome, CallResult
from debugrelay.api.rpc.error_boundary import (
    disabled_method_result,
    invalid_request_result,
    relay_error_result,
    unhandled_exception_result,
    unknown_method_result,
    validation_error_result,
)
from debugrelay.tools.registry import ToolRegistry
from debugrelay.utils.exceptions import DebugRelayError


class RequestRouter:
    """
    Dispatch calls against a frozen tool registry.

    Every call yields exactly one CallResult or CallError; nothing raised by a
    handler escapes route().
    """

    def __init__(self, registry: ToolRegistry):
        self._registry = registry

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def route(self, call: Call) -> CallOutcome:
        method = call.method
        if not method:
            return invalid_request_result("Missing or empty method")

        registration = self._registry.lookup(method)
        if registration is None:
            return unknown_method_result(method=method)
        if not registration.enabled:
            return disabled_method_result(method=method)

        try:
            request = registration.request_type.model_validate_json(call.raw_params or "{}")
        except ValidationError as exc:
            return validation_error_result(method=method, exc=exc)

        logger.debug("Dispatching {} ({})", method, call.protocol.value)
        try:
            value: Any = await registration.handler(request)
        except DebugRelayError as exc:
            return relay_error_result(method=method, exc=exc)
        except Exception as exc:
            return unhandled_exception_result(method=method, exc=exc)

        if isinstance(value, (CallResult, CallError)):
            return value
        return CallResult(payload=value)
