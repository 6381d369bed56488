"""The explicit tool table: every method the server answers, in a fixed order."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Iterable

from loguru import logger

from debugrelay.bridge.retry import RetryPolicy
from debugrelay.tools.breakpoints import BreakpointTool
from debugrelay.tools.execution import ExecutionTool
from debugrelay.tools.health import health_registration
from debugrelay.tools.inspection import InspectionTool
from debugrelay.tools.lifecycle import LifecycleTool
from debugrelay.tools.registry import ToolRegistration, ToolRegistry
from debugrelay.tools.threads import ThreadTool

if TYPE_CHECKING:
    from debugrelay.config.schema import Config
    from debugrelay.session import DebugSession


def retry_policy_from(config: "Config") -> RetryPolicy:
    retry = config.bridge.retry
    return RetryPolicy(
        max_attempts=retry.max_attempts,
        base_delay_seconds=retry.base_delay_seconds,
        max_delay_seconds=retry.max_delay_seconds,
    )


def iter_registrations(session: "DebugSession", config: "Config") -> Iterable[ToolRegistration]:
    policy = retry_policy_from(config)
    provider = session.bridge_client
    tools = (
        LifecycleTool(session.state, provider, policy),
        ExecutionTool(session.state, provider, policy),
        BreakpointTool(session.breakpoints),
        InspectionTool(session.state, provider, policy),
        ThreadTool(session.state, provider, session.breakpoints, policy),
    )
    for tool in tools:
        yield from tool.registrations()
    yield health_registration()


def build_registry(session: "DebugSession", config: "Config") -> ToolRegistry:
    """Register every tool for a session and freeze the table.

    Raises:
        DuplicateMethodError: If two tools claim the same method.
    """
    disabled = {m.strip() for m in config.tools.disabled if m.strip()}
    registry = ToolRegistry()
    for registration in iter_registrations(session, config):
        if registration.method in disabled:
            registration = replace(registration, enabled=False)
        registry.register(registration)
    unknown = disabled - set(registry.methods(include_disabled=True))
    if unknown:
        logger.warning("tools.disabled names unknown methods: {}", sorted(unknown))
    registry.freeze()
    logger.debug("Tool registry ready: {} method(s), {} disabled", len(registry), len(disabled) - len(unknown))
    return registry
