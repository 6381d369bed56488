"""Built-in liveness tool."""

from __future__ import annotations

from debugrelay.tools.registry import ToolRegistration
from debugrelay.tools.requests import HealthRequest

HEALTH_MESSAGE = "debugrelay server is running"


async def health(request: HealthRequest) -> str:
    return HEALTH_MESSAGE


def health_registration() -> ToolRegistration:
    return ToolRegistration("health", HealthRequest, health, "Server liveness check", frozenset({"system"}))
