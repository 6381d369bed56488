"""Session lifecycle tools: attach, launch, disconnect, terminate."""

from __future__ import annotations

from typing import Any

from loguru import logger

from debugrelay.bridge.client import BridgeClient
from debugrelay.tools.base import DebugTool
from debugrelay.tools.registry import ToolRegistration
from debugrelay.tools.requests import AttachRequest, DisconnectRequest, LaunchRequest, TerminateRequest
from debugrelay.utils import codes
from debugrelay.utils.exceptions import BridgeConnectionError

TAGS = frozenset({"debug", "lifecycle"})


def _session_id_from(result: Any) -> str | None:
    if isinstance(result, dict):
        value = result.get("sessionId")
        if value not in (None, ""):
            return str(value)
    return None


class LifecycleTool(DebugTool):
    """Start and end debug sessions through the mediator."""

    def registrations(self) -> list[ToolRegistration]:
        return [
            ToolRegistration("debug.attach", AttachRequest, self.attach, "Attach to a running process for debugging", TAGS),
            ToolRegistration("debug.launch", LaunchRequest, self.launch, "Launch a program for debugging", TAGS),
            ToolRegistration("debug.disconnect", DisconnectRequest, self.disconnect, "Disconnect from current debug session", TAGS),
            ToolRegistration("debug.terminate", TerminateRequest, self.terminate, "Terminate current debug session", TAGS),
        ]

    def _connected_bridge(self) -> BridgeClient:
        bridge = self.bridge
        if bridge is None:
            raise BridgeConnectionError("is not configured")
        if not bridge.is_connected:
            raise BridgeConnectionError()
        return bridge

    async def attach(self, request: AttachRequest) -> Any:
        logger.info("Attaching to process {}", request.process_id)
        result = await self.forward(
            "attach",
            request.model_dump(by_alias=True, exclude_none=True),
            failure_code=codes.ATTACHMENT_FAILED,
            bridge=self._connected_bridge(),
        )
        self._track(result)
        return result

    async def launch(self, request: LaunchRequest) -> Any:
        logger.info("Launching {}", request.program)
        result = await self.forward(
            "launch",
            request.model_dump(by_alias=True, exclude_none=True),
            failure_code=codes.LAUNCH_FAILED,
            bridge=self._connected_bridge(),
        )
        self._track(result)
        return result

    async def disconnect(self, request: DisconnectRequest) -> Any:
        result = await self.forward("disconnect", failure_code=codes.DISCONNECT_FAILED)
        logger.info("Disconnected from session {}", self.state.session_id)
        self.state.clear()
        return result

    async def terminate(self, request: TerminateRequest) -> Any:
        result = await self.forward("terminate", failure_code=codes.TERMINATE_FAILED)
        logger.info("Terminated session {}", self.state.session_id)
        self.state.clear()
        return result

    def _track(self, result: Any) -> None:
        session_id = _session_id_from(result)
        if session_id is None:
            logger.warning("Mediator reply carried no sessionId")
            return
        self.state.begin(session_id)
        logger.info("Debug session {} started", session_id)
