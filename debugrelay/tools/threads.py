"""Thread and status tools."""

from __future__ import annotations

from typing import Any

from loguru import logger

from debugrelay.bridge.retry import RetryPolicy
from debugrelay.tools.base import BridgeProvider, DebugTool, SessionState
from debugrelay.tools.breakpoints import BreakpointStore
from debugrelay.tools.models import DebugStatus
from debugrelay.tools.registry import ToolRegistration
from debugrelay.tools.requests import GetStatusRequest, GetThreadsRequest, SelectThreadRequest
from debugrelay.utils import codes

TAGS = frozenset({"debug", "threads"})


class ThreadTool(DebugTool):
    """List and select debuggee threads, and report session status."""

    def __init__(
        self,
        state: SessionState,
        bridge: BridgeProvider,
        breakpoints: BreakpointStore,
        retry_policy: RetryPolicy | None = None,
    ):
        super().__init__(state, bridge, retry_policy)
        self._breakpoints = breakpoints

    def registrations(self) -> list[ToolRegistration]:
        return [
            ToolRegistration("debug.getThreads", GetThreadsRequest, self.get_threads, "List debuggee threads", TAGS),
            ToolRegistration("debug.selectThread", SelectThreadRequest, self.select_thread, "Select the active thread", TAGS),
            ToolRegistration("debug.getStatus", GetStatusRequest, self.get_status, "Get debug session status", frozenset({"debug", "status"})),
        ]

    async def get_threads(self, request: GetThreadsRequest) -> Any:
        return await self.forward("threads", failure_code=codes.GET_THREADS_FAILED, retry=True)

    async def select_thread(self, request: SelectThreadRequest) -> str:
        await self.forward("selectThread", {"threadId": request.thread_id}, failure_code=codes.SELECT_THREAD_FAILED)
        self.state.active_thread_id = request.thread_id
        logger.info("Thread {} selected", request.thread_id)
        return f"Thread {request.thread_id} selected"

    async def get_status(self, request: GetStatusRequest) -> DebugStatus:
        bridge = self.bridge
        connected = bridge is not None and bridge.is_connected
        return DebugStatus(
            is_debugging=connected and self.state.is_active,
            is_paused=self.state.is_paused,
            active_thread_id=self.state.active_thread_id,
            session_id=self.state.session_id,
            breakpoint_count=len(self._breakpoints),
            bridge_connected=connected,
        )
