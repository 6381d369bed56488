"""Breakpoint store and the debug.*Breakpoint tools.

The local table is authoritative. Mediator notifications are best-effort: a
missing or failing bridge is logged and the local result still stands.
"""

from __future__ import annotations

import asyncio
import uuid
from typing import Any, Callable

from loguru import logger

from debugrelay.bridge.client import BridgeClient
from debugrelay.tools.base import BridgeProvider
from debugrelay.tools.models import Breakpoint
from debugrelay.tools.registry import ToolRegistration
from debugrelay.tools.requests import ListBreakpointsRequest, RemoveBreakpointRequest, SetBreakpointRequest
from debugrelay.utils import codes
from debugrelay.utils.exceptions import BreakpointNotFoundError, BridgeError, DebugRelayError

TAGS = frozenset({"debug", "breakpoint"})
ID_ATTEMPTS = 3


def _new_breakpoint_id() -> str:
    return str(uuid.uuid4())


class BreakpointStore:
    """Session-scoped breakpoint table guarded by an asyncio lock."""

    def __init__(
        self,
        bridge: BridgeProvider | BridgeClient | None = None,
        *,
        id_factory: Callable[[], str] = _new_breakpoint_id,
    ):
        if bridge is None or isinstance(bridge, BridgeClient):
            self._bridge: BridgeProvider = lambda: bridge
        else:
            self._bridge = bridge
        self._id_factory = id_factory
        self._breakpoints: dict[str, Breakpoint] = {}
        self._lock = asyncio.Lock()

    async def set(
        self,
        file: str,
        line: int,
        column: int = 0,
        condition: str | None = None,
        hit_condition: str | None = None,
    ) -> Breakpoint:
        async with self._lock:
            bp = Breakpoint(
                id=self._allocate_id(),
                file=file,
                line=line,
                column=column,
                condition=condition,
                hit_condition=hit_condition,
                verified=True,
            )
            self._breakpoints[bp.id] = bp
        logger.info("Breakpoint {} set at {}:{}", bp.id, file, line)
        await self._notify("setBreakpoint", bp.model_dump(by_alias=True))
        return bp

    async def remove(self, breakpoint_id: str) -> None:
        async with self._lock:
            if self._breakpoints.pop(breakpoint_id, None) is None:
                raise BreakpointNotFoundError(breakpoint_id)
        logger.info("Breakpoint {} removed", breakpoint_id)
        await self._notify("removeBreakpoint", {"breakpointId": breakpoint_id})

    async def list(self) -> list[Breakpoint]:
        async with self._lock:
            return [bp.model_copy() for bp in self._breakpoints.values()]

    async def clear(self) -> None:
        async with self._lock:
            self._breakpoints.clear()

    def __len__(self) -> int:
        return len(self._breakpoints)

    def _allocate_id(self) -> str:
        # Caller holds the lock.
        for _ in range(ID_ATTEMPTS):
            candidate = self._id_factory()
            if candidate not in self._breakpoints:
                return candidate
        raise DebugRelayError(
            f"Could not allocate a unique breakpoint id after {ID_ATTEMPTS} attempts",
            code=codes.BREAKPOINT_SET_FAILED,
        )

    async def _notify(self, method: str, payload: dict[str, Any]) -> None:
        bridge = self._bridge()
        if bridge is None or not bridge.is_connected:
            logger.debug("No debug bridge; {} kept local only", method)
            return
        try:
            await bridge.call(method, payload)
        except BridgeError as exc:
            logger.warning("Bridge {} failed, keeping local result: {}", method, exc)


class BreakpointTool:
    """Expose the store as debug.setBreakpoint / removeBreakpoint / listBreakpoints."""

    def __init__(self, store: BreakpointStore):
        self.store = store

    def registrations(self) -> list[ToolRegistration]:
        return [
            ToolRegistration(
                "debug.setBreakpoint",
                SetBreakpointRequest,
                self.set_breakpoint,
                "Set a breakpoint at specified location",
                TAGS,
            ),
            ToolRegistration(
                "debug.removeBreakpoint",
                RemoveBreakpointRequest,
                self.remove_breakpoint,
                "Remove a breakpoint by ID",
                TAGS,
            ),
            ToolRegistration(
                "debug.listBreakpoints",
                ListBreakpointsRequest,
                self.list_breakpoints,
                "List all active breakpoints",
                TAGS,
            ),
        ]

    async def set_breakpoint(self, request: SetBreakpointRequest) -> Breakpoint:
        return await self.store.set(
            request.file,
            request.line,
            column=request.column,
            condition=request.condition,
            hit_condition=request.hit_condition,
        )

    async def remove_breakpoint(self, request: RemoveBreakpointRequest) -> str:
        await self.store.remove(request.breakpoint_id)
        return "removed"

    async def list_breakpoints(self, request: ListBreakpointsRequest) -> list[Breakpoint]:
        return await self.store.list()
