"""Shared session state and the base class for bridged debug tools."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from loguru import logger

from debugrelay.bridge.client import BridgeClient
from debugrelay.bridge.protocol import BridgeMessage
from debugrelay.bridge.retry import RetryPolicy, with_retry
from debugrelay.tools.registry import ToolRegistration
from debugrelay.utils.exceptions import (
    BridgeRemoteError,
    BridgeTimeoutError,
    DebugRelayError,
    ErrorCategory,
    NoDebugSessionError,
)

BridgeProvider = Callable[[], "BridgeClient | None"]

DEFAULT_THREAD_ID = 1


@dataclass(slots=True)
class SessionState:
    """Mutable debugger state tracked on behalf of one client."""

    session_id: str | None = None
    is_paused: bool = False
    active_thread_id: int | None = None

    @property
    def is_active(self) -> bool:
        return self.session_id is not None

    def begin(self, session_id: str) -> None:
        self.session_id = session_id
        self.is_paused = False
        self.active_thread_id = None

    def clear(self) -> None:
        self.session_id = None
        self.is_paused = False
        self.active_thread_id = None

    def apply_event(self, message: BridgeMessage) -> None:
        """Fold one mediator event into the state."""
        event = message.method or ""
        data = message.data if isinstance(message.data, dict) else {}
        if event == "stopped":
            self.is_paused = True
            thread_id = data.get("threadId")
            if isinstance(thread_id, int):
                self.active_thread_id = thread_id
        elif event == "continued":
            self.is_paused = False
        elif event in ("terminated", "exited"):
            self.clear()
        else:
            logger.debug("Ignoring bridge event {}", event)


class DebugTool:
    """
    Base class for tools that forward requests to the mediator.

    Subclasses expose their methods through ``registrations()``. Remote errors
    are re-raised under the operation's own failure code; timeout and
    connection errors keep their bridge codes.
    """

    def __init__(
        self,
        state: SessionState,
        bridge: BridgeProvider,
        retry_policy: RetryPolicy | None = None,
    ):
        self.state = state
        self._bridge = bridge
        self._retry_policy = retry_policy or RetryPolicy()

    def registrations(self) -> list[ToolRegistration]:
        raise NotImplementedError

    @property
    def bridge(self) -> BridgeClient | None:
        return self._bridge()

    def require_bridge(self) -> BridgeClient:
        bridge = self._bridge()
        if bridge is None or not bridge.is_connected:
            raise NoDebugSessionError()
        return bridge

    async def forward(
        self,
        method: str,
        payload: dict[str, Any] | None = None,
        *,
        failure_code: str,
        retry: bool = False,
        bridge: BridgeClient | None = None,
    ) -> Any:
        """Send one bridge request and translate remote failures."""
        client = bridge or self.require_bridge()
        try:
            if retry:
                return await with_retry(
                    lambda: client.call(method, payload),
                    self._retry_policy,
                    retry_on=(BridgeTimeoutError,),
                )
            return await client.call(method, payload)
        except BridgeRemoteError as exc:
            raise DebugRelayError(
                exc.message,
                code=failure_code,
                category=ErrorCategory.RECOVERABLE,
                details={"bridgeMethod": method},
            ) from exc


def thread_or_default(thread_id: int | None) -> int:
    return DEFAULT_THREAD_ID if thread_id is None else thread_id
