"""Debug session: owns every piece of mutable state for one connected client."""

from __future__ import annotations

from loguru import logger

from debugrelay.api.rpc.envelope import EnvelopeTranslator
from debugrelay.api.rpc.router import RequestRouter
from debugrelay.bridge.client import BridgeClient
from debugrelay.bridge.process import MediatorProcess, spawn_bridge
from debugrelay.bridge.protocol import BridgeMessage
from debugrelay.config.schema import Config
from debugrelay.tools.base import SessionState
from debugrelay.tools.breakpoints import BreakpointStore
from debugrelay.tools.catalog import build_registry
from debugrelay.tools.registry import ToolRegistry


class DebugSession:
    """
    One client's debug context.

    Holds the optional mediator, session state, breakpoints and the frozen
    registry/router/translator chain built on top of them. Sessions never
    share state.
    """

    def __init__(
        self,
        config: Config,
        *,
        bridge: BridgeClient | None = None,
        mediator: MediatorProcess | None = None,
    ):
        self.config = config
        self.mediator = mediator
        self._bridge = mediator.client if mediator is not None else bridge
        self.state = SessionState()
        self.breakpoints = BreakpointStore(self.bridge_client)
        self._closed = False
        if self._bridge is not None:
            self._bridge.set_event_handler(self.on_bridge_event)
        self.registry: ToolRegistry = build_registry(self, config)
        self.router = RequestRouter(self.registry)
        self.translator = EnvelopeTranslator(self.router)

    @classmethod
    async def create(cls, config: Config, *, bridge: BridgeClient | None = None) -> "DebugSession":
        """Build a session, spawning the configured mediator when no bridge is injected.

        Raises:
            BridgeConnectionError: If the configured mediator cannot be started.
            DuplicateMethodError: If the tool table is inconsistent.
        """
        mediator: MediatorProcess | None = None
        if bridge is None and config.bridge.enabled:
            mediator = await spawn_bridge(
                config.bridge.command,
                request_timeout=config.bridge.request_timeout_seconds,
                shutdown_grace_seconds=config.bridge.shutdown_grace_seconds,
                cwd=config.bridge.cwd,
                env=config.bridge.env,
            )
        try:
            return cls(config, bridge=bridge, mediator=mediator)
        except Exception:
            if mediator is not None:
                await mediator.close()
            raise

    def bridge_client(self) -> BridgeClient | None:
        return self._bridge

    def on_bridge_event(self, message: BridgeMessage) -> None:
        logger.debug("Bridge event {}", message.method)
        self.state.apply_event(message)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self.breakpoints.clear()
        self.state.clear()
        if self.mediator is not None:
            await self.mediator.close()
        elif self._bridge is not None:
            await self._bridge.close()
        logger.info("Debug session closed")

    async def __aenter__(self) -> "DebugSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
