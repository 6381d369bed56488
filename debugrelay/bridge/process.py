"""Spawn and supervise the external debugger mediator process."""

from __future__ import annotations

import asyncio
import os
import shutil
from typing import Any

from loguru import logger

from debugrelay.bridge.client import BridgeClient, EventHandler
from debugrelay.utils.exceptions import BridgeConnectionError

# Mediator frames can carry large variable dumps.
STREAM_LIMIT = 16 * 1024 * 1024


class MediatorProcess:
    """A running mediator child process plus the client bound to its stdio."""

    def __init__(
        self,
        proc: asyncio.subprocess.Process,
        client: BridgeClient,
        *,
        shutdown_grace_seconds: float = 2.0,
    ):
        self.proc = proc
        self.client = client
        self._grace = shutdown_grace_seconds
        self._stderr_task: asyncio.Task | None = None

    @property
    def pid(self) -> int:
        return self.proc.pid

    @property
    def is_running(self) -> bool:
        return self.proc.returncode is None

    def start(self) -> None:
        self.client.start()
        if self.proc.stderr is not None and self._stderr_task is None:
            self._stderr_task = asyncio.create_task(self._stderr_loop(), name="debugrelay-mediator-stderr")

    async def _stderr_loop(self) -> None:
        stream = self.proc.stderr
        if stream is None:
            return
        while True:
            line = await stream.readline()
            if not line:
                return
            text = line.decode("utf-8", errors="replace").strip()
            if text:
                logger.debug("[mediator] {}", text)

    async def close(self) -> None:
        await self.client.close()
        if self.proc.returncode is None:
            try:
                self.proc.terminate()
                await asyncio.wait_for(self.proc.wait(), timeout=self._grace)
            except ProcessLookupError:
                pass
            except asyncio.TimeoutError:
                logger.warning("Mediator pid={} ignored terminate; killing", self.proc.pid)
                try:
                    self.proc.kill()
                except ProcessLookupError:
                    pass
                await self.proc.wait()
        if self._stderr_task is not None:
            self._stderr_task.cancel()
            try:
                await self._stderr_task
            except asyncio.CancelledError:
                pass
            self._stderr_task = None
        logger.info("Mediator stopped (exit code {})", self.proc.returncode)


async def spawn_bridge(
    command: list[str],
    *,
    request_timeout: float = 30.0,
    on_event: EventHandler | None = None,
    shutdown_grace_seconds: float = 2.0,
    cwd: str | None = None,
    env: dict[str, str] | None = None,
) -> MediatorProcess:
    """Start the mediator and return a started MediatorProcess.

    Raises:
        BridgeConnectionError: If the command is empty or cannot be started.
    """
    if not command:
        raise BridgeConnectionError("command is not configured")
    program = command[0]
    if os.path.sep not in program and shutil.which(program) is None:
        raise BridgeConnectionError(f"executable not found: {program}")
    child_env: dict[str, Any] = os.environ.copy()
    if env:
        child_env.update(env)
    try:
        proc = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
            env=child_env,
            limit=STREAM_LIMIT,
        )
    except OSError as exc:
        raise BridgeConnectionError(f"failed to start: {exc}") from exc
    if proc.stdin is None or proc.stdout is None:
        proc.kill()
        await proc.wait()
        raise BridgeConnectionError("has no stdio pipes")
    client = BridgeClient(proc.stdout, proc.stdin, request_timeout=request_timeout, on_event=on_event)
    mediator = MediatorProcess(proc, client, shutdown_grace_seconds=shutdown_grace_seconds)
    mediator.start()
    logger.info("Mediator started pid={} command={}", proc.pid, command[0])
    return mediator
