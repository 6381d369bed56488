"""Request/response correlation over the mediator's line-delimited stdio channel."""

from __future__ import annotations

import asyncio
import inspect
import json
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from loguru import logger

from debugrelay.bridge.protocol import BridgeMessage
from debugrelay.bridge.serialization import decode_message_line, encode_message_line, request_message
from debugrelay.utils.exceptions import (
    BridgeConnectionError,
    BridgeError,
    BridgeProtocolError,
    BridgeRemoteError,
    BridgeTimeoutError,
)

EventHandler = Callable[[BridgeMessage], Any]


class LineWriter(Protocol):
    """The subset of asyncio.StreamWriter the client needs."""

    def write(self, data: bytes) -> None: ...

    async def drain(self) -> None: ...

    def close(self) -> None: ...


@dataclass(slots=True)
class PendingRequest:
    """One in-flight request awaiting its reply."""

    id: str
    method: str
    created_at: float
    timeout_at: float
    future: asyncio.Future


class PendingTable:
    """In-flight requests keyed by id; each entry leaves the table exactly once."""

    def __init__(self):
        self._entries: dict[str, PendingRequest] = {}

    def add(self, request_id: str, method: str, timeout: float) -> PendingRequest:
        if request_id in self._entries:
            raise BridgeProtocolError(f"request id {request_id} is already in flight")
        now = time.monotonic()
        entry = PendingRequest(
            id=request_id,
            method=method,
            created_at=now,
            timeout_at=now + timeout,
            future=asyncio.get_running_loop().create_future(),
        )
        self._entries[request_id] = entry
        return entry

    def pop(self, request_id: str) -> PendingRequest | None:
        return self._entries.pop(request_id, None)

    def fail_all(self, exc: BridgeError) -> int:
        entries = list(self._entries.values())
        self._entries.clear()
        for entry in entries:
            if not entry.future.done():
                entry.future.set_exception(exc)
        return len(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, request_id: str) -> bool:
        return request_id in self._entries


class BridgeClient:
    """
    Correlate requests to the mediator with their replies.

    A single reader task owns all inbound reads. Writes are serialized by a
    lock so frames never interleave. Events go to ``on_event`` and never touch
    the pending table.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: LineWriter,
        *,
        request_timeout: float = 30.0,
        on_event: EventHandler | None = None,
        id_factory: Callable[[], str] | None = None,
    ):
        self._reader = reader
        self._writer = writer
        self._request_timeout = request_timeout
        self._on_event = on_event
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)
        self._pending = PendingTable()
        self._write_lock = asyncio.Lock()
        self._reader_task: asyncio.Task | None = None
        self._closed = False

    @property
    def is_connected(self) -> bool:
        return not self._closed

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def set_event_handler(self, on_event: EventHandler | None) -> None:
        self._on_event = on_event

    def start(self) -> None:
        if self._reader_task is None:
            self._reader_task = asyncio.create_task(self._reader_loop(), name="debugrelay-bridge-reader")

    async def call(self, method: str, payload: Any = None, *, timeout: float | None = None) -> Any:
        """Send one request and await its correlated reply."""
        if self._closed:
            raise BridgeConnectionError()
        deadline = self._request_timeout if timeout is None else timeout
        request_id = self._id_factory()
        entry = self._pending.add(request_id, method, deadline)
        line = encode_message_line(request_message(request_id, method, payload)) + "\n"
        try:
            async with self._write_lock:
                self._writer.write(line.encode("utf-8"))
                await self._writer.drain()
        except (ConnectionError, OSError) as exc:
            self._pending.pop(request_id)
            logger.warning("Debug bridge write failed for {}: {}", method, exc)
            self._mark_lost()
            raise BridgeConnectionError() from exc

        try:
            message: BridgeMessage = await asyncio.wait_for(entry.future, timeout=deadline)
        except asyncio.TimeoutError:
            logger.warning("Debug bridge request {} ({}) timed out after {}s", method, request_id, deadline)
            raise BridgeTimeoutError(method, deadline) from None
        finally:
            self._pending.pop(request_id)

        if message.error is not None:
            raise BridgeRemoteError(method, message.error)
        return message.data

    async def close(self) -> None:
        if self._closed and self._reader_task is None:
            return
        self._closed = True
        task, self._reader_task = self._reader_task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        try:
            self._writer.close()
        except (ConnectionError, OSError, RuntimeError) as exc:
            logger.debug("Debug bridge writer close failed: {}", exc)
        failed = self._pending.fail_all(BridgeConnectionError("is closed"))
        if failed:
            logger.debug("Failed {} pending bridge request(s) on close", failed)

    def _mark_lost(self) -> None:
        self._closed = True
        failed = self._pending.fail_all(BridgeConnectionError())
        if failed:
            logger.warning("Debug bridge connection lost; failed {} pending request(s)", failed)

    async def _reader_loop(self) -> None:
        try:
            while True:
                try:
                    raw = await self._reader.readline()
                except (ConnectionError, OSError, ValueError) as exc:
                    logger.warning("Debug bridge read failed: {}", exc)
                    break
                if not raw:
                    logger.info("Debug bridge reached EOF")
                    break
                text = raw.decode("utf-8", errors="replace").strip()
                if not text:
                    continue
                try:
                    message = decode_message_line(text)
                except json.JSONDecodeError:
                    logger.warning("Debug bridge sent invalid JSON: {}", text[:200])
                    continue
                except BridgeProtocolError as exc:
                    logger.warning("Debug bridge protocol violation: {}", exc.message)
                    continue
                await self._dispatch(message)
        finally:
            self._mark_lost()

    async def _dispatch(self, message: BridgeMessage) -> None:
        if message.is_event:
            await self._emit_event(message)
            return
        if message.id is None:
            logger.warning("Debug bridge sent {} without id; dropped", message.type)
            return
        if not message.is_response:
            logger.warning("Debug bridge sent unexpected {} {} ({}); dropped", message.type, message.method, message.id)
            return
        entry = self._pending.pop(message.id)
        if entry is None:
            logger.debug("Dropping late or unknown bridge response {}", message.id)
            return
        if not entry.future.done():
            entry.future.set_result(message)

    async def _emit_event(self, message: BridgeMessage) -> None:
        handler = self._on_event
        if handler is None:
            return
        try:
            result = handler(message)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Bridge event handler failed for {}", message.method)
