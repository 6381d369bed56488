"""Pytest hooks and fixtures."""

import asyncio
import json
import os
from typing import Any, Callable

import pytest

from debugrelay.bridge.client import BridgeClient
from debugrelay.config.schema import Config

Responder = Callable[[dict[str, Any]], list[dict[str, Any]] | None]


def pytest_configure(config):
    """Register custom markers (also in pyproject.toml)."""
    config.addinivalue_line(
        "markers",
        "integration: spawns a real mediator subprocess",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests when DEBUGRELAY_SKIP_INTEGRATION=1."""
    if os.environ.get("DEBUGRELAY_SKIP_INTEGRATION") != "1":
        return
    skip = pytest.mark.skip(reason="Integration tests disabled by DEBUGRELAY_SKIP_INTEGRATION")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


def frame_line(frame: dict[str, Any]) -> bytes:
    return (json.dumps(frame) + "\n").encode("utf-8")


def reply_to(request: dict[str, Any], data: Any = None, error: str | None = None) -> dict[str, Any]:
    frame = {"id": request["id"], "type": "response", "method": request.get("method"), "data": data}
    if error is not None:
        frame["error"] = error
    return frame


class FakeMediatorWriter:
    """Stands in for the mediator's stdin; records frames and optionally answers them."""

    def __init__(self, reader: asyncio.StreamReader, responder: Responder | None = None):
        self.reader = reader
        self.responder = responder
        self.frames: list[dict[str, Any]] = []
        self.closed = False
        self.fail_writes = False

    def write(self, data: bytes) -> None:
        if self.fail_writes:
            raise BrokenPipeError("mediator stdin closed")
        for line in data.decode("utf-8").splitlines():
            frame = json.loads(line)
            self.frames.append(frame)
            if self.responder is None:
                continue
            loop = asyncio.get_running_loop()
            for reply in self.responder(frame) or []:
                loop.call_soon(self.reader.feed_data, frame_line(reply))

    async def drain(self) -> None:
        return None

    def close(self) -> None:
        self.closed = True

    def requests(self, method: str | None = None) -> list[dict[str, Any]]:
        return [f for f in self.frames if f.get("type") == "request" and (method is None or f.get("method") == method)]


class YieldingMediatorWriter(FakeMediatorWriter):
    """Buffers writes until drain, and drain yields to the loop before flushing.

    Each flushed chunk is recorded, so overlapping writers show up as a chunk
    holding more than one line.
    """

    def __init__(self, reader: asyncio.StreamReader, responder: Responder | None = None):
        super().__init__(reader, responder)
        self.chunks: list[bytes] = []
        self._buffer = b""

    def write(self, data: bytes) -> None:
        if self.fail_writes:
            raise BrokenPipeError("mediator stdin closed")
        self._buffer += data

    async def drain(self) -> None:
        await asyncio.sleep(0)
        data, self._buffer = self._buffer, b""
        if data:
            self.chunks.append(data)
            super().write(data)


def canned_responder(
    answers: dict[str, Any] | None = None,
    errors: dict[str, str] | None = None,
) -> Responder:
    """Answer each request from fixed tables; methods in neither table get no reply."""
    answers = answers or {}
    errors = errors or {}

    def respond(request: dict[str, Any]) -> list[dict[str, Any]] | None:
        method = request.get("method")
        if method in errors:
            return [reply_to(request, error=errors[method])]
        if method in answers:
            return [reply_to(request, data=answers[method])]
        return None

    return respond


@pytest.fixture
def bridge_pair():
    """Factory for (client, reader, writer) wired to an in-memory mediator."""

    def make(responder: Responder | None = None, *, writer_cls: type[FakeMediatorWriter] = FakeMediatorWriter, **kwargs: Any):
        reader = asyncio.StreamReader()
        writer = writer_cls(reader, responder)
        kwargs.setdefault("request_timeout", 1.0)
        client = BridgeClient(reader, writer, **kwargs)
        client.start()
        return client, reader, writer

    return make


@pytest.fixture
def wait_until():
    async def wait(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
        async def poll() -> None:
            while not predicate():
                await asyncio.sleep(0.001)

        await asyncio.wait_for(poll(), timeout=timeout)

    return wait


@pytest.fixture
def config() -> Config:
    """Default config with fast retries."""
    cfg = Config()
    cfg.bridge.retry.base_delay_seconds = 0.0
    return cfg
