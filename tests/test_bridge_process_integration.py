import asyncio
import json
import sys
from pathlib import Path

import pytest

from debugrelay.bridge.process import spawn_bridge
from debugrelay.session import DebugSession
from debugrelay.utils import codes
from debugrelay.utils.exceptions import BridgeConnectionError

MEDIATOR = Path(__file__).resolve().parents[1] / "scripts" / "echo_mediator.py"

pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_spawn_bridge_round_trip():
    events = []
    mediator = await spawn_bridge([sys.executable, str(MEDIATOR)], request_timeout=5.0, on_event=events.append)
    try:
        assert mediator.is_running
        threads = await mediator.client.call("threads")
        assert threads["threads"][0] == {"id": 1, "name": "main"}
        await mediator.client.call("pause", {"threadId": 1})
        for _ in range(200):
            if events:
                break
            await asyncio.sleep(0.01)
        assert events and events[0].method == "stopped"
    finally:
        await mediator.close()
    assert not mediator.is_running
    assert not mediator.client.is_connected


@pytest.mark.asyncio
async def test_spawn_bridge_missing_executable():
    with pytest.raises(BridgeConnectionError):
        await spawn_bridge(["definitely-not-a-real-mediator-binary"])


@pytest.mark.asyncio
async def test_spawn_bridge_empty_command():
    with pytest.raises(BridgeConnectionError):
        await spawn_bridge([])


@pytest.mark.asyncio
async def test_session_against_echo_mediator(config):
    config.bridge.command = [sys.executable, str(MEDIATOR)]
    config.bridge.request_timeout_seconds = 5.0
    session = await DebugSession.create(config)

    async def send(frame):
        return json.loads(await session.translator.handle_line(json.dumps(frame)))

    try:
        launched = await send({"jsonrpc": "2.0", "id": 1, "method": "debug.launch", "params": {"program": "app.py"}})
        assert launched["result"]["data"]["sessionId"] == "echo-session-1"

        stepped = await send({"jsonrpc": "2.0", "id": 2, "method": "debug.step", "params": {"stepType": "into", "threadId": 1}})
        assert stepped["result"]["data"] == "Step into completed on thread 1"

        cont = await send({"jsonrpc": "2.0", "id": 3, "method": "debug.continue"})
        assert cont["result"]["data"] == "All threads continued"

        failed = await send({"jsonrpc": "2.0", "id": 4, "method": "debug.evaluate", "params": {"expression": "boom"}})
        assert failed["error"]["data"]["mcpCode"] == codes.EVALUATION_FAILED

        bp = await send({"jsonrpc": "2.0", "id": 5, "method": "debug.setBreakpoint", "params": {"file": "app.py", "line": 3}})
        assert bp["result"]["data"]["verified"] is True

        status = await send({"jsonrpc": "2.0", "id": 6, "method": "debug.getStatus"})
        assert status["result"]["data"]["bridgeConnected"] is True
        assert status["result"]["data"]["breakpointCount"] == 1
    finally:
        await session.close()
