import pytest

from conftest import canned_responder
from debugrelay.api.rpc.contracts import Call, CallError
from debugrelay.session import DebugSession
from debugrelay.tools.execution import ExecutionTool
from debugrelay.tools.base import SessionState
from debugrelay.tools.requests import ContinueRequest, PauseRequest, StepRequest
from debugrelay.utils import codes
from debugrelay.utils.exceptions import (
    DebugRelayError,
    InvalidParamsError,
    NoDebugSessionError,
    NotImplementedFeatureError,
)


def _tool(client=None) -> ExecutionTool:
    return ExecutionTool(SessionState(), lambda: client)


@pytest.mark.asyncio
async def test_no_bridge_is_no_debug_session():
    tool = _tool()
    with pytest.raises(NoDebugSessionError) as exc_info:
        await tool.continue_(ContinueRequest())
    assert exc_info.value.code == codes.NO_DEBUG_SESSION
    assert "debug.attach()" in exc_info.value.message


@pytest.mark.asyncio
async def test_continue_defaults_to_thread_one(bridge_pair):
    client, _, writer = bridge_pair(canned_responder({"continue": {}}))
    tool = _tool(client)
    assert await tool.continue_(ContinueRequest()) == "Thread 1 continued"
    assert writer.requests("continue")[0]["data"] == {"threadId": 1}
    await client.close()


@pytest.mark.asyncio
async def test_continue_all_threads(bridge_pair):
    client, _, _ = bridge_pair(canned_responder({"continue": {"allThreadsContinued": True}}))
    tool = _tool(client)
    tool.state.is_paused = True
    assert await tool.continue_(ContinueRequest(thread_id=3)) == "All threads continued"
    assert tool.state.is_paused is False
    await client.close()


@pytest.mark.asyncio
async def test_pause_tracks_thread(bridge_pair):
    client, _, _ = bridge_pair(canned_responder({"pause": {}}))
    tool = _tool(client)
    assert await tool.pause(PauseRequest(thread_id=4)) == "Thread 4 paused"
    assert tool.state.is_paused and tool.state.active_thread_id == 4
    await client.close()


@pytest.mark.asyncio
@pytest.mark.parametrize(("step_type", "bridge_method"), [("over", "next"), ("into", "stepIn"), ("out", "stepOut")])
async def test_step_maps_to_bridge_methods(bridge_pair, step_type, bridge_method):
    client, _, writer = bridge_pair(canned_responder({"next": {}, "stepIn": {}, "stepOut": {}}))
    tool = _tool(client)
    message = await tool.step(StepRequest(step_type=step_type, thread_id=2))
    assert message == f"Step {step_type} completed on thread 2"
    assert [r["method"] for r in writer.requests()] == [bridge_method]
    await client.close()


@pytest.mark.asyncio
async def test_step_unknown_type_is_invalid_params(bridge_pair):
    client, _, writer = bridge_pair()
    with pytest.raises(InvalidParamsError) as exc_info:
        await _tool(client).step(StepRequest(step_type="sideways"))
    assert "sideways" in exc_info.value.message
    assert writer.frames == []
    await client.close()


@pytest.mark.asyncio
async def test_step_back_is_not_implemented(bridge_pair):
    client, _, _ = bridge_pair()
    with pytest.raises(NotImplementedFeatureError) as exc_info:
        await _tool(client).step(StepRequest(step_type="back"))
    assert exc_info.value.code == codes.NOT_IMPLEMENTED
    await client.close()


@pytest.mark.asyncio
async def test_remote_error_uses_operation_failure_code(bridge_pair):
    client, _, _ = bridge_pair(canned_responder(errors={"continue": "not stopped"}))
    with pytest.raises(DebugRelayError) as exc_info:
        await _tool(client).continue_(ContinueRequest())
    assert exc_info.value.code == codes.CONTINUE_FAILED
    assert exc_info.value.message == "not stopped"
    await client.close()


@pytest.mark.asyncio
async def test_timeout_keeps_bridge_code(bridge_pair, config):
    client, _, _ = bridge_pair(request_timeout=0.05)
    session = DebugSession(config, bridge=client)
    call = Call(method="debug.pause", raw_params="{}")
    outcome = await session.router.route(call)
    assert isinstance(outcome, CallError)
    assert outcome.domain_code == codes.BRIDGE_TIMEOUT
    await session.close()


@pytest.mark.asyncio
async def test_step_errors_through_router(bridge_pair, config):
    client, _, _ = bridge_pair()
    session = DebugSession(config, bridge=client)
    bad = await session.router.route(Call(method="debug.step", raw_params='{"stepType": "sideways"}'))
    back = await session.router.route(Call(method="debug.step", raw_params='{"stepType": "back"}'))
    assert bad.domain_code == codes.INVALID_PARAMS
    assert back.domain_code == codes.NOT_IMPLEMENTED
    await session.close()
