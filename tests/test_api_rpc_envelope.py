import json

import pytest
from pydantic import BaseModel

from debugrelay.api.rpc.envelope import EnvelopeTranslator, encode_outcome
from debugrelay.api.rpc.contracts import Call, CallError, CallResult, Protocol
from debugrelay.api.rpc.request_guard import prepare_call
from debugrelay.api.rpc.router import RequestRouter
from debugrelay.tools.registry import ToolRegistration, ToolRegistry
from debugrelay.utils import codes


class _Req(BaseModel):
    value: int = 0


class _Base(BaseModel):
    name: str


class _Derived(_Base):
    extra: str


async def _double(request: _Req):
    return {"value": request.value * 2}


async def _derived(request: _Req) -> _Base:
    return _Derived(name="n", extra="kept")


async def _crash(request: _Req):
    raise RuntimeError("nope")


async def _not_a_number(request: _Req):
    return {"ratio": float("nan")}


def _strict_loads(line: str):
    def reject(name):
        raise ValueError(name)

    return json.loads(line, parse_constant=reject)


def _translator() -> EnvelopeTranslator:
    registry = ToolRegistry()
    registry.register(ToolRegistration("double", _Req, _double))
    registry.register(ToolRegistration("derived", _Req, _derived))
    registry.register(ToolRegistration("crash", _Req, _crash))
    registry.register(ToolRegistration("nan", _Req, _not_a_number))
    registry.freeze()
    return EnvelopeTranslator(RequestRouter(registry))


async def _handle(raw) -> dict:
    line = await _translator().handle_line(raw if isinstance(raw, str) else json.dumps(raw))
    assert "\n" not in line
    return json.loads(line)


@pytest.mark.asyncio
async def test_jsonrpc_success_shape_and_params_member():
    resp = await _handle({"jsonrpc": "2.0", "id": 7, "method": "double", "params": {"value": 21}})
    assert resp == {"jsonrpc": "2.0", "id": 7, "result": {"success": True, "data": {"value": 42}, "message": None}}


@pytest.mark.asyncio
async def test_jsonrpc_inline_params_when_no_params_member():
    resp = await _handle({"jsonrpc": "2.0", "id": "a", "method": "double", "value": 5})
    assert resp["result"]["data"] == {"value": 10}


@pytest.mark.asyncio
@pytest.mark.parametrize("req_id", [1, "abc", 2.5, None])
async def test_jsonrpc_id_is_echoed_with_type(req_id):
    resp = await _handle({"jsonrpc": "2.0", "id": req_id, "method": "double"})
    assert resp["id"] == req_id
    assert type(resp["id"]) is type(req_id)


@pytest.mark.asyncio
async def test_jsonrpc_missing_id_answers_null():
    resp = await _handle({"jsonrpc": "2.0", "method": "double"})
    assert "id" in resp and resp["id"] is None


@pytest.mark.asyncio
async def test_jsonrpc_unknown_method_error_shape():
    resp = await _handle({"jsonrpc": "2.0", "id": 3, "method": "debug.nope"})
    assert resp["jsonrpc"] == "2.0"
    assert resp["id"] == 3
    assert resp["error"]["code"] == -32601
    assert "debug.nope" in resp["error"]["message"]
    assert resp["error"]["data"]["mcpCode"] == codes.METHOD_NOT_FOUND


@pytest.mark.asyncio
async def test_jsonrpc_internal_error_keeps_domain_code():
    resp = await _handle({"jsonrpc": "2.0", "id": 4, "method": "crash"})
    assert resp["error"]["code"] == -32603
    assert resp["error"]["data"]["mcpCode"] == codes.INTERNAL_ERROR
    assert resp["error"]["data"]["details"]["category"] == "fatal"


@pytest.mark.asyncio
async def test_legacy_success_shape():
    resp = await _handle({"method": "double", "value": 4})
    assert resp == {"success": True, "message": None, "result": {"value": 8}}


@pytest.mark.asyncio
async def test_legacy_error_shape():
    resp = await _handle({"method": "missing.method"})
    assert resp["success"] is False
    assert resp["message"] is None
    assert resp["error"]["code"] == codes.METHOD_NOT_FOUND
    assert "missing.method" in resp["error"]["message"]


@pytest.mark.asyncio
async def test_malformed_json_is_legacy_parse_error():
    resp = await _handle("{not json")
    assert resp["success"] is False
    assert resp["error"]["code"] == codes.JSON_PARSE_ERROR


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["[1, 2]", "42", '"text"', "null"])
async def test_non_object_is_invalid_request(raw):
    resp = await _handle(raw)
    assert resp["error"]["code"] == codes.INVALID_REQUEST


@pytest.mark.asyncio
@pytest.mark.parametrize("frame", [{"jsonrpc": "2.0", "id": 1}, {"method": ""}, {"method": 5}])
async def test_missing_method_is_legacy_invalid_request(frame):
    resp = await _handle(frame)
    assert "jsonrpc" not in resp
    assert resp["error"]["code"] == codes.INVALID_REQUEST
    assert resp["error"]["message"] == "Missing or empty method property"


@pytest.mark.asyncio
async def test_payload_serialized_by_runtime_type():
    resp = await _handle({"jsonrpc": "2.0", "id": 1, "method": "derived"})
    assert resp["result"]["data"] == {"name": "n", "extra": "kept"}


@pytest.mark.asyncio
async def test_unexpected_translator_failure_is_internal_error(monkeypatch):
    translator = _translator()

    async def broken_route(call):
        raise RuntimeError("router exploded")

    monkeypatch.setattr(translator._router, "route", broken_route)
    resp = json.loads(await translator.handle_line('{"method": "double"}'))
    assert resp["success"] is False
    assert resp["error"]["code"] == codes.INTERNAL_ERROR
    assert resp["error"]["message"] == "An unexpected error occurred"


def test_prepare_call_legacy_params_exclude_method_only():
    guarded = prepare_call('{"method": "double", "value": 1, "id": 9}')
    assert guarded.error is None
    assert guarded.call.protocol is Protocol.LEGACY
    assert json.loads(guarded.call.raw_params) == {"value": 1, "id": 9}


def test_prepare_call_jsonrpc_inline_params_exclude_reserved():
    guarded = prepare_call('{"jsonrpc": "2.0", "id": 1, "method": "double", "value": 1}')
    assert json.loads(guarded.call.raw_params) == {"value": 1}
    assert guarded.call.has_id is True


def test_encode_outcome_jsonrpc_error_carries_details():
    call = Call(method="m", protocol=Protocol.JSONRPC2, id="x", has_id=True)
    line = encode_outcome(call, CallError(codes.BRIDGE_TIMEOUT, "slow", {"method": "threads"}))
    assert json.loads(line)["error"] == {
        "code": -32004,
        "message": "slow",
        "data": {"mcpCode": codes.BRIDGE_TIMEOUT, "details": {"method": "threads"}},
    }


def test_encode_outcome_legacy_result_message():
    call = Call(method="m")
    line = encode_outcome(call, CallResult(payload=[1, 2], message="done"))
    assert json.loads(line) == {"success": True, "message": "done", "result": [1, 2]}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw",
    [
        '{"jsonrpc": "2.0", "id": 1e400, "method": "double"}',
        '{"jsonrpc": "2.0", "id": NaN, "method": "double"}',
        '{"method": "double", "value": Infinity}',
        '{"method": "double", "value": -Infinity}',
    ],
)
async def test_non_finite_numbers_are_parse_errors(raw):
    line = await _translator().handle_line(raw)
    resp = _strict_loads(line)
    assert resp["success"] is False
    assert resp["error"]["code"] == codes.JSON_PARSE_ERROR


@pytest.mark.asyncio
async def test_deeply_nested_input_is_parse_error():
    resp = _strict_loads(await _translator().handle_line("[" * 100000))
    assert resp["error"]["code"] == codes.JSON_PARSE_ERROR


@pytest.mark.asyncio
async def test_non_finite_result_becomes_internal_error():
    line = await _translator().handle_line('{"jsonrpc": "2.0", "id": 8, "method": "nan"}')
    resp = _strict_loads(line)
    assert resp["id"] == 8
    assert resp["error"]["code"] == -32603
    assert resp["error"]["data"]["mcpCode"] == codes.INTERNAL_ERROR


def test_encode_outcome_refuses_non_finite_values():
    with pytest.raises(ValueError):
        encode_outcome(Call(method="m"), CallResult(payload=float("inf")))
