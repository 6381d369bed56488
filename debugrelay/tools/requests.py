"""Typed request models decoded by the router before a handler runs."""

from __future__ import annotations

from pydantic import Field

from debugrelay.tools.models import CamelModel


class EmptyRequest(CamelModel):
    """Request with no parameters; extra members are ignored."""


class HealthRequest(EmptyRequest):
    pass


# Lifecycle

class AttachRequest(CamelModel):
    process_id: int
    configuration: str | None = None


class LaunchRequest(CamelModel):
    program: str = Field(min_length=1)
    args: list[str] = Field(default_factory=list)
    cwd: str | None = None
    env: dict[str, str] = Field(default_factory=dict)
    stop_at_entry: bool = False


class DisconnectRequest(EmptyRequest):
    pass


class TerminateRequest(EmptyRequest):
    pass


# Execution

class ContinueRequest(CamelModel):
    thread_id: int | None = None


class PauseRequest(CamelModel):
    thread_id: int | None = None


class StepRequest(CamelModel):
    thread_id: int | None = None
    # Checked by the handler so unknown values answer INVALID_PARAMS.
    step_type: str = "over"


# Breakpoints

class SetBreakpointRequest(CamelModel):
    file: str = Field(min_length=1)
    line: int = Field(ge=1)
    column: int = Field(default=0, ge=0)
    condition: str | None = None
    hit_condition: str | None = None


class RemoveBreakpointRequest(CamelModel):
    breakpoint_id: str = Field(min_length=1)


class ListBreakpointsRequest(EmptyRequest):
    pass


# Inspection

class GetStackTraceRequest(CamelModel):
    thread_id: int | None = None
    start_frame: int | None = Field(default=None, ge=0)
    levels: int | None = Field(default=None, ge=0)


class GetVariablesRequest(CamelModel):
    frame_id: int | None = None
    scope_id: int | None = None
    filter: str | None = None


class EvaluateRequest(CamelModel):
    expression: str
    frame_id: int | None = None
    context: str = "repl"


# Threads and status

class GetThreadsRequest(EmptyRequest):
    pass


class SelectThreadRequest(CamelModel):
    thread_id: int


class GetStatusRequest(EmptyRequest):
    pass
