"""Wire-facing payload models returned by debug tools."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for models whose JSON keys are camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Breakpoint(CamelModel):
    """A breakpoint as tracked by the relay."""

    id: str
    file: str
    line: int = Field(ge=1)
    column: int = Field(default=0, ge=0)
    condition: str | None = None
    hit_condition: str | None = None
    verified: bool = True


class DebugStatus(CamelModel):
    """Snapshot of session state answered by debug.getStatus."""

    is_debugging: bool = False
    is_paused: bool = False
    active_thread_id: int | None = None
    session_id: str | None = None
    breakpoint_count: int = 0
    bridge_connected: bool = False
