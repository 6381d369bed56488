"""Execution control tools: continue, pause, step."""

from __future__ import annotations

from loguru import logger

from debugrelay.tools.base import DebugTool, thread_or_default
from debugrelay.tools.registry import ToolRegistration
from debugrelay.tools.requests import ContinueRequest, PauseRequest, StepRequest
from debugrelay.utils import codes
from debugrelay.utils.exceptions import InvalidParamsError, NotImplementedFeatureError

TAGS = frozenset({"debug", "execution"})

# stepType -> mediator method; "back" is accepted but has no mediator method.
STEP_METHODS: dict[str, str | None] = {
    "over": "next",
    "into": "stepIn",
    "out": "stepOut",
    "back": None,
}


class ExecutionTool(DebugTool):
    """Resume, pause and step the debuggee."""

    def registrations(self) -> list[ToolRegistration]:
        return [
            ToolRegistration("debug.continue", ContinueRequest, self.continue_, "Continue execution from current breakpoint", TAGS),
            ToolRegistration("debug.pause", PauseRequest, self.pause, "Pause execution", TAGS),
            ToolRegistration("debug.step", StepRequest, self.step, "Step through code (over/into/out)", TAGS),
        ]

    async def continue_(self, request: ContinueRequest) -> str:
        thread_id = thread_or_default(request.thread_id)
        logger.info("Continuing execution for thread {}", thread_id)
        result = await self.forward("continue", {"threadId": thread_id}, failure_code=codes.CONTINUE_FAILED)
        self.state.is_paused = False
        if isinstance(result, dict) and result.get("allThreadsContinued") is True:
            return "All threads continued"
        return f"Thread {thread_id} continued"

    async def pause(self, request: PauseRequest) -> str:
        thread_id = thread_or_default(request.thread_id)
        logger.info("Pausing thread {}", thread_id)
        await self.forward("pause", {"threadId": thread_id}, failure_code=codes.EXECUTION_FAILED)
        self.state.is_paused = True
        self.state.active_thread_id = thread_id
        return f"Thread {thread_id} paused"

    async def step(self, request: StepRequest) -> str:
        self.require_bridge()
        step_type = request.step_type.strip().lower()
        if step_type not in STEP_METHODS:
            raise InvalidParamsError(
                f"Invalid step type: {request.step_type}. Valid types: over, into, out, back",
                field="stepType",
            )
        method = STEP_METHODS[step_type]
        if method is None:
            raise NotImplementedFeatureError(f"Step {step_type}")
        thread_id = thread_or_default(request.thread_id)
        logger.info("Stepping {} on thread {}", step_type, thread_id)
        await self.forward(method, {"threadId": thread_id}, failure_code=codes.STEP_FAILED)
        return f"Step {step_type} completed on thread {thread_id}"
