"""Inspection tools: stack trace, variables, expression evaluation."""

from __future__ import annotations

from typing import Any

from loguru import logger

from debugrelay.tools.base import DebugTool, thread_or_default
from debugrelay.tools.registry import ToolRegistration
from debugrelay.tools.requests import EvaluateRequest, GetStackTraceRequest, GetVariablesRequest
from debugrelay.utils import codes
from debugrelay.utils.exceptions import InvalidParamsError

TAGS = frozenset({"debug", "inspection"})


class InspectionTool(DebugTool):
    """Read-only views into the paused debuggee."""

    def registrations(self) -> list[ToolRegistration]:
        return [
            ToolRegistration("debug.getStackTrace", GetStackTraceRequest, self.get_stack_trace, "Get call stack for a thread", TAGS),
            ToolRegistration("debug.getVariables", GetVariablesRequest, self.get_variables, "Get variables for a frame or scope", TAGS),
            ToolRegistration("debug.evaluate", EvaluateRequest, self.evaluate, "Evaluate an expression in the debug context", TAGS),
        ]

    async def get_stack_trace(self, request: GetStackTraceRequest) -> Any:
        thread_id = request.thread_id if request.thread_id is not None else self.state.active_thread_id
        thread_id = thread_or_default(thread_id)
        logger.info("Getting stack trace for thread {}", thread_id)
        payload = {"threadId": thread_id, "startFrame": request.start_frame, "levels": request.levels}
        return await self.forward(
            "stackTrace",
            {k: v for k, v in payload.items() if v is not None},
            failure_code=codes.STACK_TRACE_FAILED,
            retry=True,
        )

    async def get_variables(self, request: GetVariablesRequest) -> Any:
        logger.info("Getting variables for scope {}, frame {}", request.scope_id, request.frame_id)
        return await self.forward(
            "variables",
            request.model_dump(by_alias=True, exclude_none=True),
            failure_code=codes.VARIABLES_FAILED,
            retry=True,
        )

    async def evaluate(self, request: EvaluateRequest) -> Any:
        self.require_bridge()
        if not request.expression.strip():
            raise InvalidParamsError("Expression cannot be empty", field="expression")
        logger.info("Evaluating expression in {} context", request.context)
        return await self.forward(
            "evaluate",
            request.model_dump(by_alias=True, exclude_none=True),
            failure_code=codes.EVALUATION_FAILED,
        )
