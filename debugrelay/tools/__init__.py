"""Debug tools and the registry that exposes them."""

from debugrelay.tools.breakpoints import BreakpointStore, BreakpointTool
from debugrelay.tools.models import Breakpoint, DebugStatus
from debugrelay.tools.registry import ToolRegistration, ToolRegistry

__all__ = [
    "Breakpoint",
    "BreakpointStore",
    "BreakpointTool",
    "DebugStatus",
    "ToolRegistration",
    "ToolRegistry",
]
