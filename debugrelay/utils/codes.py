"""Stable domain error codes shared by tools, the bridge and the RPC layer."""

# Method and request errors
METHOD_NOT_FOUND = "METHOD_NOT_FOUND"
INVALID_REQUEST = "INVALID_REQUEST"
INVALID_PARAMS = "INVALID_PARAMS"
JSON_PARSE_ERROR = "JSON_PARSE_ERROR"

# Registry and handler availability
TOOL_NOT_FOUND = "TOOL_NOT_FOUND"
TOOL_ERROR = "TOOL_ERROR"
DUPLICATE_METHOD = "DUPLICATE_METHOD"
REGISTRY_FROZEN = "REGISTRY_FROZEN"

# Bridge communication errors
BRIDGE_CONNECTION_FAILED = "DEBUG_BRIDGE_CONNECTION_FAILED"
BRIDGE_TIMEOUT = "DEBUG_BRIDGE_TIMEOUT"
BRIDGE_PROTOCOL_ERROR = "DEBUG_BRIDGE_PROTOCOL_ERROR"
BRIDGE_REMOTE_ERROR = "DEBUG_BRIDGE_REMOTE_ERROR"

# Session management errors
ATTACHMENT_FAILED = "DEBUG_ATTACHMENT_FAILED"
LAUNCH_FAILED = "DEBUG_LAUNCH_FAILED"
NO_DEBUG_SESSION = "NO_DEBUG_SESSION"
DISCONNECT_FAILED = "DISCONNECT_FAILED"
TERMINATE_FAILED = "TERMINATE_FAILED"

# Execution control errors
EXECUTION_FAILED = "DEBUG_EXECUTION_FAILED"
STEP_FAILED = "DEBUG_STEP_FAILED"
CONTINUE_FAILED = "DEBUG_CONTINUE_FAILED"

# Breakpoint errors
BREAKPOINT_SET_FAILED = "BREAKPOINT_SET_FAILED"
BREAKPOINT_NOT_FOUND = "BREAKPOINT_NOT_FOUND"

# Inspection errors
STACK_TRACE_FAILED = "STACK_TRACE_FAILED"
VARIABLES_FAILED = "GET_VARIABLES_FAILED"
EVALUATION_FAILED = "EVALUATION_FAILED"

# Thread and status errors
GET_THREADS_FAILED = "GET_THREADS_FAILED"
SELECT_THREAD_FAILED = "SELECT_THREAD_FAILED"

# General errors
INTERNAL_ERROR = "INTERNAL_ERROR"
NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
PROCESSING_ERROR = "PROCESSING_ERROR"
