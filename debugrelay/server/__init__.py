"""Transport loops that feed inbound lines to the envelope translator."""

from debugrelay.server.stdio import PROCESSING_ERROR_LINE, run_message_loop, serve_stdio

__all__ = ["PROCESSING_ERROR_LINE", "run_message_loop", "serve_stdio"]
