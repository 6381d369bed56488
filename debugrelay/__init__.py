"""
debugrelay - relay debug operations from an AI agent to a debugger mediator.
"""

__version__ = "0.1.0"
__logo__ = "🪲"
