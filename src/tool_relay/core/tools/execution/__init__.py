"""Tool execution: the proxy and the bounded subprocess runner."""

from .process_runner import CompletedCommand, run_subprocess, DEFAULT_MAX_OUTPUT
from .proxy import ToolProxy

__all__ = ["CompletedCommand", "run_subprocess", "DEFAULT_MAX_OUTPUT", "ToolProxy"]
