"""Tool Relay - executes a remote coding agent's tool calls on the local machine."""

from .core import (
    RelaySettings,
    ExecutionContext,
    ToolCall,
    ToolResult,
    ToolCallsMessage,
    ContinuationRequest,
    ToolName,
    ToolRegistry,
    ToolProxy,
    build_default_registry,
    get_logger,
    setup_logging,
)
from .continuation import AgentClient, ContinuationHandler, extract_tool_calls

__all__ = [
    "RelaySettings",
    "ExecutionContext",
    "ToolCall",
    "ToolResult",
    "ToolCallsMessage",
    "ContinuationRequest",
    "ToolName",
    "ToolRegistry",
    "ToolProxy",
    "build_default_registry",
    "get_logger",
    "setup_logging",
    "AgentClient",
    "ContinuationHandler",
    "extract_tool_calls",
]
