"""Public exports for local tool execution: context, safety policy, registry and proxy."""

from .config import RelaySettings
from .context import ExecutionContext, KVStore, InMemoryKVStore
from .exceptions import (
    ToolRelayError,
    ToolRegistrationError,
    ToolNotFoundError,
    ToolValidationError,
    ToolExecutionError,
    CommandBlockedError,
    CommandTimeoutError,
    CommandFailedError,
    ProtocolError,
    ContinuationError,
    ContinuationTimeoutError,
    ContinuationHTTPError,
    RateLimitError,
)
from .logger import get_logger, setup_logging
from .messages import (
    ToolCall,
    ToolResult,
    ToolCallsMessage,
    ContinuationRequest,
    ExtractionResult,
    FlowResult,
    TurnResult,
)
from .safety import CommandSafetyPolicy, SafetyVerdict, evaluate_command
from .tools import ToolDefinition, ToolName, ToolRegistry, ToolProxy, build_default_registry

__all__ = [
    "RelaySettings",
    "ExecutionContext",
    "KVStore",
    "InMemoryKVStore",
    "ToolRelayError",
    "ToolRegistrationError",
    "ToolNotFoundError",
    "ToolValidationError",
    "ToolExecutionError",
    "CommandBlockedError",
    "CommandTimeoutError",
    "CommandFailedError",
    "ProtocolError",
    "ContinuationError",
    "ContinuationTimeoutError",
    "ContinuationHTTPError",
    "RateLimitError",
    "get_logger",
    "setup_logging",
    "ToolCall",
    "ToolResult",
    "ToolCallsMessage",
    "ContinuationRequest",
    "ExtractionResult",
    "FlowResult",
    "TurnResult",
    "CommandSafetyPolicy",
    "SafetyVerdict",
    "evaluate_command",
    "ToolDefinition",
    "ToolName",
    "ToolRegistry",
    "ToolProxy",
    "build_default_registry",
]
