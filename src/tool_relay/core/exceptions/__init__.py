"""Export the exception hierarchy shared by tool execution and the continuation protocol."""

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
    RateLimitError,
    ContinuationHTTPError,
)

__all__ = [
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
    "RateLimitError",
    "ContinuationHTTPError",
]
