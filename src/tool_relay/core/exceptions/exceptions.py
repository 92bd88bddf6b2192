"""
Custom exception classes for the tool relay.

This module defines the hierarchy of exceptions raised while registering and
executing local tools and while exchanging continuation messages with the
remote agent. Executors raise these freely; the tool proxy is the only place
that turns them into failed tool results.
"""

from typing import Optional


class ToolRelayError(Exception):
    """Base exception for all relay errors."""

    pass


class ToolRegistrationError(ToolRelayError):
    """Raised when there is an error registering a tool."""

    pass


class ToolNotFoundError(ToolRelayError):
    """Raised when a requested tool is not found in the registry."""

    pass


class ToolValidationError(ToolRelayError):
    """Raised when tool parameters or definition are invalid."""

    pass


class ToolExecutionError(ToolRelayError):
    """Raised when a tool fails during execution."""

    pass


class CommandBlockedError(ToolExecutionError):
    """Raised when the command safety policy rejects a shell command."""

    def __init__(self, command: str, reason: str) -> None:
        super().__init__(f"Command blocked for safety: {reason}")
        self.command = command
        self.reason = reason


class CommandTimeoutError(ToolExecutionError):
    """Raised when a subprocess exceeds its timeout and is killed."""

    def __init__(self, command: str, timeout: float) -> None:
        super().__init__(f"Command timed out after {timeout:g}s: `{command}`")
        self.command = command
        self.timeout = timeout


class CommandFailedError(ToolExecutionError):
    """Raised when a subprocess exits with a non-zero status.

    The captured output is part of the message so the remote model can diagnose the failure.
    """

    def __init__(self, command: str, exit_code: int, stdout: str = "", stderr: str = "") -> None:
        self.command = command
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        parts = [f"Command failed with exit code {exit_code}: `{command}`"]
        if stdout.strip():
            parts.append(f"stdout:\n```\n{stdout.strip()}\n```")
        if stderr.strip():
            parts.append(f"stderr:\n```\n{stderr.strip()}\n```")
        super().__init__("\n\n".join(parts))


class ProtocolError(ToolRelayError):
    """Raised when an embedded tool-call batch cannot be decoded."""

    pass


class ContinuationError(ToolRelayError):
    """Raised when the continuation request cannot be delivered."""

    pass


class ContinuationTimeoutError(ContinuationError):
    """Raised when the continuation request exceeds its timeout."""

    pass


class ContinuationHTTPError(ContinuationError):
    """Raised when the agent endpoint answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class RateLimitError(ContinuationHTTPError):
    """Raised when the agent endpoint answers 429 Too Many Requests."""

    pass
