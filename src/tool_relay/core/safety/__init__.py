"""Command safety policy for shell execution."""

from .command_policy import (
    CommandSafetyPolicy,
    SafetyVerdict,
    DEFAULT_POLICY,
    DEFAULT_ALLOWED_COMMANDS,
    DEFAULT_BLOCKED_PATTERNS,
    evaluate_command,
)

__all__ = [
    "CommandSafetyPolicy",
    "SafetyVerdict",
    "DEFAULT_POLICY",
    "DEFAULT_ALLOWED_COMMANDS",
    "DEFAULT_BLOCKED_PATTERNS",
    "evaluate_command",
]
