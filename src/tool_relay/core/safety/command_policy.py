"""Allow/deny policy for shell commands requested by the remote model.

Deny patterns are searched in the whole command string, so dangerous fragments are
caught anywhere (including after a pipe). The allowlist only constrains the leading
command, which keeps compound commands such as ``git log | head`` usable.

This is a pragmatic filter, not a sandbox: a determined caller can still phrase a
harmful command that passes. Adjust both lists to the deployment's threat model.
"""

import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Pattern, Sequence, Tuple

from ..logger import get_logger

logger = get_logger(__name__)

DEFAULT_ALLOWED_COMMANDS: FrozenSet[str] = frozenset(
    {
        # interpreters and package managers
        "node", "python", "python3", "deno", "bun", "npm", "yarn", "pnpm", "pip", "pip3",
        # build tools and compilers
        "cargo", "rustc", "go", "tsc", "make", "cmake", "docker",
        # version control
        "git",
        # common unix utilities
        "ls", "pwd", "cat", "echo", "grep", "find", "wc", "head", "tail",
        "mkdir", "touch", "cp", "mv", "chmod", "chown",
        # process control
        "ps", "kill", "killall", "jobs", "bg", "fg",
    }
)

DEFAULT_BLOCKED_PATTERNS: Tuple[str, ...] = (
    r"rm\s+.*-rf",  # recursive force delete
    r"\bsudo\b",  # privilege escalation
    r"\bsu\s",  # user switching
    r"curl.*\|.*sh",  # download piped into a shell
    r"wget.*\|.*sh",
    r">\s*/dev/",  # writes to device files
    r"/etc/",  # system configuration
    r"/bin/",  # system binaries
    r"/usr/",  # system directories
    r"\bmkfs",  # filesystem formatting
    r"\bfdisk\b",  # partitioning
    r"\bdd\s",  # raw block device access
)


@dataclass(frozen=True)
class SafetyVerdict:
    """Outcome of evaluating one command.

    Attributes:
        safe: True if the command may run.
        reason: Why the command was rejected. None when safe.
    """

    safe: bool
    reason: Optional[str] = None


class CommandSafetyPolicy:
    """
    Stateless command filter: ordered deny patterns first, then an allowlist on the base command.
    """

    def __init__(
        self,
        allowed_commands: Iterable[str] = DEFAULT_ALLOWED_COMMANDS,
        blocked_patterns: Sequence[str] = DEFAULT_BLOCKED_PATTERNS,
    ) -> None:
        """Initialize the policy.

        Args:
            allowed_commands: Base commands that may lead a command line.
            blocked_patterns: Regular expressions that reject a command wherever they match. Order matters:
                the first match is reported.
        """
        self.allowed_commands: FrozenSet[str] = frozenset(allowed_commands)
        self.blocked_patterns: Tuple[Pattern[str], ...] = tuple(re.compile(p) for p in blocked_patterns)

    def evaluate(self, command: str) -> SafetyVerdict:
        """Decide whether ``command`` may be executed.

        Args:
            command: The raw shell command line.

        Returns:
            A SafetyVerdict. Rejections carry the matched pattern or the unrecognized base command.
        """
        for pattern in self.blocked_patterns:
            if pattern.search(command):
                return SafetyVerdict(safe=False, reason=f"Command contains blocked pattern: {pattern.pattern}")

        tokens = command.split()
        base_command = tokens[0] if tokens else ""

        if not base_command or base_command not in self.allowed_commands:
            return SafetyVerdict(
                safe=False,
                reason=f"Command '{base_command or 'empty'}' is not in the allowed list",
            )

        return SafetyVerdict(safe=True)


DEFAULT_POLICY = CommandSafetyPolicy()


def evaluate_command(command: str) -> SafetyVerdict:
    """Evaluate ``command`` against the default policy."""
    return DEFAULT_POLICY.evaluate(command)
