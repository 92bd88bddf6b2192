"""Shell command execution, gated by the command safety policy."""

from typing import Annotated

from pydantic import Field

from ..execution.process_runner import DEFAULT_MAX_OUTPUT, run_subprocess
from ...context import ExecutionContext
from ...exceptions import CommandBlockedError, CommandFailedError
from ...safety import evaluate_command


async def run_command(
    ctx: ExecutionContext,
    command: Annotated[str, Field(description="Shell command to execute")],
    working_dir: Annotated[
        str, Field(description="Directory to run the command in, relative to the project root", alias="workingDir")
    ] = ".",
    timeout: Annotated[int, Field(description="Timeout in milliseconds")] = 30000,
) -> str:
    """Run a shell command in the project and return its output.

    Commands are checked against the safety policy before anything is spawned.
    """
    verdict = evaluate_command(command)
    if not verdict.safe:
        ctx.logger.warning(f"Blocked unsafe command: {command} - {verdict.reason}")
        raise CommandBlockedError(command, verdict.reason or "rejected")

    cwd = ctx.working_directory if working_dir == "." else ctx.resolve(working_dir)
    ctx.logger.info(f"Executing command: {command} in {working_dir}")

    result = await run_subprocess(command, cwd=cwd, timeout=timeout / 1000, max_output=DEFAULT_MAX_OUTPUT)
    if not result.ok:
        raise CommandFailedError(command, result.exit_code, result.stdout, result.stderr)

    parts = [f"Command executed successfully: `{command}`"]
    if result.stdout.strip():
        parts.append(f"stdout:\n```\n{result.stdout.strip()}\n```")
    if result.stderr.strip():
        parts.append(f"stderr:\n```\n{result.stderr.strip()}\n```")
    return "\n\n".join(parts)
