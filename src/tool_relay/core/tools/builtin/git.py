"""Git working-tree inspection."""

import asyncio
from typing import Annotated, List, Optional

from pydantic import Field

from ..execution.process_runner import run_subprocess
from ...context import ExecutionContext
from ...exceptions import CommandFailedError, ToolExecutionError

GIT_DIFF_MAX_OUTPUT = 5 * 1024 * 1024
GIT_TIMEOUT = 60.0
GIT_NOT_A_REPOSITORY = 128


async def git_diff(
    ctx: ExecutionContext,
    files: Annotated[Optional[List[str]], Field(description="Limit the diff to these paths")] = None,
    staged: Annotated[bool, Field(description="Show staged changes instead of unstaged ones")] = False,
    save_to_file: Annotated[
        Optional[str], Field(description="Write the full diff to this file instead of returning it", alias="saveToFile")
    ] = None,
    use_delta: Annotated[
        bool, Field(description="Accepted for compatibility; git diff output is returned unrendered", alias="useDelta")
    ] = True,
) -> str:
    """Show the git diff of the working tree or of the staged changes."""
    argv = ["git", "--no-pager", "diff", "--no-color"]
    if staged:
        argv.append("--cached")
    if files:
        argv += ["--", *files]

    ctx.logger.info(f"Running: {' '.join(argv)}")
    try:
        result = await run_subprocess(
            argv, cwd=ctx.working_directory, timeout=GIT_TIMEOUT, max_output=GIT_DIFF_MAX_OUTPUT
        )
    except FileNotFoundError as exc:
        raise ToolExecutionError("git is not installed") from exc

    if result.exit_code == GIT_NOT_A_REPOSITORY or "not a git repository" in result.stderr.lower():
        raise ToolExecutionError("Not a git repository or git not available")
    if not result.ok:
        raise CommandFailedError(result.command, result.exit_code, result.stdout, result.stderr)

    if not result.stdout.strip():
        if save_to_file:
            return "No staged changes to save" if staged else "No changes to save (working directory is clean)"
        return "No staged changes to show" if staged else "No changes to show (working directory is clean)"

    if save_to_file:
        target = ctx.resolve(save_to_file)

        def _save() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(result.stdout, encoding="utf-8")

        await asyncio.to_thread(_save)
        return f"Full diff saved to file: `{save_to_file}`\n\nView with: `less {save_to_file}` or open in your editor"

    if result.truncated:
        ctx.logger.warning("git diff output exceeded %d bytes and was cut off", GIT_DIFF_MAX_OUTPUT)
    return f"Git Diff:\n\n```diff\n{result.stdout}\n```"
