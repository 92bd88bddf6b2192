"""Diffs between two files or two inline texts."""

import asyncio
import difflib
import shutil
from typing import Annotated, Optional, Tuple

from pydantic import Field

from ..execution.process_runner import run_subprocess
from ...context import ExecutionContext
from ...exceptions import ToolExecutionError

DELTA_TIMEOUT = 10.0


async def _read_or_inline(ctx: ExecutionContext, value: str, inline_label: str) -> Tuple[str, str]:
    """Return ``(label, content)``: the file's content if ``value`` names a readable file, else ``value`` itself."""
    try:
        content = await asyncio.to_thread(ctx.resolve(value).read_text, encoding="utf-8")
    except (OSError, ValueError, UnicodeDecodeError):
        return inline_label, value
    return value, content


async def _render_with_delta(ctx: ExecutionContext, diff_text: str) -> Optional[str]:
    """Pipe a unified diff through ``delta``. Returns None if delta is missing or fails."""
    if shutil.which("delta") is None:
        return None
    try:
        result = await run_subprocess(
            ["delta", "--paging=never"],
            cwd=ctx.working_directory,
            timeout=DELTA_TIMEOUT,
            stdin=diff_text.encode("utf-8"),
        )
    except (OSError, ToolExecutionError) as exc:
        ctx.logger.warning(f"delta failed, using the built-in diff: {exc}")
        return None
    if not result.ok or not result.stdout.strip():
        ctx.logger.warning(f"delta exited with {result.exit_code}, using the built-in diff")
        return None
    return result.stdout


async def diff_files(
    ctx: ExecutionContext,
    file1: Annotated[str, Field(description="First file path, or the original text")],
    file2: Annotated[str, Field(description="Second file path, or the modified text")],
    context: Annotated[int, Field(description="Number of context lines around each change")] = 3,
    use_delta: Annotated[
        bool, Field(description="Render the diff with delta when it is installed", alias="useDelta")
    ] = True,
) -> str:
    """Show the differences between two files, or between two pieces of text."""
    name1, content1 = await _read_or_inline(ctx, file1, "original")
    name2, content2 = await _read_or_inline(ctx, file2, "modified")
    ctx.logger.info(f"Generating diff between {name1} and {name2}")

    if content1 == content2:
        return f"Files are identical: {name1} and {name2}"

    diff_lines = difflib.unified_diff(
        content1.splitlines(),
        content2.splitlines(),
        fromfile=name1,
        tofile=name2,
        n=max(context, 0),
        lineterm="",
    )
    diff_text = "\n".join(diff_lines) + "\n"
    if not diff_text.strip():
        return f"Files differ only in line endings: {name1} and {name2}"

    if use_delta:
        rendered = await _render_with_delta(ctx, diff_text)
        if rendered is not None:
            return f"Diff:\n{rendered.rstrip()}"

    return f"Diff:\n```diff\n{diff_text}```"
