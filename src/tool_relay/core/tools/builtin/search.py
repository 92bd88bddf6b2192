"""Content and file-name search backed by the system ``grep`` and ``find``."""

from pathlib import PurePath
from typing import Annotated, List, Literal, Optional

from pydantic import Field

from ..execution.process_runner import run_subprocess
from ...context import ExecutionContext
from ...exceptions import CommandFailedError

GREP_MAX_OUTPUT = 2 * 1024 * 1024
FIND_MAX_OUTPUT = 1024 * 1024
SEARCH_TIMEOUT = 60.0

_FIND_TYPE_FLAGS = {"file": ["-type", "f"], "directory": ["-type", "d"], "both": []}


def _search_target(path: str) -> str:
    """Keep a search path under the root and out of option position."""
    candidate = PurePath(path)
    if candidate.anchor:
        candidate = candidate.relative_to(candidate.anchor)
    target = str(candidate)
    return f"./{target}" if target.startswith("-") else target


async def grep_search(
    ctx: ExecutionContext,
    pattern: Annotated[str, Field(description="Regular expression to search for")],
    path: Annotated[str, Field(description="File or directory to search in")] = ".",
    file_pattern: Annotated[
        Optional[str], Field(description="Only search files matching this glob, e.g. '*.py'", alias="filePattern")
    ] = None,
    case_sensitive: Annotated[
        bool, Field(description="Whether the search is case sensitive", alias="caseSensitive")
    ] = False,
) -> str:
    """Search file contents for a pattern, recursively."""
    argv: List[str] = ["grep", "-r", "-n"]
    if not case_sensitive:
        argv.append("-i")
    if file_pattern:
        argv.append(f"--include={file_pattern}")
    argv += ["-e", pattern, _search_target(path)]

    ctx.logger.info(f"Searching for pattern: {pattern} in {path}")
    result = await run_subprocess(
        argv, cwd=ctx.working_directory, timeout=SEARCH_TIMEOUT, max_output=GREP_MAX_OUTPUT
    )

    # grep exits 1 when nothing matched, 2 on real errors
    if result.exit_code == 1 or (result.ok and not result.stdout.strip()):
        return f"No matches found for pattern: {pattern}"
    if not result.ok:
        raise CommandFailedError(result.command, result.exit_code, result.stdout, result.stderr)

    return f'Search results for "{pattern}":\n```\n{result.stdout.rstrip()}\n```'


async def find_files(
    ctx: ExecutionContext,
    pattern: Annotated[str, Field(description="File name glob, e.g. '*.ts'")],
    path: Annotated[str, Field(description="Directory to search in")] = ".",
    type: Annotated[
        Literal["file", "directory", "both"], Field(description="Kind of entries to return")
    ] = "file",
) -> str:
    """Find files or directories whose name matches a glob pattern."""
    argv = ["find", _search_target(path), *_FIND_TYPE_FLAGS[type], "-name", pattern]

    ctx.logger.info(f"Finding {type} entries matching: {pattern} in {path}")
    result = await run_subprocess(
        argv, cwd=ctx.working_directory, timeout=SEARCH_TIMEOUT, max_output=FIND_MAX_OUTPUT
    )
    if not result.ok:
        raise CommandFailedError(result.command, result.exit_code, result.stdout, result.stderr)

    files = [line for line in result.stdout.splitlines() if line.strip()]
    if not files:
        return f"No files found matching pattern: {pattern}"

    listing = "\n".join(f"- {f}" for f in files)
    return f'Found {len(files)} file(s) matching "{pattern}":\n{listing}'
