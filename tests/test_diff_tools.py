from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from tool_relay.core.context import ExecutionContext
from tool_relay.core.tools.builtin import diff_files
from tool_relay.core.tools.execution import CompletedCommand


@pytest.mark.asyncio
async def test_identical_inline_content(ctx: ExecutionContext) -> None:
    assert await diff_files(ctx, file1="same", file2="same") == "Files are identical: original and modified"


@pytest.mark.asyncio
async def test_identical_files(ctx: ExecutionContext, workdir: Path) -> None:
    (workdir / "a.txt").write_text("x\n")
    (workdir / "b.txt").write_text("x\n")
    assert await diff_files(ctx, file1="a.txt", file2="b.txt") == "Files are identical: a.txt and b.txt"


@pytest.mark.asyncio
async def test_unified_diff_of_files(ctx: ExecutionContext, workdir: Path) -> None:
    (workdir / "a.txt").write_text("keep\nold\n")
    (workdir / "b.txt").write_text("keep\nnew\n")

    result = await diff_files(ctx, file1="a.txt", file2="b.txt", use_delta=False)

    assert result == "Diff:\n```diff\n--- a.txt\n+++ b.txt\n@@ -1,2 +1,2 @@\n keep\n-old\n+new\n```"


@pytest.mark.asyncio
async def test_file_against_inline_text(ctx: ExecutionContext, workdir: Path) -> None:
    (workdir / "a.txt").write_text("one\n")

    result = await diff_files(ctx, file1="a.txt", file2="two", use_delta=False)

    assert "--- a.txt\n+++ modified" in result
    assert "-one\n+two" in result


@pytest.mark.asyncio
async def test_context_lines(ctx: ExecutionContext) -> None:
    original = "\n".join(f"line {i}" for i in range(10))
    modified = original.replace("line 5", "line five")

    result = await diff_files(ctx, file1=original, file2=modified, context=1, use_delta=False)

    assert " line 4\n-line 5\n+line five\n line 6" in result
    assert "line 3" not in result


@pytest.mark.asyncio
async def test_delta_rendering_is_used_when_available(ctx: ExecutionContext) -> None:
    rendered = CompletedCommand(command="delta", exit_code=0, stdout="pretty diff\n", stderr="")
    with patch("tool_relay.core.tools.builtin.diff.shutil.which", return_value="/usr/local/bin/delta"), patch(
        "tool_relay.core.tools.builtin.diff.run_subprocess", new=AsyncMock(return_value=rendered)
    ) as runner:
        result = await diff_files(ctx, file1="a", file2="b")

    assert result == "Diff:\npretty diff"
    assert runner.call_args.kwargs["stdin"].startswith(b"--- original\n+++ modified")


@pytest.mark.asyncio
async def test_falls_back_when_delta_fails(ctx: ExecutionContext) -> None:
    broken = CompletedCommand(command="delta", exit_code=1, stdout="", stderr="bad config")
    with patch("tool_relay.core.tools.builtin.diff.shutil.which", return_value="/usr/local/bin/delta"), patch(
        "tool_relay.core.tools.builtin.diff.run_subprocess", new=AsyncMock(return_value=broken)
    ):
        result = await diff_files(ctx, file1="a", file2="b")

    assert result.startswith("Diff:\n```diff\n--- original\n+++ modified")


@pytest.mark.asyncio
async def test_delta_not_installed(ctx: ExecutionContext) -> None:
    with patch("tool_relay.core.tools.builtin.diff.shutil.which", return_value=None):
        result = await diff_files(ctx, file1="a", file2="b")
    assert result.startswith("Diff:\n```diff\n")
