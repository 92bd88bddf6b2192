import asyncio
from pathlib import Path
from typing import Annotated
from unittest.mock import AsyncMock, patch

import pytest
from pydantic import Field

from tool_relay.core.context import ExecutionContext
from tool_relay.core.exceptions import ToolExecutionError
from tool_relay.core.messages import ToolCall
from tool_relay.core.tools import ToolProxy, ToolRegistry


def _call(call_id: str, tool_name: str, **parameters) -> ToolCall:
    return ToolCall(id=call_id, tool_name=tool_name, parameters=parameters)


@pytest.mark.asyncio
async def test_executes_a_single_call(proxy: ToolProxy, workdir: Path) -> None:
    (workdir / "a.txt").write_text("hello")

    result = await proxy.execute_tool_call(_call("c1", "read_file", path="a.txt"))

    assert result.id == "c1"
    assert result.success is True
    assert result.result == "File content of a.txt:\n```\nhello\n```"


@pytest.mark.asyncio
async def test_unknown_tool_fails_without_raising(proxy: ToolProxy) -> None:
    result = await proxy.execute_tool_call(_call("c1", "format_disk"))
    assert result.success is False
    assert result.error == "Unknown tool: format_disk"


@pytest.mark.asyncio
async def test_missing_required_parameter(proxy: ToolProxy) -> None:
    result = await proxy.execute_tool_call(_call("c1", "read_file"))
    assert result.success is False
    assert result.error.startswith("Argument validation failed")


@pytest.mark.asyncio
async def test_camel_case_parameters_reach_the_executor(proxy: ToolProxy, workdir: Path) -> None:
    (workdir / "sub").mkdir()

    result = await proxy.execute_tool_call(_call("c1", "run_command", command="pwd", workingDir="sub"))

    assert result.success is True, result.error
    assert str((workdir / "sub").resolve()) in result.result


@pytest.mark.asyncio
async def test_batch_results_match_calls_one_to_one(proxy: ToolProxy, workdir: Path) -> None:
    calls = [
        _call("c1", "read_file", path="missing.txt"),
        _call("c2", "write_file", path="out/new.txt", content="data"),
        _call("c3", "not_a_tool"),
        _call("c4", "read_file", path="out/new.txt"),
    ]

    results = await proxy.execute_tool_calls(calls)

    assert [r.id for r in results] == ["c1", "c2", "c3", "c4"]
    assert [r.success for r in results] == [False, True, False, True]
    assert results[0].error.startswith("FileNotFoundError")
    assert "data" in results[3].result


@pytest.mark.asyncio
async def test_empty_batch(proxy: ToolProxy) -> None:
    assert await proxy.execute_tool_calls([]) == []


@pytest.mark.asyncio
async def test_concurrent_mode_keeps_input_order(ctx: ExecutionContext) -> None:
    registry = ToolRegistry()

    @registry.tool("write_file")
    async def slow_echo(
        ctx,
        content: Annotated[str, Field(description="Text")],
        delay: Annotated[float, Field(description="Seconds")] = 0.0,
    ) -> str:
        """Echo after a delay."""
        await asyncio.sleep(delay)
        return content

    proxy = ToolProxy(ctx, registry, concurrent=True)
    calls = [
        _call("slow", "write_file", content="first", delay=0.05),
        _call("fast", "write_file", content="second"),
    ]

    results = await proxy.execute_tool_calls(calls)

    assert [r.id for r in results] == ["slow", "fast"]
    assert [r.result for r in results] == ["first", "second"]


@pytest.mark.asyncio
async def test_executor_errors_are_normalized(ctx: ExecutionContext) -> None:
    registry = ToolRegistry()

    @registry.tool("read_file")
    async def explode(ctx) -> str:
        """Always fails."""
        raise ToolExecutionError("disk on fire")

    @registry.tool("write_file")
    async def crash(ctx) -> str:
        """Fails unexpectedly."""
        raise RuntimeError("unexpected")

    proxy = ToolProxy(ctx, registry)
    first, second = await proxy.execute_tool_calls([_call("c1", "read_file"), _call("c2", "write_file")])

    assert first.error == "disk on fire"
    assert second.error == "RuntimeError: unexpected"


@pytest.mark.asyncio
async def test_tool_timeout(ctx: ExecutionContext) -> None:
    registry = ToolRegistry()

    @registry.tool("read_file")
    async def hang(ctx) -> str:
        """Never finishes."""
        await asyncio.sleep(10)
        return ""

    proxy = ToolProxy(ctx, registry, tool_timeout=0.05)
    result = await proxy.execute_tool_call(_call("c1", "read_file"))

    assert result.success is False
    assert "timed out" in result.error


@pytest.mark.asyncio
async def test_blocked_command_never_spawns_a_process(proxy: ToolProxy) -> None:
    with patch("tool_relay.core.tools.builtin.shell.run_subprocess", new_callable=AsyncMock) as runner:
        result = await proxy.execute_tool_call(_call("c1", "run_command", command="sudo rm -rf /"))

    runner.assert_not_called()
    assert result.success is False
    assert result.error.startswith("Command blocked for safety:")
