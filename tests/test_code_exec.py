import json

import httpx
import pytest

from tool_relay.core.context import ExecutionContext
from tool_relay.core.exceptions import ToolExecutionError
from tool_relay.core.messages import ToolCall
from tool_relay.core.tools import ToolProxy
from tool_relay.core.tools.builtin import execute_code


@pytest.mark.asyncio
async def test_missing_key_is_a_successful_explanation(proxy: ToolProxy) -> None:
    call = ToolCall(id="c1", tool_name="execute_code", parameters={"language": "python", "code": "print(1)"})

    result = await proxy.execute_tool_call(call)

    assert result.success is True
    assert result.result.startswith("Code execution unavailable")
    assert "https://riza.io" in result.result
    assert "RIZA_API_KEY" in result.result


@pytest.mark.asyncio
async def test_executes_remotely(ctx: ExecutionContext, recording_transport) -> None:
    transport = recording_transport(
        lambda request: httpx.Response(200, json={"exit_code": 0, "stdout": "42\n", "stderr": ""})
    )
    ctx.code_runner_api_key = "riza-key"
    ctx.code_runner_url = "https://sandbox.test/"
    ctx.http_client = httpx.AsyncClient(transport=transport)

    result = await execute_code(ctx, language="python", code="print(42)", input="data")

    assert result == "Code execution completed with exit code: 0\n\nstdout:\n42\n"
    request = transport.requests[0]
    assert str(request.url) == "https://sandbox.test/v1/execute"
    assert request.headers["authorization"] == "Bearer riza-key"
    assert json.loads(request.content) == {"language": "PYTHON", "code": "print(42)", "stdin": "data"}


@pytest.mark.asyncio
async def test_reports_stderr_and_exit_code(ctx: ExecutionContext, recording_transport) -> None:
    transport = recording_transport(
        lambda request: httpx.Response(200, json={"exit_code": 1, "stdout": "", "stderr": "Traceback"})
    )
    ctx.code_runner_api_key = "riza-key"
    ctx.http_client = httpx.AsyncClient(transport=transport)

    result = await execute_code(ctx, language="typescript", code="throw 1")

    assert result == "Code execution completed with exit code: 1\n\nstderr:\nTraceback"
    assert json.loads(transport.requests[0].content)["language"] == "TYPESCRIPT"


@pytest.mark.asyncio
async def test_service_errors_raise(ctx: ExecutionContext, recording_transport) -> None:
    ctx.code_runner_api_key = "riza-key"
    ctx.http_client = httpx.AsyncClient(transport=recording_transport(lambda request: httpx.Response(401, text="bad key")))

    with pytest.raises(ToolExecutionError, match="HTTP 401: bad key"):
        await execute_code(ctx, language="python", code="print(1)")


@pytest.mark.asyncio
async def test_unreachable_service_fails_the_call(ctx: ExecutionContext, recording_transport) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    ctx.code_runner_api_key = "riza-key"
    ctx.http_client = httpx.AsyncClient(transport=recording_transport(refuse))
    proxy = ToolProxy(ctx)

    result = await proxy.execute_tool_call(
        ToolCall(id="c1", tool_name="execute_code", parameters={"language": "javascript", "code": "1"})
    )

    assert result.success is False
    assert result.error.startswith("Code execution service unreachable")


@pytest.mark.asyncio
async def test_unsupported_language_is_rejected(proxy: ToolProxy) -> None:
    result = await proxy.execute_tool_call(
        ToolCall(id="c1", tool_name="execute_code", parameters={"language": "cobol", "code": "x"})
    )
    assert result.success is False
    assert result.error.startswith("Argument validation failed")
