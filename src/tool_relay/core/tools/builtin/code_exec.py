"""Sandboxed code execution through the Riza HTTP API."""

from typing import Annotated, Any, Dict, Literal, Optional

import httpx
from pydantic import Field

from ...context import ExecutionContext
from ...exceptions import ToolExecutionError

EXECUTE_PATH = "/v1/execute"
EXECUTE_TIMEOUT = 60.0

CODE_EXECUTION_UNAVAILABLE = (
    "Code execution unavailable: RIZA_API_KEY environment variable not set.\n\n"
    "To enable code execution:\n"
    "1. Sign up at https://riza.io\n"
    "2. Get your API key\n"
    "3. Set RIZA_API_KEY environment variable"
)


async def _post_execute(ctx: ExecutionContext, payload: Dict[str, Any]) -> Dict[str, Any]:
    url = ctx.code_runner_url.rstrip("/") + EXECUTE_PATH
    headers = {"Authorization": f"Bearer {ctx.code_runner_api_key}"}

    try:
        if ctx.http_client is not None:
            response = await ctx.http_client.post(url, json=payload, headers=headers, timeout=EXECUTE_TIMEOUT)
        else:
            async with httpx.AsyncClient(timeout=EXECUTE_TIMEOUT) as client:
                response = await client.post(url, json=payload, headers=headers)
        response.raise_for_status()
    except httpx.TimeoutException as exc:
        raise ToolExecutionError(f"Code execution service timed out after {EXECUTE_TIMEOUT:g}s") from exc
    except httpx.HTTPStatusError as exc:
        body = exc.response.text.strip()[:2000]
        msg = f"Code execution service returned HTTP {exc.response.status_code}"
        raise ToolExecutionError(f"{msg}: {body}" if body else msg) from exc
    except httpx.HTTPError as exc:
        raise ToolExecutionError(f"Code execution service unreachable: {exc}") from exc

    try:
        return response.json()
    except ValueError as exc:
        raise ToolExecutionError("Code execution service returned a non-JSON response") from exc


async def execute_code(
    ctx: ExecutionContext,
    language: Annotated[
        Literal["python", "javascript", "typescript"], Field(description="Programming language of the code")
    ],
    code: Annotated[str, Field(description="Source code to execute")],
    input: Annotated[Optional[str], Field(description="Optional data passed to the program on stdin")] = None,
) -> str:
    """Execute a code snippet in a remote sandbox and return its output."""
    if not ctx.code_runner_api_key:
        ctx.logger.warning("Code execution requested but no RIZA_API_KEY is configured.")
        return CODE_EXECUTION_UNAVAILABLE

    ctx.logger.info(f"Executing {language} code")
    payload: Dict[str, Any] = {"language": language.upper(), "code": code}
    if input:
        payload["stdin"] = input

    result = await _post_execute(ctx, payload)

    parts = [f"Code execution completed with exit code: {result.get('exit_code')}"]
    if result.get("stdout"):
        parts.append(f"stdout:\n{result['stdout']}")
    if result.get("stderr"):
        parts.append(f"stderr:\n{result['stderr']}")
    return "\n\n".join(parts)
