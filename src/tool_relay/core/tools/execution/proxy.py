"""Executes tool calls requested by the remote agent against the local executors."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from ..models import ToolName
from ..registry import ToolRegistry
from ...context import ExecutionContext
from ...exceptions import ToolExecutionError, ToolValidationError
from ...logger import get_logger
from ...messages import ToolCall, ToolResult

logger = get_logger(__name__)


class ToolProxy:
    """Dispatches tool calls to executors and normalizes every outcome into a ToolResult.

    This is the single error boundary of tool execution: executors raise, the proxy
    converts. Nothing raised by an executor escapes ``execute_tool_call``, and one
    failing call never prevents the rest of a batch from running.
    """

    # Exceptions that are an expected part of tool use and only warrant a warning.
    # Anything else is still converted to a failed result, but logged with a traceback.
    RECOVERABLE_ERRORS = (
        ToolExecutionError,
        ToolValidationError,
        FileNotFoundError,
        FileExistsError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
        ValueError,
        TypeError,
    )

    def __init__(
        self,
        context: Optional[ExecutionContext] = None,
        registry: Optional[ToolRegistry] = None,
        *,
        concurrent: bool = False,
        tool_timeout: Optional[float] = None,
    ) -> None:
        """Initialize the proxy.

        Args:
            context: Execution context shared by all calls. Defaults to one rooted at the current directory.
            registry: Tool registry. Defaults to the built-in tool catalog.
            concurrent: Run the calls of a batch concurrently. Results keep the input order either way.
            tool_timeout: Optional upper bound in seconds for a single executor, on top of its own timeouts.
        """
        self.context = context or ExecutionContext()
        if registry is None:
            # builtin executors import the process runner from this package
            from ..builtin import build_default_registry

            registry = build_default_registry()
        self.registry = registry
        self.concurrent = concurrent
        self._tool_timeout = tool_timeout

    async def execute_tool_call(self, call: ToolCall) -> ToolResult:
        """Execute one tool call.

        Args:
            call: The requested call.

        Returns:
            A ToolResult carrying the call's id. Failures of any kind are returned, not raised.
        """
        logger.info(f"Executing tool: {call.tool_name} with ID: {call.id}")

        kind = ToolName.parse(call.tool_name)
        tool_def = self.registry.tools.get(kind.value) if kind else None
        if tool_def is None:
            msg = f"Unknown tool: {call.tool_name}"
            logger.warning(msg)
            return ToolResult.fail(call.id, msg)

        try:
            function_args = self._normalize_function_args(call.tool_name, call.parameters)
            if tool_def.args_model:
                function_args = tool_def.args_model(**function_args).model_dump()
        except ValidationError as validation_error:
            msg = f"Argument validation failed: {validation_error}"
            logger.warning(f"Validation error for '{call.tool_name}': {msg}")
            return ToolResult.fail(call.id, msg)
        except ToolValidationError as exc:
            logger.warning(f"Argument normalization failed for '{call.tool_name}': {exc}")
            return ToolResult.fail(call.id, str(exc))

        try:
            result = await self._execute_tool(tool_def.func, function_args)
        except self.RECOVERABLE_ERRORS as exc:
            msg = self._format_error(exc)
            logger.warning(f"Tool '{call.tool_name}' failed: {msg} ({type(exc).__name__})")
            return ToolResult.fail(call.id, msg)
        except Exception as exc:
            msg = self._format_error(exc)
            logger.error(f"Unexpected error executing tool '{call.tool_name}': {msg}", exc_info=True)
            return ToolResult.fail(call.id, msg)

        logger.info(f"Tool '{call.tool_name}' executed successfully.")
        return ToolResult.ok(call.id, result)

    async def execute_tool_calls(self, calls: Sequence[ToolCall]) -> List[ToolResult]:
        """Execute a batch of tool calls.

        Args:
            calls: Calls in execution order.

        Returns:
            Exactly one result per call, in the same order as ``calls``.
        """
        if self.concurrent:
            return list(await asyncio.gather(*(self.execute_tool_call(call) for call in calls)))

        results: List[ToolResult] = []
        for call in calls:
            results.append(await self.execute_tool_call(call))
        return results

    @staticmethod
    def _normalize_function_args(tool_name: str, raw_args: Any) -> Dict[str, Any]:
        """Normalize tool arguments into a dictionary.

        Handles JSON strings, dictionaries, or None values.

        Args:
            tool_name: Name of the tool (for error reporting).
            raw_args: The raw arguments (dict, string, or None).

        Returns:
            A dictionary of normalized arguments.

        Raises:
            ToolValidationError: If arguments cannot be parsed or are not an object.
        """
        if raw_args is None or raw_args == "":
            return {}

        if isinstance(raw_args, dict):
            return dict(raw_args)

        if isinstance(raw_args, str):
            try:
                parsed = json.loads(raw_args)
            except json.JSONDecodeError as exc:
                raise ToolValidationError(f"Failed to parse arguments for tool '{tool_name}': {exc}") from exc
            if parsed is None:
                return {}
            if isinstance(parsed, dict):
                return parsed

        raise ToolValidationError(f"Arguments for tool '{tool_name}' must be a JSON object.")

    async def _execute_tool(self, tool_function: Any, function_args: Dict[str, Any]) -> str:
        """Run the executor, applying the optional proxy-level timeout.

        Raises:
            ToolExecutionError: If execution times out.
        """
        coro = tool_function(self.context, **function_args)
        if self._tool_timeout is None:
            result = await coro
        else:
            try:
                result = await asyncio.wait_for(coro, timeout=self._tool_timeout)
            except asyncio.TimeoutError as exc:
                raise ToolExecutionError(f"Tool execution timed out after {self._tool_timeout} seconds.") from exc
        return result if isinstance(result, str) else str(result)

    @staticmethod
    def _format_error(exc: BaseException) -> str:
        message = str(exc).strip()
        if isinstance(exc, (ToolExecutionError, ToolValidationError)):
            return message or type(exc).__name__
        return f"{type(exc).__name__}: {message}" if message else type(exc).__name__
