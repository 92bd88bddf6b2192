"""Drives one round trip: parse a response, run its tool calls locally, send the results back."""

from typing import Callable, List, Optional, Tuple

from ..core.logger import get_logger
from ..core.messages import FlowResult, ToolCallsMessage, ToolResult, TurnResult
from ..core.tools import ToolName, ToolProxy
from .codec import build_continuation_request, extract_tool_calls
from .transport import DEFAULT_TIMEOUT, AgentClient

logger = get_logger(__name__)

ClientFactory = Callable[[str, str, float], AgentClient]


def truncate_diff(diff_output: str, max_lines: int = 100) -> Tuple[str, bool]:
    """Shorten a long diff, keeping its first 70% and last 10% of ``max_lines``.

    Args:
        diff_output: The diff text.
        max_lines: Line count above which the diff is shortened.

    Returns:
        ``(text, was_truncated)``.
    """
    lines = diff_output.split("\n")
    if len(lines) <= max_lines:
        return diff_output, False

    keep_start = int(max_lines * 0.7)
    keep_end = int(max_lines * 0.1)
    omitted = len(lines) - keep_start - keep_end

    kept = lines[:keep_start] + [f"\n... [{omitted} lines truncated] ...\n"]
    if keep_end:
        kept += lines[-keep_end:]
    return "\n".join(kept), True


def _default_client_factory(endpoint: str, credential: str, timeout: float) -> AgentClient:
    return AgentClient(endpoint, credential, timeout=timeout)


class ContinuationHandler:
    """
    Executes the tool-call batches embedded in agent responses and delivers the results.

    Each batch is executed in full and answered with exactly one continuation request.
    Transport failures propagate as ContinuationError subclasses; tool failures never do,
    they travel upstream as failed ToolResults.
    """

    def __init__(
        self,
        proxy: Optional[ToolProxy] = None,
        *,
        client_factory: Optional[ClientFactory] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_result_lines: Optional[int] = None,
    ) -> None:
        """Initialize the handler.

        Args:
            proxy: The tool proxy executing calls. Defaults to one with the built-in catalog.
            client_factory: Builds the AgentClient used by ``handle_tool_call_flow``.
            timeout: Timeout in seconds for continuation requests.
            max_result_lines: If set, successful git_diff results longer than this are shortened before sending.
        """
        self.proxy = proxy or ToolProxy()
        self._client_factory = client_factory or _default_client_factory
        self.timeout = timeout
        self.max_result_lines = max_result_lines

    async def handle_tool_call_flow(
        self,
        response_text: str,
        endpoint: str,
        credential: str,
        session_id: str,
        original_message: Optional[str] = None,
    ) -> FlowResult:
        """Handle one agent response.

        Args:
            response_text: The complete agent response.
            endpoint: Agent URL for the continuation request.
            credential: Bearer token for the agent.
            session_id: Session the results belong to.
            original_message: The user message that started the turn, echoed for context.

        Returns:
            A FlowResult. Without an embedded batch nothing is executed or sent.

        Raises:
            ContinuationError: If the continuation request could not be delivered.
        """
        extraction = extract_tool_calls(response_text)
        if not extraction.found or extraction.batch is None:
            return FlowResult(needs_continuation=False, cleaned_response=extraction.visible_text)

        async with self._client_factory(endpoint, credential, self.timeout) as client:
            results, reply = await self._execute_and_send(extraction.batch, client, session_id, original_message)

        return FlowResult(
            needs_continuation=True,
            continuation_response=reply,
            cleaned_response=extraction.visible_text,
            tool_results=results,
        )

    async def run_turn(
        self,
        message: str,
        client: AgentClient,
        session_id: str,
        max_rounds: int = 5,
    ) -> TurnResult:
        """Send a user message and keep answering tool requests until the agent is done.

        Args:
            message: The user's message.
            client: Client for the agent endpoint.
            session_id: Session identifier.
            max_rounds: Upper bound on tool batches handled in this turn.

        Returns:
            The visible text of every response in the turn.
        """
        turn = TurnResult()
        response_text = await client.send_message(message, session_id)

        while True:
            extraction = extract_tool_calls(response_text)
            turn.responses.append(extraction.visible_text)
            if not extraction.found or extraction.batch is None:
                return turn

            if turn.rounds >= max_rounds:
                logger.warning(f"Stopping after {max_rounds} tool rounds; the agent still requested tools.")
                turn.exhausted = True
                return turn

            turn.rounds += 1
            _, response_text = await self._execute_and_send(extraction.batch, client, session_id, message)

    async def _execute_and_send(
        self,
        batch: ToolCallsMessage,
        client: AgentClient,
        session_id: str,
        original_message: Optional[str],
    ) -> Tuple[List[ToolResult], str]:
        logger.info(f"Executing {len(batch.tool_calls)} tool call(s) locally")
        results = await self.proxy.execute_tool_calls(batch.tool_calls)
        results = self._apply_size_policy(batch, results)

        request = build_continuation_request(session_id, results, original_message)
        reply = await client.send_continuation(request)
        return results, reply

    def _apply_size_policy(self, batch: ToolCallsMessage, results: List[ToolResult]) -> List[ToolResult]:
        if not self.max_result_lines:
            return results

        shortened = []
        for call, result in zip(batch.tool_calls, results):
            if call.tool_name == ToolName.GIT_DIFF.value and result.success and result.result:
                text, was_truncated = truncate_diff(result.result, self.max_result_lines)
                if was_truncated:
                    text += "\n\nLarge diff shortened. Use saveToFile to get the full diff, or ask for specific files."
                    result = ToolResult.ok(result.id, text)
            shortened.append(result)
        return shortened
