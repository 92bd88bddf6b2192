"""Encoding and decoding of the tool-call framing embedded in agent responses.

A response that needs local tools carries one framed JSON batch::

    ---TOOL_CALLS---
    {"type": "tool_calls_required", "toolCalls": [...], "sessionId": "..."}
    ---END_TOOL_CALLS---

optionally followed by a waiting notice. Everything outside the frames is user-visible text.
"""

import json
import re
from typing import Optional, Sequence

from pydantic import ValidationError

from ..core.exceptions import ProtocolError
from ..core.logger import get_logger
from ..core.messages import ContinuationRequest, ExtractionResult, ToolCallsMessage, ToolResult

logger = get_logger(__name__)

START_MARKER = "---TOOL_CALLS---"
END_MARKER = "---END_TOOL_CALLS---"
WAITING_TEXT = "⏳ Waiting for local tool execution..."

_FRAME_RE = re.compile(re.escape(START_MARKER) + r"\n(.*?)\n" + re.escape(END_MARKER), re.DOTALL)
_WAITING_RE = re.compile(r"\n" + re.escape(WAITING_TEXT) + r"(?:\n|$)")


def decode_tool_calls(payload: str) -> ToolCallsMessage:
    """Decode the JSON body of a framed batch.

    Raises:
        ProtocolError: If the payload is not JSON or not a valid batch.
    """
    try:
        return ToolCallsMessage.model_validate_json(payload)
    except ValidationError as exc:
        raise ProtocolError(f"Malformed tool call batch: {exc}") from exc


def extract_tool_calls(text: str) -> ExtractionResult:
    """Find and decode the first tool-call batch embedded in ``text``.

    A malformed batch is logged and treated as absent, so the caller falls back to
    showing the response unchanged.

    Args:
        text: A complete agent response.

    Returns:
        An ExtractionResult. When no batch is found, ``visible_text`` is ``text`` itself.
    """
    match = _FRAME_RE.search(text)
    if match is None:
        return ExtractionResult(found=False, visible_text=text)

    try:
        batch = decode_tool_calls(match.group(1))
    except ProtocolError as exc:
        logger.error(f"Failed to parse tool calls: {exc}")
        return ExtractionResult(found=False, visible_text=text)

    # Only the first batch runs, but no frame may reach the user.
    cleaned = _FRAME_RE.sub("", text)
    cleaned = _WAITING_RE.sub("", cleaned)
    return ExtractionResult(found=True, batch=batch, visible_text=cleaned.strip())


def build_continuation_request(
    session_id: str, results: Sequence[ToolResult], original_message: Optional[str] = None
) -> ContinuationRequest:
    """Wrap tool results into the envelope sent back to the agent."""
    return ContinuationRequest(
        session_id=session_id, tool_results=list(results), original_message=original_message
    )


def encode_continuation(request: ContinuationRequest) -> str:
    """Serialize a continuation request to its JSON wire body."""
    return json.dumps(request.to_wire(), ensure_ascii=False)


def encode_tool_calls(batch: ToolCallsMessage, waiting: bool = True) -> str:
    """Frame a tool-call batch the way the agent embeds it in a response."""
    block = f"\n{START_MARKER}\n{json.dumps(batch.to_wire(), ensure_ascii=False)}\n{END_MARKER}\n"
    if waiting:
        block += f"\n{WAITING_TEXT}\n"
    return block
