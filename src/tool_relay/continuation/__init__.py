"""The continuation protocol: framing codec, HTTP transport and the round-trip handler."""

from .codec import (
    START_MARKER,
    END_MARKER,
    WAITING_TEXT,
    decode_tool_calls,
    extract_tool_calls,
    build_continuation_request,
    encode_continuation,
    encode_tool_calls,
)
from .transport import AgentClient
from .handler import ContinuationHandler, truncate_diff

__all__ = [
    "START_MARKER",
    "END_MARKER",
    "WAITING_TEXT",
    "decode_tool_calls",
    "extract_tool_calls",
    "build_continuation_request",
    "encode_continuation",
    "encode_tool_calls",
    "AgentClient",
    "ContinuationHandler",
    "truncate_diff",
]
