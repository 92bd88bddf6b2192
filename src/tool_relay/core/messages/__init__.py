"""Expose the wire models of the continuation protocol."""

from .models import (
    WireModel,
    ToolCall,
    ToolResult,
    ToolCallsMessage,
    ContinuationRequest,
    ExtractionResult,
    FlowResult,
    TurnResult,
)

__all__ = [
    "WireModel",
    "ToolCall",
    "ToolResult",
    "ToolCallsMessage",
    "ContinuationRequest",
    "ExtractionResult",
    "FlowResult",
    "TurnResult",
]
