"""Wire models exchanged between the local relay and the remote agent.

All models use camelCase aliases on the wire and snake_case attributes in Python.
Use ``to_wire()`` to get the JSON-ready dictionary.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class WireModel(BaseModel):
    """Base model for protocol messages."""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        """Dump the model using its wire (camelCase) field names, omitting unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ToolCall(WireModel):
    """One operation requested by the remote model.

    Attributes:
        id: Opaque correlation token, unique within its batch.
        type: Discriminator, always ``tool_call``.
        tool_name: Name of the executor to invoke.
        parameters: Executor-specific arguments.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    type: Literal["tool_call"] = "tool_call"
    tool_name: str = Field(alias="toolName")
    parameters: Dict[str, Any] = Field(default_factory=dict)


class ToolResult(WireModel):
    """Outcome of executing one ToolCall.

    Exactly one of ``result`` and ``error`` is populated.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    success: bool
    result: Optional[str] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _check_outcome(self) -> "ToolResult":
        if self.success:
            if self.result is None or self.error is not None:
                raise ValueError("A successful ToolResult needs a result and no error.")
        else:
            if not self.error or self.result is not None:
                raise ValueError("A failed ToolResult needs a non-empty error and no result.")
        return self

    @classmethod
    def ok(cls, call_id: str, result: str) -> "ToolResult":
        """Build a successful result."""
        return cls(id=call_id, success=True, result=result)

    @classmethod
    def fail(cls, call_id: str, error: str) -> "ToolResult":
        """Build a failed result. An empty message is replaced with a generic one."""
        return cls(id=call_id, success=False, error=error or "Unknown error")


class ToolCallsMessage(WireModel):
    """A batch of tool calls embedded in a streamed agent response."""

    type: Literal["tool_calls_required"] = "tool_calls_required"
    tool_calls: List[ToolCall] = Field(alias="toolCalls")
    session_id: str = Field(default="", alias="sessionId")


class ContinuationRequest(WireModel):
    """Envelope carrying tool results back to the remote agent."""

    type: Literal["continuation"] = "continuation"
    session_id: str = Field(alias="sessionId")
    tool_results: List[ToolResult] = Field(alias="toolResults")
    original_message: Optional[str] = Field(default=None, alias="originalMessage")


class ExtractionResult(BaseModel):
    """Result of scanning a response for an embedded tool-call batch.

    Attributes:
        found: True if a well-formed batch was found.
        batch: The decoded batch, when found.
        visible_text: Text safe to show to the user (no protocol framing).
    """

    found: bool
    batch: Optional[ToolCallsMessage] = None
    visible_text: str


class FlowResult(BaseModel):
    """Outcome of one parse/execute/transmit cycle.

    Attributes:
        needs_continuation: True if a batch was executed and results were sent upstream.
        continuation_response: Body of the agent's reply to the continuation request.
        cleaned_response: The original response with protocol framing removed.
        tool_results: Results that were sent upstream, in batch order.
    """

    needs_continuation: bool
    continuation_response: Optional[str] = None
    cleaned_response: str
    tool_results: List[ToolResult] = Field(default_factory=list)


class TurnResult(BaseModel):
    """Visible output of a complete user turn, across all continuation rounds.

    Attributes:
        responses: User-visible text of each round, in order.
        rounds: Number of tool batches executed.
        exhausted: True if the round limit stopped the turn while the agent still requested tools.
    """

    responses: List[str] = Field(default_factory=list)
    rounds: int = 0
    exhausted: bool = False

    @property
    def text(self) -> str:
        """All visible text joined with blank lines."""
        return "\n\n".join(r for r in self.responses if r)
