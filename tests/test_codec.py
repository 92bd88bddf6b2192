import json
import logging

import pytest

from tool_relay.continuation import (
    END_MARKER,
    START_MARKER,
    WAITING_TEXT,
    build_continuation_request,
    encode_continuation,
    encode_tool_calls,
    extract_tool_calls,
)
from tool_relay.core.messages import ToolCall, ToolCallsMessage, ToolResult


def _batch() -> ToolCallsMessage:
    return ToolCallsMessage(
        tool_calls=[
            ToolCall(id="c1", tool_name="read_file", parameters={"path": "a.txt"}),
            ToolCall(id="c2", tool_name="list_directory"),
        ],
        session_id="s1",
    )


def test_plain_text_is_returned_unchanged() -> None:
    text = "Here is your answer.\nNo tools needed."
    extraction = extract_tool_calls(text)
    assert extraction.found is False
    assert extraction.batch is None
    assert extraction.visible_text == text


def test_extracts_an_encoded_batch() -> None:
    text = "I'll read that file." + encode_tool_calls(_batch())

    extraction = extract_tool_calls(text)

    assert extraction.found is True
    assert extraction.batch == _batch()
    assert extraction.visible_text == "I'll read that file."


def test_strips_frame_and_waiting_line_from_agent_output() -> None:
    payload = json.dumps(
        {
            "type": "tool_calls_required",
            "toolCalls": [{"id": "t1", "type": "tool_call", "toolName": "git_diff", "parameters": {}}],
            "sessionId": "abc",
        }
    )
    text = f"Checking changes.\n{START_MARKER}\n{payload}\n{END_MARKER}\n\n{WAITING_TEXT}\nmore text"

    extraction = extract_tool_calls(text)

    assert extraction.found is True
    assert extraction.batch.tool_calls[0].tool_name == "git_diff"
    assert WAITING_TEXT not in extraction.visible_text
    assert START_MARKER not in extraction.visible_text
    assert extraction.visible_text == "Checking changes.\n\nmore text"


def test_only_the_first_batch_is_decoded() -> None:
    first = ToolCallsMessage(tool_calls=[ToolCall(id="a", tool_name="read_file")])
    second = ToolCallsMessage(tool_calls=[ToolCall(id="b", tool_name="read_file")])

    extraction = extract_tool_calls(
        "hi" + encode_tool_calls(first, waiting=False) + encode_tool_calls(second, waiting=False)
    )

    assert [c.id for c in extraction.batch.tool_calls] == ["a"]
    assert START_MARKER not in extraction.visible_text
    assert '"b"' not in extraction.visible_text
    assert extraction.visible_text == "hi"


def test_waiting_line_at_end_of_response_is_stripped() -> None:
    text = "Reading." + encode_tool_calls(_batch(), waiting=False) + f"\n{WAITING_TEXT}"

    extraction = extract_tool_calls(text)

    assert extraction.found is True
    assert extraction.visible_text == "Reading."


@pytest.mark.parametrize(
    "payload",
    [
        "{not json",
        json.dumps({"type": "tool_calls_required"}),
        json.dumps({"type": "something_else", "toolCalls": []}),
    ],
)
def test_malformed_batch_is_logged_and_ignored(payload: str, caplog: pytest.LogCaptureFixture) -> None:
    text = f"Hi\n{START_MARKER}\n{payload}\n{END_MARKER}\n"

    with caplog.at_level(logging.ERROR, logger="tool_relay"):
        extraction = extract_tool_calls(text)

    assert extraction.found is False
    assert extraction.visible_text == text
    assert "Failed to parse tool calls" in caplog.text


def test_markers_without_newlines_are_not_a_batch() -> None:
    text = f"{START_MARKER}{{}}{END_MARKER}"
    assert extract_tool_calls(text).found is False


def test_continuation_wire_body() -> None:
    request = build_continuation_request(
        "s1", [ToolResult.ok("c1", "contents"), ToolResult.fail("c2", "Unknown tool: x")], "read a.txt"
    )

    body = json.loads(encode_continuation(request))

    assert body == {
        "type": "continuation",
        "sessionId": "s1",
        "toolResults": [
            {"id": "c1", "success": True, "result": "contents"},
            {"id": "c2", "success": False, "error": "Unknown tool: x"},
        ],
        "originalMessage": "read a.txt",
    }


def test_original_message_is_optional() -> None:
    body = json.loads(encode_continuation(build_continuation_request("s1", [])))
    assert "originalMessage" not in body
    assert body["toolResults"] == []
