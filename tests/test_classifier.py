"""Tests for classification of raw model output."""
import json

import pytest

from orchestrator.classifier import classify_response
from orchestrator.models import (
    CancellationPrompt,
    ConversationalAnswer,
    FollowUp,
    ToolBatch,
    ToolInvocation,
    ToolSingle,
    Unrecognized,
)


def test_plain_text_is_a_direct_answer() -> None:
    result = classify_response("not json at all")

    assert result == ConversationalAnswer(response="not json at all", follow_ups=[])


def test_single_tool_call() -> None:
    raw = json.dumps({
        "tool_name": "update_schedule",
        "arguments": {"id": 3, "status": "Cancelled", "cancellationReason": "Trainer is sick."},
    })

    result = classify_response(raw)

    assert result == ToolSingle(
        invocation=ToolInvocation(
            name="update_schedule",
            arguments={"id": 3, "status": "Cancelled", "cancellationReason": "Trainer is sick."},
        )
    )


def test_tool_batch_preserves_array_order() -> None:
    raw = json.dumps([
        {"tool_name": "send_notification", "arguments": {"message": "c"}},
        {"tool_name": "update_schedule", "arguments": {"id": 1, "status": "Pending"}},
        {"tool_name": "send_notification", "arguments": {"message": "a"}},
    ])

    result = classify_response(raw)

    assert isinstance(result, ToolBatch)
    assert [(i.name, i.arguments) for i in result.invocations] == [
        ("send_notification", {"message": "c"}),
        ("update_schedule", {"id": 1, "status": "Pending"}),
        ("send_notification", {"message": "a"}),
    ]


def test_cancellation_prompt_discards_model_sessions() -> None:
    raw = json.dumps({
        "action": "PROMPT_FOR_CANCELLATION",
        "data": {"prompt": "Which session?", "sessions": [{"id": 999, "schoolName": "Made Up"}]},
    })

    result = classify_response(raw)

    assert result == CancellationPrompt(prompt="Which session?")


def test_answer_normalizes_follow_ups() -> None:
    raw = json.dumps({
        "response": "Here you go.",
        "followUpQuestions": ["Anything else?", {"text": "Confirm NJC?", "sessionId": 3}],
    })

    result = classify_response(raw)

    assert result == ConversationalAnswer(
        response="Here you go.",
        follow_ups=[FollowUp("Anything else?"), FollowUp("Confirm NJC?", entry_id=3)],
    )


def test_code_fenced_json_is_unwrapped() -> None:
    raw = '```json\n{"tool_name": "send_notification", "arguments": {"message": "hi"}}\n```'

    result = classify_response(raw)

    assert isinstance(result, ToolSingle)
    assert result.invocation.arguments == {"message": "hi"}


@pytest.mark.parametrize(
    "raw",
    [
        '{"response": "unterminated", }',
        '{"response": oops}',
        "[{]",
    ],
)
def test_malformed_json_is_unrecognized(raw: str) -> None:
    result = classify_response(raw)

    assert isinstance(result, Unrecognized)
    assert "invalid JSON" in result.reason


@pytest.mark.parametrize(
    "payload",
    [
        {"foo": "bar"},
        {"response": "missing follow-ups"},
        {"response": "bad item", "followUpQuestions": [42]},
        {"tool_name": "update_schedule", "arguments": {}, "response": "mixed"},
        {"tool_name": "update_schedule", "arguments": "not a mapping"},
        {"action": "PROMPT_FOR_CANCELLATION", "data": {"sessions": []}},
        {"action": "SOMETHING_ELSE", "data": {"prompt": "?"}},
        [],
        [{"tool_name": "send_notification", "arguments": {}}, {"tool_name": "x"}],
    ],
)
def test_json_matching_no_shape_is_unrecognized(payload) -> None:
    result = classify_response(json.dumps(payload))

    assert isinstance(result, Unrecognized)


def test_empty_text_is_unrecognized() -> None:
    assert isinstance(classify_response("   "), Unrecognized)
