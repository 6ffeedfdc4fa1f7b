"""Classification of raw assistant-model output.

The model is instructed to answer with exactly one of four JSON shapes. This
module decodes the raw text into the matching variant of
:data:`orchestrator.models.Classification`. Text that does not look like JSON
at all is taken as a plain conversational answer; text that looks like JSON
but does not decode into one of the shapes becomes :class:`Unrecognized`.
"""
import json
import re
import typing as t

from pydantic import ValidationError

from orchestrator.models import (
    CancellationPrompt,
    Classification,
    ConversationalAnswer,
    FollowUp,
    ToolBatch,
    ToolInvocation,
    ToolSingle,
    Unrecognized,
)
from orchestrator.schemas import AnswerPayload, CancellationPayload, ToolCallPayload


_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)

# Keys that mark an object as something other than a tool call
_NON_TOOL_KEYS = ("action", "response")


def _strip_code_fence(text: str) -> str:
    match = _CODE_FENCE.match(text)
    return match.group(1) if match else text


def _decode_tool_call(data: t.Any) -> t.Optional[ToolInvocation]:
    if not isinstance(data, dict):
        return None
    try:
        payload = ToolCallPayload.model_validate(data)
    except ValidationError:
        return None
    return ToolInvocation(name=payload.tool_name, arguments=dict(payload.arguments))


def _decode_array(data: list) -> Classification:
    if not data:
        return Unrecognized(raw=json.dumps(data), reason="empty tool call array")

    invocations = []
    for index, item in enumerate(data):
        invocation = _decode_tool_call(item)
        if invocation is None:
            return Unrecognized(
                raw=json.dumps(data),
                reason=f"array element {index} is not a tool call",
            )
        invocations.append(invocation)
    return ToolBatch(invocations=invocations)


def _decode_cancellation(data: dict) -> t.Optional[CancellationPrompt]:
    try:
        payload = CancellationPayload.model_validate(data)
    except ValidationError:
        return None
    return CancellationPrompt(prompt=payload.data.prompt)


def _decode_answer(data: dict) -> t.Optional[ConversationalAnswer]:
    try:
        payload = AnswerPayload.model_validate(data)
    except ValidationError:
        return None

    follow_ups = []
    for item in payload.followUpQuestions:
        if isinstance(item, str):
            follow_ups.append(FollowUp(text=item))
        else:
            follow_ups.append(FollowUp(text=item.text, entry_id=item.sessionId))
    return ConversationalAnswer(response=payload.response, follow_ups=follow_ups)


def _decode_object(data: dict) -> Classification:
    if "action" in data:
        prompt = _decode_cancellation(data)
        if prompt is not None:
            return prompt

    if not any(key in data for key in _NON_TOOL_KEYS):
        invocation = _decode_tool_call(data)
        if invocation is not None:
            return ToolSingle(invocation=invocation)

    answer = _decode_answer(data)
    if answer is not None:
        return answer

    return Unrecognized(raw=json.dumps(data), reason="object matches no known response shape")


def classify_response(raw_text: str) -> Classification:
    """Classify raw model output into exactly one response shape.

    Args:
        raw_text: Text returned by the LLM call

    Returns:
        ToolBatch, ToolSingle, CancellationPrompt, ConversationalAnswer or
        Unrecognized. Never raises for malformed input.
    """
    text = _strip_code_fence((raw_text or "").strip())
    if not text:
        return Unrecognized(raw=raw_text or "", reason="empty response")

    looks_like_object = text.startswith("{") and text.endswith("}")
    looks_like_array = text.startswith("[") and text.endswith("]")
    if not (looks_like_object or looks_like_array):
        return ConversationalAnswer(response=text)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        return Unrecognized(raw=text, reason=f"invalid JSON: {e}")

    if isinstance(data, list):
        return _decode_array(data)
    return _decode_object(data)
