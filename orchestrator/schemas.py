"""
Pydantic models for the JSON shapes the assistant model may return.

Each top-level shape has one model. The classifier tries them in a fixed
order and rejects anything that matches none.
"""
from __future__ import annotations

import typing as t

from pydantic import BaseModel, StrictStr


CANCELLATION_ACTION = "PROMPT_FOR_CANCELLATION"


class ToolCallPayload(BaseModel):
    """{"tool_name": "...", "arguments": {...}}"""
    tool_name: StrictStr
    arguments: dict[str, t.Any]


class CancellationData(BaseModel):
    prompt: StrictStr
    # Whatever the model lists here is discarded in favour of the live store
    sessions: t.Any = None


class CancellationPayload(BaseModel):
    """{"action": "PROMPT_FOR_CANCELLATION", "data": {"prompt": "...", "sessions": [...]}}"""
    action: t.Literal["PROMPT_FOR_CANCELLATION"]
    data: CancellationData


class FollowUpItemPayload(BaseModel):
    """A follow-up bound to a session: {"text": "...", "sessionId": 3}"""
    text: StrictStr
    sessionId: t.Optional[int] = None


class AnswerPayload(BaseModel):
    """{"response": "...", "followUpQuestions": [...]}"""
    response: StrictStr
    followUpQuestions: list[t.Union[StrictStr, FollowUpItemPayload]]
