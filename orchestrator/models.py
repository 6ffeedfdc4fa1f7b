"""
Data models for the conversation orchestrator.

This module contains the dataclasses for transcript entries, tool invocations
and their outcomes, and the tagged union produced by the response classifier.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import typing as t

from schedule_server.models import ScheduleEntry


class Role(str, Enum):
    """Author of a transcript entry."""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM_TOOL = "system-tool"


@dataclass
class FollowUp:
    """A suggested next prompt, optionally bound to one schedule entry."""
    text: str
    entry_id: t.Optional[int] = None


@dataclass
class PendingConfirmation:
    """Cancellation choice offered to the user: a prompt plus the live entries."""
    prompt: str
    entries: list[ScheduleEntry] = field(default_factory=list)


@dataclass
class TranscriptEntry:
    """One turn in the chat transcript."""
    role: Role
    content: str
    pending: bool = False
    follow_ups: list[FollowUp] = field(default_factory=list)
    confirmation: t.Optional[PendingConfirmation] = None

    def clear_affordances(self) -> None:
        """Drops follow-ups and any pending confirmation."""
        self.follow_ups = []
        self.confirmation = None


@dataclass
class ToolInvocation:
    """A single named operation requested by the model."""
    name: str
    arguments: dict[str, t.Any]


@dataclass
class ToolOutcome:
    """Result of one invocation: user-facing text plus an optional notification to surface."""
    text: str
    notification: t.Optional[str] = None


@dataclass
class ToolBatch:
    invocations: list[ToolInvocation]


@dataclass
class ToolSingle:
    invocation: ToolInvocation


@dataclass
class CancellationPrompt:
    prompt: str


@dataclass
class ConversationalAnswer:
    response: str
    follow_ups: list[FollowUp] = field(default_factory=list)


@dataclass
class Unrecognized:
    raw: str
    reason: str


Classification = t.Union[ToolBatch, ToolSingle, CancellationPrompt, ConversationalAnswer, Unrecognized]
