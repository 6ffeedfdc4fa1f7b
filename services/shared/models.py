"""
Shared Pydantic models for REST API serialization.

This module contains Pydantic equivalents of the schedule and transcript
dataclasses, using the camelCase field names of the assistant's JSON contract.
"""
from __future__ import annotations

import typing as t
from pydantic import BaseModel, Field

from orchestrator.models import TranscriptEntry
from schedule_server.models import ScheduleEntry, Status


class ScheduleEntryModel(BaseModel):
    """One training session booking."""
    id: int
    schoolName: str
    topic: str
    date: str               # "YYYY-MM-DD"
    time: str               # "HH:MM" 24h
    status: Status
    trainer: str
    location: t.Optional[str] = None
    notes: t.Optional[str] = None
    cancellationReason: t.Optional[str] = None
    reminderMinutes: t.Optional[int] = None
    suggestedActions: list[str] = Field(default_factory=list)

    @classmethod
    def from_entry(cls, entry: ScheduleEntry) -> "ScheduleEntryModel":
        return cls(**entry.to_wire(include_suggestions=True))


class FollowUpModel(BaseModel):
    text: str
    sessionId: t.Optional[int] = None


class ConfirmationModel(BaseModel):
    """Cancellation choice awaiting the administrator."""
    prompt: str
    sessions: list[ScheduleEntryModel] = Field(default_factory=list)


class TranscriptEntryModel(BaseModel):
    """One chat turn."""
    role: t.Literal["user", "assistant", "system-tool"]
    content: str
    pending: bool = False
    followUpQuestions: list[FollowUpModel] = Field(default_factory=list)
    confirmation: t.Optional[ConfirmationModel] = None

    @classmethod
    def from_entry(cls, entry: TranscriptEntry) -> "TranscriptEntryModel":
        confirmation = None
        if entry.confirmation is not None:
            confirmation = ConfirmationModel(
                prompt=entry.confirmation.prompt,
                sessions=[ScheduleEntryModel.from_entry(s) for s in entry.confirmation.entries],
            )
        return cls(
            role=entry.role.value,
            content=entry.content,
            pending=entry.pending,
            followUpQuestions=[
                FollowUpModel(text=f.text, sessionId=f.entry_id) for f in entry.follow_ups
            ],
            confirmation=confirmation,
        )


# Request/Response Models for API endpoints
class ChatRequest(BaseModel):
    """Request model for sending a chat message."""
    message: str = Field(min_length=1)


class NotificationResponse(BaseModel):
    """Response model for the notification currently on display."""
    message: t.Optional[str] = None
