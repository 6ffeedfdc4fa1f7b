"""
Data models for the training-session schedule.

This module contains the dataclasses used to represent schedule entries and
the transient suggested actions the assistant attaches to them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import typing as t


Status = t.Literal["Confirmed", "Pending", "Cancelled"]

CONFIRMED: Status = "Confirmed"
PENDING: Status = "Pending"
CANCELLED: Status = "Cancelled"

# Reminder lead times offered to the administrator (minutes)
REMINDER_PRESETS = (15, 30, 60, 1440)

# Wire (camelCase) key -> dataclass attribute
WIRE_FIELDS: dict[str, str] = {
    "id": "id",
    "schoolName": "school_name",
    "topic": "topic",
    "date": "date",
    "time": "time",
    "status": "status",
    "trainer": "trainer",
    "location": "location",
    "notes": "notes",
    "cancellationReason": "cancellation_reason",
    "reminderMinutes": "reminder_minutes",
}


@dataclass
class SuggestedAction:
    """A follow-up prompt bound to one schedule entry."""
    prompt: str


@dataclass
class ScheduleEntry:
    """Represents one training session booking.

    ``suggested_actions`` is a UI-facing annotation. It is not part of the
    booking itself and is excluded from equality.
    """
    id: int
    school_name: str
    topic: str
    date: str  # "YYYY-MM-DD"
    time: str  # "HH:MM" 24h
    status: Status
    trainer: str
    location: t.Optional[str] = None
    notes: t.Optional[str] = None
    cancellation_reason: t.Optional[str] = None
    reminder_minutes: t.Optional[int] = None
    suggested_actions: list[SuggestedAction] = field(default_factory=list, compare=False)

    def to_wire(self, include_suggestions: bool = False) -> dict[str, t.Any]:
        """Serialize to the camelCase mapping used in prompts and tool arguments.

        Optional fields that are unset are omitted.
        """
        data: dict[str, t.Any] = {}
        for wire_key, attr in WIRE_FIELDS.items():
            value = getattr(self, attr)
            if value is None:
                continue
            data[wire_key] = value
        if include_suggestions and self.suggested_actions:
            data["suggestedActions"] = [action.prompt for action in self.suggested_actions]
        return data

    @classmethod
    def from_wire(cls, data: t.Mapping[str, t.Any], entry_id: int = 0) -> "ScheduleEntry":
        """Build an entry from camelCase arguments, ignoring unknown keys."""
        return cls(
            id=entry_id,
            school_name=str(data.get("schoolName") or ""),
            topic=str(data.get("topic") or ""),
            date=str(data.get("date") or ""),
            time=str(data.get("time") or ""),
            status=data.get("status") or PENDING,
            trainer=str(data.get("trainer") or ""),
            location=data.get("location"),
            notes=data.get("notes"),
            cancellation_reason=data.get("cancellationReason"),
            reminder_minutes=data.get("reminderMinutes"),
        )

    def merged_with(self, arguments: t.Mapping[str, t.Any]) -> "ScheduleEntry":
        """Return a copy with ``arguments`` shallowly written over this entry.

        The id never changes. Unknown keys and unspecified fields are left
        as they are; suggested actions carry over untouched.
        """
        changes: dict[str, t.Any] = {}
        for wire_key, value in arguments.items():
            attr = WIRE_FIELDS.get(wire_key)
            if attr is None or attr == "id":
                continue
            changes[attr] = value
        return ScheduleEntry(
            **{
                **{attr: getattr(self, attr) for attr in WIRE_FIELDS.values()},
                **changes,
                "id": self.id,
            },
            suggested_actions=list(self.suggested_actions),
        )

    @property
    def is_cancellable(self) -> bool:
        return self.status in (CONFIRMED, PENDING)
