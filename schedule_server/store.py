# -*- coding: utf-8 -*-
from __future__ import annotations

import typing as t
from dataclasses import replace
from datetime import date, timedelta

from .models import CANCELLED, CONFIRMED, PENDING, ScheduleEntry, SuggestedAction


class ScheduleStore:
    """In-memory ordered collection of schedule entries.

    One instance is created by the application and handed to every component
    that needs it. In a real deployment this would be replaced with a
    persistent database.
    """

    def __init__(self, entries: t.Iterable[ScheduleEntry] = ()) -> None:
        self._entries: list[ScheduleEntry] = list(entries)
        self._last_id = max((entry.id for entry in self._entries), default=0)

    def list(self) -> list[ScheduleEntry]:
        """Returns the entries in store order."""
        return list(self._entries)

    def get(self, entry_id: int) -> t.Optional[ScheduleEntry]:
        """Looks up an entry by id.

        :param entry_id: The id to look up.
        :return: The entry, or None if no entry has that id.
        """
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def cancellable(self) -> list[ScheduleEntry]:
        """Returns the Confirmed and Pending entries in store order."""
        return [entry for entry in self._entries if entry.is_cancellable]

    def add(self, entry: ScheduleEntry) -> ScheduleEntry:
        """Adds an entry and assigns it a fresh id.

        Any id already set on ``entry`` is ignored. The new id is one more
        than the highest id this store has ever held, so ids freed by
        deletion are not reissued.

        :param entry: The entry to add.
        :return: The stored entry carrying its assigned id.
        """
        current_max = max((existing.id for existing in self._entries), default=0)
        self._last_id = max(self._last_id, current_max) + 1
        stored = replace(entry, id=self._last_id)
        self._entries.append(stored)
        return stored

    def update(self, entry: ScheduleEntry) -> bool:
        """Replaces the entry with the same id.

        :param entry: The replacement entry.
        :return: True if an entry was replaced.
        """
        for idx, existing in enumerate(self._entries):
            if existing.id == entry.id:
                self._entries[idx] = entry
                return True
        return False

    def delete(self, entry_id: int) -> bool:
        """Removes the entry with the given id.

        :param entry_id: The id to remove.
        :return: True if an entry was removed.
        """
        before = len(self._entries)
        self._entries = [entry for entry in self._entries if entry.id != entry_id]
        return len(self._entries) != before

    def add_suggested_action(self, entry_id: int, action: SuggestedAction) -> bool:
        """Appends a suggested action to an entry.

        :return: False if no entry has that id.
        """
        entry = self.get(entry_id)
        if entry is None:
            return False
        entry.suggested_actions.append(action)
        return True

    def clear_all_suggested_actions(self) -> None:
        for entry in self._entries:
            entry.suggested_actions.clear()


def seed_schedule(today: t.Optional[date] = None) -> list[ScheduleEntry]:
    """Builds the demo schedule relative to ``today``."""
    today = today or date.today()

    def day(offset: int) -> str:
        return (today + timedelta(days=offset)).isoformat()

    return [
        ScheduleEntry(1, "Raffles Institution", "Advanced Robotics Workshop", day(0), "10:00",
                      CONFIRMED, "John Doe", reminder_minutes=30),
        ScheduleEntry(2, "Hwa Chong Institution", "Intro to Python for Sec 1", day(0), "14:00",
                      CONFIRMED, "Jane Smith"),
        ScheduleEntry(3, "National Junior College", "Cybersecurity Basics", day(1), "09:30",
                      PENDING, "Alex Tan"),
        ScheduleEntry(4, "Anglo-Chinese School (Independent)", "AI in Education Seminar", day(1), "13:00",
                      CONFIRMED, "Emily Carter"),
        ScheduleEntry(5, "Victoria School", "Web Development Crash Course", day(2), "11:00",
                      CANCELLED, "Michael Bay",
                      cancellation_reason="Trainer has a personal emergency."),
        ScheduleEntry(6, "Dunman High School", "Data Science with Python", day(2), "15:00",
                      PENDING, "Sarah Chen"),
        ScheduleEntry(7, "Nanyang Girls' High School", "Mobile App Design Principles", day(3), "10:30",
                      CONFIRMED, "David Lee"),
    ]
