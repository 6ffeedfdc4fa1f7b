# -*- coding: utf-8 -*-
import typing as t
from datetime import datetime

from fastmcp import FastMCP

from schedule_server.models import ScheduleEntry
from schedule_server.store import ScheduleStore


def _format_date(iso_date: str) -> str:
    """Formats a YYYY-MM-DD date as 'Mon 1/15'.

    If parsing fails, returns the original string.
    """
    try:
        return datetime.strptime(iso_date, "%Y-%m-%d").strftime("%a %-m/%-d")
    except (ValueError, TypeError):
        return iso_date


def _format_time(hh_mm: str) -> str:
    """Formats a 24h HH:MM time as '2:30 PM', falling back to the input."""
    try:
        return datetime.strptime(hh_mm, "%H:%M").strftime("%-I:%M %p")
    except (ValueError, TypeError):
        return hh_mm


def format_schedule(entries: t.Sequence[ScheduleEntry]) -> str:
    """Formats schedule entries as a plain-text table sorted by date and time.

    :param entries: The entries to render.
    :return: Formatted table string, or a message if there are no entries.
    """
    if not entries:
        return "📅 No training sessions scheduled."

    lines = []
    lines.append("📅 TRAINING SESSIONS")
    lines.append("=" * 110)
    lines.append(
        f"{'ID':<4} {'School':<30} {'Topic':<30} {'When':<18} {'Trainer':<14} {'Status':<10}"
    )
    lines.append("-" * 110)

    for entry in sorted(entries, key=lambda e: (e.date, e.time)):
        school = entry.school_name[:29]
        topic = entry.topic[:29]
        when = f"{_format_date(entry.date)} {_format_time(entry.time)}"
        lines.append(
            f"{entry.id:<4} {school:<30} {topic:<30} {when:<18} {entry.trainer[:13]:<14} {entry.status:<10}"
        )
        if entry.cancellation_reason:
            lines.append(f"{'':<4} ↳ Reason: {entry.cancellation_reason}")

    lines.append("=" * 110)
    lines.append(f"Total: {len(entries)} session(s)")
    return "\n".join(lines)


def create_schedule_server(store: ScheduleStore) -> FastMCP:
    """Builds a read-only MCP tool server over ``store``."""
    mcp = FastMCP("ScheduleServer")

    @mcp.tool()
    def list_schedule() -> list[dict]:
        """Lists all training sessions.

        :return: A list of session dictionaries in camelCase wire format.
        """
        return [entry.to_wire() for entry in store.list()]

    @mcp.tool()
    def list_cancellable_sessions() -> list[dict]:
        """Lists the sessions that are still Confirmed or Pending.

        :return: A list of session dictionaries in camelCase wire format.
        """
        return [entry.to_wire() for entry in store.cancellable()]

    @mcp.tool()
    def show_schedule() -> str:
        """Displays all training sessions as a formatted table.

        :return: Table string of all sessions, or a message if none exist.
        """
        return format_schedule(store.list())

    return mcp


if __name__ == "__main__":
    from schedule_server.store import seed_schedule

    create_schedule_server(ScheduleStore(seed_schedule())).run()
