"""Console, logging and rendering helpers for the assistant CLI."""
import logging
import os
import re
import typing as t
from datetime import datetime

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from schedule_server.models import ScheduleEntry

console = Console()

LOG_LEVEL = os.getenv("ASSISTANT_LOG_LEVEL", "WARNING")

_STATUS_STYLES = {
    "Confirmed": "green",
    "Pending": "yellow",
    "Cancelled": "red",
}

_HTML_TO_MARKUP = (
    (re.compile(r"<\s*b\s*>", re.I), "[bold]"),
    (re.compile(r"<\s*/\s*b\s*>", re.I), "[/bold]"),
    (re.compile(r"<\s*i\s*>", re.I), "[italic]"),
    (re.compile(r"<\s*/\s*i\s*>", re.I), "[/italic]"),
    (re.compile(r"<\s*li\s*>", re.I), "\n  • "),
    (re.compile(r"<\s*br\s*/?\s*>", re.I), "\n"),
)
_ANY_TAG = re.compile(r"<[^>]+>")


def configure_logging(verbose: bool = False) -> None:
    """Route log records through rich; ``verbose`` lowers the level to DEBUG."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else LOG_LEVEL,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=verbose)],
        force=True,
    )
    # Keep HTTP client chatter out of the chat view
    logging.getLogger("httpx").setLevel(logging.WARNING)


def html_to_markup(html: str) -> str:
    """Convert the simple HTML the assistant emits into rich console markup."""
    text = escape(html)
    for pattern, replacement in _HTML_TO_MARKUP:
        text = pattern.sub(replacement, text)
    return _ANY_TAG.sub("", text).strip()


def format_date_human(iso_date: str) -> str:
    """Convert YYYY-MM-DD to a readable date (Mon 15 Jan), falling back to the input."""
    try:
        return datetime.strptime(iso_date, "%Y-%m-%d").strftime("%a %d %b")
    except (ValueError, TypeError):
        return iso_date


def create_schedule_table(entries: t.Sequence[ScheduleEntry], title: str = "📅 Upcoming Sessions") -> Table:
    """Create a rich table of schedule entries sorted by date and time."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("When", style="yellow")
    table.add_column("School", style="white")
    table.add_column("Topic", style="white")
    table.add_column("Trainer", style="blue")
    table.add_column("Status")
    table.add_column("Suggestions", style="dim")

    for entry in sorted(entries, key=lambda e: (e.date, e.time)):
        status = f"[{_STATUS_STYLES.get(entry.status, 'white')}]{entry.status}[/]"
        if entry.cancellation_reason:
            status += f"\n[dim]{escape(entry.cancellation_reason)}[/dim]"
        table.add_row(
            str(entry.id),
            f"{format_date_human(entry.date)} {entry.time}",
            escape(entry.school_name),
            escape(entry.topic),
            escape(entry.trainer),
            status,
            "\n".join(escape(action.prompt) for action in entry.suggested_actions),
        )

    return table
