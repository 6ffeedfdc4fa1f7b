"""Interactive chat CLI for the schedule assistant.

Examples:
    # Chat interactively
    python -m orchestrator.run

    # Ask one question and exit
    python -m orchestrator.run --prompt "What's on the schedule for today?"
"""
import asyncio
import typing as t

import click
from rich.panel import Panel

from notification_server.sink import NotificationSink
from orchestrator.conversation import ConversationOrchestrator
from orchestrator.llm import DEFAULT_MODEL, LLMClient
from orchestrator.models import TranscriptEntry
from orchestrator.utils import configure_logging, console, create_schedule_table, format_date_human, html_to_markup
from schedule_server.store import ScheduleStore, seed_schedule

HELP_TEXT = (
    "[dim]Commands: [bold]/schedule[/bold] show sessions · "
    "[bold]/cancel <id>[/bold] pick a session to cancel · "
    "[bold]/quit[/bold] exit[/dim]"
)


def print_reply(entry: TranscriptEntry) -> None:
    """Print an assistant entry with its follow-ups and cancellation choices."""
    console.print(Panel(html_to_markup(entry.content), title="🤖 Assistant", border_style="blue", expand=False))

    if entry.confirmation is not None:
        for session in entry.confirmation.entries:
            console.print(
                f"  [cyan]/cancel {session.id}[/cyan]  {session.school_name} · "
                f"{session.topic} · {format_date_human(session.date)} {session.time}"
            )
    for follow_up in entry.follow_ups:
        console.print(f"  [dim]›[/dim] {follow_up.text}")


def print_notification(sink: NotificationSink, already_shown: int) -> int:
    """Print notifications emitted since the last call; return the new count."""
    for message in sink.sent_since(already_shown):
        console.print(Panel(message, title="🔔 Notification", border_style="green", expand=False))
    return sink.total_sent


async def run_turn(orchestrator: ConversationOrchestrator, command: str) -> t.Optional[TranscriptEntry]:
    with console.status("[bold green]Thinking..."):
        if command.startswith("/cancel"):
            _, _, arg = command.partition(" ")
            if not arg.strip().isdigit():
                console.print("[red]Usage:[/red] /cancel <id>")
                return None
            try:
                return await orchestrator.select_for_cancellation(int(arg))
            except KeyError as e:
                console.print(f"[red]Error:[/red] {e.args[0]}")
                return None
        return await orchestrator.submit(command)


async def async_main(model: str, prompt: t.Optional[str]) -> None:
    store = ScheduleStore(seed_schedule())
    sink = NotificationSink()
    orchestrator = ConversationOrchestrator(LLMClient(model=model), store, sink)
    shown = 0

    if prompt:
        reply = await run_turn(orchestrator, prompt)
        if reply is not None:
            print_reply(reply)
        print_notification(sink, shown)
        return

    console.print(
        Panel.fit(
            f"[bold blue]🏫 SG School Trainer Hub Assistant[/bold blue]\n"
            f"Model: [cyan]{model}[/cyan]",
            border_style="blue",
        )
    )
    console.print(create_schedule_table(store.list()))
    print_reply(orchestrator.transcript[-1])
    console.print(HELP_TEXT)

    while True:
        try:
            command = (await asyncio.to_thread(console.input, "\n[bold cyan]You ›[/bold cyan] ")).strip()
        except (EOFError, KeyboardInterrupt):
            break

        if not command:
            continue
        if command in ("/quit", "/exit"):
            break
        if command == "/schedule":
            console.print(create_schedule_table(store.list()))
            continue

        reply = await run_turn(orchestrator, command)
        if reply is not None:
            print_reply(reply)
        shown = print_notification(sink, shown)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--model",
    default=DEFAULT_MODEL,
    help=f"OpenAI model to use (default: {DEFAULT_MODEL}).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.option("--prompt", "-p", default=None, help="Send one message and exit.")
def main(model: str, verbose: bool, prompt: t.Optional[str]) -> None:
    """Chat with the schedule assistant to manage training sessions."""
    configure_logging(verbose)
    asyncio.run(async_main(model, prompt))


if __name__ == "__main__":
    main()
