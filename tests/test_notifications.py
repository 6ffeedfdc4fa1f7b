"""Tests for the notification sink and its MCP tool server."""
import pytest

from notification_server.server import create_notification_server
from notification_server.sink import NotificationSink


def test_notification_clears_after_display_window(sink: NotificationSink, clock) -> None:
    sink.notify("Reminder set")

    assert sink.current_message == "Reminder set"
    clock.advance(2.9)
    assert sink.current_message == "Reminder set"
    clock.advance(0.2)
    assert sink.current_message is None
    assert list(sink.sent) == ["Reminder set"]


def test_newer_notification_restarts_window(sink: NotificationSink, clock) -> None:
    sink.notify("first")
    clock.advance(2.0)
    sink.notify("second")
    clock.advance(2.0)

    assert sink.current_message == "second"
    assert list(sink.sent) == ["first", "second"]


def test_history_keeps_only_recent_messages(clock) -> None:
    sink = NotificationSink(clock=clock, history=3)
    for idx in range(10):
        sink.notify(f"message {idx}")

    assert list(sink.sent) == ["message 7", "message 8", "message 9"]
    assert sink.total_sent == 10
    assert sink.current_message == "message 9"


def test_sent_since_tracks_past_history_bound(clock) -> None:
    sink = NotificationSink(clock=clock, history=2)
    sink.notify("a")
    seen = sink.total_sent
    for message in ("b", "c", "d"):
        sink.notify(message)

    assert sink.sent_since(seen) == ["c", "d"]
    assert sink.sent_since(sink.total_sent) == []
    sink.notify("e")
    assert sink.sent_since(4) == ["e"]


def test_nothing_displayed_initially() -> None:
    assert NotificationSink().current_message is None


@pytest.mark.asyncio
async def test_send_notification_tool_forwards_to_sink(sink: NotificationSink) -> None:
    server = create_notification_server(sink)
    tools = await server.get_tools()

    result = tools["send_notification"].fn(message="Session 3 moved")

    assert result["status"] == "success"
    assert list(sink.sent) == ["Session 3 moved"]
    assert tools["current_notification"].fn() == "Session 3 moved"


@pytest.mark.asyncio
async def test_send_notification_tool_default_message(sink: NotificationSink) -> None:
    tools = await create_notification_server(sink).get_tools()

    tools["send_notification"].fn()

    assert list(sink.sent) == ["Notification sent!"]
