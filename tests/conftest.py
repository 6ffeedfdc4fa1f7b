"""Shared fixtures for the assistant test suite."""
import asyncio
import typing as t
from datetime import date, datetime

import pytest

from notification_server.sink import NotificationSink
from orchestrator.conversation import ConversationOrchestrator
from schedule_server.store import ScheduleStore, seed_schedule

TODAY = date(2024, 1, 15)


class FakeLLM:
    """Stand-in for the LLM call that replays canned replies.

    A reply that is an exception instance is raised instead of returned.
    If ``gate`` is set, each call waits for it before answering.
    """

    def __init__(self, *replies: t.Union[str, Exception]) -> None:
        self.replies = list(replies)
        self.calls: list[tuple[str, list[dict[str, str]]]] = []
        self.gate: t.Optional[asyncio.Event] = None

    async def complete(self, system_instruction: str, history: t.Sequence[dict[str, str]]) -> str:
        self.calls.append((system_instruction, list(history)))
        if self.gate is not None:
            await self.gate.wait()
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def store() -> ScheduleStore:
    return ScheduleStore(seed_schedule(TODAY))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sink(clock: FakeClock) -> NotificationSink:
    return NotificationSink(clock=clock)


@pytest.fixture
def make_orchestrator(store: ScheduleStore, sink: NotificationSink):
    """Build an orchestrator over the seeded store that answers with ``replies``."""

    def factory(*replies: t.Union[str, Exception]) -> tuple[ConversationOrchestrator, FakeLLM]:
        llm = FakeLLM(*replies)
        orchestrator = ConversationOrchestrator(
            llm, store, sink, now=lambda: datetime(2024, 1, 15, 9, 0)
        )
        return orchestrator, llm

    return factory
