"""Conversation orchestrator for the schedule assistant.

The orchestrator owns the chat transcript. Each submitted message runs one
turn: the transcript and a live snapshot of the schedule go to the LLM, the
reply is classified, any requested tools run against the schedule store, and
a single assistant entry replaces the pending placeholder.
"""
import json
import logging
import typing as t
from dataclasses import replace
from datetime import datetime
from enum import Enum

from notification_server.sink import NotificationSink
from orchestrator.classifier import classify_response
from orchestrator.errors import ToolExecutionError
from orchestrator.executor import ToolExecutor
from orchestrator.llm import GENERIC_FAILURE_MESSAGE, LLMClient, describe_llm_failure
from orchestrator.models import (
    CancellationPrompt,
    Classification,
    ConversationalAnswer,
    FollowUp,
    PendingConfirmation,
    Role,
    ToolBatch,
    ToolOutcome,
    ToolSingle,
    TranscriptEntry,
)
from prompts import load_prompt, render_prompt
from schedule_server.models import REMINDER_PRESETS, SuggestedAction
from schedule_server.store import ScheduleStore

logger = logging.getLogger(__name__)

SYSTEM_PROMPT_TEMPLATE = load_prompt("assistant_system_prompt")

GREETING = (
    "Hello Admin! Welcome to the SG School Trainer Hub. You can manage all trainer "
    "schedules here. How can I assist you?"
)
GREETING_FOLLOW_UPS = (
    "What's on the schedule for today?",
    "Are there any pending sessions?",
    "I need to cancel a session.",
)
TOOL_FOLLOW_UPS = (
    "What's on the schedule for today?",
    "Are there any pending sessions?",
)
UNEXPECTED_RESPONSE_MESSAGE = (
    "Sorry, I received an unexpected response. Could you please rephrase your request?"
)
TOOL_FAILURE_MESSAGE = (
    "Sorry, I couldn't complete that request. Please check the schedule and try again."
)


class OrchestratorState(Enum):
    IDLE = "Idle"
    AWAITING_MODEL = "AwaitingModel"
    RESOLVING = "Resolving"


def _assistant(content: str, follow_ups: t.Iterable[str] = ()) -> TranscriptEntry:
    return TranscriptEntry(
        role=Role.ASSISTANT,
        content=content,
        follow_ups=[FollowUp(text=text) for text in follow_ups],
    )


class ConversationOrchestrator:
    """Drives chat turns between the administrator and the assistant model.

    Only one turn runs at a time; a message submitted while a turn is in
    flight is ignored.
    """

    def __init__(
        self,
        llm: LLMClient,
        store: ScheduleStore,
        sink: NotificationSink,
        executor: t.Optional[ToolExecutor] = None,
        now: t.Callable[[], datetime] = datetime.now,
    ) -> None:
        self.llm = llm
        self.store = store
        self.sink = sink
        self.executor = executor or ToolExecutor(store)
        self._now = now
        self.state = OrchestratorState.IDLE
        self.transcript: list[TranscriptEntry] = [_assistant(GREETING, GREETING_FOLLOW_UPS)]

    @property
    def busy(self) -> bool:
        return self.state is not OrchestratorState.IDLE

    async def submit(self, message: str) -> t.Optional[TranscriptEntry]:
        """Run one chat turn for ``message``.

        Args:
            message: The administrator's text

        Returns:
            The assistant entry that ends the turn, or None if the message was
            blank or another turn is still in flight
        """
        text = message.strip()
        if self.busy or not text:
            logger.debug("Ignoring submit (state=%s, blank=%s)", self.state.value, not text)
            return None

        if self.transcript:
            self.transcript[-1].clear_affordances()
        self.transcript.append(TranscriptEntry(role=Role.USER, content=text))
        placeholder = TranscriptEntry(role=Role.ASSISTANT, content="", pending=True)
        self.transcript.append(placeholder)
        self.state = OrchestratorState.AWAITING_MODEL

        reply = _assistant(GENERIC_FAILURE_MESSAGE)
        try:
            reply = await self._run_turn()
        finally:
            self._replace_placeholder(placeholder, reply)
            self.state = OrchestratorState.IDLE
        return reply

    async def select_for_cancellation(self, entry_id: int) -> t.Optional[TranscriptEntry]:
        """Submit the canonical message choosing a session to cancel.

        Raises:
            KeyError: If no offered or stored session has that id
        """
        entry = None
        confirmation = self.transcript[-1].confirmation if self.transcript else None
        if confirmation is not None:
            entry = next((e for e in confirmation.entries if e.id == entry_id), None)
        if entry is None:
            entry = self.store.get(entry_id)
        if entry is None:
            raise KeyError(f"No session with ID {entry_id}")

        return await self.submit(
            f"I want to cancel the session at {entry.school_name} on {entry.date} (ID: {entry.id})."
        )

    def build_system_instruction(self) -> str:
        """Render the system prompt over the live schedule."""
        schedule = [entry.to_wire() for entry in self.store.list()]
        return render_prompt(
            SYSTEM_PROMPT_TEMPLATE,
            CURRENT_DATE=self._now().isoformat(timespec="minutes"),
            SCHEDULE=json.dumps(schedule, indent=2),
            REMINDER_PRESETS=", ".join(str(minutes) for minutes in REMINDER_PRESETS),
        )

    def outbound_history(self) -> list[dict[str, str]]:
        """User and assistant turns sent to the model, excluding the pending entry."""
        return [
            {"role": entry.role.value, "text": entry.content}
            for entry in self.transcript
            if not entry.pending and entry.role in (Role.USER, Role.ASSISTANT)
        ]

    async def _run_turn(self) -> TranscriptEntry:
        system_instruction = self.build_system_instruction()
        history = self.outbound_history()

        try:
            raw = await self.llm.complete(system_instruction, history)
        except Exception as e:
            logger.error("LLM call failed: %s", e)
            return _assistant(describe_llm_failure(e))

        self.state = OrchestratorState.RESOLVING
        classification = classify_response(raw)
        try:
            return await self._resolve(classification)
        except ToolExecutionError as e:
            logger.error("%s", e)
            return _assistant(TOOL_FAILURE_MESSAGE)

    async def _resolve(self, classification: Classification) -> TranscriptEntry:
        if isinstance(classification, ToolBatch):
            outcomes = await self.executor.execute_batch(classification.invocations)
            self._surface_notifications(outcomes)
            items = "".join(f"<li>{outcome.text}</li>" for outcome in outcomes)
            return _assistant(f"I've completed the following:<ul>{items}</ul>", TOOL_FOLLOW_UPS)

        if isinstance(classification, ToolSingle):
            outcome = await self.executor.execute(classification.invocation)
            self._surface_notifications([outcome])
            return _assistant(outcome.text, TOOL_FOLLOW_UPS)

        if isinstance(classification, CancellationPrompt):
            # Offer the live sessions, never the list the model supplied
            offered = [replace(entry, suggested_actions=[]) for entry in self.store.cancellable()]
            entry = _assistant(classification.prompt)
            entry.confirmation = PendingConfirmation(prompt=classification.prompt, entries=offered)
            return entry

        if isinstance(classification, ConversationalAnswer):
            return self._apply_answer(classification)

        logger.warning("Unrecognized model response (%s): %s", classification.reason, classification.raw)
        return _assistant(UNEXPECTED_RESPONSE_MESSAGE)

    def _apply_answer(self, answer: ConversationalAnswer) -> TranscriptEntry:
        self.store.clear_all_suggested_actions()
        general = []
        for follow_up in answer.follow_ups:
            if follow_up.entry_id is None:
                general.append(follow_up)
            elif not self.store.add_suggested_action(follow_up.entry_id, SuggestedAction(prompt=follow_up.text)):
                logger.warning("Dropping follow-up for unknown session %s: %s",
                               follow_up.entry_id, follow_up.text)
        return TranscriptEntry(role=Role.ASSISTANT, content=answer.response, follow_ups=general)

    def _surface_notifications(self, outcomes: t.Sequence[ToolOutcome]) -> None:
        for outcome in outcomes:
            if outcome.notification:
                self.sink.notify(outcome.notification)

    def _replace_placeholder(self, placeholder: TranscriptEntry, reply: TranscriptEntry) -> None:
        for idx, entry in enumerate(self.transcript):
            if entry is placeholder:
                self.transcript[idx] = reply
                return
        self.transcript.append(reply)
