"""Tool execution against the schedule store.

This module resolves the tool invocations requested by the assistant model.
Each invocation produces a user-facing outcome sentence; notifications are
returned on the outcome for the caller to surface rather than being sent
from here.
"""
import asyncio
import logging
import typing as t

from orchestrator.errors import ToolExecutionError
from orchestrator.models import ToolInvocation, ToolOutcome
from schedule_server.models import ScheduleEntry
from schedule_server.store import ScheduleStore

logger = logging.getLogger(__name__)

UPDATE_SCHEDULE = "update_schedule"
SEND_NOTIFICATION = "send_notification"

DEFAULT_NOTIFICATION = "Notification sent!"


# Marks an id argument that cannot name any session
_UNUSABLE_ID = object()


def _coerce_id(value: t.Any) -> t.Any:
    """Normalize an id argument.

    Returns an int, None when the invocation creates an entry, or
    _UNUSABLE_ID when the value cannot be a session id.
    """
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value or None
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip()) or None
    if isinstance(value, float) and value.is_integer():
        return int(value) or None
    return _UNUSABLE_ID


class ToolExecutor:
    """Resolves named tool invocations against a schedule store."""

    def __init__(self, store: ScheduleStore) -> None:
        self.store = store
        self._handlers: dict[str, t.Callable[[dict[str, t.Any]], ToolOutcome]] = {
            UPDATE_SCHEDULE: self._update_schedule,
            SEND_NOTIFICATION: self._send_notification,
        }

    async def execute(self, invocation: ToolInvocation) -> ToolOutcome:
        """Execute a single invocation.

        Unknown tools and unknown session ids produce an outcome describing
        the problem; they are never raised.

        Raises:
            ToolExecutionError: If the handler fails unexpectedly
        """
        handler = self._handlers.get(invocation.name)
        if handler is None:
            logger.warning("Unknown tool requested: %s", invocation.name)
            return ToolOutcome(text=f"Unknown tool: {invocation.name}")

        logger.info("Executing %s with %s", invocation.name, invocation.arguments)
        try:
            return handler(dict(invocation.arguments))
        except Exception as e:
            raise ToolExecutionError(invocation.name, e) from e

    async def execute_batch(
        self,
        invocations: t.Sequence[ToolInvocation],
        max_concurrent: t.Optional[int] = None,
    ) -> list[ToolOutcome]:
        """Execute invocations concurrently and return outcomes in input order.

        Every invocation is dispatched before any is awaited. A failing
        invocation becomes an error line in its slot; the others still run
        and report. There is no rollback.

        Args:
            invocations: The invocations, in the order the model supplied them
            max_concurrent: Optional limit on invocations in flight at once

        Returns:
            One outcome per invocation, in the same order
        """
        semaphore = asyncio.Semaphore(max_concurrent) if max_concurrent else None

        async def run(invocation: ToolInvocation) -> ToolOutcome:
            if semaphore is None:
                return await self.execute(invocation)
            async with semaphore:
                return await self.execute(invocation)

        results = await asyncio.gather(
            *(run(invocation) for invocation in invocations),
            return_exceptions=True,
        )

        outcomes = []
        for result in results:
            if isinstance(result, ToolExecutionError):
                logger.error("%s", result)
                outcomes.append(ToolOutcome(
                    text=f"Sorry, the {result.tool_name} request could not be completed."
                ))
            elif isinstance(result, BaseException):
                raise result
            else:
                outcomes.append(result)
        return outcomes

    def _update_schedule(self, arguments: dict[str, t.Any]) -> ToolOutcome:
        raw_id = arguments.get("id")
        entry_id = _coerce_id(raw_id)
        if entry_id is None:
            return self._add_entry(arguments)
        if entry_id is _UNUSABLE_ID:
            return ToolOutcome(text=f"Sorry, I couldn't find a session with ID {raw_id}.")

        existing = self.store.get(entry_id)
        if existing is None:
            return ToolOutcome(text=f"Sorry, I couldn't find a session with ID {entry_id}.")

        updated = existing.merged_with(arguments)
        self.store.update(updated)

        changed_keys = set(arguments) - {"id"}
        if changed_keys == {"reminderMinutes"}:
            minutes = updated.reminder_minutes
            return ToolOutcome(
                text=(
                    f"OK, I'll send a reminder {minutes} minutes before the session for "
                    f"<b>{updated.trainer}</b> at <b>{updated.school_name}</b>."
                ),
                notification=(
                    f"Reminder set: {minutes} minutes before {updated.topic} "
                    f"at {updated.school_name}."
                ),
            )

        return ToolOutcome(
            text=(
                f"OK, I've updated the session for <b>{updated.trainer}</b> "
                f"at <b>{updated.school_name}</b>."
            )
        )

    def _add_entry(self, arguments: dict[str, t.Any]) -> ToolOutcome:
        added = self.store.add(ScheduleEntry.from_wire(arguments))
        return ToolOutcome(
            text=(
                f"OK, I've added the new session for <b>{added.trainer}</b> "
                f"at <b>{added.school_name}</b> to the schedule."
            )
        )

    def _send_notification(self, arguments: dict[str, t.Any]) -> ToolOutcome:
        message = arguments.get("message") or DEFAULT_NOTIFICATION
        return ToolOutcome(text=f"Notification sent: {message}", notification=str(message))
