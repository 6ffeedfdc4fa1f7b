"""
FastAPI service for the schedule assistant.

Exposes the schedule, the chat transcript and the notification display over
REST so a browser front end can drive the conversation orchestrator.
"""
from __future__ import annotations

import os
import typing as t
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request

from notification_server.sink import NotificationSink
from orchestrator.conversation import ConversationOrchestrator
from orchestrator.llm import LLMClient
from schedule_server.store import ScheduleStore, seed_schedule
from services.shared.models import (
    ChatRequest,
    NotificationResponse,
    ScheduleEntryModel,
    TranscriptEntryModel,
)

SERVICE_PORT = int(os.getenv("ASSISTANT_SERVICE_PORT", "8010"))


def build_orchestrator() -> ConversationOrchestrator:
    """Create the store, sink and orchestrator for a fresh session."""
    return ConversationOrchestrator(LLMClient(), ScheduleStore(seed_schedule()), NotificationSink())


def create_app(
    orchestrator_factory: t.Callable[[], ConversationOrchestrator] = build_orchestrator,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Build the orchestrator on startup."""
        app.state.orchestrator = orchestrator_factory()
        yield

    app = FastAPI(
        title="Schedule Assistant Service",
        description="REST API for chatting with the training-schedule assistant",
        version="1.0.0",
        lifespan=lifespan,
    )

    def get_orchestrator(request: Request) -> ConversationOrchestrator:
        return request.app.state.orchestrator

    @app.get("/health")
    async def health_check():
        """Health check endpoint for container orchestration."""
        return {"status": "healthy", "service": "assistant-service"}

    @app.get("/schedule", response_model=list[ScheduleEntryModel])
    async def list_schedule(request: Request) -> list[ScheduleEntryModel]:
        """List all training sessions with their suggested actions."""
        store = get_orchestrator(request).store
        return [ScheduleEntryModel.from_entry(entry) for entry in store.list()]

    @app.delete("/schedule/{entry_id}", status_code=204)
    async def delete_session(entry_id: int, request: Request) -> None:
        """Delete a training session."""
        if not get_orchestrator(request).store.delete(entry_id):
            raise HTTPException(status_code=404, detail=f"Session {entry_id} not found")

    @app.get("/transcript", response_model=list[TranscriptEntryModel])
    async def get_transcript(request: Request) -> list[TranscriptEntryModel]:
        """Return the chat transcript in order."""
        return [TranscriptEntryModel.from_entry(e) for e in get_orchestrator(request).transcript]

    @app.post("/chat", response_model=TranscriptEntryModel)
    async def chat(body: ChatRequest, request: Request) -> TranscriptEntryModel:
        """
        Send a message to the assistant.
        
        Returns the assistant entry that ends the turn.
        """
        orchestrator = get_orchestrator(request)
        if orchestrator.busy:
            raise HTTPException(status_code=409, detail="The assistant is still answering")

        reply = await orchestrator.submit(body.message)
        if reply is None:
            raise HTTPException(status_code=409, detail="Message was not accepted")
        return TranscriptEntryModel.from_entry(reply)

    @app.post("/chat/cancel/{entry_id}", response_model=TranscriptEntryModel)
    async def select_for_cancellation(entry_id: int, request: Request) -> TranscriptEntryModel:
        """Choose the session to cancel from a cancellation prompt."""
        orchestrator = get_orchestrator(request)
        if orchestrator.busy:
            raise HTTPException(status_code=409, detail="The assistant is still answering")

        try:
            reply = await orchestrator.select_for_cancellation(entry_id)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Session {entry_id} not found")
        if reply is None:
            raise HTTPException(status_code=409, detail="Message was not accepted")
        return TranscriptEntryModel.from_entry(reply)

    @app.get("/notification", response_model=NotificationResponse)
    async def current_notification(request: Request) -> NotificationResponse:
        """Return the notification currently on display, if any."""
        return NotificationResponse(message=get_orchestrator(request).sink.current_message)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=SERVICE_PORT)
