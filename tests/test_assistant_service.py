"""Tests for the assistant REST service."""
import json

import pytest
from fastapi.testclient import TestClient

from services.assistant_service.app import create_app


@pytest.fixture
def client_for(make_orchestrator):
    """Start the service with an orchestrator answering ``replies``."""

    def factory(*replies):
        orchestrator, _ = make_orchestrator(*replies)
        return TestClient(create_app(lambda: orchestrator))

    return factory


def test_health(client_for) -> None:
    with client_for() as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_list_and_delete_schedule(client_for) -> None:
    with client_for() as client:
        sessions = client.get("/schedule").json()
        deleted = client.delete("/schedule/5")
        missing = client.delete("/schedule/5")
        remaining = client.get("/schedule").json()

    assert [s["id"] for s in sessions] == [1, 2, 3, 4, 5, 6, 7]
    assert sessions[4]["cancellationReason"] == "Trainer has a personal emergency."
    assert deleted.status_code == 204
    assert missing.status_code == 404
    assert 5 not in [s["id"] for s in remaining]


def test_chat_turn_and_transcript(client_for) -> None:
    reply = json.dumps({
        "response": "NJC is still pending.",
        "followUpQuestions": [{"text": "Confirm NJC?", "sessionId": 3}, "Anything else?"],
    })
    with client_for(reply) as client:
        response = client.post("/chat", json={"message": "What is pending?"})
        transcript = client.get("/transcript").json()
        sessions = client.get("/schedule").json()

    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "assistant"
    assert body["content"] == "NJC is still pending."
    assert body["followUpQuestions"] == [{"text": "Anything else?", "sessionId": None}]
    assert [entry["role"] for entry in transcript] == ["assistant", "user", "assistant"]
    assert transcript[0]["followUpQuestions"] == []
    assert sessions[2]["suggestedActions"] == ["Confirm NJC?"]


def test_chat_rejects_blank_message(client_for) -> None:
    with client_for() as client:
        response = client.post("/chat", json={"message": ""})

    assert response.status_code == 422


def test_cancellation_flow(client_for) -> None:
    prompt = json.dumps({
        "action": "PROMPT_FOR_CANCELLATION",
        "data": {"prompt": "Which session?", "sessions": []},
    })
    follow_up = json.dumps({"response": "What is the reason?", "followUpQuestions": []})
    with client_for(prompt, follow_up) as client:
        offered = client.post("/chat", json={"message": "Cancel a session"}).json()
        chosen = client.post("/chat/cancel/3")
        unknown = client.post("/chat/cancel/99")
        transcript = client.get("/transcript").json()

    assert [s["id"] for s in offered["confirmation"]["sessions"]] == [1, 2, 3, 4, 6, 7]
    assert chosen.status_code == 200
    assert chosen.json()["content"] == "What is the reason?"
    assert unknown.status_code == 404
    assert "(ID: 3)" in transcript[-2]["content"]
    assert transcript[-3]["confirmation"] is None


def test_notification_endpoint(client_for) -> None:
    reply = json.dumps({"tool_name": "send_notification", "arguments": {"message": "Heads up"}})
    with client_for(reply) as client:
        before = client.get("/notification").json()
        client.post("/chat", json={"message": "Notify me"})
        after = client.get("/notification").json()

    assert before == {"message": None}
    assert after == {"message": "Heads up"}
