import threading

import pytest
from fastapi.testclient import TestClient

from smart_minutes import dependencies
from smart_minutes.app import create_app

from fakes import tokens


@pytest.fixture
def shutdown():
    return threading.Event()


@pytest.fixture
def client(pipeline, recognizer, shutdown, monkeypatch):
    recognizer.tokens_by_name["budget"] = tokens((1, "young opened"), (2, "the agender"))
    monkeypatch.setattr(dependencies, "_pipeline", pipeline)
    app = create_app(initialize=False)
    app.dependency_overrides[dependencies.get_shutdown_event] = lambda: shutdown
    return TestClient(app)


def _upload(client, session_id="session-1", name="budget.mp3", content_type="audio/mpeg"):
    return client.post(
        "/transcribe",
        files={"file": (name, b"ID3audio", content_type)},
        data={"sessionId": session_id},
    )


def test_transcribe_returns_corrected_transcript(client):
    response = _upload(client)

    assert response.status_code == 200
    body = response.json()
    assert body["sessionId"] == "session-1"
    assert body["status"] == "ready"
    assert body["text"] == "Speaker 1: Yoong opened\nSpeaker 2: the agenda"
    assert body["rawText"] == "Speaker 1: young opened\nSpeaker 2: the agender"
    assert body["segments"][0] == {"speakerTag": 1, "text": "young opened"}


def test_transcribe_rejects_non_audio_upload(client):
    response = _upload(client, name="notes.txt", content_type="text/plain")

    assert response.status_code == 422


def test_transcribe_requires_session_id(client):
    response = client.post("/transcribe", files={"file": ("a.mp3", b"x", "audio/mpeg")})

    assert response.status_code == 422


def test_transcribe_reports_failed_stage(client, recognizer):
    recognizer.fail_reason = "unsupported audio"

    response = _upload(client)

    assert response.status_code == 502
    assert response.json()["detail"]["stage"] == "transcription"


def test_summarize_then_list_minutes(client):
    _upload(client)

    response = client.post(
        "/summarize",
        json={"sessionId": "session-1", "userId": "user-1", "audioFileName": "budget.mp3"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "succeeded"
    assert set(body["links"]) == {"formalMinutesLink", "actionItemsLink", "briefLink"}
    assert [t["status"] for t in body["templates"]] == ["succeeded"] * 3

    minutes = client.get("/allminutes/user-1").json()
    assert len(minutes) == 1
    assert minutes[0]["summaryId"] == body["summaryId"]
    assert minutes[0]["audioFileName"] == "budget.mp3"
    assert minutes[0]["formalMinutesLink"] == body["links"]["formalMinutesLink"]


def test_summarize_unknown_session_is_404(client):
    response = client.post(
        "/summarize",
        json={"sessionId": "nope", "userId": "user-1", "audioFileName": "a.mp3"},
    )

    assert response.status_code == 404
    assert response.json()["detail"]["status"] == "failed"


def test_summarize_validates_body(client):
    response = client.post("/summarize", json={"sessionId": "s", "userId": ""})

    assert response.status_code == 422


def test_list_minutes_for_user_without_records_is_empty(client):
    assert client.get("/allminutes/nobody").json() == []


def test_service_not_ready_returns_503(monkeypatch):
    monkeypatch.setattr(dependencies, "_pipeline", None)
    client = TestClient(create_app(initialize=False))

    response = client.get("/allminutes/user-1")

    assert response.status_code == 503
    assert response.json()["detail"]["stage"] == "startup"


def test_shutdown_abandons_in_flight_transcription(client, recognizer, shutdown):
    recognizer.block = threading.Event()
    shutdown.set()

    response = _upload(client)

    assert response.status_code == 500
    assert response.json()["detail"]["stage"] == "cancelled"
    assert recognizer.stopped.wait(1)


def test_shutdown_before_summarization_publishes_and_records_nothing(
    client, shutdown, document_host
):
    _upload(client)
    shutdown.set()

    response = client.post(
        "/summarize",
        json={"sessionId": "session-1", "userId": "user-1", "audioFileName": "budget.mp3"},
    )

    assert response.status_code == 500
    assert response.json()["detail"]["stage"] == "cancelled"
    assert document_host.files == {}
    assert client.get("/allminutes/user-1").json() == []


def test_app_shutdown_signals_in_flight_runs(monkeypatch):
    monkeypatch.setattr("smart_minutes.app.init_dependencies", lambda: None)
    dependencies.reset_dependencies()

    try:
        with TestClient(create_app()):
            assert not dependencies.get_shutdown_event().is_set()
        assert dependencies.get_shutdown_event().is_set()
    finally:
        dependencies.reset_dependencies()
