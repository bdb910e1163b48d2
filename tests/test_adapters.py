import threading
from datetime import timedelta
from unittest.mock import Mock

import assemblyai as aai
import pytest
import redis

from smart_minutes.domain import (
    DiarizationSettings,
    ObjectReference,
    RecognitionJob,
    RecognitionRequest,
    Transcript,
    TranscriptStatus,
)
from smart_minutes.exceptions import (
    CompletionError,
    DocumentHostError,
    StorageUnavailableError,
    TranscriptionFailedError,
    TranscriptStoreError,
)
from smart_minutes.infrastructure import (
    AssemblyAIRecognizer,
    GeminiLLMService,
    GoogleDriveHost,
    MinioStorageClient,
    RedisTranscriptStore,
)

REFERENCE = ObjectReference(bucket="smart-minutes", name="1714415405123-standup.mp3")


def _request(fallbacks=()):
    return RecognitionRequest(
        encoding="MP3",
        sample_rate_hertz=44100,
        primary_language="en",
        fallback_languages=fallbacks,
        diarization=DiarizationSettings(enabled=True, expected_speakers=3),
    )


# MinIO


def test_minio_upload_confirms_write():
    client = Mock()
    client.put_object.return_value = Mock(etag="abc123")

    MinioStorageClient(client).upload(REFERENCE, b"ID3", "audio/mpeg")

    kwargs = client.put_object.call_args.kwargs
    assert kwargs["bucket_name"] == "smart-minutes"
    assert kwargs["object_name"] == "1714415405123-standup.mp3"
    assert kwargs["length"] == 3
    assert kwargs["content_type"] == "audio/mpeg"


def test_minio_upload_without_etag_is_unconfirmed():
    client = Mock()
    client.put_object.return_value = Mock(etag=None)

    with pytest.raises(StorageUnavailableError):
        MinioStorageClient(client).upload(REFERENCE, b"ID3", "audio/mpeg")


def test_minio_upload_error_is_wrapped():
    client = Mock()
    client.put_object.side_effect = OSError("connection refused")

    with pytest.raises(StorageUnavailableError) as exc_info:
        MinioStorageClient(client).upload(REFERENCE, b"ID3", "audio/mpeg")

    assert isinstance(exc_info.value.cause, OSError)


def test_minio_presigned_url_uses_expiry():
    client = Mock()
    client.presigned_get_object.return_value = "https://minio/signed"

    url = MinioStorageClient(client, timedelta(minutes=30)).presigned_url(REFERENCE)

    assert url == "https://minio/signed"
    client.presigned_get_object.assert_called_once_with(
        "smart-minutes", "1714415405123-standup.mp3", expires=timedelta(minutes=30)
    )


def test_minio_creates_missing_bucket():
    client = Mock()
    client.bucket_exists.return_value = False

    MinioStorageClient(client).ensure_bucket_exists("smart-minutes")

    client.make_bucket.assert_called_once_with("smart-minutes")


# AssemblyAI


def test_assemblyai_submit_requests_diarization():
    transcriber = Mock()
    transcriber.submit.return_value = Mock(id="tr-1", status=aai.TranscriptStatus.queued)

    job = AssemblyAIRecognizer(transcriber).submit("https://audio", _request())

    assert job.job_id == "tr-1"
    config = transcriber.submit.call_args.kwargs["config"]
    assert config.speaker_labels is True
    assert config.speakers_expected == 3
    assert config.language_code == "en"


def test_assemblyai_submit_with_fallbacks_enables_language_detection():
    transcriber = Mock()
    transcriber.submit.return_value = Mock(id="tr-1", status=aai.TranscriptStatus.queued)

    AssemblyAIRecognizer(transcriber).submit("https://audio", _request(("es", "fr")))

    config = transcriber.submit.call_args.kwargs["config"]
    assert config.language_detection is True


def _polls(monkeypatch, *transcripts):
    responses = iter(transcripts)
    get_by_id = Mock(side_effect=lambda transcript_id: next(responses))
    monkeypatch.setattr(aai.Transcript, "get_by_id", get_by_id)
    return get_by_id


def test_assemblyai_wait_maps_speaker_labels_by_first_appearance(monkeypatch):
    words = [
        Mock(text="Hello", speaker="B", start=0, end=400),
        Mock(text="all.", speaker="B", start=400, end=700),
        Mock(text="Hi.", speaker="A", start=900, end=1100),
    ]
    get_by_id = _polls(
        monkeypatch,
        Mock(status=aai.TranscriptStatus.processing),
        Mock(status=aai.TranscriptStatus.completed, words=words),
    )
    recognizer = AssemblyAIRecognizer(Mock(), poll_interval_seconds=0.01)

    tokens = recognizer.wait(RecognitionJob(job_id="tr-1"), threading.Event())

    assert [(t.text, t.speaker_tag) for t in tokens] == [("Hello", 1), ("all.", 1), ("Hi.", 2)]
    assert tokens[2].start_ms == 900
    assert get_by_id.call_count == 2
    get_by_id.assert_called_with("tr-1")


def test_assemblyai_wait_raises_on_job_error(monkeypatch):
    _polls(monkeypatch, Mock(status=aai.TranscriptStatus.error, error="audio too short"))

    with pytest.raises(TranscriptionFailedError, match="audio too short"):
        AssemblyAIRecognizer(Mock()).wait(RecognitionJob(job_id="tr-1"), threading.Event())


def test_assemblyai_wait_returns_promptly_once_stopped(monkeypatch):
    get_by_id = _polls(monkeypatch, *[Mock(status=aai.TranscriptStatus.processing)] * 3)
    stop_event = threading.Event()
    stop_event.set()
    recognizer = AssemblyAIRecognizer(Mock(), poll_interval_seconds=60)

    with pytest.raises(TranscriptionFailedError, match="stopped"):
        recognizer.wait(RecognitionJob(job_id="tr-1"), stop_event)

    assert get_by_id.call_count == 1


# Gemini


def test_gemini_complete_passes_system_instruction_and_temperature():
    client = Mock()
    client.models.generate_content.return_value = Mock(text="Minutes")

    text = GeminiLLMService(client, "gemini-test").complete("SYSTEM", "PROMPT", 0.3)

    assert text == "Minutes"
    client.models.generate_content.assert_called_once_with(
        model="gemini-test",
        contents="PROMPT",
        config={"system_instruction": "SYSTEM", "temperature": 0.3},
    )


def test_gemini_empty_response_is_an_error():
    client = Mock()
    client.models.generate_content.return_value = Mock(text="")

    with pytest.raises(CompletionError):
        GeminiLLMService(client, "gemini-test").complete("S", "P", 0.2)


def test_gemini_api_error_is_wrapped():
    client = Mock()
    client.models.generate_content.side_effect = RuntimeError("quota exceeded")

    with pytest.raises(CompletionError, match="quota exceeded"):
        GeminiLLMService(client, "gemini-test").complete("S", "P", 0.2)


# Google Drive


def test_drive_upload_creates_file_in_folder():
    service = Mock()
    service.files.return_value.create.return_value.execute.return_value = {"id": "drive-1"}

    file_id = GoogleDriveHost(service).upload("folder-1", "a.docx", "application/x", b"doc")

    assert file_id == "drive-1"
    kwargs = service.files.return_value.create.call_args.kwargs
    assert kwargs["body"] == {"name": "a.docx", "parents": ["folder-1"]}
    assert kwargs["fields"] == "id"


def test_drive_upload_without_id_fails():
    service = Mock()
    service.files.return_value.create.return_value.execute.return_value = {}

    with pytest.raises(DocumentHostError):
        GoogleDriveHost(service).upload("folder-1", "a.docx", "application/x", b"doc")


def test_drive_share_grants_anyone_reader():
    service = Mock()

    link = GoogleDriveHost(service).share_publicly("drive-1")

    assert link == "https://drive.google.com/file/d/drive-1/view?usp=sharing"
    kwargs = service.permissions.return_value.create.call_args.kwargs
    assert kwargs["fileId"] == "drive-1"
    assert kwargs["body"] == {"type": "anyone", "role": "reader"}


def test_drive_share_failure_is_wrapped():
    service = Mock()
    service.permissions.return_value.create.return_value.execute.side_effect = RuntimeError("403")

    with pytest.raises(DocumentHostError) as exc_info:
        GoogleDriveHost(service).share_publicly("drive-1")

    assert exc_info.value.operation == "share"


# Redis


def test_redis_store_round_trips_transcript_with_ttl():
    client = Mock()
    store = RedisTranscriptStore(client, ttl_seconds=600)
    transcript = Transcript(
        session_id="s1", corrected_text="Speaker 1: hi", status=TranscriptStatus.READY
    )

    store.save(transcript)
    key, value = client.set.call_args.args
    assert key == "transcript:s1"
    assert client.set.call_args.kwargs == {"ex": 600}

    client.get.return_value = value
    assert store.get("s1") == transcript


def test_redis_store_missing_key_returns_none():
    client = Mock()
    client.get.return_value = None

    assert RedisTranscriptStore(client, 600).get("s1") is None


def test_redis_store_errors_are_wrapped():
    client = Mock()
    client.set.side_effect = redis.ConnectionError("down")

    with pytest.raises(TranscriptStoreError):
        RedisTranscriptStore(client, 600).save(Transcript(session_id="s1"))
