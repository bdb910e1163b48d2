"""The canonical transcription-to-minutes pipeline."""

import threading
from contextlib import contextmanager

from smart_minutes.domain.models import (
    MinutesEntry,
    MinutesRecord,
    RunStatus,
    SummarizationOutcome,
    Transcript,
)
from smart_minutes.exceptions import (
    InputValidationError,
    MinutesPipelineError,
    PipelineCancelledError,
    SummarizationFailedError,
    TranscriptNotFoundError,
)
from smart_minutes.handlers.ingestion_handler import AudioIngestor
from smart_minutes.handlers.summarization_handler import SummarizationFanOut
from smart_minutes.handlers.transcription_handler import TranscriptionOrchestrator
from smart_minutes.infrastructure.interfaces import TranscriptStore
from smart_minutes.logging import setup_logging
from smart_minutes.repositories import MinutesRepository

logger = setup_logging()


class MinutesPipeline:
    """
    Sequences ingestion, transcription, summarization and recording.

    Each run works on its own Transcript value. The transcript store is only a
    session-keyed handle for callers that summarize in a separate request.
    """

    def __init__(
        self,
        ingestor: AudioIngestor,
        orchestrator: TranscriptionOrchestrator,
        fan_out: SummarizationFanOut,
        repository: MinutesRepository,
        transcript_store: TranscriptStore,
    ):
        self._ingestor = ingestor
        self._orchestrator = orchestrator
        self._fan_out = fan_out
        self._repository = repository
        self._transcript_store = transcript_store

    @property
    def field_keys(self) -> list[str]:
        return [t.field_key for t in self._fan_out.templates]

    def transcribe(
        self,
        session_id: str,
        file_name: str,
        data: bytes,
        content_type: str,
        cancel_event: threading.Event | None = None,
    ) -> Transcript:
        """
        Stores the audio, transcribes it and saves the session transcript.

        Raises:
            InputValidationError: If the submission is incomplete.
            UpstreamServiceError: If storage or recognition fails.
            PipelineCancelledError: If the caller cancels while waiting.
        """
        with _stage_logging(session_id):
            asset = self._ingestor.ingest(session_id, file_name, data, content_type)
            transcript = self._orchestrator.transcribe(asset, cancel_event)
            self._transcript_store.save(transcript)
        return transcript

    def summarize(
        self,
        transcript: Transcript,
        user_id: str,
        audio_file_name: str,
        cancel_event: threading.Event | None = None,
    ) -> SummarizationOutcome:
        """
        Summarizes a ready transcript with every template and records the links.

        The record is written once every template has resolved and holds a link
        only for templates whose publish succeeded.

        Raises:
            InputValidationError: If user id or file name is empty, or the
                transcript is not ready.
            SummarizationFailedError: If every template failed; nothing is recorded.
            PipelineCancelledError: If the caller cancelled before any document
                was published. Once a document is public the run is recorded
                with status ``cancelled`` instead.
            PersistenceError: If the record cannot be written.
        """
        if not user_id or not user_id.strip():
            raise InputValidationError("user_id", "must not be empty")
        if not audio_file_name or not audio_file_name.strip():
            raise InputValidationError("audio_file_name", "must not be empty")
        if not transcript.is_ready:
            raise InputValidationError(
                "transcript", f"status is '{transcript.status.value}', expected 'ready'"
            )

        session_id = transcript.session_id
        with _stage_logging(session_id):
            results = self._fan_out.run(
                session_id, transcript.corrected_text, audio_file_name, cancel_event
            )

            links = {r.field_key: r.link for r in results if r.succeeded}
            cancelled = cancel_event is not None and cancel_event.is_set()
            if not links:
                if cancelled:
                    raise PipelineCancelledError(session_id, "summarization")
                raise SummarizationFailedError(
                    session_id,
                    {r.template_name: r.error or "unknown error" for r in results},
                )

            # Published documents are always recorded, even on a cancelled run.
            entry = self._repository.push(
                MinutesRecord(
                    session_id=session_id,
                    user_id=user_id,
                    audio_file_name=audio_file_name,
                    links=links,
                )
            )

        if cancelled:
            status = RunStatus.CANCELLED
        elif len(links) == len(results):
            status = RunStatus.SUCCEEDED
        else:
            status = RunStatus.PARTIAL_FAILURE
        if status is not RunStatus.SUCCEEDED:
            logger.warning(
                "Summarization did not complete for every template",
                extra={
                    "session_id": session_id,
                    "summary_id": entry.summary_id,
                    "status": status.value,
                    "failed_templates": [r.template_name for r in results if not r.succeeded],
                },
            )
        return SummarizationOutcome(
            session_id=session_id,
            summary_id=entry.summary_id,
            status=status,
            results=results,
        )

    def summarize_session(
        self,
        session_id: str,
        user_id: str,
        audio_file_name: str,
        cancel_event: threading.Event | None = None,
    ) -> SummarizationOutcome:
        """
        Summarizes the transcript previously produced for ``session_id``.

        Raises:
            TranscriptNotFoundError: If the session has no ready transcript.
        """
        if not session_id or not session_id.strip():
            raise InputValidationError("session_id", "must not be empty")

        transcript = self._transcript_store.get(session_id)
        if transcript is None or not transcript.is_ready:
            raise TranscriptNotFoundError(session_id)
        return self.summarize(transcript, user_id, audio_file_name, cancel_event)

    def run(
        self,
        session_id: str,
        user_id: str,
        file_name: str,
        data: bytes,
        content_type: str,
        cancel_event: threading.Event | None = None,
    ) -> SummarizationOutcome:
        """Runs the whole pipeline, handing the Transcript straight to summarization."""
        transcript = self.transcribe(session_id, file_name, data, content_type, cancel_event)
        return self.summarize(transcript, user_id, file_name, cancel_event)

    def list_minutes(self, user_id: str) -> list[MinutesEntry]:
        if not user_id or not user_id.strip():
            raise InputValidationError("user_id", "must not be empty")
        return self._repository.list_all(user_id)


@contextmanager
def _stage_logging(session_id: str):
    """Logs the failing stage of any pipeline error before it propagates."""
    try:
        yield
    except MinutesPipelineError as e:
        logger.error(
            "Pipeline stage failed",
            extra={"session_id": session_id, "stage": e.stage, "error": str(e)},
        )
        raise
