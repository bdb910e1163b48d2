"""Transcription, summarization and minutes listing endpoints."""

import threading
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Form, HTTPException, UploadFile

from smart_minutes.dependencies import get_pipeline, get_shutdown_event
from smart_minutes.exceptions import (
    InputValidationError,
    MinutesPipelineError,
    PersistenceError,
    ServiceNotReadyError,
    SummarizationFailedError,
    TranscriptNotFoundError,
    UpstreamServiceError,
)
from smart_minutes.handlers import MinutesPipeline
from smart_minutes.logging import setup_logging
from smart_minutes.response_models import (
    SummarizeRequest,
    SummarizeResponse,
    TranscriptResponse,
)

logger = setup_logging()

router = APIRouter(tags=["minutes"])


def _pipeline_dependency() -> MinutesPipeline:
    try:
        return get_pipeline()
    except ServiceNotReadyError as e:
        raise _failure(503, e)


PipelineDep = Annotated[MinutesPipeline, Depends(_pipeline_dependency)]
ShutdownDep = Annotated[threading.Event, Depends(get_shutdown_event)]


def _failure(status_code: int, error: MinutesPipelineError) -> HTTPException:
    detail: dict[str, Any] = {
        "status": "failed",
        "stage": error.stage,
        "message": str(error),
    }
    if isinstance(error, SummarizationFailedError):
        detail["templates"] = error.failures
    return HTTPException(status_code=status_code, detail=detail)


def _status_for(error: MinutesPipelineError) -> int:
    if isinstance(error, InputValidationError):
        return 422
    if isinstance(error, TranscriptNotFoundError):
        return 404
    if isinstance(error, UpstreamServiceError):
        return 502
    if isinstance(error, PersistenceError):
        return 500
    return 500


@router.post("/transcribe", response_model=TranscriptResponse)
def transcribe(
    file: UploadFile,
    pipeline: PipelineDep,
    shutdown: ShutdownDep,
    session_id: str = Form(..., alias="sessionId", min_length=1),
) -> TranscriptResponse:
    """
    Transcribes an uploaded meeting recording.

    Stores the audio, runs diarized recognition and correction, and keeps the
    transcript under the session id for a later summarization request.
    """
    if file.content_type and not file.content_type.startswith("audio/"):
        raise HTTPException(status_code=422, detail="File must be an audio file")

    logger.info(
        "Received transcription request",
        extra={"file_name": file.filename, "session_id": session_id},
    )

    try:
        transcript = pipeline.transcribe(
            session_id=session_id,
            file_name=file.filename or "",
            data=file.file.read(),
            content_type=file.content_type or "application/octet-stream",
            cancel_event=shutdown,
        )
    except MinutesPipelineError as e:
        raise _failure(_status_for(e), e)

    return TranscriptResponse.from_transcript(transcript)


@router.post("/summarize", response_model=SummarizeResponse)
def summarize(
    request: SummarizeRequest, pipeline: PipelineDep, shutdown: ShutdownDep
) -> SummarizeResponse:
    """Summarizes a transcribed session with every template and records the links."""
    logger.info(
        "Received summarization request",
        extra={"session_id": request.session_id, "user_id": request.user_id},
    )

    try:
        outcome = pipeline.summarize_session(
            request.session_id,
            request.user_id,
            request.audio_file_name,
            cancel_event=shutdown,
        )
    except MinutesPipelineError as e:
        raise _failure(_status_for(e), e)

    return SummarizeResponse.from_outcome(outcome)


@router.get("/allminutes/{user_id}")
def list_minutes(user_id: str, pipeline: PipelineDep) -> list[dict[str, Any]]:
    """Returns every minutes record of a user with a stable field set."""
    try:
        entries = pipeline.list_minutes(user_id)
    except MinutesPipelineError as e:
        raise _failure(_status_for(e), e)
    except Exception as e:
        logger.error(f"Error listing minutes for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    field_keys = pipeline.field_keys
    return [entry.to_response(field_keys) for entry in entries]
