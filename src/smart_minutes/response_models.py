"""Request and response models for the minutes API."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from smart_minutes.domain.models import SummarizationOutcome, Transcript


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SegmentResponse(_CamelModel):
    speaker_tag: int
    text: str


class TranscriptResponse(_CamelModel):
    """Transcript returned after a successful transcription."""

    session_id: str
    status: str
    text: str
    raw_text: str
    segments: list[SegmentResponse]

    @classmethod
    def from_transcript(cls, transcript: Transcript) -> "TranscriptResponse":
        return cls(
            session_id=transcript.session_id,
            status=transcript.status.value,
            text=transcript.corrected_text,
            raw_text=transcript.raw_text,
            segments=[
                SegmentResponse(speaker_tag=s.speaker_tag, text=s.text)
                for s in transcript.segments
            ],
        )


class SummarizeRequest(_CamelModel):
    session_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    audio_file_name: str = Field(..., min_length=1)


class TemplateResult(_CamelModel):
    template: str
    field_key: str
    status: Literal["succeeded", "failed"]
    link: str | None = None
    failed_stage: str | None = None
    error: str | None = None


class SummarizeResponse(_CamelModel):
    """Per-template outcome of a summarization run."""

    status: str
    session_id: str
    summary_id: str
    links: dict[str, str | None]
    templates: list[TemplateResult]

    @classmethod
    def from_outcome(cls, outcome: SummarizationOutcome) -> "SummarizeResponse":
        return cls(
            status=outcome.status.value,
            session_id=outcome.session_id,
            summary_id=outcome.summary_id,
            links=outcome.links,
            templates=[
                TemplateResult(
                    template=r.template_name,
                    field_key=r.field_key,
                    status="succeeded" if r.succeeded else "failed",
                    link=r.link,
                    failed_stage=r.failed_stage,
                    error=r.error,
                )
                for r in outcome.results
            ],
        )
