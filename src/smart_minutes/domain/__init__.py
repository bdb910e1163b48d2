"""Domain layer exports."""

from .corrections import FileCorrectionRuleSource, TranscriptCorrector, apply_corrections
from .document_renderer import DOCX_MIME_TYPE, render_document
from .models import (
    AudioAsset,
    CorrectionRule,
    CorrectionRuleSet,
    DiarizationSettings,
    MinutesEntry,
    MinutesRecord,
    ObjectReference,
    RecognitionJob,
    RecognitionRequest,
    RecognizedToken,
    RunStatus,
    SummarizationOutcome,
    SummaryResult,
    SummaryTemplate,
    SummaryTemplateSet,
    Transcript,
    TranscriptSegment,
    TranscriptStatus,
)
from .transcript_builder import TranscriptBuilder

__all__ = [
    "AudioAsset",
    "CorrectionRule",
    "CorrectionRuleSet",
    "DiarizationSettings",
    "MinutesEntry",
    "MinutesRecord",
    "ObjectReference",
    "RecognitionJob",
    "RecognitionRequest",
    "RecognizedToken",
    "RunStatus",
    "SummarizationOutcome",
    "SummaryResult",
    "SummaryTemplate",
    "SummaryTemplateSet",
    "Transcript",
    "TranscriptSegment",
    "TranscriptStatus",
    "TranscriptBuilder",
    "FileCorrectionRuleSource",
    "TranscriptCorrector",
    "apply_corrections",
    "DOCX_MIME_TYPE",
    "render_document",
]
