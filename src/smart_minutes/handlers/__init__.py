"""Pipeline handlers."""

from smart_minutes.handlers.document_publisher import DocumentPublisher
from smart_minutes.handlers.ingestion_handler import AudioIngestor
from smart_minutes.handlers.minutes_pipeline import MinutesPipeline
from smart_minutes.handlers.summarization_handler import SummarizationFanOut
from smart_minutes.handlers.transcription_handler import (
    RecognitionSettings,
    TranscriptionOrchestrator,
)

__all__ = [
    "AudioIngestor",
    "DocumentPublisher",
    "MinutesPipeline",
    "RecognitionSettings",
    "SummarizationFanOut",
    "TranscriptionOrchestrator",
]
