"""Transcription-to-minutes pipeline."""

__version__ = "0.1.0"
