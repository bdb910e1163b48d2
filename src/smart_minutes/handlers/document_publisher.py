"""Handler rendering summaries into shared documents."""

import os
from collections.abc import Callable
from datetime import datetime, timezone

from smart_minutes.domain.document_renderer import DOCX_MIME_TYPE, render_document
from smart_minutes.exceptions import DocumentHostError, PublishFailedError
from smart_minutes.infrastructure.interfaces import DocumentHost
from smart_minutes.logging import setup_logging

logger = setup_logging()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentPublisher:
    """Renders, uploads and publicly shares one summary document."""

    def __init__(
        self,
        host: DocumentHost,
        parent_folder_id: str,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._host = host
        self._parent_folder_id = parent_folder_id
        self._clock = clock

    def document_name(self, audio_file_name: str, template_name: str) -> str:
        """Derives ``<audio base name>_<template>_<YYYYMMDD-HHMMSS>.docx``."""
        base_name = os.path.splitext(os.path.basename(audio_file_name))[0] or "meeting"
        timestamp = self._clock().strftime("%Y%m%d-%H%M%S")
        return f"{base_name}_{template_name}_{timestamp}.docx"

    def publish(self, text: str, template_name: str, audio_file_name: str) -> str:
        """
        Publishes a summary and returns its shareable link.

        A file that uploads but cannot be shared is deleted, and the publish
        fails as a whole.

        Raises:
            PublishFailedError: If rendering, upload or the permission grant fails.
        """
        file_name = self.document_name(audio_file_name, template_name)

        try:
            content = render_document(text)
        except Exception as e:
            logger.exception("Document rendering failed", extra={"file_name": file_name})
            raise PublishFailedError(file_name, e) from e

        try:
            file_id = self._host.upload(
                self._parent_folder_id, file_name, DOCX_MIME_TYPE, content
            )
        except DocumentHostError as e:
            raise PublishFailedError(file_name, e) from e

        try:
            link = self._host.share_publicly(file_id)
        except DocumentHostError as e:
            self._discard(file_id, file_name)
            raise PublishFailedError(file_name, e) from e

        logger.info(
            "Document published",
            extra={"file_name": file_name, "file_id": file_id, "template": template_name},
        )
        return link

    def _discard(self, file_id: str, file_name: str) -> None:
        try:
            self._host.delete(file_id)
        except DocumentHostError:
            logger.exception(
                "Unshared document could not be removed",
                extra={"file_id": file_id, "file_name": file_name},
            )
