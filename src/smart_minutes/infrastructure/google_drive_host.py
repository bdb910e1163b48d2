"""Google Drive implementation of the DocumentHost interface."""

import io

from googleapiclient.http import MediaIoBaseUpload

from smart_minutes.exceptions import DocumentHostError
from smart_minutes.infrastructure.interfaces import DocumentHost
from smart_minutes.logging import setup_logging

logger = setup_logging()

SHARE_LINK_TEMPLATE = "https://drive.google.com/file/d/{file_id}/view?usp=sharing"


class GoogleDriveHost(DocumentHost):
    """Publishes documents to a Google Drive folder."""

    def __init__(self, service):
        """
        Args:
            service: A Drive v3 resource from ``googleapiclient.discovery.build``.
        """
        self._service = service

    def upload(self, parent_folder_id: str, file_name: str, mime_type: str, data: bytes) -> str:
        media = MediaIoBaseUpload(io.BytesIO(data), mimetype=mime_type, resumable=False)
        try:
            created = (
                self._service.files()
                .create(
                    body={"name": file_name, "parents": [parent_folder_id]},
                    media_body=media,
                    fields="id",
                    supportsAllDrives=True,
                )
                .execute()
            )
        except Exception as e:
            logger.exception("Drive upload failed", extra={"file_name": file_name})
            raise DocumentHostError("upload", file_name, e) from e

        file_id = created.get("id")
        if not file_id:
            logger.error("Drive upload returned no file id", extra={"file_name": file_name})
            raise DocumentHostError("upload", file_name)

        logger.info(
            "File uploaded to Drive",
            extra={"file_name": file_name, "file_id": file_id, "folder_id": parent_folder_id},
        )
        return file_id

    def share_publicly(self, file_id: str) -> str:
        try:
            self._service.permissions().create(
                fileId=file_id,
                body={"type": "anyone", "role": "reader"},
                supportsAllDrives=True,
            ).execute()
        except Exception as e:
            logger.exception("Drive permission grant failed", extra={"file_id": file_id})
            raise DocumentHostError("share", file_id, e) from e

        logger.info("File shared publicly", extra={"file_id": file_id})
        return SHARE_LINK_TEMPLATE.format(file_id=file_id)

    def delete(self, file_id: str) -> None:
        try:
            self._service.files().delete(fileId=file_id, supportsAllDrives=True).execute()
        except Exception as e:
            logger.exception("Drive delete failed", extra={"file_id": file_id})
            raise DocumentHostError("delete", file_id, e) from e
        logger.info("File deleted from Drive", extra={"file_id": file_id})
