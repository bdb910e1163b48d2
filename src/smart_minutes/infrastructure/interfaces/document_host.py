"""Abstract interface for shared document hosting."""

from abc import ABC, abstractmethod


class DocumentHost(ABC):
    """Abstract base class for file hosting services with link sharing."""

    @abstractmethod
    def upload(self, parent_folder_id: str, file_name: str, mime_type: str, data: bytes) -> str:
        """
        Uploads a file into a folder.

        Returns:
            The hosted file's identifier.

        Raises:
            DocumentHostError: If the upload is not confirmed.
        """
        pass

    @abstractmethod
    def share_publicly(self, file_id: str) -> str:
        """
        Grants anyone with the link read access.

        Returns:
            The shareable link for the file.

        Raises:
            DocumentHostError: If the permission grant fails.
        """
        pass

    @abstractmethod
    def delete(self, file_id: str) -> None:
        """
        Removes a hosted file.

        Raises:
            DocumentHostError: If the file cannot be deleted.
        """
        pass
