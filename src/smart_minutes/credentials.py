"""Service account credential sources for the document host."""

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path

from smart_minutes.logging import setup_logging

logger = setup_logging()


class CredentialSource(ABC):
    """Abstract source of a service account key as parsed JSON."""

    @abstractmethod
    def load(self) -> dict:
        """
        Returns the service account key.

        Raises:
            ValueError: If the key is missing or is not a JSON object.
        """
        pass


class EnvironmentCredentialSource(CredentialSource):
    """Reads the key JSON from a named environment variable."""

    def __init__(self, variable: str):
        self._variable = variable

    def load(self) -> dict:
        raw = os.getenv(self._variable)
        if not raw:
            raise ValueError(f"Environment variable '{self._variable}' is not set")
        return _parse(raw, f"environment variable '{self._variable}'")


class FileCredentialSource(CredentialSource):
    """Reads the key JSON from a mounted file."""

    def __init__(self, path: Path):
        self._path = path

    def load(self) -> dict:
        if not self._path.is_file():
            raise ValueError(f"Credential file '{self._path}' does not exist")
        return _parse(self._path.read_text(encoding="utf-8"), f"file '{self._path}'")


class InlineCredentialSource(CredentialSource):
    """Uses key JSON passed directly in configuration."""

    def __init__(self, raw_json: str):
        self._raw_json = raw_json

    def load(self) -> dict:
        return _parse(self._raw_json, "inline configuration")


def credential_source_for(kind: str, value: str) -> CredentialSource:
    """
    Selects the credential source named by configuration.

    Args:
        kind: One of ``env``, ``file`` or ``inline``.
        value: Variable name, file path or JSON text respectively.

    Raises:
        ValueError: If ``kind`` is unknown.
    """
    if kind == "env":
        return EnvironmentCredentialSource(value)
    if kind == "file":
        return FileCredentialSource(Path(value))
    if kind == "inline":
        return InlineCredentialSource(value)
    raise ValueError(f"Unknown credential source '{kind}'")


def _parse(raw: str, origin: str) -> dict:
    try:
        info = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error("Credential JSON is malformed", extra={"origin": origin})
        raise ValueError(f"Credentials from {origin} are not valid JSON") from e
    if not isinstance(info, dict):
        raise ValueError(f"Credentials from {origin} must be a JSON object")
    return info
