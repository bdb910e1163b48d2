"""Gemini LLM service implementation."""

from google import genai

from smart_minutes.exceptions import CompletionError
from smart_minutes.infrastructure.interfaces import LLMService
from smart_minutes.logging import setup_logging

logger = setup_logging()


class GeminiLLMService(LLMService):
    """LLM service implementation using Google Gemini."""

    def __init__(self, client: genai.Client, model_name: str):
        self._client = client
        self._model_name = model_name

    def complete(self, system_instruction: str, user_prompt: str, temperature: float) -> str:
        try:
            response = self._client.models.generate_content(
                model=self._model_name,
                contents=user_prompt,
                config={
                    "system_instruction": system_instruction,
                    "temperature": temperature,
                },
            )
        except Exception as e:
            logger.exception("Gemini API call failed", extra={"model": self._model_name})
            raise CompletionError(f"Gemini completion failed: {e}", cause=e) from e

        if not response.text:
            logger.error("Gemini returned empty response", extra={"model": self._model_name})
            raise CompletionError("Gemini returned empty response")

        logger.info("LLM completion finished", extra={"model": self._model_name})
        return response.text
