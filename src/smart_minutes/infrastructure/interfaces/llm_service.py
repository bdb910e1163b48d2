"""Abstract interface for LLM service operations."""

from abc import ABC, abstractmethod


class LLMService(ABC):
    """Abstract base class for LLM backends."""

    @abstractmethod
    def complete(self, system_instruction: str, user_prompt: str, temperature: float) -> str:
        """
        Generates text for a prompt.

        Args:
            system_instruction: Instruction framing the model's behavior.
            user_prompt: The prompt to complete.
            temperature: Sampling temperature.

        Returns:
            The generated text.

        Raises:
            CompletionError: If the LLM call fails or returns nothing.
        """
        pass
