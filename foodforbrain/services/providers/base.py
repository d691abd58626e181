from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class GenerationRequest:
    """A single chat-style generation call."""

    system: str
    user: str
    max_tokens: int = 200
    temperature: float = 0.7


class SummaryProvider(ABC):
    """Base class for summary generation providers.

    Providers only handle the model call (messages in -> text out). Prompt
    construction and fallback behavior live in the Summarizer.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier (e.g., 'openai', 'huggingface')"""
        pass

    @abstractmethod
    async def generate(self, request: GenerationRequest) -> str:
        """Generate a completion for the request.

        Returns:
            Generated text (may be empty if the model returned nothing)

        Raises:
            SummarizationError: If the call fails
        """
        pass
