"""Feed summary generation with a deterministic fallback."""
from __future__ import annotations

import logging
from typing import Optional

from foodforbrain.core.exceptions import SummarizationError

from .providers import GenerationRequest, ProviderChain
from .summarization import PromptBuilder

logger = logging.getLogger(__name__)

TOO_SHORT_SUMMARY = "Article content too short to summarize."
MIN_SUMMARY_INPUT_CHARS = 100
FALLBACK_SENTENCES = 3


def fallback_summary(content: str) -> str:
    """First three '.'-delimited segments of the untruncated content.

    A trailing period is appended only when three segments were taken.
    """
    parts = content.split(".")[:FALLBACK_SENTENCES]
    return ".".join(parts) + ("." if len(parts) == FALLBACK_SENTENCES else "")


class Summarizer:
    """Produces a short, friendly summary of article text.

    Never raises: model failures and empty output degrade to
    ``fallback_summary`` of the original content.
    """

    def __init__(
        self,
        chain: Optional[ProviderChain],
        *,
        prompt_builder: Optional[PromptBuilder] = None,
        max_tokens: int = 200,
        temperature: float = 0.7,
    ):
        """
        Args:
            chain: Provider chain, or None when summarization is disabled
            prompt_builder: Prompt construction; defaults to French output
            max_tokens: Completion token limit per call
            temperature: Sampling temperature per call
        """
        self.chain = chain
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def summarize(self, content: Optional[str]) -> str:
        if not content or len(content) < MIN_SUMMARY_INPUT_CHARS:
            return TOO_SHORT_SUMMARY

        if self.chain is None:
            logger.debug("No summary provider configured, using fallback")
            return fallback_summary(content)

        request = GenerationRequest(
            system=self.prompt_builder.instructions,
            user=self.prompt_builder.build_user_message(content),
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        try:
            summary = (await self.chain.generate(request)).strip()
            if not summary:
                raise SummarizationError("Empty summary generated")
        except Exception as exc:
            logger.warning(
                "Summary generation failed, using fallback",
                extra={"error": str(exc), "content_length": len(content)},
            )
            return fallback_summary(content)

        logger.info("Summary generated", extra={"length": len(summary)})
        return summary
