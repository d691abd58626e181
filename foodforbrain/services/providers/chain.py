from __future__ import annotations

import logging
from typing import List, Tuple

from foodforbrain.core.exceptions import SummarizationError

from .base import GenerationRequest, SummaryProvider

logger = logging.getLogger(__name__)


class ProviderChain:
    """Ordered fallback over providers.

    Each provider gets one attempt per request; the first non-empty result
    wins. The chain holds no per-request state, so a single instance is safe
    to share between concurrently processed articles.
    """

    def __init__(self, providers: List[SummaryProvider]):
        """
        Args:
            providers: Ordered list of providers (first = highest priority)
        """
        if not providers:
            raise ValueError("Provider chain requires at least one provider")
        self.providers = providers

    @property
    def names(self) -> List[str]:
        return [provider.name for provider in self.providers]

    async def generate(self, request: GenerationRequest) -> str:
        """Generate using the first provider that returns text.

        Raises:
            SummarizationError: If every provider failed or returned nothing
        """
        failures: List[Tuple[str, str]] = []
        for provider in self.providers:
            logger.debug("Trying provider", extra={"provider": provider.name})
            try:
                result = await provider.generate(request)
            except Exception as exc:
                failures.append((provider.name, str(exc)))
                logger.warning(
                    "Provider failed, trying next",
                    extra={"provider": provider.name, "error": str(exc)},
                )
                continue

            if result and result.strip():
                logger.info("Provider succeeded", extra={"provider": provider.name})
                return result.strip()

            failures.append((provider.name, "empty response"))
            logger.warning(
                "Provider returned empty response, trying next",
                extra={"provider": provider.name},
            )

        summary = "; ".join(f"{name}: {reason}" for name, reason in failures)
        logger.error("All providers failed", extra={"failures": failures})
        raise SummarizationError(f"All providers failed. {summary}")
