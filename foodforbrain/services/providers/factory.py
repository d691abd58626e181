"""Provider factory for creating summary providers from configuration."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from .base import SummaryProvider
from .chain import ProviderChain
from .huggingface import HuggingFaceProvider
from .openai import OpenAIProvider

if TYPE_CHECKING:
    from foodforbrain.core.config import SummarizationSettings

logger = logging.getLogger(__name__)


class ProviderFactory:
    """Factory for creating summary providers from configuration.

    Handles provider-specific construction logic and error collection.
    """

    def __init__(self, settings: "SummarizationSettings"):
        self.settings = settings
        self._errors: list[tuple[str, str]] = []

    @property
    def errors(self) -> list[tuple[str, str]]:
        """(provider_name, error_message) tuples from creation attempts."""
        return self._errors.copy()

    def create_openai(self) -> Optional[SummaryProvider]:
        provider = OpenAIProvider.from_settings(self.settings.openai)
        if provider is None:
            self._record_error("openai", "OPENAI_API_KEY is not configured")
        return provider

    def create_huggingface(self) -> Optional[SummaryProvider]:
        provider = HuggingFaceProvider.from_settings(self.settings.huggingface)
        if provider is None:
            self._record_error(
                "huggingface",
                "Neither SUMMARIZATION_API_BASE nor HUGGINGFACE_MODEL is configured",
            )
        return provider

    def create_provider(self, provider_name: str) -> Optional[SummaryProvider]:
        """Create provider by name; None if creation failed or name unknown."""
        name = provider_name.strip().lower()
        try:
            if name == "openai":
                return self.create_openai()
            if name == "huggingface":
                return self.create_huggingface()
        except Exception as exc:
            self._errors.append((name, str(exc)))
            logger.error(
                "Exception creating provider",
                extra={"provider": name, "error": str(exc)},
                exc_info=True,
            )
            return None

        self._errors.append((name, f"Unknown provider: {name}"))
        logger.error("Unknown provider requested", extra={"provider": name})
        return None

    def create_all_configured(self) -> list[SummaryProvider]:
        """Create all providers listed in settings.providers.

        Raises:
            ValueError: If no providers could be created
        """
        providers: list[SummaryProvider] = []
        for provider_name in self.settings.providers:
            provider = self.create_provider(provider_name)
            if provider is not None:
                providers.append(provider)
                logger.info("Created provider", extra={"provider": provider.name})

        if not providers:
            error_summary = "; ".join(f"{name}: {msg}" for name, msg in self._errors)
            raise ValueError(f"Failed to create any providers. Errors: {error_summary}")

        if self._errors:
            logger.warning(
                "Some providers failed to create",
                extra={
                    "success_count": len(providers),
                    "failure_count": len(self._errors),
                    "errors": self._errors,
                },
            )
        return providers

    def create_chain(self) -> ProviderChain:
        """Raises ValueError if no provider could be created."""
        return ProviderChain(self.create_all_configured())

    def _record_error(self, name: str, message: str) -> None:
        self._errors.append((name, message))
        logger.warning("Provider not configured", extra={"provider": name, "error": message})
