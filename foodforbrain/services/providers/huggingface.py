from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from huggingface_hub import AsyncInferenceClient

from foodforbrain.core.exceptions import SummarizationError

from .base import GenerationRequest, SummaryProvider

if TYPE_CHECKING:
    from foodforbrain.core.config import HuggingFaceProviderSettings

logger = logging.getLogger(__name__)


class HuggingFaceProvider(SummaryProvider):
    """HuggingFace Inference / TGI provider using the chat completion API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        model: Optional[str] = None,
    ):
        """
        Args:
            base_url: Inference endpoint URL (without /v1 suffix); None uses
                the hosted Inference API with ``model``
            token: Optional API token
            model: Model id, required when no endpoint is given
        """
        self._base_url = base_url
        self._token = token
        self._model = model

    @classmethod
    def from_settings(
        cls, settings: "HuggingFaceProviderSettings"
    ) -> Optional["HuggingFaceProvider"]:
        """Create provider from configuration settings.

        Returns:
            Configured provider, or None if neither endpoint nor model is set
        """
        base = (settings.api_base or "").strip()
        if base.endswith("/v1"):
            base = base[:-3]
        model = (settings.model or "").strip() or None
        if not base and not model:
            return None

        token = settings.api_key
        if not token or token == "-":
            token = None

        return cls(base_url=base or None, token=token, model=model)

    @property
    def name(self) -> str:
        return "huggingface"

    async def generate(self, request: GenerationRequest) -> str:
        messages = [
            {"role": "system", "content": request.system},
            {"role": "user", "content": request.user},
        ]
        try:
            async with AsyncInferenceClient(
                self._base_url or self._model, token=self._token
            ) as client:
                output = await client.chat_completion(
                    messages,
                    max_tokens=request.max_tokens,
                    temperature=request.temperature,
                )
        except Exception as exc:
            raise SummarizationError(str(exc) or exc.__class__.__name__, provider=self.name) from exc
        return self._coerce_generated_text(output)

    @staticmethod
    def _coerce_generated_text(raw: Any) -> str:
        """Extract message text from chat completion output."""
        if raw is None:
            return ""
        try:
            content = raw.choices[0].message.content
        except (AttributeError, IndexError, TypeError):
            content = None
        if content is None and isinstance(raw, dict):
            try:
                content = raw["choices"][0]["message"]["content"]
            except (KeyError, IndexError, TypeError):
                content = None
        return (content or "").strip()
