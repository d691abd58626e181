"""OpenAI-compatible chat completions provider over httpx."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import httpx

from foodforbrain.core.exceptions import SummarizationError

from .base import GenerationRequest, SummaryProvider

if TYPE_CHECKING:
    from foodforbrain.core.config import OpenAIProviderSettings

logger = logging.getLogger(__name__)


class OpenAIProvider(SummaryProvider):
    """Calls ``/v1/chat/completions`` on any OpenAI-compatible endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com",
        model: str = "gpt-3.5-turbo",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        if self.base_url.endswith("/v1"):
            self.base_url = self.base_url[:-3]
        self.model = model
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls, settings: "OpenAIProviderSettings"
    ) -> Optional["OpenAIProvider"]:
        """Build from settings; None when no API key is configured."""
        api_key = (settings.api_key or "").strip()
        if not api_key or api_key == "-":
            return None
        return cls(
            api_key=api_key,
            base_url=settings.base_url,
            model=settings.model,
            timeout=settings.timeout,
        )

    @property
    def name(self) -> str:
        return "openai"

    async def generate(self, request: GenerationRequest) -> str:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": request.system},
                {"role": "user", "content": request.user},
            ],
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    f"{self.base_url}/v1/chat/completions",
                    headers=headers,
                    json=payload,
                )
                response.raise_for_status()
                result = response.json()
        except httpx.HTTPError as exc:
            raise SummarizationError(str(exc) or exc.__class__.__name__, provider=self.name) from exc
        except ValueError as exc:
            raise SummarizationError("invalid JSON response", provider=self.name) from exc

        try:
            content = result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise SummarizationError("unexpected response shape", provider=self.name) from exc

        logger.debug(
            "OpenAI completion received",
            extra={"model": self.model, "length": len(content or "")},
        )
        return (content or "").strip()
