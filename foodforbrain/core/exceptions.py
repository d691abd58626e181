"""Exception types shared across the extraction pipeline and storage."""
from __future__ import annotations

from typing import Optional


class FoodForBrainError(Exception):
    """Base class for application errors."""


class FetchError(FoodForBrainError):
    """Remote document could not be retrieved (network, timeout, non-2xx)."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        message = f"Failed to fetch {url}: {reason}"
        if status_code is not None:
            message = f"{message} (status {status_code})"
        super().__init__(message)


class SummarizationError(FoodForBrainError):
    """Text-generation call failed or produced nothing usable."""

    def __init__(self, message: str, provider: Optional[str] = None):
        self.provider = provider
        super().__init__(f"{provider}: {message}" if provider else message)


class DuplicateUrlError(FoodForBrainError):
    """An article with this URL has already been shared."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Article already shared: {url}")


class ArticleNotFoundError(FoodForBrainError):
    def __init__(self, article_id: int):
        self.article_id = article_id
        super().__init__(f"Article not found: {article_id}")
