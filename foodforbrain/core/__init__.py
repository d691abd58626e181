"""Core utilities: configuration, logging, and shared exceptions."""

from .config import AppSettings, get_settings
from .exceptions import (
    ArticleNotFoundError,
    DuplicateUrlError,
    FetchError,
    FoodForBrainError,
    SummarizationError,
)

__all__ = [
    "AppSettings",
    "get_settings",
    "ArticleNotFoundError",
    "DuplicateUrlError",
    "FetchError",
    "FoodForBrainError",
    "SummarizationError",
]
