from .base import GenerationRequest, SummaryProvider
from .chain import ProviderChain
from .factory import ProviderFactory
from .huggingface import HuggingFaceProvider
from .openai import OpenAIProvider

__all__ = [
    "GenerationRequest",
    "SummaryProvider",
    "ProviderChain",
    "ProviderFactory",
    "HuggingFaceProvider",
    "OpenAIProvider",
]
