from .prompt_builder import PROMPT_CONTENT_CHARS, PromptBuilder

__all__ = ["PROMPT_CONTENT_CHARS", "PromptBuilder"]
