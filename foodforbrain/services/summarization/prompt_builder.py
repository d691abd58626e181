"""Prompt building for feed summaries."""
from __future__ import annotations

from textwrap import dedent
from typing import Optional

# Characters of article body sent to the model
PROMPT_CONTENT_CHARS = 3000


class PromptBuilder:
    """Builds the system instructions and user message for a summary call."""

    def __init__(self, language: str = "French", instructions: Optional[str] = None):
        """
        Args:
            language: Language the summary must be written in
            instructions: System instructions override. If None, uses default.
        """
        self.language = language
        self._instructions = instructions or self._build_default_instructions()

    @property
    def instructions(self) -> str:
        return self._instructions

    def _build_default_instructions(self) -> str:
        return dedent(
            f"""
            You are an assistant that summarizes articles concisely and engagingly for a social network shared between friends.

            Instructions:
            - Summarize the article in 2-3 sentences at most (80-120 words).
            - Use a friendly, approachable tone.
            - Highlight the most interesting or surprising points.
            - End with a question or a thought that invites discussion.
            - Write in {self.language}.
            - Avoid technical jargon unless it is necessary.
            """
        ).strip()

    def build_user_message(self, content: str) -> str:
        return f"Summarize this article: {content[:PROMPT_CONTENT_CHARS]}"
