"""
Article Storage Abstraction Layer

Defines the operations the share pipeline and the HTTP routes need from the
persistence backend. Implementations: SqlArticleStorage (SQLAlchemy) and the
in-memory fake used by the test suite.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional


@dataclass
class ArticleFields:
    """Values written back once processing succeeds."""
    title: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    summary: Optional[str] = None
    image: Optional[str] = None
    author: Optional[str] = None


@dataclass
class ArticleRecord:
    """Persisted article as seen by readers of the feed."""
    id: int
    url: str
    shared_by: Optional[str]
    is_processing: bool
    title: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    summary: Optional[str] = None
    image_url: Optional[str] = None
    author: Optional[str] = None
    reaction_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class CommentRecord:
    id: int
    article_id: int
    user_id: str
    content: str
    created_at: Optional[datetime] = None


class ArticleStorageProvider(ABC):
    """
    Abstract base class for article storage providers.

    The processing flag is owned by two writes only: complete_record and
    fail_record. Both apply solely to records still processing, so a record
    reaches exactly one terminal state.
    """

    # ==================== Processing Lifecycle ====================

    @abstractmethod
    def create_processing_record(self, url: str, owner_id: str) -> int:
        """
        Create an article in the processing state.

        Args:
            url: Submitted article URL (unique across the system)
            owner_id: Identifier of the sharing user

        Returns:
            Identity of the new record

        Raises:
            DuplicateUrlError: If an article with this URL already exists
        """
        pass

    @abstractmethod
    def complete_record(self, article_id: int, fields: ArticleFields) -> bool:
        """
        Persist extracted fields and clear the processing flag.

        Returns:
            True if the record transitioned, False if it was unknown or
            already terminal
        """
        pass

    @abstractmethod
    def fail_record(self, article_id: int) -> bool:
        """
        Clear the processing flag leaving content fields untouched.

        Returns:
            True if the record transitioned, False if it was unknown or
            already terminal
        """
        pass

    # ==================== Read Operations ====================

    @abstractmethod
    def get_article(self, article_id: int) -> Optional[ArticleRecord]:
        pass

    @abstractmethod
    def list_articles(self, *, limit: int = 20, offset: int = 0) -> List[ArticleRecord]:
        """Newest first, with reaction counts."""
        pass

    # ==================== Social Operations ====================

    @abstractmethod
    def add_reaction(self, article_id: int, user_id: str, reaction: str) -> bool:
        """
        Record a reaction; re-adding an existing reaction is a no-op.

        Returns:
            True if a new reaction was stored

        Raises:
            ArticleNotFoundError: If the article does not exist
        """
        pass

    @abstractmethod
    def add_comment(self, article_id: int, user_id: str, content: str) -> CommentRecord:
        """
        Raises:
            ArticleNotFoundError: If the article does not exist
        """
        pass

    @abstractmethod
    def list_comments(self, article_id: int) -> List[CommentRecord]:
        """Oldest first."""
        pass
