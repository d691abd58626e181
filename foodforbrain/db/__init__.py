"""DB package assembling models and session helpers."""

from .models import Article, ArticleReaction, Base, Comment
from .session import get_engine, get_sessionmaker, session_scope

__all__ = [
    "Article",
    "ArticleReaction",
    "Base",
    "Comment",
    "get_engine",
    "get_sessionmaker",
    "session_scope",
]
