"""
SQLAlchemy Article Storage Implementation

Backs the share pipeline with the relational schema from db.models. Works
against PostgreSQL in production and SQLite in tests.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from foodforbrain.core.exceptions import ArticleNotFoundError, DuplicateUrlError
from foodforbrain.db.models import Article, ArticleReaction, Comment
from foodforbrain.db.session import get_sessionmaker, session_scope

from .article_storage import (
    ArticleFields,
    ArticleRecord,
    ArticleStorageProvider,
    CommentRecord,
)

logger = logging.getLogger(__name__)


class SqlArticleStorage(ArticleStorageProvider):
    """Relational storage provider built on SQLAlchemy sessions."""

    def __init__(self, session_factory: Optional[sessionmaker[Session]] = None):
        """
        Args:
            session_factory: Optional sessionmaker; defaults to the engine
                configured from settings
        """
        self._session_factory = session_factory or get_sessionmaker()

    def _session(self):
        return session_scope(self._session_factory)

    # ==================== Processing Lifecycle ====================

    def create_processing_record(self, url: str, owner_id: str) -> int:
        try:
            with self._session() as session:
                existing = session.execute(
                    select(Article.id).where(Article.url == url)
                ).scalar_one_or_none()
                if existing is not None:
                    raise DuplicateUrlError(url)

                article = Article(url=url, shared_by=owner_id, is_processing=True)
                session.add(article)
                session.flush()
                article_id = int(article.id)
        except IntegrityError as exc:
            # Lost the race against a concurrent share of the same URL
            logger.info("Duplicate URL rejected by constraint", extra={"url": url})
            raise DuplicateUrlError(url) from exc

        logger.info(
            "Created processing record",
            extra={"article_id": article_id, "url": url, "shared_by": owner_id},
        )
        return article_id

    def complete_record(self, article_id: int, fields: ArticleFields) -> bool:
        stmt = (
            update(Article)
            .where(Article.id == article_id, Article.is_processing.is_(True))
            .values(
                title=fields.title,
                description=fields.description,
                content=fields.content,
                ai_summary=fields.summary,
                image_url=fields.image,
                author=fields.author,
                is_processing=False,
                updated_at=datetime.utcnow(),
            )
        )
        with self._session() as session:
            result = session.execute(stmt)
            return result.rowcount > 0

    def fail_record(self, article_id: int) -> bool:
        stmt = (
            update(Article)
            .where(Article.id == article_id, Article.is_processing.is_(True))
            .values(is_processing=False, updated_at=datetime.utcnow())
        )
        with self._session() as session:
            result = session.execute(stmt)
            return result.rowcount > 0

    # ==================== Read Operations ====================

    def get_article(self, article_id: int) -> Optional[ArticleRecord]:
        with self._session() as session:
            row = session.execute(
                self._article_query().where(Article.id == article_id)
            ).first()
            if row is None:
                return None
            return self._to_record(*row)

    def list_articles(self, *, limit: int = 20, offset: int = 0) -> List[ArticleRecord]:
        with self._session() as session:
            rows = session.execute(
                self._article_query()
                .order_by(Article.created_at.desc(), Article.id.desc())
                .limit(limit)
                .offset(offset)
            ).all()
            return [self._to_record(article, count) for article, count in rows]

    # ==================== Social Operations ====================

    def add_reaction(self, article_id: int, user_id: str, reaction: str) -> bool:
        try:
            with self._session() as session:
                self._require_article(session, article_id)
                if self._reaction_exists(session, article_id, user_id, reaction):
                    return False
                session.add(
                    ArticleReaction(article_id=article_id, user_id=user_id, reaction=reaction)
                )
                return True
        except IntegrityError:
            # A concurrent identical reaction committed first
            logger.info(
                "Duplicate reaction rejected by constraint",
                extra={"article_id": article_id, "user_id": user_id, "reaction": reaction},
            )
            return False

    def _reaction_exists(
        self, session: Session, article_id: int, user_id: str, reaction: str
    ) -> bool:
        existing = session.execute(
            select(ArticleReaction.id).where(
                ArticleReaction.article_id == article_id,
                ArticleReaction.user_id == user_id,
                ArticleReaction.reaction == reaction,
            )
        ).scalar_one_or_none()
        return existing is not None

    def add_comment(self, article_id: int, user_id: str, content: str) -> CommentRecord:
        with self._session() as session:
            self._require_article(session, article_id)
            comment = Comment(article_id=article_id, user_id=user_id, content=content)
            session.add(comment)
            session.flush()
            session.refresh(comment)
            return self._to_comment(comment)

    def list_comments(self, article_id: int) -> List[CommentRecord]:
        with self._session() as session:
            rows = session.execute(
                select(Comment)
                .where(Comment.article_id == article_id)
                .order_by(Comment.created_at.asc(), Comment.id.asc())
            ).scalars()
            return [self._to_comment(comment) for comment in rows]

    # ==================== Helpers ====================

    @staticmethod
    def _article_query():
        reaction_count = (
            select(func.count(ArticleReaction.id))
            .where(ArticleReaction.article_id == Article.id)
            .correlate(Article)
            .scalar_subquery()
        )
        return select(Article, reaction_count)

    @staticmethod
    def _require_article(session: Session, article_id: int) -> None:
        if session.get(Article, article_id) is None:
            raise ArticleNotFoundError(article_id)

    @staticmethod
    def _to_record(article: Article, reaction_count: Optional[int]) -> ArticleRecord:
        return ArticleRecord(
            id=int(article.id),
            url=article.url,
            shared_by=article.shared_by,
            is_processing=bool(article.is_processing),
            title=article.title,
            description=article.description,
            content=article.content,
            summary=article.ai_summary,
            image_url=article.image_url,
            author=article.author,
            reaction_count=int(reaction_count or 0),
            created_at=article.created_at,
            updated_at=article.updated_at,
        )

    @staticmethod
    def _to_comment(comment: Comment) -> CommentRecord:
        return CommentRecord(
            id=int(comment.id),
            article_id=int(comment.article_id),
            user_id=comment.user_id,
            content=comment.content,
            created_at=comment.created_at,
        )
