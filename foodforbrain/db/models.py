from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
    text as sa_text,
)
from sqlalchemy.orm import declarative_base


Base = declarative_base()


class Article(Base):
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # One row per URL; the constraint closes the check-then-insert race on share
    url = Column(Text, nullable=False, unique=True)
    shared_by = Column(String, nullable=True)
    title = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    content = Column(Text, nullable=True)
    ai_summary = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    author = Column(Text, nullable=True)
    is_processing = Column(Boolean, nullable=False, server_default=sa_text("true"))
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())

    __table_args__ = (
        Index("idx_articles_created_at", "created_at"),
        Index("idx_articles_shared_by", "shared_by"),
    )


class ArticleReaction(Base):
    __tablename__ = "article_reactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    article_id = Column(
        Integer,
        ForeignKey("articles.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = Column(String, nullable=False)
    reaction = Column(String(length=32), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint(
            "article_id", "user_id", "reaction", name="uq_article_reaction_identity"
        ),
        Index("idx_article_reactions_article", "article_id"),
    )


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    article_id = Column(
        Integer,
        ForeignKey("articles.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    __table_args__ = (
        Index("idx_comments_article", "article_id"),
    )
