"""articles, reactions and comments

Revision ID: 0001_create_articles
Revises: 
Create Date: 2026-10-18
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_create_articles'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'articles',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('url', sa.Text(), nullable=False, unique=True),
        sa.Column('shared_by', sa.String(), nullable=True),
        sa.Column('title', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('ai_summary', sa.Text(), nullable=True),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('author', sa.Text(), nullable=True),
        sa.Column('is_processing', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
    )
    op.create_index('idx_articles_created_at', 'articles', ['created_at'])
    op.create_index('idx_articles_shared_by', 'articles', ['shared_by'])

    op.create_table(
        'article_reactions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('article_id', sa.Integer(), sa.ForeignKey('articles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('reaction', sa.String(length=32), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.UniqueConstraint('article_id', 'user_id', 'reaction', name='uq_article_reaction_identity'),
    )
    op.create_index('idx_article_reactions_article', 'article_reactions', ['article_id'])

    op.create_table(
        'comments',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('article_id', sa.Integer(), sa.ForeignKey('articles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
    )
    op.create_index('idx_comments_article', 'comments', ['article_id'])


def downgrade() -> None:
    op.drop_index('idx_comments_article', table_name='comments')
    op.drop_table('comments')
    op.drop_index('idx_article_reactions_article', table_name='article_reactions')
    op.drop_table('article_reactions')
    op.drop_index('idx_articles_shared_by', table_name='articles')
    op.drop_index('idx_articles_created_at', table_name='articles')
    op.drop_table('articles')
