from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, HTTPException, Query, Request

from foodforbrain.core.exceptions import ArticleNotFoundError, DuplicateUrlError
from foodforbrain.models import (
    ArticleResponse,
    CommentRequest,
    CommentResponse,
    FeedResponse,
    PagePreview,
    Pagination,
    ReactionRequest,
    ShareRequest,
    ShareResponse,
)
from foodforbrain.storage import ArticleRecord, ArticleStorageProvider, CommentRecord

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/articles", tags=["articles"])

REACTIONS = ("like", "bookmark", "read_later")


def _storage(request: Request) -> ArticleStorageProvider:
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise HTTPException(status_code=500, detail="storage not initialized")
    return storage


def _to_response(record: ArticleRecord) -> ArticleResponse:
    return ArticleResponse(
        id=record.id,
        url=record.url,
        shared_by=record.shared_by,
        title=record.title,
        description=record.description,
        content=record.content,
        ai_summary=record.summary,
        image_url=record.image_url,
        author=record.author,
        is_processing=record.is_processing,
        reaction_count=record.reaction_count,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _to_comment(record: CommentRecord) -> CommentResponse:
    return CommentResponse(
        id=record.id,
        article_id=record.article_id,
        user_id=record.user_id,
        content=record.content,
        created_at=record.created_at,
    )


@router.post("/share", response_model=ShareResponse, status_code=201)
def share_article(body: ShareRequest, request: Request) -> ShareResponse:
    """Record a shared link and queue it for background processing."""
    coordinator = getattr(request.app.state, "share_coordinator", None)
    if coordinator is None:
        raise HTTPException(status_code=500, detail="share coordinator not initialized")

    url = body.url
    try:
        article_id = coordinator.submit(url, body.shared_by)
    except DuplicateUrlError:
        raise HTTPException(status_code=409, detail="Article already shared")

    return ShareResponse(
        message="Article shared successfully, processing content...",
        article_id=article_id,
    )


@router.get("", response_model=FeedResponse)
def list_feed(
    request: Request,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> FeedResponse:
    records = _storage(request).list_articles(limit=limit, offset=(page - 1) * limit)
    return FeedResponse(
        articles=[_to_response(record) for record in records],
        pagination=Pagination(page=page, limit=limit, has_more=len(records) == limit),
    )


@router.get("/preview", response_model=PagePreview)
async def preview_article(request: Request, url: str = Query(..., min_length=1)) -> PagePreview:
    """Metadata-only preview; falls back to the URL as title."""
    extractor = getattr(request.app.state, "extractor", None)
    if extractor is None:
        raise HTTPException(status_code=500, detail="extractor not initialized")
    return await extractor.peek(url)


@router.get("/{article_id}", response_model=ArticleResponse)
def get_article(article_id: int, request: Request) -> ArticleResponse:
    record = _storage(request).get_article(article_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return _to_response(record)


@router.post("/{article_id}/react")
def react_to_article(article_id: int, body: ReactionRequest, request: Request):
    if body.reaction not in REACTIONS:
        raise HTTPException(status_code=400, detail="Invalid reaction type")
    try:
        _storage(request).add_reaction(article_id, body.user_id, body.reaction)
    except ArticleNotFoundError:
        raise HTTPException(status_code=404, detail="Article not found")
    return {"message": "Reaction added successfully"}


@router.post("/{article_id}/comment", response_model=CommentResponse, status_code=201)
def comment_on_article(article_id: int, body: CommentRequest, request: Request) -> CommentResponse:
    content = body.content.strip()
    if not content:
        raise HTTPException(status_code=400, detail="Comment content is required")
    try:
        record = _storage(request).add_comment(article_id, body.user_id, content)
    except ArticleNotFoundError:
        raise HTTPException(status_code=404, detail="Article not found")
    return _to_comment(record)


@router.get("/{article_id}/comments", response_model=List[CommentResponse])
def list_comments(article_id: int, request: Request) -> List[CommentResponse]:
    storage = _storage(request)
    if storage.get_article(article_id) is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return [_to_comment(record) for record in storage.list_comments(article_id)]
