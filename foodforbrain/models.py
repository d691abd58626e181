from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, field_validator


ReactionType = Literal["like", "bookmark", "read_later"]


class ExtractedArticle(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    image: Optional[str] = None
    author: Optional[str] = None


class PagePreview(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None


_HTTP_URL = TypeAdapter(HttpUrl)


class ShareRequest(BaseModel):
    url: str = Field(description="Absolute http(s) URL, stored exactly as submitted")
    shared_by: str = Field(description="Identifier of the sharing user")

    @field_validator("url")
    @classmethod
    def _validate_url(cls, value: str) -> str:
        # HttpUrl would normalize (e.g. add a trailing slash); keep the raw string
        _HTTP_URL.validate_python(value)
        return value


class ShareResponse(BaseModel):
    message: str
    article_id: int


class ArticleResponse(BaseModel):
    id: int
    url: str
    shared_by: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    ai_summary: Optional[str] = None
    image_url: Optional[str] = None
    author: Optional[str] = None
    is_processing: bool
    reaction_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Pagination(BaseModel):
    page: int
    limit: int
    has_more: bool


class FeedResponse(BaseModel):
    articles: List[ArticleResponse]
    pagination: Pagination


class ReactionRequest(BaseModel):
    user_id: str
    reaction: str


class CommentRequest(BaseModel):
    user_id: str
    content: str = ""


class CommentResponse(BaseModel):
    id: int
    article_id: int
    user_id: str
    content: str
    created_at: Optional[datetime] = None
