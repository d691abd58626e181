from .article_storage import (
    ArticleFields,
    ArticleRecord,
    ArticleStorageProvider,
    CommentRecord,
)
from .sql_storage import SqlArticleStorage

__all__ = [
    "ArticleFields",
    "ArticleRecord",
    "ArticleStorageProvider",
    "CommentRecord",
    "SqlArticleStorage",
]
