"""Background processing of a shared article: extract, summarize, persist."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from foodforbrain.core.exceptions import FetchError
from foodforbrain.storage import ArticleFields, ArticleStorageProvider

from .extractor import ArticleExtractor
from .summarizer import Summarizer

if TYPE_CHECKING:
    from foodforbrain.task_manager.processing import ProcessArticleTask

logger = logging.getLogger(__name__)


class ArticleProcessor:
    """Drives one processing record to exactly one terminal state.

    Success writes the extracted fields and summary through
    ``complete_record``; any failure along the way goes through
    ``fail_record``. Storage calls are blocking and run in a thread.
    """

    def __init__(
        self,
        storage: ArticleStorageProvider,
        extractor: ArticleExtractor,
        summarizer: Summarizer,
    ) -> None:
        self.storage = storage
        self.extractor = extractor
        self.summarizer = summarizer

    async def process(self, task: "ProcessArticleTask") -> bool:
        """Returns True if the record reached the populated state."""
        started = time.monotonic()
        log_extra = {"article_id": task.article_id, "url": task.url}

        try:
            article = await self.extractor.extract(task.url)
        except FetchError as exc:
            logger.warning(
                "Article fetch failed",
                extra={**log_extra, "error": str(exc), "status_code": exc.status_code},
            )
            await self._fail(task)
            return False
        except Exception:
            logger.error("Article extraction raised", extra=log_extra, exc_info=True)
            await self._fail(task)
            return False

        try:
            summary = await self.summarizer.summarize(
                article.content or article.description or ""
            )
            fields = ArticleFields(
                title=article.title,
                description=article.description,
                content=article.content,
                summary=summary,
                image=article.image,
                author=article.author,
            )
            completed = await asyncio.to_thread(
                self.storage.complete_record, task.article_id, fields
            )
        except Exception:
            logger.error("Failed to complete article", extra=log_extra, exc_info=True)
            await self._fail(task)
            return False

        if not completed:
            logger.warning("Article was no longer processing; result discarded", extra=log_extra)
            return False

        logger.info(
            "Article processed",
            extra={
                **log_extra,
                "has_content": article.content is not None,
                "duration_ms": int((time.monotonic() - started) * 1000),
            },
        )
        return True

    async def _fail(self, task: "ProcessArticleTask") -> None:
        try:
            await asyncio.to_thread(self.storage.fail_record, task.article_id)
        except Exception:
            logger.error(
                "Failed to mark article as failed",
                extra={"article_id": task.article_id, "url": task.url},
                exc_info=True,
            )
