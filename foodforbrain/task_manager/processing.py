from __future__ import annotations

import logging
import queue
from dataclasses import dataclass
from typing import TYPE_CHECKING

from foodforbrain.storage import ArticleStorageProvider

from .base import BackgroundTaskManager

if TYPE_CHECKING:
    from foodforbrain.services.processor import ArticleProcessor

logger = logging.getLogger(__name__)


@dataclass
class ProcessArticleTask:
    article_id: int
    url: str


class ArticleProcessingTaskManager(BackgroundTaskManager[ProcessArticleTask]):
    def __init__(
        self,
        processor: "ArticleProcessor",
        *,
        task_queue: "queue.Queue[ProcessArticleTask]" | None = None,
    ) -> None:
        super().__init__(task_queue=task_queue)
        self._processor = processor

    async def process(self, task: ProcessArticleTask) -> None:  # type: ignore[override]
        await self._processor.process(task)


class ShareCoordinator:
    """Entry point for shares: persist the processing record, then enqueue.

    ``submit`` returns as soon as the record exists. Extraction and
    summarization run later on the task manager's worker.
    """

    def __init__(
        self,
        storage: ArticleStorageProvider,
        task_manager: BackgroundTaskManager[ProcessArticleTask],
    ) -> None:
        self.storage = storage
        self.task_manager = task_manager

    def submit(self, url: str, owner_id: str) -> int:
        """
        Raises:
            DuplicateUrlError: If the URL was already shared; nothing is enqueued
        """
        article_id = self.storage.create_processing_record(url, owner_id)
        try:
            self.task_manager.submit(ProcessArticleTask(article_id=article_id, url=url))
        except Exception:
            logger.error(
                "Failed to enqueue article processing",
                extra={"article_id": article_id, "url": url},
                exc_info=True,
            )
            self.storage.fail_record(article_id)
            raise

        logger.info(
            "Article queued for processing",
            extra={"article_id": article_id, "url": url, "shared_by": owner_id},
        )
        return article_id
