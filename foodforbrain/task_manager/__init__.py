from .base import BackgroundTaskManager
from .processing import ArticleProcessingTaskManager, ProcessArticleTask, ShareCoordinator

__all__ = [
    "BackgroundTaskManager",
    "ArticleProcessingTaskManager",
    "ProcessArticleTask",
    "ShareCoordinator",
]
