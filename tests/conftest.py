from __future__ import annotations

from typing import Generator

import pytest

from fakes import FakeExtractor, InMemoryArticleStorage, SyncTaskManager
from foodforbrain.models import ExtractedArticle

LONG_CONTENT = (
    "Researchers followed a small group of city gardeners for a whole year. "
    "They found that shared plots changed how neighbours talked to each other. "
    "Several streets now run their own seed exchanges every spring. "
    "Local councils are starting to pay attention."
)


@pytest.fixture
def storage() -> InMemoryArticleStorage:
    return InMemoryArticleStorage()


@pytest.fixture
def extracted_article() -> ExtractedArticle:
    return ExtractedArticle(
        title="City gardens bring neighbours together",
        description="A year with urban gardeners.",
        content=LONG_CONTENT,
        image="https://example.com/garden.jpg",
        author="Jane Doe",
    )


@pytest.fixture
def fake_extractor(extracted_article: ExtractedArticle) -> FakeExtractor:
    return FakeExtractor(extracted_article)


@pytest.fixture
def api_client(storage, fake_extractor) -> Generator:
    """TestClient over the real app with fakes installed on app.state.

    The lifespan is not entered, so no database or worker thread is created.
    """
    from fastapi.testclient import TestClient

    from foodforbrain.server import app
    from foodforbrain.services import ArticleProcessor, Summarizer
    from foodforbrain.task_manager import ShareCoordinator

    processor = ArticleProcessor(storage, fake_extractor, Summarizer(None))
    task_manager = SyncTaskManager(processor.process)

    app.state.storage = storage
    app.state.extractor = fake_extractor
    app.state.task_manager = task_manager
    app.state.share_coordinator = ShareCoordinator(storage, task_manager)

    client = TestClient(app)
    try:
        yield client
    finally:
        client.close()
