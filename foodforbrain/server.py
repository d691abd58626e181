from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from foodforbrain import __version__
from foodforbrain.api import router as api_router
from foodforbrain.core.config import get_settings
from foodforbrain.core.logging import setup_logging
from foodforbrain.services import ArticleExtractor, ArticleProcessor, Summarizer
from foodforbrain.services.providers import ProviderChain, ProviderFactory
from foodforbrain.services.summarization import PromptBuilder
from foodforbrain.storage import SqlArticleStorage
from foodforbrain.task_manager import ArticleProcessingTaskManager, ShareCoordinator


settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)


def build_provider_chain(summarization) -> ProviderChain | None:
    if not summarization.enabled:
        logger.info("Summarization disabled; summaries use the fallback")
        return None
    try:
        chain = ProviderFactory(summarization).create_chain()
    except ValueError as exc:
        logger.error("Failed to create provider chain", extra={"error": str(exc)})
        return None
    logger.info("Created provider chain", extra={"provider_names": chain.names})
    return chain


@asynccontextmanager
async def lifespan_context(app: FastAPI):
    storage = SqlArticleStorage()
    extractor = ArticleExtractor(settings.extractor)
    summarizer = Summarizer(
        build_provider_chain(settings.summarization),
        prompt_builder=PromptBuilder(language=settings.summarization.language),
        max_tokens=settings.summarization.openai.max_tokens,
        temperature=settings.summarization.openai.temperature,
    )
    processor = ArticleProcessor(storage, extractor, summarizer)

    task_manager = ArticleProcessingTaskManager(processor)
    task_manager.start()

    app.state.storage = storage
    app.state.extractor = extractor
    app.state.summarizer = summarizer
    app.state.task_manager = task_manager
    app.state.share_coordinator = ShareCoordinator(storage, task_manager)
    logger.info(
        "Service started",
        extra={"summarization_enabled": summarizer.chain is not None},
    )
    try:
        yield
    finally:
        # Let in-flight articles reach a terminal state before exiting
        task_manager.stop(timeout=settings.extractor.timeout + 5)
        logger.info("Service stopped")


app = FastAPI(title="foodforbrain", version=__version__, lifespan=lifespan_context)

app.include_router(api_router)
