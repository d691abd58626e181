from .extractor import ArticleExtractor, extract_article, extract_preview, normalize_content
from .processor import ArticleProcessor
from .summarizer import TOO_SHORT_SUMMARY, Summarizer, fallback_summary

__all__ = [
    "ArticleExtractor",
    "ArticleProcessor",
    "Summarizer",
    "TOO_SHORT_SUMMARY",
    "extract_article",
    "extract_preview",
    "fallback_summary",
    "normalize_content",
]
