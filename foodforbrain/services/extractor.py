"""Fetch a shared link and derive structured article data from its HTML.

Metadata fields come from ranked meta/heading sources; the body text comes from
a ranked list of content containers where the longest cleaned candidate wins,
with a paragraph sweep as fallback for pages without a recognizable container.
"""
from __future__ import annotations

import copy
import logging
import re
from typing import Iterable, List, Optional, Sequence, Tuple
from urllib.parse import urljoin

import httpx
import lxml.html
from lxml import etree

from foodforbrain.core.config import ExtractorSettings
from foodforbrain.core.exceptions import FetchError
from foodforbrain.models import ExtractedArticle, PagePreview

logger = logging.getLogger(__name__)

MAX_TITLE_CHARS = 200
MAX_DESCRIPTION_CHARS = 500
MAX_CONTENT_CHARS = 5000
MIN_CONTENT_CHARS = 200
MIN_PARAGRAPH_CHARS = 50

Source = Tuple[str, str]


def _meta(attr: str, key: str) -> str:
    return f"string((//meta[@{attr}='{key}'])[1]/@content)"


def _has_class(name: str, scope: str = "//") -> str:
    return f"{scope}*[contains(concat(' ', normalize-space(@class), ' '), ' {name} ')]"


TITLE_SOURCES: Sequence[Source] = (
    ("og:title", _meta("property", "og:title")),
    ("twitter:title", _meta("name", "twitter:title")),
    ("title", "string((//title)[1])"),
    ("h1", "string((//h1)[1])"),
)

DESCRIPTION_SOURCES: Sequence[Source] = (
    ("og:description", _meta("property", "og:description")),
    ("twitter:description", _meta("name", "twitter:description")),
    ("description", _meta("name", "description")),
)

IMAGE_SOURCES: Sequence[Source] = (
    ("og:image", _meta("property", "og:image")),
    ("twitter:image", _meta("name", "twitter:image")),
)

AUTHOR_SOURCES: Sequence[Source] = (
    ("author", _meta("name", "author")),
)

PREVIEW_TITLE_SOURCES: Sequence[Source] = (
    ("og:title", _meta("property", "og:title")),
    ("title", "string((//title)[1])"),
)

# Highest priority first; ties keep the earlier candidate
CONTENT_CANDIDATES: Sequence[Source] = (
    ("article", "//article"),
    ("role-main", "//*[@role='main']"),
    ("post-content", _has_class("post-content")),
    ("article-content", _has_class("article-content")),
    ("entry-content", _has_class("entry-content")),
    ("content", _has_class("content")),
    ("main", "//main"),
    ("post-body", _has_class("post-body")),
)

NOISE_XPATH = " | ".join(
    [
        ".//script",
        ".//style",
        ".//nav",
        ".//aside",
        ".//footer",
        _has_class("ad", scope=".//"),
        _has_class("advertisement", scope=".//"),
        _has_class("social-share", scope=".//"),
    ]
)

_HORIZONTAL_WS = re.compile(r"[^\S\n]+")
_SPACED_NEWLINE = re.compile(r" ?\n ?")
_BLANK_LINES = re.compile(r"\n{3,}")


def normalize_content(text: Optional[str]) -> str:
    """Collapse whitespace runs, keep at most one blank line, cap the length.

    Idempotent: normalizing an already-normalized string returns it unchanged.
    """
    if not text:
        return ""
    text = _HORIZONTAL_WS.sub(" ", text)
    text = _SPACED_NEWLINE.sub("\n", text)
    text = _BLANK_LINES.sub("\n\n", text)
    return text.strip()[:MAX_CONTENT_CHARS].rstrip()


def parse_document(html: Optional[str]) -> Optional[lxml.html.HtmlElement]:
    """Parse HTML leniently; None when there is nothing usable."""
    if not html or not html.strip():
        return None
    try:
        return lxml.html.document_fromstring(html)
    except ValueError:
        # Unicode input that carries an XML encoding declaration
        try:
            return lxml.html.document_fromstring(html.encode("utf-8"))
        except (etree.ParserError, etree.XMLSyntaxError, ValueError):
            return None
    except (etree.ParserError, etree.XMLSyntaxError):
        return None


def _first_text(tree: lxml.html.HtmlElement, sources: Iterable[Source]) -> Optional[str]:
    for name, expression in sources:
        try:
            value = tree.xpath(expression)
        except Exception:
            logger.debug("Metadata source failed", extra={"source": name}, exc_info=True)
            continue
        value = " ".join(str(value).split())
        if value:
            return value
    return None


def _cap(value: Optional[str], limit: int) -> Optional[str]:
    if not value:
        return None
    capped = value.strip()[:limit].rstrip()
    return capped or None


def _absolute(value: Optional[str], base_url: Optional[str]) -> Optional[str]:
    if not value:
        return None
    if not base_url:
        return value
    try:
        return urljoin(base_url, value)
    except ValueError:
        # Malformed image URL counts as absent
        logger.debug("Image URL could not be resolved", extra={"image": value}, exc_info=True)
        return None


def _outermost(elements: List[lxml.html.HtmlElement]) -> List[lxml.html.HtmlElement]:
    selected = set(elements)
    return [
        element
        for element in elements
        if not any(ancestor in selected for ancestor in element.iterancestors())
    ]


def _candidate_text(elements: Sequence[lxml.html.HtmlElement]) -> str:
    parts = []
    for element in elements:
        clone = copy.deepcopy(element)
        for noise in clone.xpath(NOISE_XPATH):
            noise.drop_tree()
        parts.append(clone.text_content())
    return "\n".join(parts).strip()


def _paragraph_text(tree: lxml.html.HtmlElement) -> str:
    paragraphs = (_candidate_text([p]) for p in tree.xpath("//p"))
    return "\n\n".join(p for p in paragraphs if len(p) > MIN_PARAGRAPH_CHARS)


def select_content(tree: lxml.html.HtmlElement) -> Optional[str]:
    """Pick the main body text of a parsed document."""
    best = ""
    best_source = None
    for name, expression in CONTENT_CANDIDATES:
        try:
            elements = _outermost(tree.xpath(expression))
            if not elements:
                continue
            text = _candidate_text(elements)
        except Exception:
            logger.debug("Content candidate failed", extra={"candidate": name}, exc_info=True)
            continue
        if len(text) > len(best):
            best = text
            best_source = name

    if len(best) < MIN_CONTENT_CHARS:
        try:
            best = _paragraph_text(tree)
            best_source = "paragraphs"
        except Exception:
            logger.debug("Paragraph fallback failed", exc_info=True)

    content = normalize_content(best)
    logger.debug(
        "Selected content",
        extra={"source": best_source, "length": len(content)},
    )
    return content or None


def extract_article(html: Optional[str], *, base_url: Optional[str] = None) -> ExtractedArticle:
    """Derive an ExtractedArticle from raw HTML. Never raises on bad markup."""
    tree = parse_document(html)
    if tree is None:
        logger.warning("Document could not be parsed", extra={"url": base_url})
        return ExtractedArticle()

    try:
        content = select_content(tree)
    except Exception:
        logger.warning("Content selection failed", extra={"url": base_url}, exc_info=True)
        content = None

    return ExtractedArticle(
        title=_cap(_first_text(tree, TITLE_SOURCES), MAX_TITLE_CHARS),
        description=_cap(_first_text(tree, DESCRIPTION_SOURCES), MAX_DESCRIPTION_CHARS),
        content=content,
        image=_absolute(_first_text(tree, IMAGE_SOURCES), base_url),
        author=_first_text(tree, AUTHOR_SOURCES),
    )


def extract_preview(html: Optional[str], *, base_url: Optional[str] = None) -> Optional[PagePreview]:
    tree = parse_document(html)
    if tree is None:
        return None
    return PagePreview(
        title=_first_text(tree, PREVIEW_TITLE_SOURCES),
        description=_first_text(tree, (("og:description", _meta("property", "og:description")),)),
        image=_absolute(_first_text(tree, (("og:image", _meta("property", "og:image")),)), base_url),
    )


class ArticleExtractor:
    """Fetches pages over HTTP and extracts article data from them.

    A shared ``httpx.AsyncClient`` may be injected; otherwise a short-lived
    client is opened per request so the extractor can be used from any loop.
    """

    def __init__(
        self,
        settings: ExtractorSettings,
        *,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings
        self._client = client

    async def extract(self, url: str) -> ExtractedArticle:
        """Fetch ``url`` and extract its article fields.

        Raises:
            FetchError: If the document cannot be retrieved
        """
        logger.info("Extracting article", extra={"url": url})
        response = await self._fetch(
            url,
            timeout=self.settings.timeout,
            user_agent=self.settings.user_agent,
        )
        article = extract_article(response.text, base_url=str(response.url))
        logger.info(
            "Extracted article",
            extra={
                "url": url,
                "has_title": article.title is not None,
                "content_length": len(article.content or ""),
            },
        )
        return article

    async def peek(self, url: str) -> PagePreview:
        """Quick metadata-only preview; degrades to the URL as title."""
        try:
            response = await self._fetch(
                url,
                timeout=self.settings.preview_timeout,
                user_agent=self.settings.preview_user_agent,
            )
            preview = extract_preview(response.text, base_url=str(response.url))
        except Exception:
            logger.warning("Preview extraction failed", extra={"url": url}, exc_info=True)
            return PagePreview(title=url)
        if preview is None:
            return PagePreview(title=url)
        return preview

    async def _fetch(self, url: str, *, timeout: float, user_agent: str) -> httpx.Response:
        headers = {
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
        }
        try:
            if self._client is not None:
                response = await self._client.get(
                    url, headers=headers, timeout=timeout, follow_redirects=True
                )
            else:
                async with httpx.AsyncClient(follow_redirects=True, timeout=timeout) as client:
                    response = await client.get(url, headers=headers)
        except httpx.TimeoutException as exc:
            raise FetchError(url, "timed out") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchError(url, str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            raise FetchError(url, "unexpected status", status_code=response.status_code)
        return response
