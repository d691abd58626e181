"""Unit tests for article extraction: source priority, content heuristics, fetching."""
import httpx
import pytest

from foodforbrain.core.config import ExtractorSettings
from foodforbrain.core.exceptions import FetchError
from foodforbrain.models import ExtractedArticle, PagePreview
from foodforbrain.services.extractor import (
    MAX_CONTENT_CHARS,
    ArticleExtractor,
    extract_article,
    extract_preview,
    normalize_content,
)


def page(head: str = "", body: str = "") -> str:
    return f"<html><head>{head}</head><body>{body}</body></html>"


OG_TITLE = '<meta property="og:title" content="OG Title">'
TWITTER_TITLE = '<meta name="twitter:title" content="Twitter Title">'
DOC_TITLE = "<title>Doc Title</title>"
H1 = "<h1>Heading</h1>"

LONG_PARAGRAPHS = [
    f"Paragraph number {i} explains one more detail about the story in full."
    for i in range(10)
]
SHORT_PARAGRAPHS = [f"Short {i}." for i in range(5)]


def paragraphs_html() -> str:
    parts = []
    for i, long_text in enumerate(LONG_PARAGRAPHS):
        parts.append(f"<p>{long_text}</p>")
        if i < len(SHORT_PARAGRAPHS):
            parts.append(f"<p>{SHORT_PARAGRAPHS[i]}</p>")
    return "".join(parts)


class TestMetadata:
    @pytest.mark.parametrize(
        "head,body,expected",
        [
            (OG_TITLE + TWITTER_TITLE + DOC_TITLE, H1, "OG Title"),
            (TWITTER_TITLE + DOC_TITLE, H1, "Twitter Title"),
            (DOC_TITLE, H1, "Doc Title"),
            ("", H1, "Heading"),
            ("", "<p>nothing here</p>", None),
        ],
    )
    def test_title_priority(self, head, body, expected):
        assert extract_article(page(head, body)).title == expected

    def test_empty_og_title_falls_through(self):
        head = '<meta property="og:title" content="   ">' + DOC_TITLE
        assert extract_article(page(head)).title == "Doc Title"

    def test_title_is_trimmed_and_capped(self):
        assert extract_article(page("<title>  Spaced   Title \n</title>")).title == "Spaced Title"
        long_title = "t" * 250
        assert len(extract_article(page(f"<title>{long_title}</title>")).title) == 200

    def test_description_priority_and_cap(self):
        head = (
            '<meta name="twitter:description" content="From twitter">'
            '<meta name="description" content="From meta">'
        )
        assert extract_article(page(head)).description == "From twitter"

        head = '<meta name="description" content="From meta">'
        assert extract_article(page(head)).description == "From meta"

        head = f'<meta property="og:description" content="{"d" * 600}">'
        assert len(extract_article(page(head)).description) == 500

    def test_image_is_resolved_against_page_url(self):
        head = '<meta property="og:image" content="/img/cover.png">'
        article = extract_article(page(head), base_url="https://example.com/posts/1")
        assert article.image == "https://example.com/img/cover.png"

    def test_twitter_image_and_author(self):
        head = (
            '<meta name="twitter:image" content="https://cdn.example.com/a.jpg">'
            '<meta name="author" content="Jane Doe">'
        )
        article = extract_article(page(head))
        assert article.image == "https://cdn.example.com/a.jpg"
        assert article.author == "Jane Doe"

    def test_malformed_image_url_is_dropped(self):
        head = '<title>Good Title</title><meta property="og:image" content="http://[broken-image">'
        body = f"<article>{'word ' * 100}</article>"
        article = extract_article(page(head, body), base_url="https://example.com/a")
        assert article.title == "Good Title"
        assert article.content == ("word " * 100).strip()
        assert article.image is None


class TestContentSelection:
    def test_noise_is_removed_from_candidate(self):
        body_text = "Gardening " * 30
        html = page(
            body=(
                "<nav>Site menu</nav>"
                f"<article><p>{body_text}</p>"
                "<script>var tracking = 1;</script>"
                "<aside>Related links</aside>"
                "<div class='ad'>Buy now</div>"
                "<div class='social-share'>Share this</div>"
                "<footer>Copyright</footer></article>"
            )
        )
        content = extract_article(html).content
        assert content == body_text.strip()

    def test_class_match_is_token_based(self):
        body_text = "Shadows fall across the valley. " * 10
        html = page(body=f"<article><div class='shadow'>{body_text}</div></article>")
        assert extract_article(html).content == body_text.strip()

    def test_longest_candidate_wins(self):
        short = "Short piece. " * 20
        long = "Much longer entry text. " * 20
        html = page(body=f"<article>{short}</article><div class='entry-content'>{long}</div>")
        assert extract_article(html).content == long.strip()

    def test_tie_keeps_higher_priority_candidate(self):
        alpha = "alpha " * 50
        omega = "omega " * 50
        html = page(body=f"<article>{alpha}</article><main>{omega}</main>")
        assert extract_article(html).content == alpha.strip()

    def test_paragraph_fallback_without_containers(self):
        content = extract_article(page(body=paragraphs_html())).content
        assert content == "\n\n".join(LONG_PARAGRAPHS)
        for short in SHORT_PARAGRAPHS:
            assert short not in content

    def test_paragraph_fallback_replaces_short_candidate(self):
        html = page(body="<article>Teaser only.</article>" + paragraphs_html())
        assert extract_article(html).content == "\n\n".join(LONG_PARAGRAPHS)

    def test_short_candidate_without_paragraphs_yields_no_content(self):
        assert extract_article(page(body="<article>Teaser only.</article>")).content is None

    def test_paragraph_length_threshold(self):
        at_limit = "b" * 50
        over_limit = "c" * 51
        content = extract_article(page(body=f"<p>{at_limit}</p><p>{over_limit}</p>")).content
        assert content == over_limit

    def test_paragraph_fallback_strips_scripts(self):
        text = "This paragraph is long enough that it passes the filter easily, twice."
        body = "".join(
            f"<p>{text}<script>window.trackingPixel = 42;</script></p>" for _ in range(4)
        )
        content = extract_article(page(body=body)).content
        assert "trackingPixel" not in content
        assert content == "\n\n".join([text] * 4)

    def test_content_is_capped(self):
        html = page(body=f"<article>{'word ' * 2000}</article>")
        content = extract_article(html).content
        assert len(content) <= MAX_CONTENT_CHARS
        assert content == content.strip()

    def test_extraction_is_deterministic(self):
        html = page(OG_TITLE, "<article>" + paragraphs_html() + "</article>")
        assert extract_article(html) == extract_article(html)

    @pytest.mark.parametrize("html", ["", "   ", None])
    def test_empty_document_yields_empty_article(self, html):
        assert extract_article(html) == ExtractedArticle()


class TestNormalization:
    def test_collapses_whitespace_and_blank_lines(self):
        raw = "  Hello \t  world \n\n\n\n Next   line  "
        assert normalize_content(raw) == "Hello world\n\nNext line"

    @pytest.mark.parametrize(
        "raw",
        [
            "  Hello \t  world \n\n\n\n Next   line  ",
            "a\r\n\r\nb  c\n \n \n d",
            "word " * 2000,
            "",
        ],
    )
    def test_is_idempotent(self, raw):
        once = normalize_content(raw)
        assert normalize_content(once) == once


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestFetching:
    @pytest.mark.asyncio
    async def test_extract_fetches_with_browser_user_agent(self):
        settings = ExtractorSettings()
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["user_agent"] = request.headers.get("user-agent")
            return httpx.Response(200, text=page(OG_TITLE, paragraphs_html()))

        async with mock_client(handler) as client:
            article = await ArticleExtractor(settings, client=client).extract(
                "https://example.com/story"
            )

        assert seen["user_agent"] == settings.user_agent
        assert article.title == "OG Title"
        assert article.content == "\n\n".join(LONG_PARAGRAPHS)

    @pytest.mark.asyncio
    async def test_non_success_status_raises_fetch_error(self):
        async with mock_client(lambda request: httpx.Response(404, text="missing")) as client:
            with pytest.raises(FetchError) as excinfo:
                await ArticleExtractor(ExtractorSettings(), client=client).extract(
                    "https://example.com/missing"
                )
        assert excinfo.value.status_code == 404

    @pytest.mark.asyncio
    async def test_timeout_raises_fetch_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        async with mock_client(handler) as client:
            with pytest.raises(FetchError) as excinfo:
                await ArticleExtractor(ExtractorSettings(), client=client).extract(
                    "https://slow.example.com/"
                )
        assert excinfo.value.reason == "timed out"
        assert excinfo.value.status_code is None


class TestPreview:
    def test_preview_from_html(self):
        head = (
            DOC_TITLE
            + '<meta property="og:description" content="Short blurb">'
            + '<meta property="og:image" content="https://example.com/i.png">'
        )
        assert extract_preview(page(head)) == PagePreview(
            title="Doc Title", description="Short blurb", image="https://example.com/i.png"
        )

    @pytest.mark.asyncio
    async def test_peek_uses_preview_user_agent(self):
        settings = ExtractorSettings()
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["user_agent"] = request.headers.get("user-agent")
            return httpx.Response(200, text=page(OG_TITLE + DOC_TITLE))

        async with mock_client(handler) as client:
            preview = await ArticleExtractor(settings, client=client).peek("https://example.com/a")

        assert seen["user_agent"] == settings.preview_user_agent
        assert preview.title == "OG Title"

    @pytest.mark.asyncio
    async def test_peek_degrades_to_url_on_error_status(self):
        url = "https://example.com/broken"
        async with mock_client(lambda request: httpx.Response(500)) as client:
            preview = await ArticleExtractor(ExtractorSettings(), client=client).peek(url)
        assert preview == PagePreview(title=url)

    @pytest.mark.asyncio
    async def test_peek_degrades_to_url_on_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        url = "https://unreachable.example.com/"
        async with mock_client(handler) as client:
            preview = await ArticleExtractor(ExtractorSettings(), client=client).peek(url)
        assert preview == PagePreview(title=url)

    @pytest.mark.asyncio
    async def test_peek_keeps_title_when_image_url_is_malformed(self):
        head = '<title>Good Title</title><meta property="og:image" content="http://[broken-image">'

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text=page(head))

        async with mock_client(handler) as client:
            preview = await ArticleExtractor(ExtractorSettings(), client=client).peek(
                "https://example.com/a"
            )

        assert preview == PagePreview(title="Good Title")
