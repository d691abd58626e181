"""
Tests for the /articles endpoints.

Uses FastAPI TestClient with in-memory storage, a fake extractor and a
synchronous task manager, so processing finishes before the response returns.
"""

from foodforbrain.models import PagePreview

URL = "https://example.com/story"


def share(client, url=URL, user="alice"):
    return client.post("/articles/share", json={"url": url, "shared_by": user})


class TestShare:
    def test_share_returns_201_and_processes(self, api_client, storage, fake_extractor):
        response = share(api_client)

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Article shared successfully, processing content..."
        record = storage.get_article(data["article_id"])
        assert record.url == URL
        assert record.is_processing is False
        assert record.title == fake_extractor.article.title
        assert fake_extractor.extract_calls == [URL]

    def test_duplicate_share_returns_409(self, api_client, storage):
        assert share(api_client).status_code == 201

        response = share(api_client, user="bob")

        assert response.status_code == 409
        assert response.json()["detail"] == "Article already shared"
        assert len(storage.list_articles()) == 1

    def test_submitted_url_is_stored_unchanged(self, api_client, storage, fake_extractor):
        response = share(api_client, url="https://example.com")

        assert response.status_code == 201
        record = storage.get_article(response.json()["article_id"])
        assert record.url == "https://example.com"
        assert fake_extractor.extract_calls == ["https://example.com"]

    def test_malformed_url_returns_422(self, api_client, storage):
        response = share(api_client, url="not a url")

        assert response.status_code == 422
        assert storage.list_articles() == []


class TestFeed:
    def test_feed_is_newest_first_with_pagination(self, api_client):
        ids = [share(api_client, url=f"https://example.com/{i}").json()["article_id"] for i in range(3)]

        response = api_client.get("/articles?page=1&limit=2")

        assert response.status_code == 200
        data = response.json()
        assert [a["id"] for a in data["articles"]] == [ids[2], ids[1]]
        assert data["pagination"] == {"page": 1, "limit": 2, "has_more": True}

        data = api_client.get("/articles?page=2&limit=2").json()
        assert [a["id"] for a in data["articles"]] == [ids[0]]
        assert data["pagination"]["has_more"] is False

    def test_feed_exposes_summary_and_processing_flag(self, api_client):
        share(api_client)

        (article,) = api_client.get("/articles").json()["articles"]

        assert article["is_processing"] is False
        assert article["ai_summary"]
        assert article["reaction_count"] == 0

    def test_invalid_page_rejected(self, api_client):
        assert api_client.get("/articles?page=0").status_code == 422


class TestArticle:
    def test_get_article(self, api_client):
        article_id = share(api_client).json()["article_id"]

        response = api_client.get(f"/articles/{article_id}")

        assert response.status_code == 200
        assert response.json()["url"] == URL

    def test_get_unknown_article_returns_404(self, api_client):
        assert api_client.get("/articles/999").status_code == 404

    def test_preview_uses_peek(self, api_client, fake_extractor):
        fake_extractor.preview = PagePreview(title="Preview title", image="https://example.com/p.png")

        response = api_client.get("/articles/preview", params={"url": URL})

        assert response.status_code == 200
        assert response.json() == {
            "title": "Preview title",
            "description": None,
            "image": "https://example.com/p.png",
        }
        assert fake_extractor.peek_calls == [URL]


class TestReactions:
    def test_react(self, api_client):
        article_id = share(api_client).json()["article_id"]

        response = api_client.post(
            f"/articles/{article_id}/react", json={"user_id": "bob", "reaction": "like"}
        )
        api_client.post(f"/articles/{article_id}/react", json={"user_id": "bob", "reaction": "like"})

        assert response.status_code == 200
        assert api_client.get(f"/articles/{article_id}").json()["reaction_count"] == 1

    def test_invalid_reaction_returns_400(self, api_client):
        article_id = share(api_client).json()["article_id"]

        response = api_client.post(
            f"/articles/{article_id}/react", json={"user_id": "bob", "reaction": "love"}
        )

        assert response.status_code == 400

    def test_react_unknown_article_returns_404(self, api_client):
        response = api_client.post("/articles/999/react", json={"user_id": "bob", "reaction": "like"})
        assert response.status_code == 404


class TestComments:
    def test_comment_and_list(self, api_client):
        article_id = share(api_client).json()["article_id"]

        response = api_client.post(
            f"/articles/{article_id}/comment", json={"user_id": "bob", "content": "  Great read  "}
        )

        assert response.status_code == 201
        assert response.json()["content"] == "Great read"
        comments = api_client.get(f"/articles/{article_id}/comments").json()
        assert [c["user_id"] for c in comments] == ["bob"]

    def test_empty_comment_returns_400(self, api_client):
        article_id = share(api_client).json()["article_id"]

        response = api_client.post(
            f"/articles/{article_id}/comment", json={"user_id": "bob", "content": "   "}
        )

        assert response.status_code == 400

    def test_comment_unknown_article_returns_404(self, api_client):
        response = api_client.post("/articles/999/comment", json={"user_id": "bob", "content": "hi"})
        assert response.status_code == 404

    def test_comments_of_unknown_article_returns_404(self, api_client):
        assert api_client.get("/articles/999/comments").status_code == 404


def test_health(api_client):
    response = api_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "worker_running": False}
