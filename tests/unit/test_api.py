"""
Unit tests for the HTTP API (search service injected via dependency override).
"""

import pytest
from fastapi.testclient import TestClient

from template_search import main
from template_search.config import load_env_files
from template_search.corpus import CorpusRepositoryResolver, InMemoryCorpusProvider
from template_search.main import app, get_search_service
from template_search.service import SearchService


@pytest.fixture
def client(mixed_corpus):
    provider = InMemoryCorpusProvider(mixed_corpus)
    service = SearchService(provider, CorpusRepositoryResolver(provider))

    app.dependency_overrides[get_search_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestSearchEndpoint:

    def test_keyword_search(self, client):
        response = client.post("/v1/search", json={"query": "vue"})

        assert response.status_code == 200
        data = response.json()
        assert data["query"] == "vue"
        assert data["total"] == 1

        item = data["results"][0]
        assert item["id"] == "vue-setup"
        assert item["type"] == "prompt"
        assert item["repo"] == "templates"
        assert item["labels"] == ["vue", "frontend", "setup"]
        assert item["matched_fields"][0] == "id"
        assert "highlights" not in item

    def test_empty_query_lists_templates(self, client):
        data = client.post("/v1/search", json={}).json()

        assert data["total"] == 4
        assert all(item["score"] == 1 for item in data["results"])

    def test_filters(self, client):
        data = client.post("/v1/search", json={"type": "context", "repo": "team"}).json()
        assert [item["id"] for item in data["results"]] == ["backend-api"]

        data = client.post("/v1/search", json={"labels": ["FRONTEND", "vue"], "label_match_all": True}).json()
        assert [item["id"] for item in data["results"]] == ["vue-setup"]

    def test_unknown_repo_returns_empty(self, client):
        data = client.post("/v1/search", json={"query": "vue", "repo": "missing"}).json()
        assert data == {"query": "vue", "total": 0, "results": []}

    def test_pinyin_switch(self, client):
        enabled = client.post("/v1/search", json={"query": "zhongwen"}).json()
        disabled = client.post("/v1/search", json={"query": "zhongwen", "enable_pinyin": False}).json()

        assert [item["id"] for item in enabled["results"]] == ["chinese-template"]
        assert disabled["total"] == 0

    def test_highlight(self, client):
        data = client.post("/v1/search", json={"query": "vue", "highlight": True}).json()
        assert data["results"][0]["highlights"]["id"] == "<mark>vue</mark>-setup"

    def test_max_results(self, client):
        data = client.post("/v1/search", json={"max_results": 2}).json()
        assert data["total"] == 2

    @pytest.mark.parametrize("body", [
        {"max_results": -1},
        {"max_results": 1000},
        {"type": "snippet"},
    ])
    def test_validation_errors(self, client, body):
        assert client.post("/v1/search", json=body).status_code == 422


class TestOtherEndpoints:

    def test_root(self, client):
        assert client.get("/").json()["service"] == "Template Search API"

    def test_health(self, client):
        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["document_count"] == 4
        assert data["uptime_seconds"] >= 0

    def test_suggestions(self, client):
        response = client.get("/v1/suggestions", params={"q": "vue", "limit": 2})

        assert response.status_code == 200
        assert response.json() == {"suggestions": ["vue-setup", "Vue"]}

    def test_stats(self, client):
        data = client.get("/v1/stats").json()

        assert data["total_documents"] == 4
        assert data["prompt_count"] == 2
        assert data["context_count"] == 2
        assert data["repo_stats"] == [
            {"name": "templates", "document_count": 2},
            {"name": "team", "document_count": 2},
        ]


def test_service_unavailable_without_lifespan():
    """Without startup (and without override) the dependency reports 503"""
    app.dependency_overrides.clear()
    response = TestClient(app).get("/v1/stats")
    assert response.status_code == 503


def test_run_reads_port_from_env_file(tmp_path, monkeypatch):
    """PORT from .env is applied before uvicorn starts"""
    (tmp_path / ".env").write_text("PORT=9123\n")
    monkeypatch.setenv("PORT", "8080")  # Restored after the test
    monkeypatch.setattr(main, "load_env_files", lambda: load_env_files(tmp_path))

    calls = []
    monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: calls.append((app, kwargs)))

    main.run()

    assert calls == [("template_search.main:app", {"host": "0.0.0.0", "port": 9123})]
