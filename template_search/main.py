"""
Template Search - FastAPI application for fuzzy template lookup

Serves weighted fuzzy search over an indexed template corpus:
- Exact / prefix / substring / fuzzy subsequence scoring per field
- Pinyin fallback so Latin queries match Chinese names and summaries
- Type, label and repository filters

The corpus is read from the JSON index cache maintained by the indexer
(SEARCH_INDEX_CACHE). Repositories are the distinct source groups in it.
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .config import load_env_files, load_settings
from .corpus import CorpusRepositoryResolver, IndexCacheCorpusProvider
from .logging_config import setup_logging
from .models import DocumentKind
from .service import SearchService

logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"
APP_START_TIME = datetime.now(timezone.utc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load settings, configure logging and build the search service"""
    load_env_files()
    settings = load_settings()

    console_level = getattr(logging, settings.log_level, logging.INFO)
    setup_logging(
        log_file=settings.log_file,
        console_level=console_level,
        file_level=logging.DEBUG,
        keep_sessions=settings.log_keep_sessions,
    )

    provider = IndexCacheCorpusProvider(settings.index_cache)
    app.state.search_service = SearchService(
        corpus_provider=provider,
        repository_resolver=CorpusRepositoryResolver(provider),
        settings=settings,
    )
    logger.info(f"Search service ready (index cache: {settings.index_cache})")

    yield

    logger.info("Shutting down...")
    app.state.search_service = None


app = FastAPI(
    title="Template Search API",
    description="Weighted fuzzy template search with pinyin support",
    version=APP_VERSION,
    lifespan=lifespan,
)


def get_search_service(request: Request) -> SearchService:
    service = getattr(request.app.state, "search_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Search service not initialized",
        )
    return service


# Request/Response models
class HealthResponse(BaseModel):
    status: str
    version: str
    started_at: str
    uptime_seconds: float
    document_count: int


class SearchRequest(BaseModel):
    query: str = Field(default="", description="Keyword; empty lists every template")
    type: Optional[DocumentKind] = Field(default=None, description="Template type filter")
    labels: List[str] = Field(default_factory=list, description="Label filter (case-insensitive)")
    label_match_all: bool = Field(default=False, description="Require all labels instead of any")
    repo: Optional[str] = Field(default=None, description="Repository name filter")
    max_results: Optional[int] = Field(default=None, ge=0, le=200, description="Result limit (default from settings)")
    enable_pinyin: Optional[bool] = Field(default=None, description="Pinyin fallback for Chinese text")
    threshold: Optional[float] = Field(default=None, description="Minimum raw field score to count as a match")
    weights: Optional[Dict[str, float]] = Field(
        default=None,
        description="Field weight overrides (id, name, tags, summary). Raw multipliers, sign preserved.",
    )
    highlight: bool = Field(default=False, description="Include <mark> highlights for matched fields")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "query": "qianduan",
            "type": "prompt",
            "labels": ["frontend"],
            "max_results": 10,
            "enable_pinyin": True,
        }
    })


class SearchResultItem(BaseModel):
    score: float
    id: str
    type: DocumentKind
    name: str
    labels: List[str]
    summary: str
    repo: str
    matched_fields: List[str]
    highlights: Optional[Dict[str, str]] = None


class SearchResponse(BaseModel):
    query: str
    total: int
    results: List[SearchResultItem]


class SuggestionsResponse(BaseModel):
    suggestions: List[str]


class RepoStatsItem(BaseModel):
    name: str
    document_count: int


class StatsResponse(BaseModel):
    total_documents: int
    prompt_count: int
    context_count: int
    repo_stats: List[RepoStatsItem]


# Routes
@app.get("/", response_model=dict)
async def root():
    return {
        "service": "Template Search API",
        "version": APP_VERSION,
        "docs": "/docs",
    }


@app.get("/health", response_model=HealthResponse)
async def health(service: SearchService = Depends(get_search_service)):
    uptime = (datetime.now(timezone.utc) - APP_START_TIME).total_seconds()
    return HealthResponse(
        status="healthy",
        version=APP_VERSION,
        started_at=APP_START_TIME.isoformat(),
        uptime_seconds=uptime,
        document_count=service.document_count(),
    )


@app.post("/v1/search", response_model=SearchResponse, response_model_exclude_none=True)
def search_templates(request: SearchRequest, service: SearchService = Depends(get_search_service)):
    """
    Search templates.

    **Scoring:** each field (id, name, labels, summary) gets the best of a direct
    fuzzy match and, for Chinese text, pinyin / pinyin-initials matches. Field
    scores above `threshold` are multiplied by their weight and summed.

    **Empty query:** returns templates in index order, score 1.
    """
    started = time.perf_counter()

    results = service.search(
        query=request.query,
        kind=request.type,
        labels=request.labels,
        label_match_all=request.label_match_all,
        source_group=request.repo,
        max_results=request.max_results,
        enable_transliteration=request.enable_pinyin,
        threshold=request.threshold,
        weights=request.weights,
    )

    items = []
    for result in results:
        doc = result.document
        items.append(SearchResultItem(
            score=result.score,
            id=doc.id,
            type=doc.kind,
            name=doc.name,
            labels=list(doc.tags),
            summary=doc.summary,
            repo=doc.source_group,
            matched_fields=list(result.matched_fields),
            highlights=service.highlight(result, request.query) if request.highlight else None,
        ))

    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f"Search '{request.query}' -> {len(items)} results in {elapsed_ms:.1f}ms")

    return SearchResponse(query=request.query, total=len(items), results=items)


@app.get("/v1/suggestions", response_model=SuggestionsResponse)
def suggestions(
    q: str = Query(default="", description="Partial keyword"),
    limit: int = Query(default=5, ge=1, le=50),
    service: SearchService = Depends(get_search_service)
):
    return SuggestionsResponse(suggestions=service.get_suggestions(q, limit))


@app.get("/v1/stats", response_model=StatsResponse)
def stats(service: SearchService = Depends(get_search_service)):
    search_stats = service.get_search_stats()
    return StatsResponse(
        total_documents=search_stats.total_documents,
        prompt_count=search_stats.prompt_count,
        context_count=search_stats.context_count,
        repo_stats=[
            RepoStatsItem(name=repo.name, document_count=repo.document_count)
            for repo in search_stats.repo_stats
        ],
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.error(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": str(exc),
        },
    )


def run():
    """Serve the app with uvicorn on PORT from .env.local / .env / environment"""
    import uvicorn

    load_env_files()
    uvicorn.run(
        "template_search.main:app",
        host="0.0.0.0",
        port=load_settings().port,
    )


if __name__ == "__main__":
    run()
