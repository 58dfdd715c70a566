"""
Template Search - weighted fuzzy search over indexed prompt/context templates.

Usage:
    from template_search import RankingEngine, SearchOptions

    engine = RankingEngine()
    results = engine.search(documents, SearchOptions(query="qianduan", limit=10))
"""

from .models import (
    DEFAULT_FIELD_WEIGHTS,
    DocumentKind,
    IndexedDocument,
    SearchOptions,
    SearchResult,
)
from .fuzzy import RankingEngine, detects_cjk, initials, transliterate
from .filters import FilterCriteria, apply_filters
from .service import SearchService

__all__ = [
    "DEFAULT_FIELD_WEIGHTS",
    "DocumentKind",
    "IndexedDocument",
    "SearchOptions",
    "SearchResult",
    "RankingEngine",
    "detects_cjk",
    "initials",
    "transliterate",
    "FilterCriteria",
    "apply_filters",
    "SearchService",
]
