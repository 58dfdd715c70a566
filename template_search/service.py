"""
Search service - resolves the corpus, filters it and ranks it.

This is the caller side of RankingEngine: repository resolution and the
structural filters live here, the engine only ranks what it is given.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Union

from .config import Settings
from .corpus import CorpusProvider, RepositoryResolver
from .filters import FilterCriteria, apply_filters
from .fuzzy.engine import RankingEngine
from .models import DocumentKind, IndexedDocument, SearchOptions, SearchResult

logger = logging.getLogger(__name__)


@dataclass
class RepoStats:
    name: str
    document_count: int


@dataclass
class SearchStats:
    total_documents: int = 0
    prompt_count: int = 0
    context_count: int = 0
    repo_stats: List[RepoStats] = field(default_factory=list)


class SearchService:
    """
    Orchestrates one search:
    1. Resolve known repositories
    2. Fetch a corpus snapshot for them
    3. Apply kind / label / repository filters
    4. Rank with RankingEngine using settings for unspecified options
    """

    def __init__(
        self,
        corpus_provider: CorpusProvider,
        repository_resolver: RepositoryResolver,
        settings: Optional[Settings] = None,
        engine: Optional[RankingEngine] = None
    ):
        self.corpus_provider = corpus_provider
        self.repository_resolver = repository_resolver
        self.settings = settings or Settings()
        self.engine = engine or RankingEngine()

    def search(
        self,
        query: str = "",
        kind: Optional[Union[DocumentKind, str]] = None,
        labels: Sequence[str] = (),
        label_match_all: bool = False,
        source_group: Optional[str] = None,
        max_results: Optional[int] = None,
        enable_transliteration: Optional[bool] = None,
        threshold: Optional[float] = None,
        weights: Optional[Mapping[str, float]] = None
    ) -> List[SearchResult]:
        groups = self.repository_resolver.list_groups()

        if source_group is not None:
            if source_group not in groups:
                logger.warning(f"Repository not found: {source_group}")
                return []
            groups = [source_group]

        if not groups:
            logger.info("No repositories configured, nothing to search")
            return []

        corpus = self.corpus_provider.get_documents(groups)
        corpus = apply_filters(corpus, FilterCriteria(
            kind=kind,
            labels=labels,
            label_match_all=label_match_all,
            source_group=source_group,
        ))

        options = self.build_options(query, max_results, enable_transliteration, threshold, weights)
        return self.engine.search(corpus, options)

    def build_options(
        self,
        query: str,
        max_results: Optional[int] = None,
        enable_transliteration: Optional[bool] = None,
        threshold: Optional[float] = None,
        weights: Optional[Mapping[str, float]] = None
    ) -> SearchOptions:
        """SearchOptions with unspecified values taken from settings."""
        merged_weights = dict(self.settings.weights)
        if weights:
            merged_weights.update(weights)

        return SearchOptions(
            query=query,
            limit=self.settings.max_results if max_results is None else max_results,
            threshold=self.settings.threshold if threshold is None else threshold,
            enable_transliteration=self.settings.enable_pinyin if enable_transliteration is None else enable_transliteration,
            weights=merged_weights,
        )

    def highlight(self, result: SearchResult, query: str) -> Dict[str, str]:
        return self.engine.highlight_matches(result.document, query, result.matched_fields)

    def get_suggestions(self, query: str, limit: int = 5) -> List[str]:
        return self.engine.get_suggestions(self._corpus(), query, limit)

    def get_search_stats(self) -> SearchStats:
        groups = self.repository_resolver.list_groups()
        if not groups:
            return SearchStats()

        documents = self.corpus_provider.get_documents(groups)
        counts: Dict[str, int] = {name: 0 for name in groups}
        for doc in documents:
            counts[doc.source_group] = counts.get(doc.source_group, 0) + 1

        return SearchStats(
            total_documents=len(documents),
            prompt_count=sum(1 for doc in documents if doc.kind == DocumentKind.PROMPT),
            context_count=sum(1 for doc in documents if doc.kind == DocumentKind.CONTEXT),
            repo_stats=[RepoStats(name=name, document_count=counts[name]) for name in groups],
        )

    def document_count(self) -> int:
        return len(self._corpus())

    def _corpus(self) -> List[IndexedDocument]:
        groups = self.repository_resolver.list_groups()
        return self.corpus_provider.get_documents(groups) if groups else []
