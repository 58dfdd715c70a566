"""
Ranking engine - public entry point of the fuzzy search.

Flow:
1. Blank query -> browse mode: every document, score 1, corpus order
2. Otherwise score every document with WeightedScorer, drop non-matches
3. Stable sort by score (descending), ties keep corpus order
4. Truncate to limit (limit <= 0 -> empty list)

The engine holds no per-call state and never filters by kind, tag or group;
callers restrict the corpus before calling search().
"""

import logging
from typing import Dict, List, Optional, Sequence

from ..models import IndexedDocument, SearchOptions, SearchResult
from .scorer import WeightedScorer

logger = logging.getLogger(__name__)

BROWSE_SCORE = 1.0


class RankingEngine:
    """Weighted fuzzy search over an in-memory corpus"""

    def __init__(self, scorer: Optional[WeightedScorer] = None):
        self.scorer = scorer or WeightedScorer()

    def search(self, corpus: Sequence[IndexedDocument], options: SearchOptions) -> List[SearchResult]:
        """
        Rank corpus against options.query.

        Args:
            corpus: Documents to consider (already filtered by the caller)
            options: Query, limit, threshold, transliteration switch, weights

        Returns:
            At most options.limit results, best first

        Example:
            >>> engine = RankingEngine()
            >>> results = engine.search(docs, SearchOptions(query="frontend", limit=5))
            >>> [r.document.id for r in results]
            ['frontend-review-v1']
        """
        if options.limit <= 0:
            return []

        query = options.query.strip()

        if not query:
            return [
                SearchResult(score=BROWSE_SCORE, document=document, matched_fields=[])
                for document in corpus[:options.limit]
            ]

        results = []
        for document in corpus:
            result = self.scorer.score_document(document, query, options)
            if result is not None:
                results.append(result)

        # sorted() is stable, also with reverse=True
        ranked = sorted(results, key=lambda r: r.score, reverse=True)[:options.limit]

        logger.debug(f"Search '{query}': {len(results)}/{len(corpus)} documents matched, returning {len(ranked)}")
        return ranked

    def highlight_matches(
        self,
        document: IndexedDocument,
        query: str,
        matched_fields: Sequence[str],
        open_tag: str = "<mark>",
        close_tag: str = "</mark>"
    ) -> Dict[str, str]:
        """
        Highlight direct matches in the given fields.

        Fields matched only through pinyin come back unchanged; unknown field
        names are skipped.
        """
        highlighted = {}

        for key in matched_fields:
            search_field = self.scorer.get_field(key)
            if search_field is None:
                continue

            text = search_field.getter(document)
            if not text:
                continue

            marked = self.scorer.matcher.highlight(text, query, open_tag, close_tag)
            highlighted[key] = marked if marked is not None else text

        return highlighted

    def get_suggestions(self, corpus: Sequence[IndexedDocument], query: str, limit: int = 5) -> List[str]:
        """
        Completion candidates: ids, name words and tags containing the query.

        Scanning stops once limit suggestions are collected.
        """
        needle = query.strip().lower()
        if not needle or limit <= 0:
            return []

        suggestions: Dict[str, None] = {}  # Ordered set

        for document in corpus:
            if needle in document.id.lower():
                suggestions[document.id] = None

            for word in document.name.split():
                if needle in word.lower():
                    suggestions[word] = None

            for tag in document.tags:
                if needle in tag.lower():
                    suggestions[tag] = None

            if len(suggestions) >= limit:
                break

        return list(suggestions)[:limit]
