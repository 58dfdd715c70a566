"""
Weighted multi-field document scorer.

score(doc) = Σ raw(field) × weight(field)   over fields with raw > threshold

Fields are tried in a fixed order (id, name, tags, summary); the order of
matched_fields in the result follows it. Tags are joined with a space into one
text blob before matching. A document with no contributing field is not a match.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from ..models import DEFAULT_FIELD_WEIGHTS, IndexedDocument, SearchOptions, SearchResult
from .matcher import FieldMatcher


@dataclass(frozen=True)
class SearchField:
    key: str
    weight: float  # Used when the options carry no weight for this key
    getter: Callable[[IndexedDocument], str]


DEFAULT_SEARCH_FIELDS: List[SearchField] = [
    SearchField("id", DEFAULT_FIELD_WEIGHTS["id"], lambda doc: doc.id),
    SearchField("name", DEFAULT_FIELD_WEIGHTS["name"], lambda doc: doc.name),
    SearchField("tags", DEFAULT_FIELD_WEIGHTS["tags"], lambda doc: " ".join(doc.tags)),
    SearchField("summary", DEFAULT_FIELD_WEIGHTS["summary"], lambda doc: doc.summary),
]


class WeightedScorer:
    """
    Scores a document across its searchable fields.

    The field list is extensible: pass additional SearchField entries to score
    more document attributes.
    """

    def __init__(self, fields: Optional[Sequence[SearchField]] = None, matcher: Optional[FieldMatcher] = None):
        self.fields = list(fields) if fields is not None else list(DEFAULT_SEARCH_FIELDS)
        self.matcher = matcher or FieldMatcher()

    def get_field(self, key: str) -> Optional[SearchField]:
        for search_field in self.fields:
            if search_field.key == key:
                return search_field
        return None

    def score_document(self, document: IndexedDocument, query: str, options: SearchOptions) -> Optional[SearchResult]:
        """
        Args:
            document: Document to score
            query: Raw query text
            options: threshold, transliteration switch and weights

        Returns:
            SearchResult, or None when no field scores above the threshold
        """
        total_score = 0.0
        matched_fields: List[str] = []

        for search_field in self.fields:
            text = search_field.getter(document)
            if not text:
                continue

            raw = self.matcher.score(text, query, options.enable_transliteration)

            if raw > options.threshold:
                weight = options.weights.get(search_field.key, search_field.weight)
                total_score += raw * weight
                matched_fields.append(search_field.key)

        if not matched_fields:
            return None

        return SearchResult(score=total_score, document=document, matched_fields=matched_fields)
