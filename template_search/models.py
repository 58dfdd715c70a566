"""
Data model shared by the search engine, the filter stage and the API.

Documents are produced by an external indexer and borrowed read-only for the
duration of a search call. Results are created fresh per call.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class DocumentKind(str, Enum):
    """Coarse document type"""
    PROMPT = "prompt"
    CONTEXT = "context"


# Raw multipliers per field. Not normalized; negative values invert a field's
# contribution and are accepted as-is.
DEFAULT_FIELD_WEIGHTS: Dict[str, float] = {
    "id": 4.0,
    "name": 3.0,
    "tags": 2.0,
    "summary": 2.0,
}

DEFAULT_LIMIT = 20
DEFAULT_THRESHOLD = -10000.0


@dataclass(frozen=True)
class IndexedDocument:
    """Single indexed template as delivered by the corpus provider"""
    id: str
    kind: DocumentKind
    name: str
    tags: Tuple[str, ...] = ()
    summary: str = ""
    source_group: str = ""
    path: Optional[str] = None           # Absolute file path (not scored)
    last_modified: Optional[int] = None  # Epoch milliseconds (not scored)

    @property
    def key(self) -> Tuple[str, str]:
        """Result identity: ids are only unique within one source group"""
        return (self.source_group, self.id)


@dataclass
class SearchOptions:
    query: str = ""
    limit: int = DEFAULT_LIMIT
    threshold: float = DEFAULT_THRESHOLD
    enable_transliteration: bool = True
    weights: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_FIELD_WEIGHTS))


@dataclass(frozen=True)
class SearchResult:
    """Ranked document with the fields that contributed to its score"""
    score: float
    document: IndexedDocument
    matched_fields: List[str] = field(default_factory=list)  # Field iteration order
