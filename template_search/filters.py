"""
Structural filters applied to the corpus before ranking.

Filter kinds compose with AND semantics:
- kind:   exact document kind (unknown kind -> empty corpus)
- labels: tag intersection (any) or containment (all), case-insensitive
- group:  source repository name (unknown name -> empty corpus)
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from .models import DocumentKind, IndexedDocument


@dataclass
class FilterCriteria:
    kind: Optional[Union[DocumentKind, str]] = None
    labels: Sequence[str] = field(default_factory=tuple)
    label_match_all: bool = False
    source_group: Optional[str] = None


def filter_by_kind(documents: Sequence[IndexedDocument], kind: Optional[Union[DocumentKind, str]]) -> List[IndexedDocument]:
    if not kind:
        return list(documents)
    wanted = getattr(kind, "value", kind)
    return [doc for doc in documents if doc.kind.value == wanted]


def filter_by_labels(
    documents: Sequence[IndexedDocument],
    labels: Sequence[str],
    match_all: bool = False
) -> List[IndexedDocument]:
    """
    Keep documents whose tags intersect labels (or contain all of them).

    Examples:
        >>> filter_by_labels(docs, ["React"])           # any, case-insensitive
        >>> filter_by_labels(docs, ["react", "frontend"], match_all=True)
    """
    wanted = {label.lower() for label in labels}
    if not wanted:
        return list(documents)

    kept = []
    for doc in documents:
        tags = {tag.lower() for tag in doc.tags}
        if match_all:
            if wanted <= tags:
                kept.append(doc)
        elif wanted & tags:
            kept.append(doc)

    return kept


def filter_by_group(documents: Sequence[IndexedDocument], source_group: Optional[str]) -> List[IndexedDocument]:
    if source_group is None:
        return list(documents)
    return [doc for doc in documents if doc.source_group == source_group]


def apply_filters(documents: Sequence[IndexedDocument], criteria: FilterCriteria) -> List[IndexedDocument]:
    """Apply every filter kind in turn (AND)."""
    filtered = filter_by_group(documents, criteria.source_group)
    filtered = filter_by_kind(filtered, criteria.kind)
    filtered = filter_by_labels(filtered, criteria.labels, criteria.label_match_all)
    return filtered
