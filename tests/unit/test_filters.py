"""
Unit tests for the pre-ranking filter stage.
"""

from template_search.filters import (
    FilterCriteria,
    apply_filters,
    filter_by_group,
    filter_by_kind,
    filter_by_labels,
)
from template_search.models import DocumentKind


def ids(documents):
    return [doc.id for doc in documents]


class TestKindFilter:

    def test_keeps_requested_kind(self, mixed_corpus):
        assert ids(filter_by_kind(mixed_corpus, DocumentKind.PROMPT)) == ["vue-setup", "chinese-template"]

    def test_accepts_string_kind(self, mixed_corpus):
        assert ids(filter_by_kind(mixed_corpus, "context")) == ["react-component", "backend-api"]

    def test_no_kind_keeps_all(self, mixed_corpus):
        assert filter_by_kind(mixed_corpus, None) == mixed_corpus

    def test_unknown_kind_gives_empty_corpus(self, mixed_corpus):
        assert filter_by_kind(mixed_corpus, "snippet") == []


class TestLabelFilter:

    def test_any_semantics(self, mixed_corpus):
        assert ids(filter_by_labels(mixed_corpus, ["vue", "api"])) == ["vue-setup", "backend-api"]

    def test_all_semantics(self, mixed_corpus):
        assert ids(filter_by_labels(mixed_corpus, ["frontend", "react"], match_all=True)) == ["react-component"]

    def test_case_insensitive(self, mixed_corpus):
        assert ids(filter_by_labels(mixed_corpus, ["FrontEnd"])) == ["react-component", "vue-setup"]

    def test_no_labels_keeps_all(self, mixed_corpus):
        assert filter_by_labels(mixed_corpus, []) == mixed_corpus

    def test_document_without_tags(self, doc_factory):
        assert filter_by_labels([doc_factory("x")], ["react"]) == []


class TestGroupFilter:

    def test_keeps_group(self, mixed_corpus):
        assert ids(filter_by_group(mixed_corpus, "team")) == ["backend-api", "chinese-template"]

    def test_unknown_group_gives_empty_corpus(self, mixed_corpus):
        assert filter_by_group(mixed_corpus, "missing") == []

    def test_no_group_keeps_all(self, mixed_corpus):
        assert filter_by_group(mixed_corpus, None) == mixed_corpus


class TestApplyFilters:

    def test_and_composition(self, mixed_corpus):
        criteria = FilterCriteria(kind=DocumentKind.CONTEXT, labels=["api", "react"], source_group="team")
        assert ids(apply_filters(mixed_corpus, criteria)) == ["backend-api"]

    def test_empty_criteria(self, mixed_corpus):
        assert apply_filters(mixed_corpus, FilterCriteria()) == mixed_corpus

    def test_does_not_mutate_input(self, mixed_corpus):
        original = list(mixed_corpus)
        apply_filters(mixed_corpus, FilterCriteria(source_group="team"))
        assert mixed_corpus == original
