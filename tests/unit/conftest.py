"""Unit test fixtures - small in-memory template corpora"""

import pytest

from template_search.models import DocumentKind, IndexedDocument


def make_doc(id, name="", tags=(), summary="", group="templates", kind=DocumentKind.PROMPT):
    return IndexedDocument(
        id=id,
        kind=kind,
        name=name,
        tags=tuple(tags),
        summary=summary,
        source_group=group,
    )


@pytest.fixture
def review_corpus():
    """Two-template corpus: one frontend prompt, one backend context"""
    return [
        make_doc(
            "frontend-review-v1",
            name="Frontend Code Review",
            tags=["frontend", "react"],
            summary="React review",
            kind=DocumentKind.PROMPT,
        ),
        make_doc(
            "backend-api-v1",
            name="Backend API",
            tags=["backend"],
            summary="RESTful design",
            kind=DocumentKind.CONTEXT,
        ),
    ]


@pytest.fixture
def mixed_corpus():
    """Latin and Chinese templates across two repositories"""
    return [
        make_doc(
            "react-component",
            name="React Component Template",
            tags=["react", "frontend", "component"],
            summary="A template for creating React components",
            kind=DocumentKind.CONTEXT,
        ),
        make_doc(
            "vue-setup",
            name="Vue 3 Setup Guide",
            tags=["vue", "frontend", "setup"],
            summary="Guide for setting up Vue 3 projects",
        ),
        make_doc(
            "backend-api",
            name="Backend API Template",
            tags=["backend", "api", "nodejs"],
            summary="Template for creating backend APIs",
            kind=DocumentKind.CONTEXT,
            group="team",
        ),
        make_doc(
            "chinese-template",
            name="中文模板示例",
            tags=["中文", "示例", "chinese"],
            summary="这是一个中文模板的示例",
            group="team",
        ),
    ]


@pytest.fixture
def doc_factory():
    """Build IndexedDocument with test defaults"""
    return make_doc
