"""
Corpus providers and repository resolvers.

The search engine consumes a flat list of IndexedDocument. Where it comes from
is behind CorpusProvider:
- InMemoryCorpusProvider: fixed list (tests, embedding applications)
- IndexCacheCorpusProvider: JSON index cache written by the external indexer

Every get_documents() call returns a fresh list, so a concurrent refresh never
changes a corpus that a search is already ranking.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .models import DocumentKind, IndexedDocument

logger = logging.getLogger(__name__)

INDEX_CACHE_VERSION = 1


class CorpusProvider(ABC):
    """Source of indexed documents"""

    @abstractmethod
    def get_documents(self, groups: Optional[Iterable[str]] = None) -> List[IndexedDocument]:
        """
        Snapshot of the documents belonging to groups.

        Args:
            groups: Source group names to include (None = all)

        Returns:
            New list, in index order
        """
        pass

    def refresh(self):
        """Optional: drop cached state so the next call reloads"""
        pass


class RepositoryResolver(ABC):
    """Source of known repository (source group) names"""

    @abstractmethod
    def list_groups(self) -> List[str]:
        pass


def _select(documents: Iterable[IndexedDocument], groups: Optional[Iterable[str]]) -> List[IndexedDocument]:
    if groups is None:
        return list(documents)
    wanted = set(groups)
    return [doc for doc in documents if doc.source_group in wanted]


class InMemoryCorpusProvider(CorpusProvider):

    def __init__(self, documents: Iterable[IndexedDocument]):
        self._documents = tuple(documents)

    def get_documents(self, groups: Optional[Iterable[str]] = None) -> List[IndexedDocument]:
        return _select(self._documents, groups)


def document_from_cache_entry(entry: Dict[str, Any]) -> IndexedDocument:
    """
    Convert one index cache entry to an IndexedDocument.

    Raises:
        KeyError: required key missing
        ValueError: unknown template type
    """
    return IndexedDocument(
        id=str(entry["id"]),
        kind=DocumentKind(entry["type"]),
        name=str(entry.get("name") or ""),
        tags=tuple(str(tag) for tag in entry.get("labels") or ()),
        summary=str(entry.get("summary") or ""),
        source_group=str(entry["repoName"]),
        path=entry.get("absPath"),
        last_modified=entry.get("lastModified"),
    )


class IndexCacheCorpusProvider(CorpusProvider):
    """
    Reads the JSON index cache:

        {
            "version": 1,
            "lastUpdated": 1718000000000,
            "templates": [
                {"id": ..., "type": "prompt" | "context", "name": ..., "labels": [...],
                 "summary": ..., "repoName": ..., "absPath": ..., "lastModified": ...}
            ]
        }

    A missing, unreadable, malformed or outdated cache yields an empty corpus. Broken
    entries are skipped. The parsed corpus is kept until the file's mtime
    changes or refresh() is called.
    """

    def __init__(self, cache_path: Union[str, Path]):
        self.cache_path = Path(cache_path).expanduser()
        self._cached: Optional[Tuple[int, Tuple[IndexedDocument, ...]]] = None

    def refresh(self):
        self._cached = None

    def get_documents(self, groups: Optional[Iterable[str]] = None) -> List[IndexedDocument]:
        return _select(self._load(), groups)

    def _load(self) -> Tuple[IndexedDocument, ...]:
        try:
            mtime = self.cache_path.stat().st_mtime_ns
        except FileNotFoundError:
            logger.debug(f"Index cache not found: {self.cache_path}")
            return ()
        except OSError as e:
            logger.warning(f"Cannot stat index cache {self.cache_path}: {e}")
            return ()

        if self._cached is not None and self._cached[0] == mtime:
            return self._cached[1]

        documents = self._read()
        self._cached = (mtime, documents)
        return documents

    def _read(self) -> Tuple[IndexedDocument, ...]:
        try:
            with open(self.cache_path, "r", encoding="utf-8") as f:
                index = json.load(f)
        except (OSError, ValueError) as e:  # JSONDecodeError, UnicodeDecodeError
            logger.warning(f"Failed to read index cache {self.cache_path}: {e}")
            return ()

        if not isinstance(index, dict) or index.get("version") != INDEX_CACHE_VERSION:
            version = index.get("version") if isinstance(index, dict) else None
            logger.debug(f"Index cache version mismatch: {version} (expected {INDEX_CACHE_VERSION})")
            return ()

        templates = index.get("templates") or []
        if not isinstance(templates, list):
            logger.warning(f"Index cache {self.cache_path} has no template list: {type(templates).__name__}")
            return ()

        documents = []
        for entry in templates:
            try:
                documents.append(document_from_cache_entry(entry))
            except (KeyError, TypeError, ValueError) as e:
                logger.debug(f"Skipping malformed index entry {entry!r}: {e}")

        logger.info(f"Loaded {len(documents)} documents from index cache {self.cache_path}")
        return tuple(documents)


class StaticRepositoryResolver(RepositoryResolver):

    def __init__(self, names: Iterable[str]):
        self._names = list(names)

    def list_groups(self) -> List[str]:
        return list(self._names)


class CorpusRepositoryResolver(RepositoryResolver):
    """Known groups = distinct source groups present in the corpus, in corpus order"""

    def __init__(self, provider: CorpusProvider):
        self.provider = provider

    def list_groups(self) -> List[str]:
        groups: Dict[str, None] = {}
        for doc in self.provider.get_documents():
            groups[doc.source_group] = None
        return list(groups)
