"""Corpus store: movie documents behind a title lookup and a full-text search."""

import math
import threading
from abc import ABC, abstractmethod
from collections import Counter, defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd
import structlog
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

from .documents import Document, normalize_text, tokenize

logger = structlog.get_logger(__name__)

class CorpusStore(ABC):
    """Read-mostly document store consumed by the recommendation engine."""

    @abstractmethod
    def find_by_id(self, doc_id: int) -> Optional[Document]:
        """Return the document with this id, or None."""

    @abstractmethod
    def find_by_title_exact(self, title: str) -> Optional[Document]:
        """Case-insensitive exact title match, or None."""

    @abstractmethod
    def search_text(self, query: str, limit: int) -> List[Document]:
        """Relevance-ranked full-text search over the tags field."""

    @abstractmethod
    def insert_many(self, documents: Iterable[Document]) -> int:
        """Insert documents, skipping duplicate ids. Returns the number inserted."""

    @abstractmethod
    def count(self) -> int:
        """Number of stored documents."""

class InMemoryCorpusStore(CorpusStore):
    """In-process corpus store with an incrementally maintained inverted index.

    Postings map ``term -> {doc_id: term count}``. Stop words are left out of
    the index and ignored in queries, the same way a database text index
    treats them. Search scores a document by summing, over the distinct query
    terms it contains, ``(1 + ln tf) * ln(1 + N / df)``; ties keep insertion
    order.
    """

    def __init__(self, documents: Iterable[Document] = (), stop_words=ENGLISH_STOP_WORDS):
        self.stop_words = frozenset(stop_words or ())
        self._documents: Dict[int, Document] = {}
        self._order: Dict[int, int] = {}
        self._titles: Dict[str, int] = {}
        self._postings: Dict[str, Dict[int, int]] = defaultdict(dict)
        self._lock = threading.RLock()
        if documents:
            self.insert_many(documents)

    def _index_terms(self, text: str) -> List[str]:
        return [t for t in tokenize(normalize_text(text)) if t not in self.stop_words]

    def find_by_id(self, doc_id: int) -> Optional[Document]:
        return self._documents.get(int(doc_id))

    def find_by_title_exact(self, title: str) -> Optional[Document]:
        if not title:
            return None
        doc_id = self._titles.get(title.strip().lower())
        return self._documents.get(doc_id) if doc_id is not None else None

    def search_text(self, query: str, limit: int) -> List[Document]:
        if limit <= 0:
            return []
        terms = set(self._index_terms(query))

        # Snapshot the query's postings; scoring runs outside the lock
        with self._lock:
            n_docs = len(self._documents)
            postings = {term: dict(self._postings[term]) for term in terms if self._postings.get(term)}

        scores: Dict[int, float] = defaultdict(float)
        for term, term_postings in postings.items():
            idf = math.log(1.0 + n_docs / len(term_postings))
            for doc_id, tf in term_postings.items():
                scores[doc_id] += (1.0 + math.log(tf)) * idf

        # Documents are never removed, so snapshot ids stay resolvable
        ranked = sorted(scores.items(), key=lambda kv: (-kv[1], self._order[kv[0]]))
        results = [self._documents[doc_id] for doc_id, _ in ranked[:limit]]

        logger.debug("Text search", terms=len(terms), matches=len(scores), returned=len(results))
        return results

    def insert_many(self, documents: Iterable[Document]) -> int:
        inserted = 0
        skipped = 0
        with self._lock:
            for doc in documents:
                if doc.id in self._documents:
                    skipped += 1
                    continue
                self._documents[doc.id] = doc
                self._order[doc.id] = len(self._order)
                # First title wins for exact lookups
                self._titles.setdefault(doc.title.strip().lower(), doc.id)
                for term, tf in Counter(self._index_terms(doc.tags)).items():
                    self._postings[term][doc.id] = tf
                inserted += 1

        if skipped:
            logger.warning("Skipped duplicate documents", skipped=skipped)
        logger.info("Documents inserted", inserted=inserted, total=len(self._documents))
        return inserted

    def count(self) -> int:
        return len(self._documents)

    def documents(self) -> List[Document]:
        """All documents in insertion order."""
        with self._lock:
            return sorted(self._documents.values(), key=lambda d: self._order[d.id])

    def save(self, path: str):
        """Persist the documents to a Parquet file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        df = pd.DataFrame([doc.to_dict() for doc in self.documents()],
                          columns=list(Document.__dataclass_fields__))
        df.to_parquet(path, index=False)
        logger.info("Corpus saved", path=str(path), documents=len(df))

    @classmethod
    def load(cls, path: str, **kwargs) -> "InMemoryCorpusStore":
        """Load documents saved with :meth:`save`."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Corpus file not found: {path}")

        df = pd.read_parquet(path)
        df = df.astype(object).where(pd.notna(df), None)
        documents = [Document.from_dict(row) for row in df.to_dict(orient="records")]
        logger.info("Corpus loaded", path=str(path), documents=len(documents))
        return cls(documents, **kwargs)
