"""Shared fixtures for the movierec tests."""

import pytest

from movierec.data.documents import Document
from movierec.data.store import CorpusStore

class StubStore(CorpusStore):
    """Corpus store double returning a fixed candidate list per target title."""

    def __init__(self, documents=(), pools=None, error=None):
        self.documents = {d.id: d for d in documents}
        self.pools = pools or {}
        self.error = error
        self.queries = []

    def find_by_id(self, doc_id):
        return self.documents.get(doc_id)

    def find_by_title_exact(self, title):
        for doc in self.documents.values():
            if doc.title.lower() == title.lower():
                return doc
        return None

    def search_text(self, query, limit):
        self.queries.append((query, limit))
        if self.error is not None:
            raise self.error
        for title, pool in self.pools.items():
            if query.startswith(title):
                return list(pool)[:limit]
        return []

    def insert_many(self, documents):
        before = len(self.documents)
        for doc in documents:
            self.documents.setdefault(doc.id, doc)
        return len(self.documents) - before

    def count(self):
        return len(self.documents)

@pytest.fixture
def make_doc():
    """Factory for documents with just an id, title and tags."""
    def _make(doc_id, tags, title=None, **kwargs):
        return Document(id=doc_id, title=title or f"Movie {doc_id}", tags=tags, **kwargs)
    return _make

@pytest.fixture
def stub_store():
    return StubStore
