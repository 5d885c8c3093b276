"""Candidate retrieval from the corpus store."""

import time
from typing import List

import structlog

from ..data.documents import Document
from ..data.store import CorpusStore
from ..service.config import config

logger = structlog.get_logger(__name__)

class CandidateRetriever:
    """Pulls a bounded, relevance-ordered candidate set for a target."""

    def __init__(self, store: CorpusStore, limit: int = None):
        self.store = store
        self.limit = limit if limit is not None else config.CANDIDATE_LIMIT

    @staticmethod
    def build_query(target: Document) -> str:
        """Title plus tags, so same-franchise titles surface too."""
        return f"{target.title} {target.tags or ''}".strip()

    def retrieve_candidates(self, target: Document) -> List[Document]:
        """Return up to ``limit`` candidates in store relevance order.

        The target itself may be among them. Store failures give an empty list.
        """
        start_time = time.time()
        try:
            candidates = list(self.store.search_text(self.build_query(target), self.limit))
        except Exception as e:
            logger.error("Candidate retrieval failed", target_id=target.id, error=str(e))
            return []

        candidates = candidates[:self.limit]
        latency = (time.time() - start_time) * 1000
        logger.info("Recall completed",
                    target_id=target.id,
                    candidates=len(candidates),
                    latency_ms=latency)
        return candidates
