"""Content-based recommendation engine.

Given a resolved target document the engine retrieves candidates from the
corpus store, builds TF-IDF weights over ``{target} + candidates`` and ranks
candidates by cosine similarity to the target. Term weights are rebuilt on
every call because document frequencies depend on the candidate pool, so two
movies can score differently depending on which one is the target.

The engine is a best-effort layer: ``recommend`` never raises and degrades to
an empty list.
"""

import asyncio
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

import structlog

from ..data.documents import Document
from ..data.store import CorpusStore
from ..models.tfidf import build_model
from ..service.config import config
from .rank import Recommendation, rank
from .recall import CandidateRetriever

logger = structlog.get_logger(__name__)

# Default for stop_words: take the configured setting. None disables removal.
_FROM_CONFIG = object()

class RecommendationEngine:
    """Stateless recommender over a corpus store."""

    def __init__(self,
                 store: CorpusStore,
                 candidate_limit: int = None,
                 top_n: int = None,
                 stop_words=_FROM_CONFIG):
        self.retriever = CandidateRetriever(store, limit=candidate_limit)
        self.top_n = top_n if top_n is not None else config.TOP_N
        self.stop_words = config.tfidf_stop_words if stop_words is _FROM_CONFIG else stop_words

    @property
    def store(self) -> CorpusStore:
        return self.retriever.store

    def recommend(self, target: Document) -> List[Recommendation]:
        """Top-N similar documents for ``target``, best first."""
        try:
            if not (target.tags or "").strip():
                logger.info("Target has no tags", target_id=target.id)
                return []
            candidates = self.retriever.retrieve_candidates(target)
            return self._score(target, candidates)
        except Exception as e:
            logger.error("Recommendation engine error",
                         target_id=getattr(target, "id", None),
                         error=str(e))
            return []

    async def arecommend(self, target: Document, timeout: Optional[float] = None) -> List[Recommendation]:
        """Async ``recommend``; only the retrieval step is awaited.

        ``timeout`` bounds the retrieval call. On timeout the engine ranks an
        empty candidate set, which yields no recommendations.
        """
        try:
            if not (target.tags or "").strip():
                return []
            loop = asyncio.get_running_loop()
            retrieval = loop.run_in_executor(None, self.retriever.retrieve_candidates, target)
            try:
                candidates = await asyncio.wait_for(retrieval, timeout)
            except asyncio.TimeoutError:
                logger.warning("Candidate retrieval timed out", target_id=target.id, timeout_s=timeout)
                candidates = []
            return self._score(target, candidates)
        except Exception as e:
            logger.error("Recommendation engine error",
                         target_id=getattr(target, "id", None),
                         error=str(e))
            return []

    def recommend_many(self, targets: Sequence[Document], max_workers: int = 4) -> List[List[Recommendation]]:
        """Run independent recommendations in parallel; results follow input order."""
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(self.recommend, targets))

    def _score(self, target: Document, candidates: Sequence[Document]) -> List[Recommendation]:
        if not candidates:
            return []

        start_time = time.time()
        model = build_model(target, candidates, stop_words=self.stop_words)
        results = rank(model, target, candidates, top_n=self.top_n)

        logger.info("Recommendations computed",
                    target_id=target.id,
                    candidates=len(candidates),
                    vocabulary=len(model.vocabulary),
                    results=len(results),
                    latency_ms=(time.time() - start_time) * 1000)
        return results
