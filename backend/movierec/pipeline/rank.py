"""Cosine-similarity ranking of candidates against the target."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import structlog

from ..data.documents import Document, poster_url
from ..models.tfidf import TARGET_INDEX, TermWeightModel
from ..service.config import config

logger = structlog.get_logger(__name__)

@dataclass
class Recommendation:
    """A ranked candidate."""

    id: int
    title: str
    release_date: Optional[str]
    vote_average: float
    poster_url: str
    score: float

    @classmethod
    def from_document(cls, doc: Document, score: float) -> "Recommendation":
        return cls(
            id=doc.id,
            title=doc.title,
            release_date=doc.release_date,
            vote_average=doc.vote_average,
            poster_url=poster_url(doc.poster_path),
            score=score,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape used by the HTTP API."""
        return {
            'tmdb_id': self.id,
            'title': self.title,
            'poster_url': self.poster_url,
            'release_date': self.release_date,
            'vote_average': self.vote_average,
            'score': self.score,
        }

def cosine_scores(model: TermWeightModel) -> np.ndarray:
    """Cosine similarity of every candidate row to the target row.

    Rows with a zero norm, or a zero-norm target, score 0.
    """
    if model.n_documents <= 1:
        return np.zeros(0)

    target = model.vector(TARGET_INDEX)
    # Sparse dot product: only shared terms contribute
    dots = np.asarray((model.matrix[1:] @ target.T).todense()).ravel()

    norms = model.norms()
    target_norm = norms[TARGET_INDEX]
    candidate_norms = norms[1:]

    scores = np.zeros(len(candidate_norms))
    if target_norm <= 0:
        return scores

    valid = candidate_norms > 0
    scores[valid] = dots[valid] / (target_norm * candidate_norms[valid])
    # Float rounding can push identical vectors just past 1
    return np.minimum(scores, 1.0)

def rank(model: TermWeightModel,
         target: Document,
         candidates: Sequence[Document],
         top_n: int = None) -> List[Recommendation]:
    """Score candidates by cosine similarity and return the top N, best first."""
    if top_n is None:
        top_n = config.TOP_N

    scores = cosine_scores(model)

    scored = []
    for candidate, score in zip(candidates, scores):
        if candidate.id == target.id:
            continue
        if score <= 0:
            continue
        scored.append((candidate, float(score)))

    # Stable sort keeps retrieval order among equal scores
    scored.sort(key=lambda pair: pair[1], reverse=True)

    logger.debug("Candidates ranked",
                 target_id=target.id,
                 candidates=len(candidates),
                 scored=len(scored),
                 top_n=top_n)

    return [Recommendation.from_document(doc, score) for doc, score in scored[:top_n]]
