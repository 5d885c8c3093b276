"""Request-scoped TF-IDF term weights over a target and its candidates."""

from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import structlog
from scipy.sparse import csr_matrix
from sklearn.feature_extraction.text import TfidfVectorizer

from ..data.documents import Document

logger = structlog.get_logger(__name__)

TARGET_INDEX = 0

class TermWeightModel:
    """Sparse TF-IDF vectors for one scoped corpus.

    Row 0 is the target; rows 1..C are the candidates in retrieval order.
    Weights are raw term count times smoothed IDF, without length
    normalization.
    """

    def __init__(self, matrix: csr_matrix, vocabulary: Sequence[str], idf: np.ndarray):
        self.matrix = matrix
        self.vocabulary = list(vocabulary)
        self.idf = idf
        self._columns = {term: col for col, term in enumerate(self.vocabulary)}

    @property
    def n_documents(self) -> int:
        return self.matrix.shape[0]

    def vector(self, index: int) -> csr_matrix:
        """Sparse 1 x V row for a document."""
        return self.matrix[index:index + 1]

    def terms(self, index: int) -> List[Tuple[str, float]]:
        """``(term, weight)`` pairs with non-zero frequency in a document."""
        row = self.vector(index)
        return [(self.vocabulary[col], float(weight)) for col, weight in zip(row.indices, row.data)]

    def idf_of(self, term: str) -> Optional[float]:
        """IDF of a term in this scoped corpus, or None when unseen."""
        column = self._columns.get(term)
        return float(self.idf[column]) if column is not None else None

    def norms(self) -> np.ndarray:
        """Euclidean norm of every row."""
        squared = self.matrix.multiply(self.matrix).sum(axis=1)
        return np.sqrt(np.asarray(squared).ravel())

def build_model(target: Document, candidates: Sequence[Document], stop_words=None) -> TermWeightModel:
    """Fit TF-IDF weights over ``[target] + candidates``."""
    texts = [target.tags or ""] + [c.tags or "" for c in candidates]

    vectorizer = TfidfVectorizer(
        token_pattern=r"(?u)\S+",
        lowercase=True,
        stop_words=stop_words,
        norm=None,
        use_idf=True,
        smooth_idf=True,
        sublinear_tf=False,
    )

    try:
        matrix = vectorizer.fit_transform(texts)
    except ValueError:
        # Every document is empty (or only stop words)
        logger.debug("Empty vocabulary", documents=len(texts))
        return TermWeightModel(csr_matrix((len(texts), 0)), [], np.zeros(0))

    vocabulary = vectorizer.get_feature_names_out()
    logger.debug("TF-IDF model built", documents=len(texts), vocabulary=len(vocabulary))
    return TermWeightModel(matrix.tocsr(), vocabulary, vectorizer.idf_)
