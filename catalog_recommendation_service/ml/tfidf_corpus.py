"""TF-IDF reference corpus for scoring candidates against liked content."""
import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np
from scipy.sparse import csr_matrix
from sklearn.feature_extraction.text import CountVectorizer, TfidfVectorizer  # type: ignore

from catalog_recommendation_service.engine.types import ContentItem
from catalog_recommendation_service.ml.text_processor import build_document_text

logger = logging.getLogger(__name__)


class TfidfCorpus:
    """
    TF-IDF model over a small set of reference documents.

    Each document is an explicit ``(content_id, text)`` pair; relevance of a
    query against a document is looked up by the document's index, never by
    the position of some other list.

    Relevance of a query against document d is the sum over the query's
    tokens of tf-idf(token, d), using raw term counts in d and smoothed idf
    over the reference documents.
    """

    def __init__(
        self,
        documents: Sequence[Tuple[int, str]],
        stop_words: Optional[str] = 'english'
    ):
        """
        Initialize the corpus.

        Args:
            documents: (content_id, document_text) pairs
            stop_words: Stop word list passed to scikit-learn
        """
        self.documents: List[Tuple[int, str]] = list(documents)
        self.stop_words = stop_words

        self.tfidf_vectorizer: Optional[TfidfVectorizer] = None
        self.query_vectorizer: Optional[CountVectorizer] = None
        self._document_matrix: Optional[csr_matrix] = None
        self._fitted = False

    @classmethod
    def from_items(cls, items: Sequence[ContentItem], **kwargs) -> "TfidfCorpus":
        """Build a fitted corpus with one document per content item."""
        documents = [(item.id, build_document_text(item)) for item in items]
        return cls(documents, **kwargs).fit()

    def __len__(self) -> int:
        return len(self.documents)

    def fit(self) -> "TfidfCorpus":
        """
        Fit the TF-IDF model on the reference documents.

        An empty corpus, or one whose documents contain only stop words,
        leaves the model without a vocabulary; every relevance is then 0.

        Returns:
            self
        """
        self._fitted = True
        if not self.documents:
            return self

        self.tfidf_vectorizer = TfidfVectorizer(
            norm=None,
            stop_words=self.stop_words,
            strip_accents='unicode'
        )

        try:
            self._document_matrix = csr_matrix(
                self.tfidf_vectorizer.fit_transform([text for _, text in self.documents])
            )
        except ValueError as e:
            logger.warning(f"TF-IDF corpus has no usable vocabulary: {e}")
            self.tfidf_vectorizer = None
            self._document_matrix = None
            return self

        self.query_vectorizer = CountVectorizer(
            vocabulary=self.tfidf_vectorizer.vocabulary_,
            stop_words=self.stop_words,
            strip_accents='unicode'
        )

        logger.debug(
            f"Fitted TF-IDF corpus: {len(self.documents)} documents, "
            f"{len(self.tfidf_vectorizer.vocabulary_)} terms"
        )
        return self

    def relevance_matrix(self, texts: Sequence[str]) -> np.ndarray:
        """
        Compute relevance of each query text against every document.

        Args:
            texts: Query texts

        Returns:
            Array of shape (len(texts), len(documents))
        """
        if not self._fitted:
            raise RuntimeError("TfidfCorpus.fit() must be called before scoring")

        n_queries = len(texts)
        if self._document_matrix is None or n_queries == 0:
            return np.zeros((n_queries, len(self.documents)))

        query_counts = self.query_vectorizer.transform(list(texts))
        relevance = query_counts @ self._document_matrix.T

        return np.asarray(relevance.toarray(), dtype=float)

    def similarity_scores(self, texts: Sequence[str]) -> Tuple[np.ndarray, np.ndarray]:
        """
        Average and maximum relevance of each query over all documents.

        Args:
            texts: Query texts

        Returns:
            (average, maximum) arrays of length len(texts); zeros when the
            corpus has no documents
        """
        relevance = self.relevance_matrix(texts)

        if relevance.shape[1] == 0:
            zeros = np.zeros(len(texts))
            return zeros, zeros.copy()

        return relevance.mean(axis=1), relevance.max(axis=1)
