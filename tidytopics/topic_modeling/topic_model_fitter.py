# tidytopics/topic_modeling/topic_model_fitter.py
"""
Topic Model Fitter: Stage 3
--------------------
Fits an LDA model on a document-term matrix and stores the fitted model.

Responsibilities:
- Validate the topic count against the matrix before any fitting.
- Fit scikit-learn's LatentDirichletAllocation (optionally seeded).
- Expose the term-topic (beta) and document-topic (gamma) tables.
- Save / load model artifacts with joblib.

Without a seed, topic assignments change from run to run.
"""

import numbers
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import joblib
import numpy as np
from sklearn.decomposition import LatentDirichletAllocation

from tidytopics.errors import FitterTimeoutError, InvalidTopicCountError
from tidytopics.data_preprocessing.dtm_builder import DocumentTermMatrix
from tidytopics.topic_modeling.constants import (
    DEFAULT_MAX_ITER,
    DEFAULT_LEARNING_METHOD,
    TOPIC_MODEL_OUTPUT
)

MODEL_DIR = Path(__file__).parents[2] / "data" / "models"


@dataclass(frozen=True)
class TopicModel:
    """Fitted LDA model with its row and column labels. Topics are numbered 1..k."""
    estimator: LatentDirichletAllocation
    document_ids: List[str]
    terms: List[str]
    beta: np.ndarray   # k x n_terms, rows sum to 1
    gamma: np.ndarray  # n_documents x k, rows sum to 1
    seed: Optional[int] = None

    @property
    def k(self) -> int:
        return self.beta.shape[0]

    @property
    def topics(self) -> List[int]:
        return list(range(1, self.k + 1))


def validate_topic_count(k, dtm: DocumentTermMatrix) -> int:
    """Raise InvalidTopicCountError unless 1 <= k <= min(documents, terms)."""
    if isinstance(k, bool) or not isinstance(k, numbers.Integral):
        raise InvalidTopicCountError(f"k must be a positive integer, got {k!r}")
    if k < 1:
        raise InvalidTopicCountError(f"k must be a positive integer, got {k}")
    if k > dtm.n_documents:
        raise InvalidTopicCountError(f"k={k} exceeds the number of documents ({dtm.n_documents})")
    if k > dtm.n_terms:
        raise InvalidTopicCountError(f"k={k} exceeds the vocabulary size ({dtm.n_terms})")
    return int(k)


def _row_normalize(matrix: np.ndarray) -> np.ndarray:
    totals = matrix.sum(axis=1, keepdims=True)
    totals[totals == 0] = 1.0
    return matrix / totals


class TopicModelFitter:
    def __init__(
            self,
            k: int,
            seed: Optional[int] = None,
            max_iter: int = DEFAULT_MAX_ITER,
            learning_method: str = DEFAULT_LEARNING_METHOD,
            timeout: Optional[float] = None,
            verbose: bool = True
            ):
        """
        Args:
            k (int): Number of topics. Required, checked against the matrix in fit().
            seed (int): random_state for LDA. None gives a different model each run.
            max_iter (int): EM iterations.
            timeout (float): Seconds to wait for the fit before FitterTimeoutError.
        """
        self.k = k
        self.seed = seed
        self.max_iter = max_iter
        self.learning_method = learning_method
        self.timeout = timeout
        self.verbose = verbose

    def _new_estimator(self, k: int) -> LatentDirichletAllocation:
        return LatentDirichletAllocation(
            n_components=k,
            max_iter=self.max_iter,
            learning_method=self.learning_method,
            random_state=self.seed,
        )

    def _run_fit(self, estimator, counts):
        if self.timeout is None:
            return estimator.fit_transform(counts)

        # Daemon worker: an abandoned fit must not keep the interpreter alive at exit
        outcome = {}

        def work():
            try:
                outcome["result"] = estimator.fit_transform(counts)
            except BaseException as e:
                outcome["error"] = e

        worker = threading.Thread(target=work, name="lda-fit", daemon=True)
        worker.start()
        worker.join(self.timeout)
        if worker.is_alive():
            raise FitterTimeoutError(f"LDA fit did not finish within {self.timeout} seconds")
        if "error" in outcome:
            raise outcome["error"]
        return outcome["result"]

    def fit(self, dtm: DocumentTermMatrix) -> TopicModel:
        """Validate k, then fit LDA on the matrix."""
        k = validate_topic_count(self.k, dtm)

        if self.verbose:
            seed_info = self.seed if self.seed is not None else "none (non-deterministic)"
            print(f"[Fit] LDA with k={k} on {dtm.n_documents} documents x {dtm.n_terms} terms, seed={seed_info}")

        start = time.perf_counter()
        estimator = self._new_estimator(k)
        doc_topic = self._run_fit(estimator, dtm.counts)

        model = TopicModel(
            estimator=estimator,
            document_ids=list(dtm.document_ids),
            terms=list(dtm.terms),
            beta=_row_normalize(np.asarray(estimator.components_, dtype=float)),
            gamma=_row_normalize(np.asarray(doc_topic, dtype=float)),
            seed=self.seed,
        )
        if self.verbose:
            print(f"[Done] Model fitted in {time.perf_counter() - start:.2f}s "
                  f"({estimator.n_iter_} iterations, perplexity {estimator.perplexity(dtm.counts):.1f})")
        return model


def save_model(model: TopicModel, path=None) -> Path:
    """Persist a fitted TopicModel with joblib."""
    path = Path(path) if path is not None else MODEL_DIR / TOPIC_MODEL_OUTPUT
    path.parent.mkdir(parents=True, exist_ok=True)
    joblib.dump(model, path)
    print(f"[Saved] Topic model in {path}")
    return path


def load_model(path=None) -> TopicModel:
    path = Path(path) if path is not None else MODEL_DIR / TOPIC_MODEL_OUTPUT
    if not path.exists():
        raise FileNotFoundError(f"Topic model not found at {path}")
    model = joblib.load(path)
    if not isinstance(model, TopicModel):
        raise ValueError(f"{path} does not hold a TopicModel")
    print(f"Loaded topic model from {path}")
    return model


if __name__ == "__main__":
    import sys
    from tidytopics.data_acquisition.corpus_loader import CorpusLoader
    from tidytopics.data_preprocessing.text_normalizer import TextNormalizer
    from tidytopics.data_preprocessing.dtm_builder import DTMBuilder

    start = time.perf_counter()
    docs = TextNormalizer().normalize_documents(CorpusLoader(sys.argv[1]).load())
    dtm = DTMBuilder().build(docs)
    topic_model = TopicModelFitter(k=int(sys.argv[2]), seed=1234).fit(dtm)
    model_path = save_model(topic_model)
    print(f"[Info] Model saved at: {model_path}")

    total = time.perf_counter() - start
    print(f"[Total] End-to-end execution time: {total/60:.2f} minutes")

# Run it like this -
# python -m tidytopics.topic_modeling.topic_model_fitter data/raw 2
