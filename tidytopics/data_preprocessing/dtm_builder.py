# tidytopics/data_preprocessing/dtm_builder.py
"""
dtm_builder.py
----------------------
Stage 2: Document-Term Matrix

Purpose:
- Tokenize normalized text on whitespace and count terms per document
- Prune sparse terms (too few documents contain them)
- Drop documents left without any term

Input:  list[Document] with normalized_text
Output: DocumentTermMatrix (scipy CSR counts + row/column labels)
"""

from dataclasses import dataclass
from typing import List

import numpy as np
import pandas as pd
from scipy import sparse
from sklearn.feature_extraction.text import CountVectorizer

from tidytopics.errors import EmptyMatrixError, UnknownDocumentError
from tidytopics.data_acquisition.corpus_loader import Document
from tidytopics.data_preprocessing.preprocess_constants import DEFAULT_SPARSITY_THRESHOLD


@dataclass(frozen=True)
class DocumentTermMatrix:
    counts: sparse.csr_matrix
    document_ids: List[str]
    terms: List[str]

    @property
    def n_documents(self) -> int:
        return self.counts.shape[0]

    @property
    def n_terms(self) -> int:
        return self.counts.shape[1]

    @property
    def sparsity(self) -> float:
        """Share of zero cells."""
        cells = self.n_documents * self.n_terms
        return 1.0 - self.counts.nnz / cells if cells else 0.0

    def row_index(self, document_id: str) -> int:
        try:
            return self.document_ids.index(document_id)
        except ValueError:
            raise UnknownDocumentError(f"Document not in matrix: {document_id}") from None

    def tidy(self) -> pd.DataFrame:
        """Long table of non-zero cells: document, term, count."""
        coo = self.counts.tocoo()
        order = np.lexsort((coo.col, coo.row))
        return pd.DataFrame({
            "document": np.asarray(self.document_ids, dtype=object)[coo.row[order]],
            "term": np.asarray(self.terms, dtype=object)[coo.col[order]],
            "count": coo.data[order].astype(int),
        })


class DTMBuilder:
    """Count terms per document and apply sparsity pruning."""

    def __init__(self, sparsity_threshold: float = DEFAULT_SPARSITY_THRESHOLD, verbose: bool = True):
        """
        Args:
            sparsity_threshold (float): Largest allowed fraction of documents
                without the term. 0.75 keeps terms found in >= 25% of documents.
        """
        if not 0.0 <= sparsity_threshold <= 1.0:
            raise ValueError(f"sparsity_threshold must be within [0, 1], got {sparsity_threshold}")
        self.sparsity_threshold = sparsity_threshold
        self.verbose = verbose

    def count_terms(self, documents: List[Document]):
        """Raw counts before pruning. Returns (csr matrix, terms)."""
        texts = [doc.normalized_text or "" for doc in documents]
        vectorizer = CountVectorizer(analyzer=str.split)
        try:
            counts = vectorizer.fit_transform(texts)
        except ValueError as e:
            # sklearn refuses an empty vocabulary
            raise EmptyMatrixError(f"No terms found in the corpus: {e}") from e
        return counts.tocsr(), list(vectorizer.get_feature_names_out())

    def prune(self, counts: sparse.csr_matrix) -> np.ndarray:
        """Boolean mask of the terms that survive the sparsity threshold."""
        n_docs = counts.shape[0]
        doc_freq = np.asarray((counts > 0).sum(axis=0)).ravel()
        zero_fraction = 1.0 - doc_freq / n_docs
        too_sparse = (zero_fraction > self.sparsity_threshold) & ~np.isclose(zero_fraction, self.sparsity_threshold)
        return ~too_sparse

    def build(self, documents: List[Document]) -> DocumentTermMatrix:
        if not documents:
            raise EmptyMatrixError("No documents to build a matrix from.")

        counts, terms = self.count_terms(documents)
        if self.verbose:
            print(f"[DTM] Raw matrix: {counts.shape[0]} documents x {counts.shape[1]} terms")

        keep_terms = self.prune(counts)
        counts = counts[:, keep_terms]
        terms = [t for t, keep in zip(terms, keep_terms) if keep]

        keep_docs = np.asarray(counts.sum(axis=1)).ravel() > 0
        counts = counts[keep_docs]
        document_ids = [doc.document_id for doc, keep in zip(documents, keep_docs) if keep]

        if not terms or not document_ids:
            raise EmptyMatrixError(
                f"Sparsity pruning (threshold={self.sparsity_threshold}) removed every term."
            )

        dropped_docs = len(documents) - len(document_ids)
        if dropped_docs and self.verbose:
            print(f"[Warning] {dropped_docs} documents have no terms left after pruning; dropping them.")

        dtm = DocumentTermMatrix(
            counts=sparse.csr_matrix(counts, dtype=np.int64),
            document_ids=document_ids,
            terms=terms,
        )
        if self.verbose:
            print(f"[DTM] Pruned matrix: {dtm.n_documents} documents x {dtm.n_terms} terms "
                  f"(sparsity {dtm.sparsity:.0%})")
        return dtm


if __name__ == "__main__":
    import sys
    from tidytopics.data_acquisition.corpus_loader import CorpusLoader
    from tidytopics.data_preprocessing.text_normalizer import TextNormalizer

    docs = CorpusLoader(sys.argv[1] if len(sys.argv) > 1 else "data/raw").load()
    docs = TextNormalizer().normalize_documents(docs)
    dtm = DTMBuilder(sparsity_threshold=DEFAULT_SPARSITY_THRESHOLD).build(docs)
    print(dtm.tidy().head(20))

# Run it like this -
# python -m tidytopics.data_preprocessing.dtm_builder data/raw
