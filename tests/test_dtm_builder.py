import pytest

from tidytopics.errors import EmptyMatrixError, UnknownDocumentError
from tidytopics.data_acquisition.corpus_loader import Document
from tidytopics.data_preprocessing.dtm_builder import DTMBuilder


def normalized(**texts):
    return [Document(f"{name}.txt", raw_text=text, normalized_text=text) for name, text in texts.items()]


def test_two_document_scenario(two_doc_dtm):
    assert two_doc_dtm.document_ids == ["a.txt", "b.txt"]
    assert "ran" in two_doc_dtm.terms
    # at 0.75 a term in 1 of 2 documents (50% zeros) survives
    assert two_doc_dtm.terms == ["bark", "cat", "dog", "mat", "park", "ran", "sat"]
    assert two_doc_dtm.counts.sum() == 10


def test_stricter_threshold_keeps_only_shared_terms(two_doc_dir, normalizer):
    from tidytopics.data_acquisition.corpus_loader import CorpusLoader

    docs = normalizer.normalize_documents(CorpusLoader(two_doc_dir, verbose=False).load())
    dtm = DTMBuilder(sparsity_threshold=0.25, verbose=False).build(docs)

    assert dtm.terms == ["ran"]
    assert dtm.document_ids == ["a.txt", "b.txt"]


def test_counts_per_document():
    dtm = DTMBuilder(sparsity_threshold=1.0, verbose=False).build(normalized(a="x y x", b="y z"))

    assert dtm.terms == ["x", "y", "z"]
    assert dtm.counts.toarray().tolist() == [[2, 1, 0], [0, 1, 1]]


def test_pruning_boundary_is_inclusive():
    docs = normalized(a="common rare", b="common half", c="common half", d="common")
    dtm = DTMBuilder(sparsity_threshold=0.5, verbose=False).build(docs)

    # half: 50% zeros == threshold -> kept; rare: 75% zeros -> dropped
    assert dtm.terms == ["common", "half"]


def test_documents_without_surviving_terms_are_dropped():
    docs = normalized(a="shared only", b="shared words", c="lonely")
    dtm = DTMBuilder(sparsity_threshold=0.5, verbose=False).build(docs)

    assert dtm.terms == ["shared"]
    assert dtm.document_ids == ["a.txt", "b.txt"]
    assert dtm.counts.shape == (2, 1)


def test_pruning_everything_raises():
    docs = normalized(a="alpha", b="beta", c="gamma")
    with pytest.raises(EmptyMatrixError):
        DTMBuilder(sparsity_threshold=0.0, verbose=False).build(docs)


def test_empty_corpus_raises():
    with pytest.raises(EmptyMatrixError):
        DTMBuilder(verbose=False).build(normalized(a="", b=""))
    with pytest.raises(EmptyMatrixError):
        DTMBuilder(verbose=False).build([])


@pytest.mark.parametrize("threshold", [-0.1, 1.5])
def test_threshold_must_be_a_fraction(threshold):
    with pytest.raises(ValueError):
        DTMBuilder(sparsity_threshold=threshold)


def test_tidy_lists_nonzero_cells_in_row_order():
    dtm = DTMBuilder(sparsity_threshold=1.0, verbose=False).build(normalized(a="x y x", b="y z"))
    tidy = dtm.tidy()

    assert list(tidy.columns) == ["document", "term", "count"]
    assert tidy.values.tolist() == [
        ["a.txt", "x", 2], ["a.txt", "y", 1], ["b.txt", "y", 1], ["b.txt", "z", 1]
    ]


def test_sparsity_and_row_lookup():
    dtm = DTMBuilder(sparsity_threshold=1.0, verbose=False).build(normalized(a="x y x", b="y z"))

    assert dtm.sparsity == pytest.approx(2 / 6)
    assert dtm.row_index("b.txt") == 1
    with pytest.raises(UnknownDocumentError):
        dtm.row_index("missing.txt")
