import re

import pytest

from tidytopics.data_acquisition.corpus_loader import Document
from tidytopics.data_preprocessing import text_normalizer
from tidytopics.data_preprocessing.text_normalizer import TextNormalizer

SAMPLE = (
    "In 2019, the 3 researchers agreed: running experiments generously "
    "isn't cheap!!  Their findings,   however, were   conclusive (p < 0.05)."
)


def test_normalize_applies_every_step(normalizer):
    assert normalizer.normalize("The 3 cats were running, quickly!") == "cat run quick"


def test_removes_digits_and_punctuation(normalizer):
    out = normalizer.normalize(SAMPLE)

    assert not re.search(r"\d", out)
    assert not re.search(r"[^\w\s]", out)
    assert out == out.lower()
    assert "  " not in out
    assert out == out.strip()


def test_stopwords_removed_before_stemming(normalizer):
    # "the" and "were" are whole-word stopwords; "there" is also one
    out = normalizer.normalize("The dogs were there").split()

    assert out == ["dog"]


def test_stemming_runs_on_lowercased_words(normalizer):
    assert normalizer.normalize("RUNNING Runners") == normalizer.normalize("running runners")


def test_normalize_is_idempotent(normalizer):
    once = normalizer.normalize(SAMPLE)
    assert normalizer.normalize(once) == once


@pytest.mark.parametrize("text", ["İstanbul", "DİYARBAKIR ve İzmir"])
def test_normalize_is_idempotent_when_lowercasing_adds_marks(normalizer, text):
    once = normalizer.normalize(text)

    assert "̇" not in once
    assert normalizer.normalize(once) == once


def test_stem_reaches_a_fixed_point(normalizer):
    for word in ["agreed", "generously", "conditional", "happiness", "running"]:
        stem = normalizer.stem(word)
        assert normalizer.stem(stem) == stem


def test_empty_text(normalizer):
    assert normalizer.normalize("") == ""
    assert normalizer.normalize("123 ... !!!") == ""


def test_custom_stopwords_are_case_insensitive():
    normalizer = TextNormalizer(stopwords=["Cat"], verbose=False)
    assert normalizer.normalize("cat dog") == "dog"


def test_default_stopwords_come_from_nltk(monkeypatch):
    monkeypatch.setattr(text_normalizer, "load_stopwords", lambda language: {"dog"})
    normalizer = TextNormalizer(verbose=False)
    assert normalizer.normalize("cat dog") == "cat"


def test_normalize_documents_keeps_order_and_ids(normalizer):
    docs = [Document(f"{i}.txt", f"Document number {i} talks about cats") for i in range(5)]

    out = normalizer.normalize_documents(docs)

    assert [d.document_id for d in out] == [d.document_id for d in docs]
    assert all(d.normalized_text == "document number talk cat" for d in out)
    # inputs untouched
    assert all(d.normalized_text is None for d in docs)


def test_parallel_normalization_matches_sequential(stopwords):
    docs = [Document(f"{i}.txt", text) for i, text in enumerate([SAMPLE, "Cats chase mice.", "Banks raise rates."])]
    sequential = TextNormalizer(stopwords=stopwords, n_jobs=1, verbose=False).normalize_documents(docs)
    parallel = TextNormalizer(stopwords=stopwords, n_jobs=2, verbose=False).normalize_documents(docs)

    assert parallel == sequential


@pytest.mark.parametrize("text", ["Hello, World!", "x_y z", "naïve café"])
def test_output_contains_only_word_characters(normalizer, text):
    assert re.fullmatch(r"[\w ]*", normalizer.normalize(text))
