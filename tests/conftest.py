import pytest
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

from tidytopics.data_acquisition.corpus_loader import CorpusLoader
from tidytopics.data_preprocessing.text_normalizer import TextNormalizer
from tidytopics.data_preprocessing.dtm_builder import DTMBuilder
from tidytopics.topic_modeling.topic_model_fitter import TopicModelFitter

SEED = 1234

TWO_DOCS = {
    "a.txt": "The cat sat on the mat. The cat ran.",
    "b.txt": "Dogs ran in the park. Dogs bark.",
}

THEMED_DOCS = {
    "pets_01.txt": "Cats and dogs are loyal pets. The dog barks at the cat, the cat hisses at the dog.",
    "pets_02.txt": "My dog loves the park. Dogs chase cats and cats chase mice in the garden.",
    "pets_03.txt": "A kitten is a young cat. Puppies grow into dogs. Pets need food and care.",
    "money_01.txt": "The bank raised interest rates. Markets fell as investors sold stock.",
    "money_02.txt": "Stock markets rallied after the bank cut rates. Investors bought shares.",
    "money_03.txt": "Interest on savings depends on the bank. Investors watch markets and rates.",
}


def write_corpus(directory, docs):
    directory.mkdir(parents=True, exist_ok=True)
    for name, text in docs.items():
        (directory / name).write_text(text, encoding="utf-8")
    return directory


@pytest.fixture
def stopwords():
    # scikit-learn's list needs no download
    return set(ENGLISH_STOP_WORDS)


@pytest.fixture
def normalizer(stopwords):
    return TextNormalizer(stopwords=stopwords, verbose=False)


@pytest.fixture
def two_doc_dir(tmp_path):
    return write_corpus(tmp_path / "two_docs", TWO_DOCS)


@pytest.fixture
def themed_dir(tmp_path):
    return write_corpus(tmp_path / "themed", THEMED_DOCS)


@pytest.fixture
def two_doc_dtm(two_doc_dir, normalizer):
    docs = normalizer.normalize_documents(CorpusLoader(two_doc_dir, verbose=False).load())
    return DTMBuilder(sparsity_threshold=0.75, verbose=False).build(docs)


@pytest.fixture
def themed_dtm(themed_dir, normalizer):
    docs = normalizer.normalize_documents(CorpusLoader(themed_dir, verbose=False).load())
    return DTMBuilder(sparsity_threshold=0.9, verbose=False).build(docs)


@pytest.fixture
def themed_model(themed_dtm):
    return TopicModelFitter(k=2, seed=SEED, verbose=False).fit(themed_dtm)
