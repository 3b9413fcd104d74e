# tidytopics/data_preprocessing/text_normalizer.py

"""
text_normalizer.py
----------------------
Stage 1: Text Normalization

Purpose:
- Strip digits and punctuation, collapse whitespace, lowercase
- Remove English stopwords on whole words
- Stem the remaining tokens (Snowball English), always as the last step
- Keep documents independent so the stage can run in parallel

Input:  list[Document] with raw_text
Output: list[Document] with normalized_text, same order
"""

import re
from dataclasses import replace
from typing import Iterable, List, Optional

import nltk
from joblib import Parallel, delayed
from nltk.corpus import stopwords as nltk_stopwords
from nltk.stem.snowball import SnowballStemmer
from tqdm import tqdm

from tidytopics.data_acquisition.corpus_loader import Document
from tidytopics.data_preprocessing.preprocess_constants import (
    STEMMER_LANGUAGE, STOPWORD_LANGUAGE
)

DIGITS_RE = re.compile(r"\d+")
PUNCTUATION_RE = re.compile(r"[^\w\s]|_")
WHITESPACE_RE = re.compile(r"\s+")

# Snowball settles in one or two passes; the bound only guards against cycles
MAX_STEM_PASSES = 5


def load_stopwords(language: str = STOPWORD_LANGUAGE) -> set:
    """Return nltk's stopword list, downloading the corpus on first use."""
    try:
        words = nltk_stopwords.words(language)
    except LookupError:
        nltk.download("stopwords", quiet=True) # stores in global cache directory
        words = nltk_stopwords.words(language)
    return set(words)


class TextNormalizer:
    """Apply the fixed normalization sequence to document text."""

    def __init__(
            self,
            stopwords: Optional[Iterable[str]] = None,
            language: str = STEMMER_LANGUAGE,
            n_jobs: int = 1,
            verbose: bool = True
            ):
        """
        Args:
            stopwords: Words to drop. Defaults to nltk's list for `language`.
            language (str): Snowball stemmer language.
            n_jobs (int): Worker count for normalize_documents (joblib).
        """
        if stopwords is None:
            stopwords = load_stopwords(language)
        self.stopwords = frozenset(w.lower() for w in stopwords)
        self.stemmer = SnowballStemmer(language)
        self.n_jobs = n_jobs
        self.verbose = verbose

    def stem(self, token: str) -> str:
        """Stem until the result no longer changes."""
        for _ in range(MAX_STEM_PASSES):
            stemmed = self.stemmer.stem(token)
            if stemmed == token:
                break
            token = stemmed
        return token

    def normalize(self, text: str) -> str:
        if not text:
            return ""

        # 1. Remove digits
        text = DIGITS_RE.sub("", text)

        # 2. Remove punctuation (no space inserted, "don't" -> "dont")
        text = PUNCTUATION_RE.sub("", text)

        # 3. Collapse whitespace and trim
        text = WHITESPACE_RE.sub(" ", text).strip()

        # 4. Lowercase; lower() can emit combining marks ("İ" -> "i̇"), strip them again
        text = PUNCTUATION_RE.sub("", text.lower())

        # 5. Stopwords, matched on whole words
        tokens = [t for t in text.split(" ") if t and t not in self.stopwords]

        # 6. Stem last; a stem that lands on a stopword would be removed by a
        # second pass, so it is dropped here
        stems = (self.stem(t) for t in tokens)
        return " ".join(s for s in stems if s and s not in self.stopwords)

    def normalize_documents(self, documents: List[Document]) -> List[Document]:
        """Normalize every document, returned in the input order."""
        iterator = tqdm(documents, desc="Normalizing documents", disable=not self.verbose)
        texts = Parallel(n_jobs=self.n_jobs)(
            delayed(self.normalize)(doc.raw_text) for doc in iterator
        )
        normalized = [replace(doc, normalized_text=text) for doc, text in zip(documents, texts)]

        empty = [doc.document_id for doc in normalized if not doc.normalized_text]
        if empty and self.verbose:
            tqdm.write(f"[Warning] {len(empty)} documents are empty after normalization: {empty[:5]}")
        if self.verbose:
            print(f"[Normalize] {len(normalized)} documents normalized.")
        return normalized


if __name__ == "__main__":
    normalizer = TextNormalizer()
    sample = "The 3 cats were running across 12 gardens, chasing mice!"
    print(sample)
    print(normalizer.normalize(sample))

# Run it like this -
# python -m tidytopics.data_preprocessing.text_normalizer
