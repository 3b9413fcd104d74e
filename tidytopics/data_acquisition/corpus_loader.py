# tidytopics/data_acquisition/corpus_loader.py
"""
corpus_loader.py
----------------------
Stage 0: Corpus Loading

Purpose:
- Read a directory of plain-text files into memory
- One Document per file, file name used as the document id
- Keep a stable directory-listing order (sorted by file name)

Input:  a directory of UTF-8 .txt files
Output: list[Document]
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from tidytopics.errors import MissingInputError
from tidytopics.data_preprocessing.preprocess_constants import (
    INPUT_FILE_PATTERN, INPUT_ENCODING
)


@dataclass(frozen=True)
class Document:
    document_id: str
    raw_text: str
    normalized_text: Optional[str] = None


class CorpusLoader:
    """Load every text file of a directory as a Document."""

    def __init__(self, input_dir, encoding: str = INPUT_ENCODING, pattern: str = INPUT_FILE_PATTERN, verbose: bool = True):
        self.input_dir = Path(input_dir)
        self.encoding = encoding
        self.pattern = pattern
        self.verbose = verbose

    def list_files(self) -> List[Path]:
        if not self.input_dir.is_dir():
            raise MissingInputError(f"Input directory not found: {self.input_dir}")
        return sorted(p for p in self.input_dir.glob(self.pattern) if p.is_file())

    def load(self) -> List[Document]:
        """Read all matching files. Undecodable files are skipped."""
        files = self.list_files()
        if not files:
            raise MissingInputError(f"No text files matching '{self.pattern}' in {self.input_dir}")

        documents = []
        for path in tqdm(files, desc="Loading documents", disable=not self.verbose):
            try:
                text = path.read_text(encoding=self.encoding)
            except (UnicodeDecodeError, OSError) as e:
                tqdm.write(f"[SKIP] Could not read {path.name}: {e}")
                continue
            documents.append(Document(document_id=path.name, raw_text=text))

        if not documents:
            raise MissingInputError(f"No readable text files in {self.input_dir}")

        if self.verbose:
            print(f"[Load] {len(documents)} documents loaded from {self.input_dir}")
        return documents


if __name__ == "__main__":
    import sys

    loader = CorpusLoader(sys.argv[1] if len(sys.argv) > 1 else "data/raw")
    for doc in loader.load():
        print(f"{doc.document_id}: {len(doc.raw_text)} characters")

# Run it like this -
# python -m tidytopics.data_acquisition.corpus_loader data/raw
