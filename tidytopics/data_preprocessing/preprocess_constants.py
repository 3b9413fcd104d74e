# tidytopics/data_preprocessing/preprocess_constants.py

# Corpus input
INPUT_FILE_PATTERN = "*.txt"
INPUT_ENCODING = "utf-8"

# Normalization
STEMMER_LANGUAGE = "english"
STOPWORD_LANGUAGE = "english"

# A term survives pruning when at most this fraction of documents lacks it
DEFAULT_SPARSITY_THRESHOLD = 0.75

# Output file names
DTM_OUTPUT = "document_term_matrix.csv"
