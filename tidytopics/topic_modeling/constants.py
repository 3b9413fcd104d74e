# tidytopics/topic_modeling/constants.py

# LDA settings
DEFAULT_MAX_ITER = 50
DEFAULT_LEARNING_METHOD = "batch"

# Reporting
DEFAULT_TOP_N = 10
LOG_RATIO_THRESHOLD = 0.001
GAMMA_DECIMALS = 8

# Output file names
TOPIC_MODEL_OUTPUT = "topic_model.joblib"
BETA_OUTPUT = "topic_terms_beta.csv"
GAMMA_OUTPUT = "document_topics_gamma.csv"
TOP_TERMS_OUTPUT = "top_terms.csv"
LOG_RATIO_OUTPUT = "log_ratio.csv"
DOMINANT_TOPICS_OUTPUT = "dominant_topics.csv"
TERM_ASSIGNMENTS_OUTPUT = "term_assignments.csv"

TOP_TERMS_PLOT = "top_terms.png"
LOG_RATIO_PLOT = "log_ratio.png"
DOCUMENT_TOPICS_PLOT = "document_topics.png"
