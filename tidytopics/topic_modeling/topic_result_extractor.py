# tidytopics/topic_modeling/topic_result_extractor.py
"""
Tidy views of a fitted topic model.

beta:  one row per (topic, term)      -> topic, term, beta
gamma: one row per (document, topic)  -> document, topic, gamma, proportion
"""

import numpy as np
import pandas as pd

from tidytopics.topic_modeling.topic_model_fitter import TopicModel
from tidytopics.topic_modeling.constants import GAMMA_DECIMALS

BETA_COLUMNS = ["topic", "term", "beta"]
GAMMA_COLUMNS = ["document", "topic", "gamma", "proportion"]


def extract_beta(model: TopicModel) -> pd.DataFrame:
    """Term-topic probabilities, ordered by topic then term column order. Zero cells are left out."""
    k, n_terms = model.beta.shape
    df = pd.DataFrame({
        "topic": np.repeat(np.arange(1, k + 1), n_terms),
        "term": np.tile(np.asarray(model.terms, dtype=object), k),
        "beta": model.beta.ravel(),
    })
    return df[df["beta"] > 0].reset_index(drop=True)[BETA_COLUMNS]


def extract_gamma(model: TopicModel, decimals: int = GAMMA_DECIMALS) -> pd.DataFrame:
    """
    Document-topic proportions.
    Sorted by document (descending), then proportion (descending).
    """
    n_docs, k = model.gamma.shape
    df = pd.DataFrame({
        "document": np.repeat(np.asarray(model.document_ids, dtype=object), k),
        "topic": np.tile(np.arange(1, k + 1), n_docs),
        "gamma": model.gamma.ravel(),
    })
    df["proportion"] = df["gamma"].round(decimals)
    df = df.sort_values(
        ["document", "proportion", "topic"],
        ascending=[False, False, True],
        kind="mergesort"
    )
    return df.reset_index(drop=True)[GAMMA_COLUMNS]
