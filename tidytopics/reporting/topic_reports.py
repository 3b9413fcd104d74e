# tidytopics/reporting/topic_reports.py
"""
Secondary tables derived from the tidy beta / gamma tables.

- top_terms:        highest-beta terms per topic
- log_ratio_table:  log2(beta_b / beta_a) for terms common enough in either topic
- top_bottom:       strongest terms on each side of a log-ratio table
- document_terms:   term counts of one document (drill-down)
- document_topics:  topic proportions of one document
- dominant_topics:  most likely topic per document
- term_assignments: most likely topic for each (document, term) cell
"""

import numpy as np
import pandas as pd

from tidytopics.errors import UnknownDocumentError
from tidytopics.data_preprocessing.dtm_builder import DocumentTermMatrix
from tidytopics.topic_modeling.topic_model_fitter import TopicModel
from tidytopics.topic_modeling.constants import DEFAULT_TOP_N, LOG_RATIO_THRESHOLD


def _check_n(n: int):
    if n < 1:
        raise ValueError(f"n must be at least 1, got {n}")


def top_terms(beta: pd.DataFrame, n: int = DEFAULT_TOP_N) -> pd.DataFrame:
    """
    The n highest-beta rows of each topic.
    Ties keep the original term order. Sorted by topic asc, beta desc.
    """
    _check_n(n)
    df = beta.assign(_order=np.arange(len(beta)))
    df = df.sort_values(["topic", "beta", "_order"], ascending=[True, False, True], kind="mergesort")
    top = df.groupby("topic", sort=False).head(n)
    return top.drop(columns="_order").reset_index(drop=True)


def log_ratio_table(
        beta: pd.DataFrame,
        topic_a: int,
        topic_b: int,
        threshold: float = LOG_RATIO_THRESHOLD
        ) -> pd.DataFrame:
    """
    Compare two topics term by term.

    Keeps terms whose beta exceeds `threshold` in at least one of the two
    topics and computes log_ratio = log2(beta_b / beta_a). Terms with a zero
    beta on either side have no defined ratio and are left out.

    Returns columns: term, topic<a>, topic<b>, log_ratio
    """
    if topic_a == topic_b:
        raise ValueError("topic_a and topic_b must differ.")
    known = set(beta["topic"].unique())
    missing = [t for t in (topic_a, topic_b) if t not in known]
    if missing:
        raise ValueError(f"Unknown topic(s): {missing}. Available: {sorted(known)}")

    col_a, col_b = f"topic{topic_a}", f"topic{topic_b}"
    pair = beta[beta["topic"].isin([topic_a, topic_b])]
    wide = (
        pair.pivot(index="term", columns="topic", values="beta")
        .reindex(index=pd.unique(pair["term"]), columns=[topic_a, topic_b])
        .fillna(0.0)
    )
    wide.columns = [col_a, col_b]
    wide = wide.rename_axis("term").reset_index()

    common = (wide[col_a] > threshold) | (wide[col_b] > threshold)
    defined = (wide[col_a] > 0) & (wide[col_b] > 0)
    wide = wide[common & defined].copy()
    wide["log_ratio"] = np.log2(wide[col_b] / wide[col_a])
    return wide.reset_index(drop=True)


def top_bottom(log_ratios: pd.DataFrame, n: int = DEFAULT_TOP_N) -> pd.DataFrame:
    """Union of the n largest and n smallest log ratios, one row per term, descending."""
    _check_n(n)
    both = pd.concat([
        log_ratios.nlargest(n, "log_ratio"),
        log_ratios.nsmallest(n, "log_ratio"),
    ])
    both = both.drop_duplicates(subset="term")
    return both.sort_values("log_ratio", ascending=False, kind="mergesort").reset_index(drop=True)


def document_terms(dtm: DocumentTermMatrix, document_id: str) -> pd.DataFrame:
    """(term, count) pairs of one document, most frequent first."""
    row = dtm.counts[dtm.row_index(document_id)]
    cols = row.indices
    order = np.argsort(cols, kind="mergesort")
    df = pd.DataFrame({
        "term": np.asarray(dtm.terms, dtype=object)[cols[order]],
        "count": row.data[order].astype(int),
    })
    df = df[df["count"] > 0]
    return df.sort_values("count", ascending=False, kind="mergesort").reset_index(drop=True)


def document_topics(gamma: pd.DataFrame, document_id: str) -> pd.DataFrame:
    """Gamma rows of one document, highest proportion first."""
    rows = gamma[gamma["document"] == document_id]
    if rows.empty:
        raise UnknownDocumentError(f"Document not in model: {document_id}")
    return rows.sort_values(["gamma", "topic"], ascending=[False, True], kind="mergesort").reset_index(drop=True)


def dominant_topics(gamma: pd.DataFrame) -> pd.DataFrame:
    """The topic with the largest gamma for every document (ties go to the lower topic)."""
    ranked = gamma.sort_values(
        ["document", "gamma", "topic"],
        ascending=[True, False, True],
        kind="mergesort"
    )
    best = ranked.drop_duplicates(subset="document", keep="first")
    return best[["document", "topic", "gamma"]].reset_index(drop=True)


def term_assignments(model: TopicModel, dtm: DocumentTermMatrix) -> pd.DataFrame:
    """
    Assign each non-zero (document, term) cell to the topic most likely to
    have generated it: argmax over topics of gamma[d, t] * beta[t, w].

    Returns columns: document, term, count, topic
    """
    if list(model.document_ids) != list(dtm.document_ids) or list(model.terms) != list(dtm.terms):
        raise ValueError("Model and document-term matrix were built from different data.")

    coo = dtm.counts.tocoo()
    order = np.lexsort((coo.col, coo.row))
    rows, cols = coo.row[order], coo.col[order]

    scores = model.gamma[rows] * model.beta[:, cols].T
    return pd.DataFrame({
        "document": np.asarray(dtm.document_ids, dtype=object)[rows],
        "term": np.asarray(dtm.terms, dtype=object)[cols],
        "count": coo.data[order].astype(int),
        "topic": scores.argmax(axis=1) + 1,
    })
