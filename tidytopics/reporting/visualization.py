# tidytopics/reporting/visualization.py
"""
Bar charts of the tidy topic tables, written to PNG files.
"""

import math
from pathlib import Path

import matplotlib
matplotlib.use("Agg")  # files only, no display
import matplotlib.pyplot as plt
import pandas as pd

from tidytopics.topic_modeling.constants import (
    TOP_TERMS_PLOT,
    LOG_RATIO_PLOT,
    DOCUMENT_TOPICS_PLOT
)

FIGURES_DIR = Path(__file__).parents[2] / "data" / "figures"


def _grid(n_panels: int, n_cols: int = 3):
    n_cols = min(n_cols, n_panels)
    n_rows = math.ceil(n_panels / n_cols)
    fig, axes = plt.subplots(n_rows, n_cols, figsize=(5 * n_cols, 4 * n_rows), squeeze=False)
    return fig, axes.flatten()


def _save(fig, output_dir, filename) -> Path:
    output_dir = Path(output_dir) if output_dir is not None else FIGURES_DIR
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / filename
    fig.savefig(path, dpi=120, bbox_inches="tight")
    plt.close(fig)
    print(f"[Saved] Chart in {path}")
    return path


def plot_top_terms(top: pd.DataFrame, output_dir=None, filename: str = TOP_TERMS_PLOT) -> Path:
    """One horizontal bar panel per topic, highest beta on top."""
    topics = sorted(top["topic"].unique())
    fig, axes = _grid(len(topics))
    for ax, topic in zip(axes, topics):
        rows = top[top["topic"] == topic]
        ax.barh(rows["term"], rows["beta"], height=0.7)
        ax.set_title(f"Topic {topic}")
        ax.invert_yaxis()
        ax.set_xlabel("beta")
        for side in "top right".split():
            ax.spines[side].set_visible(False)
    for ax in axes[len(topics):]:
        ax.set_visible(False)
    fig.suptitle("Top terms per topic")
    fig.tight_layout()
    return _save(fig, output_dir, filename)


def plot_log_ratios(log_ratios: pd.DataFrame, output_dir=None, filename: str = LOG_RATIO_PLOT) -> Path:
    """Terms ordered by log2 ratio; the topic columns name the axis."""
    topic_cols = [c for c in log_ratios.columns if c.startswith("topic")]
    rows = log_ratios.sort_values("log_ratio")
    fig, ax = plt.subplots(figsize=(7, max(3, 0.3 * len(rows))))
    colors = ["tab:red" if v < 0 else "tab:blue" for v in rows["log_ratio"]]
    ax.barh(rows["term"], rows["log_ratio"], color=colors)
    ax.axvline(0, color="black", linewidth=0.8)
    if len(topic_cols) == 2:
        ax.set_xlabel(f"log2 ratio of beta in {topic_cols[1]} / {topic_cols[0]}")
    ax.set_title("Largest differences in beta")
    fig.tight_layout()
    return _save(fig, output_dir, filename)


def plot_document_topics(gamma: pd.DataFrame, output_dir=None, filename: str = DOCUMENT_TOPICS_PLOT) -> Path:
    """Gamma per topic for every document, one panel per document."""
    documents = sorted(gamma["document"].unique())
    fig, axes = _grid(len(documents), n_cols=4)
    for ax, document in zip(axes, documents):
        rows = gamma[gamma["document"] == document].sort_values("topic")
        ax.bar(rows["topic"].astype(str), rows["gamma"])
        ax.set_ylim(0, 1)
        ax.set_title(document, fontsize=9)
        ax.set_xlabel("topic")
    for ax in axes[len(documents):]:
        ax.set_visible(False)
    fig.suptitle("Per-document topic proportions (gamma)")
    fig.tight_layout()
    return _save(fig, output_dir, filename)
