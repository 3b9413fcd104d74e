import pandas as pd

from tidytopics.topic_modeling.topic_result_extractor import extract_beta, extract_gamma
from tidytopics.reporting.topic_reports import log_ratio_table, top_bottom, top_terms
from tidytopics.reporting.table_export import TableExporter
from tidytopics.reporting import visualization


def test_charts_are_written(themed_model, tmp_path):
    beta = extract_beta(themed_model)
    gamma = extract_gamma(themed_model)
    ratios = top_bottom(log_ratio_table(beta, 1, 2), n=5)

    paths = [
        visualization.plot_top_terms(top_terms(beta, n=5), tmp_path),
        visualization.plot_document_topics(gamma, tmp_path),
        visualization.plot_log_ratios(ratios, tmp_path),
    ]

    assert [p.name for p in paths] == ["top_terms.png", "document_topics.png", "log_ratio.png"]
    for path in paths:
        assert path.exists() and path.stat().st_size > 0


def test_export_creates_directory_and_csv(tmp_path):
    exporter = TableExporter(tmp_path / "out", verbose=False)
    df = pd.DataFrame({"topic": [1, 2], "term": ["cat", "bank"], "beta": [0.5, 0.5]})

    path = exporter.export("beta.csv", df)

    assert path == tmp_path / "out" / "beta.csv"
    pd.testing.assert_frame_equal(pd.read_csv(path), df)
