# tidytopics/pipeline_cli.py
"""
End-to-end topic modelling run:

    load -> normalize -> document-term matrix -> LDA fit
         -> beta / gamma tables -> reports -> CSV + charts

Structural errors (missing input, empty matrix, invalid k, fit timeout)
abort the run with exit code 1. A drill-down on an unknown document is
reported and the run continues.
"""

import argparse
import os
import sys
import time
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from dotenv import load_dotenv

from tidytopics.errors import TopicPipelineError, UnknownDocumentError
from tidytopics.data_acquisition.corpus_loader import CorpusLoader
from tidytopics.data_preprocessing.text_normalizer import TextNormalizer
from tidytopics.data_preprocessing.dtm_builder import DTMBuilder
from tidytopics.data_preprocessing.preprocess_constants import (
    DEFAULT_SPARSITY_THRESHOLD,
    DTM_OUTPUT
)
from tidytopics.topic_modeling.topic_model_fitter import TopicModelFitter, save_model
from tidytopics.topic_modeling.topic_result_extractor import extract_beta, extract_gamma
from tidytopics.topic_modeling.constants import (
    DEFAULT_MAX_ITER,
    DEFAULT_TOP_N,
    TOPIC_MODEL_OUTPUT,
    BETA_OUTPUT,
    GAMMA_OUTPUT,
    TOP_TERMS_OUTPUT,
    LOG_RATIO_OUTPUT,
    DOMINANT_TOPICS_OUTPUT,
    TERM_ASSIGNMENTS_OUTPUT
)
from tidytopics.reporting import topic_reports
from tidytopics.reporting.table_export import TableExporter
from tidytopics.reporting import visualization


class TopicPipelineCLI:
    def __init__(
            self,
            input_dir,
            k: int,
            sparsity_threshold: float = DEFAULT_SPARSITY_THRESHOLD,
            seed: Optional[int] = None,
            top_n: int = DEFAULT_TOP_N,
            compare_topics: Optional[Tuple[int, int]] = None,
            document_id: Optional[str] = None,
            output_dir=None,
            timeout: Optional[float] = None,
            n_jobs: int = 1,
            max_iter: int = DEFAULT_MAX_ITER,
            make_plots: bool = True,
            stopwords: Optional[Iterable[str]] = None,
            verbose: bool = True
            ):
        self.loader = CorpusLoader(input_dir, verbose=verbose)
        self.normalizer = TextNormalizer(stopwords=stopwords, n_jobs=n_jobs, verbose=verbose)
        self.builder = DTMBuilder(sparsity_threshold=sparsity_threshold, verbose=verbose)
        self.fitter = TopicModelFitter(k=k, seed=seed, max_iter=max_iter, timeout=timeout, verbose=verbose)
        self.exporter = TableExporter(output_dir, verbose=verbose) if output_dir is not None else None
        self.output_dir = output_dir
        self.top_n = top_n
        self.compare_topics = compare_topics
        self.document_id = document_id
        self.make_plots = make_plots
        self.verbose = verbose

    def _log(self, message: str):
        if self.verbose:
            print(message)

    def _export(self, filename, df):
        if self.exporter is not None:
            self.exporter.export(filename, df)

    def run_once(self) -> Dict[str, Any]:
        """Run every stage once and return the intermediate results and tables."""
        # 1) Corpus
        documents = self.loader.load()
        documents = self.normalizer.normalize_documents(documents)

        # 2) Matrix and model
        dtm = self.builder.build(documents)
        model = self.fitter.fit(dtm)

        # 3) Tidy tables
        beta = extract_beta(model)
        gamma = extract_gamma(model)
        top = topic_reports.top_terms(beta, n=self.top_n)
        dominant = topic_reports.dominant_topics(gamma)
        assignments = topic_reports.term_assignments(model, dtm)

        self._log("\n=== TOP TERMS ===")
        for topic, rows in top.groupby("topic"):
            self._log(f"  Topic {topic}: {', '.join(rows['term'])}")

        # 4) Topic comparison
        log_ratios = None
        compare = self.compare_topics or ((1, 2) if model.k >= 2 else None)
        if compare is not None:
            topic_a, topic_b = compare
            ratios = topic_reports.log_ratio_table(beta, topic_a, topic_b)
            log_ratios = topic_reports.top_bottom(ratios, n=self.top_n)
            self._log(f"[Report] {len(ratios)} terms compared between topic {topic_a} and topic {topic_b}")

        # 5) Drill-down; an unknown document does not stop the run
        drill_down = None
        if self.document_id is not None:
            try:
                drill_down = topic_reports.document_terms(dtm, self.document_id)
                self._log(f"\n=== TERMS OF {self.document_id} ===")
                self._log(drill_down.head(self.top_n).to_string(index=False))
            except UnknownDocumentError as e:
                print(f"[Error]: {e}")

        # 6) Outputs
        self._export(DTM_OUTPUT, dtm.tidy())
        self._export(BETA_OUTPUT, beta)
        self._export(GAMMA_OUTPUT, gamma)
        self._export(TOP_TERMS_OUTPUT, top)
        self._export(DOMINANT_TOPICS_OUTPUT, dominant)
        self._export(TERM_ASSIGNMENTS_OUTPUT, assignments)
        if log_ratios is not None:
            self._export(LOG_RATIO_OUTPUT, log_ratios)

        # Charts follow the CSV rule: nothing is written without an output directory
        charts = []
        if self.make_plots and self.output_dir is not None:
            charts.append(visualization.plot_top_terms(top, self.output_dir))
            charts.append(visualization.plot_document_topics(gamma, self.output_dir))
            if log_ratios is not None and not log_ratios.empty:
                charts.append(visualization.plot_log_ratios(log_ratios, self.output_dir))

        if self.output_dir is not None:
            save_model(model, os.path.join(self.output_dir, TOPIC_MODEL_OUTPUT))

        return {
            "documents": documents,
            "dtm": dtm,
            "model": model,
            "beta": beta,
            "gamma": gamma,
            "top_terms": top,
            "log_ratios": log_ratios,
            "dominant_topics": dominant,
            "term_assignments": assignments,
            "document_terms": drill_down,
            "charts": charts,
        }


def _env(name: str, default, cast):
    value = os.getenv(name)
    if value in (None, ""):
        return default
    try:
        return cast(value)
    except ValueError:
        raise ValueError(f"{name}={value!r} is not a valid {cast.__name__}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fit an LDA topic model on a directory of text files.")
    parser.add_argument("input_dir", help="directory of UTF-8 .txt files, one document per file")
    parser.add_argument("-k", "--k", type=int, required=True, help="number of topics")
    parser.add_argument("--sparsity", type=float,
                        default=_env("TIDYTOPICS_SPARSITY", DEFAULT_SPARSITY_THRESHOLD, float),
                        help="largest allowed fraction of documents without a term (default 0.75)")
    parser.add_argument("--seed", type=int, default=None, help="random seed; omit for a non-deterministic fit")
    parser.add_argument("--document", default=None, help="document id to drill down into")
    parser.add_argument("--top-n", type=int, default=_env("TIDYTOPICS_TOP_N", DEFAULT_TOP_N, int))
    parser.add_argument("--topics", type=int, nargs=2, metavar=("A", "B"), default=None,
                        help="topics to compare with log2 ratios (default: 1 2)")
    parser.add_argument("--output-dir", default=_env("TIDYTOPICS_OUTPUT_DIR", None, str))
    parser.add_argument("--max-iter", type=int, default=_env("TIDYTOPICS_MAX_ITER", DEFAULT_MAX_ITER, int))
    parser.add_argument("--timeout", type=float, default=None, help="seconds allowed for the LDA fit")
    parser.add_argument("--n-jobs", type=int, default=1, help="parallel workers for normalization")
    parser.add_argument("--no-plots", action="store_true")
    parser.add_argument("--quiet", action="store_true")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    start = time.perf_counter()
    try:
        # Environment defaults are cast while the parser is built
        args = build_parser().parse_args(argv)
        pipeline = TopicPipelineCLI(
            input_dir=args.input_dir,
            k=args.k,
            sparsity_threshold=args.sparsity,
            seed=args.seed,
            top_n=args.top_n,
            compare_topics=tuple(args.topics) if args.topics else None,
            document_id=args.document,
            output_dir=args.output_dir,
            timeout=args.timeout,
            n_jobs=args.n_jobs,
            max_iter=args.max_iter,
            make_plots=not args.no_plots,
            verbose=not args.quiet,
        )
        pipeline.run_once()
    except (TopicPipelineError, ValueError) as e:
        print(f"[Error]: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        print(f"[Total] End-to-end execution time: {time.perf_counter() - start:.2f} seconds")
    return 0


if __name__ == "__main__":
    sys.exit(main())

# Run it like this -
# python -m tidytopics.pipeline_cli data/raw --k 2 --seed 1234 --output-dir data/output
