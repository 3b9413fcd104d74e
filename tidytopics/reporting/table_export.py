# tidytopics/reporting/table_export.py
"""
Write tidy tables to CSV under data/processed (or a chosen directory).
"""

from pathlib import Path

import pandas as pd

PROCESSED_DIR = Path(__file__).parents[2] / "data" / "processed"


class TableExporter:
    def __init__(self, output_dir=None, verbose: bool = True):
        """
        Args:
            output_dir: Target directory, created on first export.
        """
        self.output_dir = Path(output_dir) if output_dir is not None else PROCESSED_DIR
        self.verbose = verbose

    def export(self, filename: str, df: pd.DataFrame) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / filename
        df.to_csv(path, index=False)
        if self.verbose:
            print(f"✅ Saved {len(df)} rows in {path}")
        return path
