from pathlib import Path
from typing import Any, Dict, List

import pandas as pd


class BaseReport:
    """
    Contract for report renderers (Markdown, PDF).

    Renderers receive already computed tables and never compute
    statistics themselves.
    """

    name: str = "base"

    def build(
        self,
        reports: Dict[str, pd.DataFrame],
        output_dir: Path,
        metadata: Dict[str, Any] | None = None,
    ) -> Path:
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement build()"
        )

    def validate_results(self, reports: Dict[str, pd.DataFrame]):
        """
        Basic sanity validation of computed reports.
        """
        if not isinstance(reports, dict):
            raise ValueError("reports must be a dict")

        for name, table in reports.items():
            if not isinstance(table, pd.DataFrame):
                raise ValueError(f"Result for report '{name}' must be a DataFrame")

    @staticmethod
    def table_rows(table: pd.DataFrame, max_rows: int | None = None) -> List[Dict[str, Any]]:
        if max_rows is not None:
            table = table.head(max_rows)
        return table.to_dict(orient="records")
