from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
import uuid

import pandas as pd

from hospital_analysis.reporting.base import BaseReport
from hospital_analysis.reporting.formatters import fmt_cell, fmt_header
from hospital_analysis.reporting.registry import REPORTS


# =====================================================
# MARKDOWN REPORT (SOURCE OF TRUTH)
# =====================================================

class MarkdownReport(BaseReport):
    """
    Markdown Report Engine

    Responsibilities:
    - Render every computed report as a table
    - Surface data quality and rejected rows
    - NEVER compute statistics
    """

    name = "markdown"
    file_name = "Hospital_Analysis_Report.md"

    def __init__(self, max_table_rows: Optional[int] = 50):
        self.max_table_rows = max_table_rows

    def build(
        self,
        reports: Dict[str, pd.DataFrame],
        output_dir: Path,
        metadata: Optional[Dict[str, Any]] = None,
        quality: Optional[Dict[str, Any]] = None,
        rejected: Optional[List[Dict[str, Any]]] = None,
        visuals: Optional[List[Dict[str, Any]]] = None,
    ) -> Path:
        self.validate_results(reports)

        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        report_path = output_dir / self.file_name
        run_id = f"HA-{datetime.now(timezone.utc):%Y%m%d}-{uuid.uuid4().hex[:6]}"

        charts = {}
        for vis in visuals or []:
            charts.setdefault(vis.get("report"), []).append(vis)

        with open(report_path, "w", encoding="utf-8") as f:
            self._write_header(f, run_id, metadata)
            self._write_quality(f, quality or {}, rejected or [])

            for name, table in reports.items():
                self._write_report_section(f, name, table, charts.get(name, []), output_dir)

            self._write_footer(f)

        return report_path

    # -------------------------------------------------
    # DATA QUALITY
    # -------------------------------------------------
    def _write_quality(self, f, quality: Dict[str, Any], rejected: List[Dict[str, Any]]):
        if not quality and not rejected:
            return

        f.write("## Data Quality\n\n")
        f.write("| Check | Value |\n")
        f.write("| :--- | ---: |\n")
        f.write(f"| Rows Read | {quality.get('rows_read', '-')} |\n")
        f.write(f"| Rows Accepted | {quality.get('rows_accepted', '-')} |\n")
        f.write(f"| Rows Rejected | {quality.get('rows_rejected', len(rejected))} |\n")

        for field, count in (quality.get("rejections_by_field") or {}).items():
            f.write(f"| Rejected on `{field}` | {count} |\n")

        if rejected:
            f.write("\n### Rejected Rows\n")
            f.write("| Row | Patient ID | Reason |\n")
            f.write("| ---: | :--- | :--- |\n")
            for item in rejected[: self.max_table_rows or len(rejected)]:
                pid = item.get("patient_id")
                f.write(
                    f"| {item.get('row_number')} | {pid if pid is not None else '-'} "
                    f"| {item.get('reason')} |\n"
                )

        f.write("\n---\n\n")

    # -------------------------------------------------
    # REPORT SECTION
    # -------------------------------------------------
    def _write_report_section(self, f, name: str, table: pd.DataFrame, charts, output_dir: Path):
        spec = REPORTS.get(name)
        title = spec.title if spec else name.replace("_", " ").title()

        f.write(f"## {title}\n\n")
        if spec:
            f.write(f"_{spec.description}_\n\n")

        if table.empty:
            f.write("_No rows._\n\n")
        else:
            self._write_table(f, table)

        for vis in charts:
            path = Path(vis["path"])
            try:
                path = path.relative_to(output_dir)
            except ValueError:
                pass
            f.write(f"![{vis.get('caption')}]({path.as_posix()})\n")
            f.write(f"> {vis.get('caption')}\n\n")

    def _write_table(self, f, table: pd.DataFrame):
        columns = list(table.columns)
        f.write("| " + " | ".join(fmt_header(c) for c in columns) + " |\n")
        f.write("| " + " | ".join(self._align(table[c]) for c in columns) + " |\n")

        for row in self.table_rows(table, self.max_table_rows):
            f.write("| " + " | ".join(fmt_cell(c, row[c]) for c in columns) + " |\n")

        hidden = len(table) - (self.max_table_rows or len(table))
        if hidden > 0:
            f.write(f"\n_{hidden} more rows in the CSV export._\n")
        f.write("\n")

    # -------------------------------------------------
    # HEADER & FOOTER
    # -------------------------------------------------
    def _write_header(self, f, run_id: str, metadata: Optional[Dict[str, Any]]):
        f.write("# Hospital Analysis Report\n\n")
        f.write(
            f"**Run ID:** `{run_id}` | "
            f"**Generated:** {datetime.now(timezone.utc):%Y-%m-%d %H:%M UTC}\n\n"
        )
        if metadata:
            for k, v in metadata.items():
                f.write(f"- **{k.replace('_',' ').title()}**: {v}\n")
        f.write("\n---\n\n")

    def _write_footer(self, f):
        f.write("\n---\n")
        f.write("_Generated by **Hospital Analysis**_\n")

    @staticmethod
    def _align(series: pd.Series) -> str:
        return "---:" if pd.api.types.is_numeric_dtype(series) and not pd.api.types.is_bool_dtype(series) else ":---"
