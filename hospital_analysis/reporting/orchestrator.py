import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

import pandas as pd

from hospital_analysis.automation.run_metadata import create_run_metadata
from hospital_analysis.config.loader import report_options
from hospital_analysis.core.loader import load_patients
from hospital_analysis.reporting.markdown import MarkdownReport
from hospital_analysis.reporting.registry import generate_reports

log = logging.getLogger("hospital_analysis.orchestrator")


# =====================================================
# PAYLOAD (NO FILES WRITTEN)
# =====================================================

def generate_report_payload(input_path: str, config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Load the patients file and compute the configured reports.

    Responsibilities:
    - Load and validate data
    - Run every selected report

    Explicitly does NOT:
    - Format outputs
    - Write files
    """
    loaded = load_patients(input_path)

    if loaded.frame.empty:
        log.warning("No valid patient records in %s", input_path)

    selection = (config.get("reports") or {}).get("include") or None
    reports = generate_reports(
        loaded.frame,
        names=selection,
        options=report_options(config),
    )

    return {
        "reports": reports,
        "quality": loaded.summary,
        "rejected": [r.to_dict() for r in loaded.rejected],
        "record_count": loaded.record_count,
    }


# =====================================================
# EXPORTS
# =====================================================

def export_tables(reports: Dict[str, pd.DataFrame], output_dir: Path) -> Dict[str, str]:
    """Write one CSV per report; returns report name -> path."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = {}
    for name, table in reports.items():
        path = output_dir / f"{name}.csv"
        table.to_csv(path, index=False)
        paths[name] = str(path)

    log.info("Exported %d tables to %s", len(paths), output_dir)
    return paths


def resolve_run_dir(config: Dict[str, Any]) -> Path:
    if config.get("run_dir"):
        return Path(config["run_dir"])
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H-%M-%S")
    return Path(config.get("output_dir", "runs")) / stamp


# =====================================================
# FULL RUN
# =====================================================

def run(input_path: str, config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Compute every configured report and write the run artefacts.

    Returns:
        {
            "markdown": <path or None>,
            "tables": {report: csv path},
            "visuals": [{"report", "path", "caption"}],
            "pdf": <path or None>,
            "payload": <generate_report_payload() result>,
            "run_dir": <path>,
        }
    """
    output_cfg = config.get("output", {}) or {}
    max_rows = output_cfg.get("max_table_rows")

    run_dir = resolve_run_dir(config)
    run_dir.mkdir(parents=True, exist_ok=True)
    log.info("Run directory: %s", run_dir)

    payload = generate_report_payload(input_path, config)
    reports = payload["reports"]

    tables = {}
    if output_cfg.get("csv", True):
        tables = export_tables(reports, run_dir / "tables")

    visuals = []
    if output_cfg.get("visuals", True):
        try:
            from hospital_analysis.reporting.visuals import render_visuals

            visuals = render_visuals(reports, run_dir / "visuals")
        except Exception:
            log.exception("Chart rendering failed")

    md_path = None
    if output_cfg.get("markdown", True):
        md_path = MarkdownReport(max_table_rows=max_rows).build(
            reports,
            run_dir,
            metadata=config.get("metadata"),
            quality=payload["quality"],
            rejected=payload["rejected"],
            visuals=visuals,
        )
        log.info("Markdown generated: %s", md_path)

    pdf_path = None
    if output_cfg.get("pdf", False):
        try:
            from hospital_analysis.reporting.pdf_renderer import ExecutivePDFRenderer

            pdf_path = ExecutivePDFRenderer().build(
                reports,
                run_dir,
                quality=payload["quality"],
                visuals=visuals,
            )
            log.info("PDF generated: %s", pdf_path)
        except Exception:
            log.exception("PDF generation failed")

    create_run_metadata(
        input_files=[str(input_path)],
        config=config,
        output_dir=run_dir,
        reports=list(reports),
        records=payload["record_count"],
        rejected=len(payload["rejected"]),
    )

    return {
        "markdown": str(md_path) if md_path else None,
        "tables": tables,
        "visuals": visuals,
        "pdf": str(pdf_path) if pdf_path else None,
        "payload": payload,
        "run_dir": str(run_dir),
    }
