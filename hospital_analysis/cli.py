"""
Hospital Analysis CLI
"""

import argparse
import logging
from pathlib import Path
import sys
from typing import List, Optional, Dict, Any

from hospital_analysis.__version__ import __version__
from hospital_analysis.config.loader import load_config
from hospital_analysis.core.exceptions import DataLoadError
from hospital_analysis.reporting.registry import REPORTS

logger = logging.getLogger(__name__)


# -------------------------------------------------
# PROGRAMMATIC ENTRY
# -------------------------------------------------
def run_single_file(
    input_path: str,
    config_path: Optional[str] = None,
    config: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Returns the orchestrator result:
        {"markdown", "tables", "visuals", "pdf", "payload", "run_dir"}
    """
    from hospital_analysis.reporting.orchestrator import run

    final_config = config if config is not None else load_config(config_path)
    return run(input_path, final_config)


def _apply_overrides(config: Dict[str, Any], args) -> Dict[str, Any]:
    output = config.setdefault("output", {})

    if args.report:
        config.setdefault("reports", {})["include"] = list(args.report)
    if args.pdf:
        output["pdf"] = True
    if args.no_csv:
        output["csv"] = False
    if args.no_visuals:
        output["visuals"] = False
    if args.output_dir:
        config["output_dir"] = args.output_dir

    return config


# -------------------------------------------------
# CLI ENTRY
# -------------------------------------------------
def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="hospital-analysis",
        description=f"Hospital Analysis v{__version__}",
    )

    parser.add_argument("input", nargs="?", help="Input CSV or Excel file")
    parser.add_argument("--config", required=False, help="Path to config YAML")
    parser.add_argument(
        "--report",
        action="append",
        choices=list(REPORTS),
        metavar="NAME",
        help="Only compute this report (repeatable; see --list-reports)",
    )
    parser.add_argument("--batch", help="Process every file in a folder")
    parser.add_argument("--output-dir", help="Root folder for run directories")

    parser.add_argument("--pdf", action="store_true", help="Export Executive PDF")
    parser.add_argument("--no-csv", action="store_true", help="Skip CSV table export")
    parser.add_argument("--no-visuals", action="store_true", help="Skip charts")
    parser.add_argument("--list-reports", action="store_true")
    parser.add_argument("--version", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")

    args = parser.parse_args(argv)

    # ---- VERSION ----
    if args.version:
        print(f"Hospital Analysis v{__version__}")
        return 0

    # ---- LIST ----
    if args.list_reports:
        for name, spec in REPORTS.items():
            print(f"{name:<26} {spec.title}")
        return 0

    # ---- LOGGING ----
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    if args.batch and args.input:
        parser.error("give either an input file or --batch, not both")

    # ---- BATCH ----
    if args.batch:
        if args.report or args.pdf or args.no_csv or args.no_visuals:
            parser.error("--batch takes its options from --config")
        from hospital_analysis.automation.batch_runner import run_batch

        result = run_batch(args.batch, args.config, output_root=args.output_dir)
        print(f"\nBatch folder: {result['run_dir']}")
        return 0 if not result["errors"] else 1

    # ---- SINGLE FILE ----
    if not args.input:
        parser.error("Input file required")

    config = _apply_overrides(load_config(args.config), args)

    try:
        result = run_single_file(str(Path(args.input)), config=config)
    except DataLoadError as exc:
        logger.error("%s", exc)
        return 1

    rejected = len(result["payload"]["rejected"])

    print("\nReport generated")
    if result["markdown"]:
        print(f"Markdown: {result['markdown']}")
    if result["pdf"]:
        print(f"PDF: {result['pdf']}")
    if rejected:
        print(f"Rejected rows: {rejected}")

    print(f"Run folder: {result['run_dir']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
