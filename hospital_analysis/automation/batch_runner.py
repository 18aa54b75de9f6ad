import os
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List

from hospital_analysis.automation.retry import retry
from hospital_analysis.automation.run_metadata import create_run_metadata
from hospital_analysis.config.loader import load_config
from hospital_analysis.core.loader import SUPPORTED_EXT
from hospital_analysis.reporting.orchestrator import run as run_reports
from hospital_analysis.utils.logger import get_logger

log = get_logger("batch-runner")


# =====================================================
# PROCESS SINGLE FILE (BATCH SAFE)
# =====================================================

@retry(times=3, delay=5)
def run_single_file(
    file_path: Path,
    config: Dict[str, Any],
    run_dir: Path,
) -> Dict[str, Any]:
    """
    Batch contract:

    - Each file gets its own folder (<stem>_<ext>) under the batch run directory
    - A copy of the input is kept next to its reports
    """

    src = Path(file_path)

    # ward.csv and ward.xlsx must not share a folder
    file_run_dir = run_dir / f"{src.stem}_{src.suffix.lstrip('.').lower()}"
    input_dir = file_run_dir / "input"
    input_dir.mkdir(parents=True, exist_ok=True)

    dst = input_dir / src.name
    dst.write_bytes(src.read_bytes())

    log.info("Processing file: %s", src.name)

    local_config = dict(config)
    local_config["run_dir"] = str(file_run_dir)

    result = run_reports(str(dst), local_config)

    log.info("Completed file: %s", src.name)

    return {
        "file": src.name,
        "markdown": result["markdown"],
        "pdf": result["pdf"],
        "run_dir": result["run_dir"],
    }


# =====================================================
# BATCH ENTRY POINT
# =====================================================

def run_batch(
    input_folder: str,
    config_path: Optional[str],
    output_root: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Batch Runner

    - One timestamped run directory
    - One subfolder per file
    - Safe retries
    - A failing file never stops the batch
    """

    config = load_config(config_path)

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H-%M-%S")
    run_dir = Path(output_root or config.get("output_dir", "runs")) / timestamp
    run_dir.mkdir(parents=True, exist_ok=True)

    files = sorted(
        f for f in os.listdir(input_folder)
        if f.lower().endswith(SUPPORTED_EXT)
    )

    log.info("Found %d input files", len(files))
    log.info("Batch run directory: %s", run_dir)

    completed: List[Dict[str, Any]] = []
    errors: List[str] = []

    for file in files:
        src = Path(input_folder) / file

        try:
            completed.append(run_single_file(src, config, run_dir))

        except Exception as e:
            failed_path = (
                run_dir
                / "failed"
                / f"{src.stem}_{int(datetime.now(timezone.utc).timestamp())}{src.suffix}"
            )
            failed_path.parent.mkdir(exist_ok=True)
            failed_path.write_bytes(src.read_bytes())

            errors.append(f"{src.name}: {e}")
            log.error(
                "File failed after retries: %s | Reason: %s",
                src.name,
                str(e),
            )

    create_run_metadata(
        input_files=files,
        config=config,
        output_dir=run_dir,
        status="completed" if not errors else "completed_with_errors",
        errors=errors,
    )

    log.info("Batch run finished: %s", run_dir)
    return {"run_dir": str(run_dir), "completed": completed, "errors": errors}
