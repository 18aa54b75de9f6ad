import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List


def create_run_metadata(
    input_files: List[str],
    config: Dict,
    output_dir: Path,
    status: str = "completed",
    errors: List[str] | None = None,
    reports: List[str] | None = None,
    records: int | None = None,
    rejected: int | None = None,
):
    """
    Create a run.json metadata file describing a batch or single-file run.
    """

    metadata = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": status,
        "input_files": input_files,
        "reports": reports or [],
        "records": records,
        "rejected_records": rejected,
        "errors": errors or [],
        "config_summary": sorted(config.keys()),
    }

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    metadata_path = output_dir / "run.json"

    with open(metadata_path, "w", encoding="utf-8") as f:
        json.dump(metadata, f, indent=2)

    return metadata_path
