import pandas as pd
import pytest

from hospital_analysis.automation import batch_runner
from hospital_analysis.automation.retry import retry
from hospital_analysis.core.exceptions import DataLoadError


def test_retry_recovers_from_transient_errors():
    calls = []

    @retry(times=3, delay=0)
    def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise OSError("disk busy")
        return "ok"

    assert flaky() == "ok"
    assert len(calls) == 3


def test_retry_gives_up_on_bad_data():
    calls = []

    @retry(times=3, delay=0)
    def broken():
        calls.append(1)
        raise DataLoadError("Missing required columns: age")

    with pytest.raises(DataLoadError):
        broken()
    assert len(calls) == 1


def test_batch_isolates_failures(sample_csv, tmp_path):
    inbox = tmp_path / "inbox"
    inbox.mkdir()
    (inbox / "good.csv").write_bytes(sample_csv.read_bytes())
    (inbox / "bad.csv").write_text("a,b\n1,2\n", encoding="utf-8")
    (inbox / "notes.txt").write_text("ignored", encoding="utf-8")

    config = tmp_path / "config.yaml"
    config.write_text("output:\n  visuals: false\n", encoding="utf-8")

    result = batch_runner.run_batch(str(inbox), str(config), output_root=str(tmp_path / "runs"))

    assert [c["file"] for c in result["completed"]] == ["good.csv"]
    assert len(result["errors"]) == 1
    assert result["errors"][0].startswith("bad.csv")

    run_dir = tmp_path / "runs"
    assert list(run_dir.glob("*/good_csv/Hospital_Analysis_Report.md"))
    assert list(run_dir.glob("*/failed/bad_*.csv"))
    assert list(run_dir.glob("*/run.json"))


def test_same_stem_different_extension_get_separate_folders(sample_csv, tmp_path):
    inbox = tmp_path / "inbox"
    inbox.mkdir()
    (inbox / "ward.csv").write_bytes(sample_csv.read_bytes())
    pd.read_csv(sample_csv).to_excel(inbox / "ward.xlsx", index=False)

    config = tmp_path / "config.yaml"
    config.write_text("output:\n  visuals: false\n", encoding="utf-8")

    result = batch_runner.run_batch(str(inbox), str(config), output_root=str(tmp_path / "runs"))

    assert result["errors"] == []
    dirs = [c["run_dir"] for c in result["completed"]]
    assert len(dirs) == 2
    assert len(set(dirs)) == 2

    run_dir = tmp_path / "runs"
    assert list(run_dir.glob("*/ward_csv/Hospital_Analysis_Report.md"))
    assert list(run_dir.glob("*/ward_xlsx/Hospital_Analysis_Report.md"))
