import subprocess
import sys


def run_cli(args):
    return subprocess.run(
        [sys.executable, "-m", "hospital_analysis.cli"] + args,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )


def test_cli_help():
    result = run_cli(["--help"])
    assert result.returncode == 0


def test_cli_version():
    result = run_cli(["--version"])
    assert result.returncode == 0
    assert "Hospital Analysis" in result.stdout


def test_cli_list_reports():
    result = run_cli(["--list-reports"])
    assert result.returncode == 0
    assert "cost_effectiveness" in result.stdout
    assert len(result.stdout.strip().splitlines()) == 15


def test_cli_unknown_report_is_usage_error(sample_csv):
    result = run_cli([str(sample_csv), "--report", "bogus"])
    assert result.returncode == 2


def test_cli_single_file(sample_csv, tmp_path):
    result = run_cli([
        str(sample_csv),
        "--no-visuals",
        "--output-dir", str(tmp_path / "runs"),
        "--report", "demographics",
    ])
    assert result.returncode == 0, result.stderr
    assert "Report generated" in result.stdout
    assert "Rejected rows: 4" in result.stdout
    assert list((tmp_path / "runs").glob("*/Hospital_Analysis_Report.md"))


def test_cli_unusable_input(tmp_path):
    bad = tmp_path / "bad.csv"
    bad.write_text("a,b\n1,2\n", encoding="utf-8")

    result = run_cli([str(bad), "--output-dir", str(tmp_path / "runs")])
    assert result.returncode == 1
    assert "Missing required columns" in result.stderr


def test_cli_zero_byte_input(tmp_path):
    empty = tmp_path / "empty.csv"
    empty.write_bytes(b"")

    result = run_cli([str(empty), "--output-dir", str(tmp_path / "runs")])
    assert result.returncode == 1
    assert "Could not parse" in result.stderr
    assert "Traceback" not in result.stderr
