import pytest

from hospital_analysis.config import DEFAULT_CONFIG, load_config, report_options


def test_defaults_without_file():
    config = load_config(None)
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG


def test_user_values_merge_over_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "reports:\n"
        "  high_cost_limit: 10\n"
        "  min_group_size:\n"
        "    cost_effectiveness: 1\n"
        "output:\n"
        "  pdf: true\n",
        encoding="utf-8",
    )
    config = load_config(str(path))

    assert config["reports"]["high_cost_limit"] == 10
    assert config["reports"]["min_group_size"]["cost_effectiveness"] == 1
    assert config["reports"]["min_group_size"]["readmission_risk"] == 10
    assert config["output"]["pdf"] is True
    assert config["output"]["csv"] is True
    assert DEFAULT_CONFIG["reports"]["min_group_size"]["cost_effectiveness"] == 3


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))


def test_config_must_be_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_report_options():
    options = report_options(load_config(None))

    assert options["high_cost_patients"] == {"limit": 50}
    assert options["readmission_by_outcome"] == {"min_count": 10}
    assert options["cost_effectiveness"] == {"min_count": 3}


def test_min_group_size_for_report_without_threshold(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "reports:\n"
        "  min_group_size:\n"
        "    demographics: 2\n",
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match="min_group_size.demographics"):
        report_options(load_config(str(path)))
