import math

import numpy as np
import pandas as pd
import pytest

from hospital_analysis.core.schema import records_to_frame
from hospital_analysis.reporting import reports
from hospital_analysis.reporting.registry import REPORTS
from hospital_analysis.reporting.utils import round_half_up, safe_ratio


# -------------------------------------------------
# Rounding & ratios
# -------------------------------------------------

@pytest.mark.parametrize("value,expected", [
    (2.675, 2.68),
    (1.005, 1.01),
    (-1.005, -1.01),
    (33.333333, 33.33),
    (12, 12.0),
])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_round_half_up_keeps_nan():
    assert math.isnan(round_half_up(float("nan")))
    assert math.isnan(round_half_up(None))


def test_safe_ratio_zero_denominator():
    assert math.isnan(safe_ratio(5, 0))
    out = safe_ratio(pd.Series([1.0, 2.0]), pd.Series([2, 0]))
    assert out.iloc[0] == 0.5
    assert math.isnan(out.iloc[1])


# -------------------------------------------------
# Empty input
# -------------------------------------------------

@pytest.mark.parametrize("name", list(REPORTS))
def test_empty_input_gives_empty_table(name):
    spec = REPORTS[name]
    out = spec.compute(records_to_frame([]))

    assert out.empty
    assert list(out.columns) == spec.columns


# -------------------------------------------------
# Individual reports
# -------------------------------------------------

def test_demographics(make_patients):
    df = make_patients([
        {"gender": "Female", "age": 30},
        {"gender": "Male", "age": 20},
        {"gender": "Female", "age": 41},
        {"gender": "Male", "age": 60},
    ])
    out = reports.demographics(df)

    assert out["gender"].tolist() == ["Male", "Female"]
    assert out["total_patients"].tolist() == [2, 2]
    assert out["average_age"].tolist() == [40.0, 35.5]
    assert out["min_age"].tolist() == [20, 30]
    assert out["max_age"].tolist() == [60, 41]


def test_condition_prevalence_sorted_by_count_then_name(make_patients):
    df = make_patients(
        [{"condition": "Stroke", "cost": 100}] * 2
        + [{"condition": "Asthma", "cost": 300, "length_of_stay": 2}]
        + [{"condition": "Cancer", "cost": 200}]
    )
    out = reports.condition_prevalence(df)

    assert out["condition"].tolist() == ["Stroke", "Asthma", "Cancer"]
    assert out["percentage"].tolist() == [50.0, 25.0, 25.0]
    assert out.loc[1, "avg_cost"] == 300.0
    assert out.loc[1, "avg_stay"] == 2.0


def test_procedure_cost(make_patients):
    df = make_patients([
        {"procedure": "MRI", "cost": 100.10},
        {"procedure": "MRI", "cost": 200.30},
        {"procedure": "Surgery", "cost": 5000},
    ])
    out = reports.procedure_cost(df)

    assert out["procedure"].tolist() == ["Surgery", "MRI"]
    mri = out.iloc[1]
    assert mri["cases"] == 2
    assert mri["average_cost"] == 150.2
    assert mri["min_cost"] == 100.10
    assert mri["max_cost"] == 200.3
    assert mri["total_cost"] == 300.4


def test_readmission_by_outcome_needs_more_than_ten_cases(make_patients):
    rows = (
        [{"condition": "Stroke", "readmission": "Yes"}] * 3
        + [{"condition": "Stroke", "readmission": "No"}] * 8
        + [{"condition": "Asthma", "readmission": "Yes"}] * 10
    )
    out = reports.readmission_by_outcome(make_patients(rows))

    assert out["condition"].tolist() == ["Stroke"]
    assert out.iloc[0]["total_cases"] == 11
    assert out.iloc[0]["readmissions"] == 3
    assert out.iloc[0]["readmission_rate"] == 27.27


def test_readmission_threshold_is_configurable(make_patients):
    rows = [{"condition": "Asthma", "readmission": "Yes"}] * 2
    out = reports.readmission_by_outcome(make_patients(rows), min_count=1)
    assert out.iloc[0]["readmission_rate"] == 100.0


def test_stay_vs_cost_categories(make_patients):
    df = make_patients([
        {"length_of_stay": 3, "cost": 100},
        {"length_of_stay": 4, "cost": 200},
        {"length_of_stay": 7, "cost": 400},
        {"length_of_stay": 8, "cost": 800},
    ])
    out = reports.stay_vs_cost(df)

    assert out["stay_category"].astype(str).tolist() == [
        "Short Stay (1-3 days)",
        "Medium Stay (4-7 days)",
        "Long Stay (8+ days)",
    ]
    assert out["patient_count"].tolist() == [1, 2, 1]
    assert out["avg_stay"].tolist() == [3.0, 5.5, 8.0]
    assert out["avg_cost"].tolist() == [100.0, 300.0, 800.0]


def test_satisfaction_by_outcome_order(make_patients):
    df = make_patients([
        {"outcome": "Stable", "readmission": "No", "satisfaction": 2},
        {"outcome": "Recovered", "readmission": "No", "satisfaction": 5},
        {"outcome": "Stable", "readmission": "Yes", "satisfaction": 1},
        {"outcome": "Recovered", "readmission": "Yes", "satisfaction": 3},
    ])
    out = reports.satisfaction_by_outcome(df)

    pairs = list(zip(out["outcome"].astype(str), out["readmission"]))
    assert pairs == [
        ("Recovered", True),
        ("Recovered", False),
        ("Stable", True),
        ("Stable", False),
    ]
    assert out["avg_satisfaction"].tolist() == [3.0, 5.0, 1.0, 2.0]


def test_age_group_example(make_patients):
    df = make_patients([
        {"age": 25, "cost": 100},
        {"age": 45, "cost": 200},
        {"age": 75, "cost": 300},
    ])
    out = reports.age_group_analysis(df)

    assert out["age_group"].astype(str).tolist() == [
        "Young (Below 30)",
        "Middle-Aged (30-49)",
        "Elderly (70+)",
    ]
    assert out["avg_cost"].tolist() == [100.0, 200.0, 300.0]


def test_high_cost_patients(make_patients):
    df = make_patients([{"cost": c} for c in (100, 400, 200, 300)])
    out = reports.high_cost_patients(df)

    assert out["cost"].tolist() == [400.0, 300.0]
    assert out["patient_id"].tolist() == [2, 4]
    assert list(out.columns) == list(df.columns)


def test_high_cost_limit(make_patients):
    df = make_patients([{"cost": 100 + i} for i in range(200)])
    out = reports.high_cost_patients(df)

    assert len(out) == 50
    assert out["cost"].is_monotonic_decreasing
    assert len(reports.high_cost_patients(df, limit=None)) == 100


def test_equal_costs_have_no_high_cost_patients(make_patients):
    df = make_patients([{"cost": 100.10}] * 3)
    assert reports.high_cost_patients(df).empty


def test_zero_recovered_gives_zero_rate(make_patients):
    df = make_patients([{"procedure": "CT Scan", "outcome": "Stable"}] * 6)
    out = reports.procedure_effectiveness(df)

    assert out.iloc[0]["recovered_cases"] == 0
    assert out.iloc[0]["recovery_rate"] == 0.0


def test_procedure_effectiveness_threshold(make_patients):
    rows = [{"procedure": "MRI"}] * 5 + [{"procedure": "Surgery"}] * 6
    out = reports.procedure_effectiveness(make_patients(rows))
    assert out["procedure"].tolist() == ["Surgery"]


def test_monthly_trend(make_patients):
    df = make_patients([{"readmission": "Yes" if i % 2 else "No"} for i in range(24)])
    out = reports.monthly_trend(df)

    assert out["month_num"].tolist() == list(range(1, 13))
    assert out["month_label"].iloc[0] == "Month 1"
    assert out["admissions"].sum() == 24
    assert (out["admissions"] == 2).all()


def test_gender_condition_sorted_by_gender_then_cases(make_patients):
    rows = (
        [{"gender": "Female", "condition": "Asthma"}] * 6
        + [{"gender": "Male", "condition": "Asthma"}] * 6
        + [{"gender": "Male", "condition": "Stroke", "outcome": "Stable"}] * 8
        + [{"gender": "Female", "condition": "Stroke"}] * 5
    )
    out = reports.gender_condition(make_patients(rows))

    assert list(zip(out["gender"].astype(str), out["condition"])) == [
        ("Male", "Stroke"),
        ("Male", "Asthma"),
        ("Female", "Asthma"),
    ]
    assert out.iloc[0]["recovery_rate"] == 0.0


def test_cost_effectiveness_score_example():
    assert reports.cost_effectiveness_score(500, 4, 100) == 1.25


def test_cost_effectiveness_single_row_group(make_patients):
    df = make_patients([{"cost": 500, "satisfaction": 4, "outcome": "Recovered"}])
    out = reports.cost_effectiveness(df, min_count=0)
    assert out.iloc[0]["cost_effectiveness_score"] == 1.25


def test_unscored_groups_sort_last(make_patients):
    rows = (
        [{"procedure": "A", "cost": 1000, "outcome": "Stable"}] * 4
        + [{"procedure": "B", "cost": 800, "satisfaction": 4}] * 4
        + [{"procedure": "C", "cost": 400, "satisfaction": 5}] * 4
    )
    out = reports.cost_effectiveness(make_patients(rows))

    assert out["procedure"].tolist() == ["C", "B", "A"]
    assert out["cost_effectiveness_score"].iloc[0] == 0.8
    assert out["cost_effectiveness_score"].iloc[1] == 2.0
    assert np.isnan(out["cost_effectiveness_score"].iloc[2])


def test_readmission_risk(make_patients):
    rows = (
        [{"condition": "Stroke", "readmission": "Yes", "age": 70}] * 6
        + [{"condition": "Stroke", "age": 60}] * 6
        + [{"condition": "Asthma"}] * 11
    )
    out = reports.readmission_risk(make_patients(rows))

    assert out["condition"].tolist() == ["Stroke", "Asthma"]
    assert out.iloc[0]["readmission_rate"] == 50.0
    assert out.iloc[0]["avg_age"] == 65.0
    assert out.iloc[1]["readmissions"] == 0


def test_satisfaction_drivers_order(make_patients):
    df = make_patients([{"satisfaction": s} for s in (1, 3, 5, 2)])
    out = reports.satisfaction_drivers(df)

    assert out["satisfaction_level"].astype(str).tolist() == [
        "High Satisfaction (4-5)",
        "Medium Satisfaction (3)",
        "Low Satisfaction (1-2)",
    ]
    assert out["patient_count"].tolist() == [1, 1, 2]


def test_executive_dashboard(make_patients):
    df = make_patients([
        {"age": 20, "cost": 100, "length_of_stay": 2, "satisfaction": 5},
        {"age": 40, "cost": 300, "length_of_stay": 6, "satisfaction": 3,
         "outcome": "Stable", "readmission": "Yes"},
    ])
    out = reports.executive_dashboard(df)

    overall, high = out.to_dict(orient="records")
    assert overall == {
        "metric": "Overall Metrics",
        "total_patients": 2,
        "avg_age": 30.0,
        "avg_cost": 200.0,
        "avg_stay": 4.0,
        "avg_satisfaction": 4.0,
        "recovery_rate": 50.0,
        "readmission_rate": 50.0,
    }
    assert high["metric"] == "High Cost Analysis"
    assert high["total_patients"] == 1
    assert high["avg_cost"] == 300.0
    assert high["recovery_rate"] == 0.0
    assert high["readmission_rate"] == 100.0


def test_dashboard_with_empty_high_cost_subset(make_patients):
    out = reports.executive_dashboard(make_patients([{"cost": 250}] * 2))

    high = out.iloc[1]
    assert high["total_patients"] == 0
    assert np.isnan(high["avg_cost"])
    assert np.isnan(high["recovery_rate"])
