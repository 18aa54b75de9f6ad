"""
The fifteen hospital reports.

Each report is a pure function of the patient frame returning a new
DataFrame.  Shared rules:

- averages and rates are rounded to 2 places, halves away from zero
- rates are matching * 100 / group size; an empty group gives NaN
- an empty input frame gives an empty result with the report's columns
- ties in the sort order resolve by the grouping key
"""

from functools import wraps
from typing import List, Optional

import numpy as np
import pandas as pd

from hospital_analysis.core.buckets import (
    age_groups,
    month_label,
    satisfaction_levels,
    simulated_months,
    stay_categories,
)
from hospital_analysis.core.schema import (
    AGE,
    COLUMNS,
    CONDITION,
    COST,
    GENDER,
    LENGTH_OF_STAY,
    OUTCOME,
    PATIENT_ID,
    PROCEDURE,
    READMISSION,
    SATISFACTION,
    Outcome,
)
from hospital_analysis.reporting.utils import (
    percentage,
    round_half_up,
    round_series,
    safe_ratio,
)

AGE_GROUP = "age_group"
STAY_CATEGORY = "stay_category"
SATISFACTION_LEVEL = "satisfaction_level"
MONTH_NUM = "month_num"
MONTH_LABEL = "month_label"

OVERALL_METRICS = "Overall Metrics"
HIGH_COST_ANALYSIS = "High Cost Analysis"

_RECOVERED = "_recovered"


# =====================================================
# SHARED HELPERS
# =====================================================

def returns_columns(columns: List[str]):
    """
    Attach the output columns to a report and short-circuit empty input.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(df: pd.DataFrame, *args, **kwargs) -> pd.DataFrame:
            if df is None or df.empty:
                return pd.DataFrame(columns=columns)
            return func(df, *args, **kwargs)[columns]

        wrapper.columns = list(columns)
        return wrapper

    return decorator


def _group_stats(df: pd.DataFrame, by) -> pd.DataFrame:
    """
    One row per group (sorted by key) with every raw aggregate the
    reports draw on.  Nothing is rounded here.
    """
    frame = df.assign(**{_RECOVERED: df[OUTCOME].eq(Outcome.RECOVERED.value)})

    stats = frame.groupby(by, sort=True, observed=True).agg(
        count=(PATIENT_ID, "count"),
        readmissions=(READMISSION, "sum"),
        recovered=(_RECOVERED, "sum"),
        mean_age=(AGE, "mean"),
        min_age=(AGE, "min"),
        max_age=(AGE, "max"),
        mean_cost=(COST, "mean"),
        min_cost=(COST, "min"),
        max_cost=(COST, "max"),
        total_cost=(COST, "sum"),
        mean_stay=(LENGTH_OF_STAY, "mean"),
        mean_satisfaction=(SATISFACTION, "mean"),
    ).reset_index()

    stats["readmission_pct"] = percentage(stats["readmissions"], stats["count"])
    stats["recovery_pct"] = percentage(stats["recovered"], stats["count"])
    return stats


def _sort(frame: pd.DataFrame, by, ascending=True) -> pd.DataFrame:
    return frame.sort_values(
        by, ascending=ascending, kind="mergesort", na_position="last"
    ).reset_index(drop=True)


def above_average_cost(df: pd.DataFrame) -> pd.Series:
    """
    Mask of rows whose cost exceeds the mean cost of the whole frame.

    Compared in whole cents (cost * n > sum) so float noise in the mean
    never lets an average-priced row through.
    """
    if df.empty:
        return pd.Series(False, index=df.index)
    cents = (df[COST] * 100).round().astype("int64")
    return cents * len(df) > int(cents.sum())


# =====================================================
# 1. DEMOGRAPHICS
# =====================================================

@returns_columns([GENDER, "total_patients", "average_age", "min_age", "max_age"])
def demographics(df: pd.DataFrame) -> pd.DataFrame:
    """Patient count and age spread per gender."""
    stats = _group_stats(df, GENDER)
    return pd.DataFrame({
        GENDER: stats[GENDER],
        "total_patients": stats["count"],
        "average_age": round_series(stats["mean_age"]),
        "min_age": stats["min_age"],
        "max_age": stats["max_age"],
    })


# =====================================================
# 2. CONDITION PREVALENCE
# =====================================================

@returns_columns([CONDITION, "patient_count", "percentage", "avg_cost", "avg_stay"])
def condition_prevalence(df: pd.DataFrame) -> pd.DataFrame:
    """Most common conditions with their share of all patients."""
    stats = _group_stats(df, CONDITION)
    out = pd.DataFrame({
        CONDITION: stats[CONDITION],
        "patient_count": stats["count"],
        "percentage": round_series(percentage(stats["count"], len(df))),
        "avg_cost": round_series(stats["mean_cost"]),
        "avg_stay": round_series(stats["mean_stay"]),
    })
    return _sort(out, "patient_count", ascending=False)


# =====================================================
# 3. PROCEDURE COST
# =====================================================

@returns_columns([PROCEDURE, "cases", "average_cost", "min_cost", "max_cost", "total_cost"])
def procedure_cost(df: pd.DataFrame) -> pd.DataFrame:
    stats = _group_stats(df, PROCEDURE)
    out = pd.DataFrame({
        PROCEDURE: stats[PROCEDURE],
        "cases": stats["count"],
        "average_cost": round_series(stats["mean_cost"]),
        "min_cost": round_series(stats["min_cost"]),
        "max_cost": round_series(stats["max_cost"]),
        "total_cost": round_series(stats["total_cost"]),
    })
    return _sort(out, "average_cost", ascending=False)


# =====================================================
# 4. READMISSION BY CONDITION & OUTCOME
# =====================================================

@returns_columns([CONDITION, OUTCOME, "total_cases", "readmissions", "readmission_rate"])
def readmission_by_outcome(df: pd.DataFrame, min_count: int = 10) -> pd.DataFrame:
    stats = _group_stats(df, [CONDITION, OUTCOME])
    stats = stats[stats["count"] > min_count]
    out = pd.DataFrame({
        CONDITION: stats[CONDITION],
        OUTCOME: stats[OUTCOME],
        "total_cases": stats["count"],
        "readmissions": stats["readmissions"],
        "readmission_rate": round_series(stats["readmission_pct"]),
    })
    return _sort(out, "readmission_rate", ascending=False)


# =====================================================
# 5. LENGTH OF STAY VS COST
# =====================================================

@returns_columns([STAY_CATEGORY, "patient_count", "avg_stay", "avg_cost", "avg_satisfaction"])
def stay_vs_cost(df: pd.DataFrame) -> pd.DataFrame:
    stats = _group_stats(
        df.assign(**{STAY_CATEGORY: stay_categories(df[LENGTH_OF_STAY])}),
        STAY_CATEGORY,
    )
    out = pd.DataFrame({
        STAY_CATEGORY: stats[STAY_CATEGORY],
        "patient_count": stats["count"],
        "avg_stay": round_series(stats["mean_stay"]),
        "avg_cost": round_series(stats["mean_cost"]),
        "avg_satisfaction": round_series(stats["mean_satisfaction"]),
    })
    return _sort(out, "avg_stay")


# =====================================================
# 6. SATISFACTION BY OUTCOME & READMISSION
# =====================================================

@returns_columns([OUTCOME, READMISSION, "cases", "avg_satisfaction", "avg_cost"])
def satisfaction_by_outcome(df: pd.DataFrame) -> pd.DataFrame:
    """Readmitted patients are listed before the others within an outcome."""
    stats = _group_stats(df, [OUTCOME, READMISSION])
    out = pd.DataFrame({
        OUTCOME: stats[OUTCOME],
        READMISSION: stats[READMISSION].astype(bool),
        "cases": stats["count"],
        "avg_satisfaction": round_series(stats["mean_satisfaction"]),
        "avg_cost": round_series(stats["mean_cost"]),
    })
    return _sort(out, [OUTCOME, READMISSION], ascending=[True, False])


# =====================================================
# 7. AGE GROUPS
# =====================================================

@returns_columns([
    AGE_GROUP, "patient_count", "avg_cost", "avg_stay",
    "avg_satisfaction", "readmission_rate",
])
def age_group_analysis(df: pd.DataFrame) -> pd.DataFrame:
    stats = _group_stats(df.assign(**{AGE_GROUP: age_groups(df[AGE])}), AGE_GROUP)
    # Categorical key: groupby already yields the fixed age order
    return pd.DataFrame({
        AGE_GROUP: stats[AGE_GROUP],
        "patient_count": stats["count"],
        "avg_cost": round_series(stats["mean_cost"]),
        "avg_stay": round_series(stats["mean_stay"]),
        "avg_satisfaction": round_series(stats["mean_satisfaction"]),
        "readmission_rate": round_series(stats["readmission_pct"]),
    })


# =====================================================
# 8. HIGH-COST PATIENTS
# =====================================================

@returns_columns(list(COLUMNS))
def high_cost_patients(df: pd.DataFrame, limit: Optional[int] = 50) -> pd.DataFrame:
    """
    Patients costing more than the average over ALL patients, most
    expensive first.  limit=None returns every such patient.
    """
    rows = _sort(df[above_average_cost(df)], PATIENT_ID)
    rows = _sort(rows, COST, ascending=False)
    if limit is not None:
        rows = rows.head(limit)
    return rows


# =====================================================
# 9. PROCEDURE EFFECTIVENESS
# =====================================================

@returns_columns([
    PROCEDURE, "total_cases", "recovered_cases", "recovery_rate",
    "avg_cost", "avg_satisfaction",
])
def procedure_effectiveness(df: pd.DataFrame, min_count: int = 5) -> pd.DataFrame:
    stats = _group_stats(df, PROCEDURE)
    stats = stats[stats["count"] > min_count]
    out = pd.DataFrame({
        PROCEDURE: stats[PROCEDURE],
        "total_cases": stats["count"],
        "recovered_cases": stats["recovered"],
        "recovery_rate": round_series(stats["recovery_pct"]),
        "avg_cost": round_series(stats["mean_cost"]),
        "avg_satisfaction": round_series(stats["mean_satisfaction"]),
    })
    return _sort(out, "recovery_rate", ascending=False)


# =====================================================
# 10. MONTHLY TREND (SIMULATED)
# =====================================================

@returns_columns([MONTH_NUM, MONTH_LABEL, "admissions", "avg_cost", "avg_stay", "readmission_rate"])
def monthly_trend(df: pd.DataFrame) -> pd.DataFrame:
    """Admissions per simulated month, (patient_id mod 12) + 1."""
    stats = _group_stats(df.assign(**{MONTH_NUM: simulated_months(df[PATIENT_ID])}), MONTH_NUM)
    return pd.DataFrame({
        MONTH_NUM: stats[MONTH_NUM],
        MONTH_LABEL: stats[MONTH_NUM].map(month_label),
        "admissions": stats["count"],
        "avg_cost": round_series(stats["mean_cost"]),
        "avg_stay": round_series(stats["mean_stay"]),
        "readmission_rate": round_series(stats["readmission_pct"]),
    })


# =====================================================
# 11. GENDER x CONDITION
# =====================================================

@returns_columns([
    GENDER, CONDITION, "cases", "avg_age", "avg_cost", "avg_stay", "recovery_rate",
])
def gender_condition(df: pd.DataFrame, min_count: int = 5) -> pd.DataFrame:
    stats = _group_stats(df, [GENDER, CONDITION])
    stats = stats[stats["count"] > min_count]
    out = pd.DataFrame({
        GENDER: stats[GENDER],
        CONDITION: stats[CONDITION],
        "cases": stats["count"],
        "avg_age": round_series(stats["mean_age"]),
        "avg_cost": round_series(stats["mean_cost"]),
        "avg_stay": round_series(stats["mean_stay"]),
        "recovery_rate": round_series(stats["recovery_pct"]),
    })
    return _sort(out, [GENDER, "cases"], ascending=[True, False])


# =====================================================
# 12. COST-EFFECTIVENESS SCORE
# =====================================================

def cost_effectiveness_score(avg_cost, avg_satisfaction, recovery_rate):
    """
    avg_cost / (avg_satisfaction * recovery_rate); lower is better.
    NaN when the product is zero (e.g. nobody recovered).
    """
    return safe_ratio(avg_cost, avg_satisfaction * recovery_rate)


@returns_columns([
    CONDITION, PROCEDURE, "cases", "avg_cost", "recovery_rate",
    "avg_satisfaction", "cost_effectiveness_score",
])
def cost_effectiveness(df: pd.DataFrame, min_count: int = 3) -> pd.DataFrame:
    stats = _group_stats(df, [CONDITION, PROCEDURE])
    stats = stats[stats["count"] > min_count]
    score = cost_effectiveness_score(
        stats["mean_cost"], stats["mean_satisfaction"], stats["recovery_pct"]
    )
    out = pd.DataFrame({
        CONDITION: stats[CONDITION],
        PROCEDURE: stats[PROCEDURE],
        "cases": stats["count"],
        "avg_cost": round_series(stats["mean_cost"]),
        "recovery_rate": round_series(stats["recovery_pct"]),
        "avg_satisfaction": round_series(stats["mean_satisfaction"]),
        "cost_effectiveness_score": round_series(score),
    })
    # Unscored (NaN) rows go last
    return _sort(out, "cost_effectiveness_score")


# =====================================================
# 13. READMISSION RISK BY CONDITION
# =====================================================

@returns_columns([
    CONDITION, "avg_age", "avg_stay", "avg_cost", "avg_satisfaction",
    "total_cases", "readmissions", "readmission_rate",
])
def readmission_risk(df: pd.DataFrame, min_count: int = 10) -> pd.DataFrame:
    stats = _group_stats(df, CONDITION)
    stats = stats[stats["count"] > min_count]
    out = pd.DataFrame({
        CONDITION: stats[CONDITION],
        "avg_age": round_series(stats["mean_age"]),
        "avg_stay": round_series(stats["mean_stay"]),
        "avg_cost": round_series(stats["mean_cost"]),
        "avg_satisfaction": round_series(stats["mean_satisfaction"]),
        "total_cases": stats["count"],
        "readmissions": stats["readmissions"],
        "readmission_rate": round_series(stats["readmission_pct"]),
    })
    return _sort(out, "readmission_rate", ascending=False)


# =====================================================
# 14. SATISFACTION DRIVERS
# =====================================================

@returns_columns([
    SATISFACTION_LEVEL, "patient_count", "avg_cost", "avg_stay",
    "recovery_rate", "readmission_rate",
])
def satisfaction_drivers(df: pd.DataFrame) -> pd.DataFrame:
    stats = _group_stats(
        df.assign(**{SATISFACTION_LEVEL: satisfaction_levels(df[SATISFACTION])}),
        SATISFACTION_LEVEL,
    )
    return pd.DataFrame({
        SATISFACTION_LEVEL: stats[SATISFACTION_LEVEL],
        "patient_count": stats["count"],
        "avg_cost": round_series(stats["mean_cost"]),
        "avg_stay": round_series(stats["mean_stay"]),
        "recovery_rate": round_series(stats["recovery_pct"]),
        "readmission_rate": round_series(stats["readmission_pct"]),
    })


# =====================================================
# 15. EXECUTIVE DASHBOARD
# =====================================================

def _summary_row(label: str, subset: pd.DataFrame) -> dict:
    count = len(subset)
    recovered = int(subset[OUTCOME].eq(Outcome.RECOVERED.value).sum())
    readmitted = int(subset[READMISSION].sum())

    return {
        "metric": label,
        "total_patients": count,
        "avg_age": round_half_up(subset[AGE].mean()),
        "avg_cost": round_half_up(subset[COST].mean()),
        "avg_stay": round_half_up(subset[LENGTH_OF_STAY].mean()),
        "avg_satisfaction": round_half_up(subset[SATISFACTION].mean()),
        "recovery_rate": round_half_up(percentage(recovered, count)),
        "readmission_rate": round_half_up(percentage(readmitted, count)),
    }


@returns_columns([
    "metric", "total_patients", "avg_age", "avg_cost", "avg_stay",
    "avg_satisfaction", "recovery_rate", "readmission_rate",
])
def executive_dashboard(df: pd.DataFrame) -> pd.DataFrame:
    """
    Two rows: everyone, then the above-average-cost subset.  When no
    patient is above average the second row has zero patients and NaN
    metrics.
    """
    rows = [
        _summary_row(OVERALL_METRICS, df),
        _summary_row(HIGH_COST_ANALYSIS, df[above_average_cost(df)]),
    ]
    out = pd.DataFrame(rows)
    out["total_patients"] = out["total_patients"].astype("int64")
    for column in out.columns[2:]:
        out[column] = out[column].astype(np.float64)
    return out
