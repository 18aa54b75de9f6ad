# =====================================================
# REPORT REGISTRY
# =====================================================

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

import pandas as pd

from hospital_analysis.core.exceptions import UnknownReportError
from hospital_analysis.reporting.reports import (
    age_group_analysis,
    condition_prevalence,
    cost_effectiveness,
    demographics,
    executive_dashboard,
    gender_condition,
    high_cost_patients,
    monthly_trend,
    procedure_cost,
    procedure_effectiveness,
    readmission_by_outcome,
    readmission_risk,
    satisfaction_by_outcome,
    satisfaction_drivers,
    stay_vs_cost,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportSpec:
    name: str
    title: str
    description: str
    func: Callable[..., pd.DataFrame]

    @property
    def columns(self) -> List[str]:
        return list(self.func.columns)

    def compute(self, df: pd.DataFrame, **options: Any) -> pd.DataFrame:
        return self.func(df, **options)


# =====================================================
# NAME -> REPORT (report order)
# =====================================================

REPORTS: Dict[str, ReportSpec] = {
    spec.name: spec
    for spec in [
        ReportSpec(
            "demographics",
            "Patient Demographics Overview",
            "Patient count and average, minimum and maximum age per gender.",
            demographics,
        ),
        ReportSpec(
            "condition_prevalence",
            "Condition Prevalence Analysis",
            "Most common conditions with their average cost and stay.",
            condition_prevalence,
        ),
        ReportSpec(
            "procedure_cost",
            "Cost Analysis by Procedure",
            "Total, average and range of cost per procedure.",
            procedure_cost,
        ),
        ReportSpec(
            "readmission_by_outcome",
            "Readmission Rate Analysis",
            "Readmission rate per condition and outcome.",
            readmission_by_outcome,
        ),
        ReportSpec(
            "stay_vs_cost",
            "Length of Stay vs Cost",
            "Average cost and satisfaction per stay category.",
            stay_vs_cost,
        ),
        ReportSpec(
            "satisfaction_by_outcome",
            "Satisfaction by Outcome & Readmission",
            "Satisfaction and cost per outcome and readmission status.",
            satisfaction_by_outcome,
        ),
        ReportSpec(
            "age_group_analysis",
            "Age Group Analysis",
            "Cost, stay, satisfaction and readmission rate per age group.",
            age_group_analysis,
        ),
        ReportSpec(
            "high_cost_patients",
            "High-Cost Patients",
            "Patients whose cost exceeds the average over all patients.",
            high_cost_patients,
        ),
        ReportSpec(
            "procedure_effectiveness",
            "Procedure Effectiveness",
            "Recovery rate and satisfaction per procedure.",
            procedure_effectiveness,
        ),
        ReportSpec(
            "monthly_trend",
            "Monthly Trend (Simulated)",
            "Admissions and readmissions per month derived from patient id.",
            monthly_trend,
        ),
        ReportSpec(
            "gender_condition",
            "Gender-Based Treatment Differences",
            "Outcomes and cost per condition for each gender.",
            gender_condition,
        ),
        ReportSpec(
            "cost_effectiveness",
            "Cost Efficiency",
            "Cost-effectiveness score per condition and procedure (lower is better).",
            cost_effectiveness,
        ),
        ReportSpec(
            "readmission_risk",
            "Readmission Risk Factors",
            "Conditions associated with higher readmission rates.",
            readmission_risk,
        ),
        ReportSpec(
            "satisfaction_drivers",
            "Satisfaction Drivers",
            "Recovery and readmission outcomes per satisfaction level.",
            satisfaction_drivers,
        ),
        ReportSpec(
            "executive_dashboard",
            "Performance Dashboard",
            "Overall metrics next to the high-cost patient subset.",
            executive_dashboard,
        ),
    ]
}


def get_report(name: str) -> ReportSpec:
    try:
        return REPORTS[name]
    except KeyError:
        raise UnknownReportError(
            f"Unknown report '{name}' (available: {', '.join(REPORTS)})"
        ) from None


def generate_reports(
    df: pd.DataFrame,
    names: Optional[Iterable[str]] = None,
    options: Optional[Dict[str, Dict[str, Any]]] = None,
) -> Dict[str, pd.DataFrame]:
    """
    Compute reports in registry order.

    Args:
        df: Validated patient frame
        names: Subset of report names; None or empty means all
        options: Per-report keyword options, e.g.
            {"high_cost_patients": {"limit": 20}}

    Returns:
        Ordered mapping name -> result DataFrame
    """
    options = options or {}
    selected = list(names) if names else list(REPORTS)

    # Fail before computing anything
    specs = [get_report(name) for name in selected]
    wanted = {spec.name for spec in specs}

    results: Dict[str, pd.DataFrame] = {}
    for spec in REPORTS.values():
        if spec.name not in wanted:
            continue
        results[spec.name] = spec.compute(df, **options.get(spec.name, {}))
        logger.debug("Report %s: %d rows", spec.name, len(results[spec.name]))

    return results
