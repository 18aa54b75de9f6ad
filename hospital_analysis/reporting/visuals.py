"""
Charts drawn from computed report tables.

Every chart reads a report result (never the raw frame), so figures always
agree with the tables they sit next to.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns
from matplotlib.ticker import FuncFormatter

from hospital_analysis.reporting.formatters import fmt_currency


def _save(fig, out: Path) -> Path:
    fig.tight_layout()
    fig.savefig(out, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return out


def condition_prevalence_chart(table: pd.DataFrame, out: Path) -> Optional[Path]:
    """Horizontal bar of patient count per condition (top 10)."""
    if table is None or table.empty:
        return None

    data = table.head(10)
    top = data.iloc[0]

    fig, ax = plt.subplots(figsize=(7, 4))
    sns.barplot(x=data["patient_count"], y=data["condition"], ax=ax, color="#4C72B0")

    ax.set_title(
        f"{top['condition']} is the most common condition ({top['percentage']:.1f}% of patients)",
        fontsize=11,
        pad=10,
    )
    ax.set_xlabel("Patients")
    ax.set_ylabel("Condition")
    ax.grid(axis="x", linestyle="--", alpha=0.4)
    return _save(fig, out)


def age_group_cost_chart(table: pd.DataFrame, out: Path) -> Optional[Path]:
    if table is None or table.empty:
        return None

    fig, ax = plt.subplots(figsize=(7, 3.5))
    sns.barplot(
        x=table["age_group"].astype(str),
        y=table["avg_cost"],
        ax=ax,
        color="#55A868",
    )
    ax.set_title("Average Treatment Cost by Age Group", fontsize=11, pad=10)
    ax.set_xlabel("Age Group")
    ax.set_ylabel("Average Cost ($)")
    ax.get_yaxis().set_major_formatter(FuncFormatter(lambda x, _: fmt_currency(x)))
    ax.grid(axis="y", linestyle="--", alpha=0.4)
    return _save(fig, out)


def monthly_trend_chart(table: pd.DataFrame, out: Path) -> Optional[Path]:
    if table is None or table.empty:
        return None

    fig, ax = plt.subplots(figsize=(8, 3.5))
    ax.plot(table["month_num"], table["admissions"], marker="o", linewidth=2, label="Admissions")
    ax.set_xlabel("Simulated Month")
    ax.set_ylabel("Admissions")
    ax.set_xticks(table["month_num"].tolist())

    rate_ax = ax.twinx()
    rate_ax.plot(
        table["month_num"],
        table["readmission_rate"],
        marker="s",
        linestyle="--",
        color="#C44E52",
        label="Readmission Rate (%)",
    )
    rate_ax.set_ylabel("Readmission Rate (%)")

    ax.set_title("Admissions and Readmission Rate by Month (Simulated)", fontsize=11, pad=10)
    ax.grid(axis="y", linestyle="--", alpha=0.4)
    return _save(fig, out)


def satisfaction_drivers_chart(table: pd.DataFrame, out: Path) -> Optional[Path]:
    if table is None or table.empty:
        return None

    long = table.melt(
        id_vars="satisfaction_level",
        value_vars=["recovery_rate", "readmission_rate"],
        var_name="metric",
        value_name="rate",
    )
    long["satisfaction_level"] = long["satisfaction_level"].astype(str)
    long["metric"] = long["metric"].str.replace("_", " ").str.title()

    fig, ax = plt.subplots(figsize=(7, 3.5))
    sns.barplot(data=long, x="satisfaction_level", y="rate", hue="metric", ax=ax)
    ax.set_title("Recovery vs Readmission by Satisfaction Level", fontsize=11, pad=10)
    ax.set_xlabel("")
    ax.set_ylabel("Rate (%)")
    ax.grid(axis="y", linestyle="--", alpha=0.4)
    return _save(fig, out)


# report name -> (chart function, file name, caption)
CHARTS = {
    "condition_prevalence": (
        condition_prevalence_chart,
        "condition_prevalence.png",
        "Patient count per condition",
    ),
    "age_group_analysis": (
        age_group_cost_chart,
        "age_group_cost.png",
        "Average treatment cost per age group",
    ),
    "monthly_trend": (
        monthly_trend_chart,
        "monthly_trend.png",
        "Admissions and readmission rate per simulated month",
    ),
    "satisfaction_drivers": (
        satisfaction_drivers_chart,
        "satisfaction_drivers.png",
        "Recovery and readmission rate per satisfaction level",
    ),
}


def render_visuals(
    reports: Dict[str, pd.DataFrame],
    output_dir: Path,
) -> List[Dict[str, Any]]:
    """
    Draw every chart whose report was computed.

    Returns a list of {"report", "path", "caption"} for the charts that
    were written.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    visuals = []
    for report_name, (chart, file_name, caption) in CHARTS.items():
        path = chart(reports.get(report_name), output_dir / file_name)
        if path is not None:
            visuals.append({"report": report_name, "path": str(path), "caption": caption})

    return visuals
