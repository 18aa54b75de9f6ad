from collections import Counter
from typing import Any, Dict, List, TYPE_CHECKING

import numpy as np
import pandas as pd

if TYPE_CHECKING:
    from hospital_analysis.core.loader import RejectedRecord


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Standardize column names: strip, lower-case, spaces to underscores.
    Returns a copy; the input frame is left untouched.
    """
    df = df.copy()
    df.columns = (
        df.columns.astype(str)
        .str.strip()
        .str.lower()
        .str.replace(" ", "_")
    )
    return df


def outlier_counts(df: pd.DataFrame, threshold: float = 3.0) -> Dict[str, int]:
    """
    Simple outlier signal: rows with |z-score| above threshold per numeric column.
    """
    flags = {}
    numeric_cols = df.select_dtypes(include=[np.number]).columns

    for col in numeric_cols:
        series = df[col].dropna()
        if series.empty or series.std() == 0 or pd.isna(series.std()):
            flags[col] = 0
            continue

        z_scores = (series - series.mean()) / series.std()
        flags[col] = int((z_scores.abs() > threshold).sum())

    return flags


def summarize_quality(
    raw_df: pd.DataFrame,
    frame: pd.DataFrame,
    rejected: List["RejectedRecord"],
) -> Dict[str, Any]:
    """
    Data integrity summary for the audit section of the report.

    Args:
        raw_df: Frame as read from disk (after column normalisation)
        frame: Validated patient frame
        rejected: Rows that failed validation

    Returns:
        dict with row counts, rejection reasons, null ratios and
        outlier counts.
    """
    # Rows the reader dropped never reach raw_df
    total_rows = len(frame) + len(rejected)
    blanks = raw_df.replace(r"^\s*$", np.nan, regex=True)
    reasons = Counter(r.field for r in rejected)

    return {
        "rows_read": total_rows,
        "rows_accepted": len(frame),
        "rows_rejected": len(rejected),
        "rejections_by_field": dict(sorted(reasons.items())),
        "null_ratio_by_column": (
            {k: float(v) for k, v in blanks.isna().mean().items()}
            if len(raw_df) > 0 else {}
        ),
        "outlier_counts_by_column": outlier_counts(frame.drop(columns=["patient_id"], errors="ignore")),
    }
