from difflib import get_close_matches
from typing import Dict, List, Optional
import pandas as pd

from hospital_analysis.core.schema import (
    PATIENT_ID,
    AGE,
    GENDER,
    CONDITION,
    PROCEDURE,
    COST,
    LENGTH_OF_STAY,
    READMISSION,
    OUTCOME,
    SATISFACTION,
)


# =====================================================
# PATIENT TABLE SYNONYMS
# =====================================================
# Keys are canonical column names, values are accepted spellings
# after normalize_columns() has run.

SEMANTIC_COLUMN_MAP: Dict[str, List[str]] = {
    PATIENT_ID: ["patient_id", "patientid", "id", "pid", "patient"],
    AGE: ["age", "patient_age", "age_years"],
    GENDER: ["gender", "sex"],
    CONDITION: ["condition", "diagnosis", "dx", "medical_condition"],
    PROCEDURE: ["procedure", "treatment", "procedure_name"],
    COST: ["cost", "treatment_cost", "billing_amount", "charges"],
    LENGTH_OF_STAY: ["length_of_stay", "los", "stay_length", "lengthofstay", "stay_days"],
    READMISSION: ["readmission", "readmitted", "readmit", "re_admitted"],
    OUTCOME: ["outcome", "result", "status"],
    SATISFACTION: ["satisfaction", "satisfaction_score", "patient_satisfaction"],
}


# =====================================================
# COLUMN RESOLUTION ENGINE
# =====================================================

def resolve_column(
    df: pd.DataFrame,
    semantic_key: str,
    cutoff: float = 0.85
) -> Optional[str]:
    """
    Resolve a canonical column name to an actual dataframe column.

    Resolution strategy:
    1. Exact match (case-insensitive)
    2. Synonym match from SEMANTIC_COLUMN_MAP
    3. Fuzzy match fallback

    Returns:
        Actual column name if resolved, else None
    """

    if df is None or semantic_key is None:
        return None

    cols = list(df.columns)
    cols_lower = {str(c).lower(): c for c in cols}

    semantic_key = semantic_key.lower()

    # 1. Exact match
    if semantic_key in cols_lower:
        return cols_lower[semantic_key]

    # 2. Synonym match
    candidates = SEMANTIC_COLUMN_MAP.get(semantic_key, [])
    for candidate in candidates:
        if candidate in cols_lower:
            return cols_lower[candidate]

    # 3. Fuzzy fallback (last resort)
    matches = get_close_matches(
        semantic_key,
        cols_lower.keys(),
        n=1,
        cutoff=cutoff
    )

    return cols_lower[matches[0]] if matches else None


def resolve_columns(df: pd.DataFrame) -> Dict[str, Optional[str]]:
    """Map every canonical column to its source column (or None)."""
    resolved: Dict[str, Optional[str]] = {}
    taken = set()

    for key in SEMANTIC_COLUMN_MAP:
        column = resolve_column(df, key)
        # One source column feeds at most one canonical field
        if column in taken:
            column = None
        resolved[key] = column
        if column is not None:
            taken.add(column)

    return resolved
