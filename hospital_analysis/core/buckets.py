"""
Grouping keys derived from record fields.

Every bucket has a scalar function (one value in, one label out) and a
vectorised twin over a pandas Series returning an ordered categorical, so
grouped reports come out in the fixed business order.
"""

import pandas as pd


# =====================================================
# LABELS (ORDER MATTERS)
# =====================================================

AGE_YOUNG = "Young (Below 30)"
AGE_MIDDLE = "Middle-Aged (30-49)"
AGE_SENIOR = "Senior (50-69)"
AGE_ELDERLY = "Elderly (70+)"

AGE_GROUP_ORDER = [AGE_YOUNG, AGE_MIDDLE, AGE_SENIOR, AGE_ELDERLY]

STAY_SHORT = "Short Stay (1-3 days)"
STAY_MEDIUM = "Medium Stay (4-7 days)"
STAY_LONG = "Long Stay (8+ days)"

STAY_CATEGORY_ORDER = [STAY_SHORT, STAY_MEDIUM, STAY_LONG]

SATISFACTION_HIGH = "High Satisfaction (4-5)"
SATISFACTION_MEDIUM = "Medium Satisfaction (3)"
SATISFACTION_LOW = "Low Satisfaction (1-2)"

# Reports list the happiest patients first
SATISFACTION_LEVEL_ORDER = [SATISFACTION_HIGH, SATISFACTION_MEDIUM, SATISFACTION_LOW]


# =====================================================
# SCALAR BUCKETS
# =====================================================

def age_group(age: int) -> str:
    if age < 30:
        return AGE_YOUNG
    if age < 50:
        return AGE_MIDDLE
    if age < 70:
        return AGE_SENIOR
    return AGE_ELDERLY


def stay_category(length_of_stay: int) -> str:
    if length_of_stay <= 3:
        return STAY_SHORT
    if length_of_stay <= 7:
        return STAY_MEDIUM
    return STAY_LONG


def satisfaction_level(satisfaction: int) -> str:
    if satisfaction >= 4:
        return SATISFACTION_HIGH
    if satisfaction >= 3:
        return SATISFACTION_MEDIUM
    return SATISFACTION_LOW


def simulated_month(patient_id: int) -> int:
    """Stand-in admission month: the table carries no dates."""
    return (patient_id % 12) + 1


def month_label(month: int) -> str:
    return f"Month {month}"


# =====================================================
# VECTORISED BUCKETS
# =====================================================

def _categorise(series: pd.Series, func, order) -> pd.Series:
    return series.map(func).astype(pd.CategoricalDtype(order, ordered=True))


def age_groups(ages: pd.Series) -> pd.Series:
    return _categorise(ages, age_group, AGE_GROUP_ORDER)


def stay_categories(stays: pd.Series) -> pd.Series:
    return _categorise(stays, stay_category, STAY_CATEGORY_ORDER)


def satisfaction_levels(scores: pd.Series) -> pd.Series:
    return _categorise(scores, satisfaction_level, SATISFACTION_LEVEL_ORDER)


def simulated_months(patient_ids: pd.Series) -> pd.Series:
    # patient_id is non-negative, so months fall in 1..12
    return patient_ids.map(simulated_month).astype("int64")
