from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

import numpy as np
import pandas as pd


def round_half_up(value, places: int = 2) -> float:
    """
    Round like SQL ROUND() on decimals: halves go away from zero.
    NaN and None come back as NaN.
    """
    if value is None or pd.isna(value):
        return np.nan
    try:
        # repr gives the shortest decimal that round-trips, so 2.675 stays 2.675
        exact = Decimal(repr(float(value)))
        return float(exact.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return np.nan


def round_series(series: pd.Series, places: int = 2) -> pd.Series:
    return series.map(lambda v: round_half_up(v, places)).astype("float64")


def safe_ratio(numerator, denominator):
    """
    numerator / denominator with NaN wherever the denominator is zero
    or missing.  Works on scalars and on Series.
    """
    if isinstance(denominator, pd.Series):
        return numerator / denominator.where(denominator != 0)
    if denominator is None or pd.isna(denominator) or denominator == 0:
        return np.nan
    return numerator / denominator


def percentage(part, whole):
    """part * 100 / whole, NaN on an empty whole."""
    return safe_ratio(part * 100.0, whole)
