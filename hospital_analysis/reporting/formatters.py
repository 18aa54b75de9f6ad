from numbers import Integral, Real
from typing import Any, Optional

import numpy as np
import pandas as pd

MISSING = "N/A"


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def fmt_currency(value: Optional[float]) -> str:
    """
    Compact currency for chart axes and headline figures.
    """
    if _is_missing(value):
        return MISSING

    try:
        value = float(value)
    except (TypeError, ValueError):
        return MISSING

    if abs(value) >= 1_000_000:
        return f"${value/1_000_000:.2f}M"
    if abs(value) >= 1_000:
        return f"${value/1_000:.1f}K"
    return f"${value:,.0f}"


def fmt_percent(value: Optional[float], decimals: int = 2) -> str:
    """Rates are already on a 0-100 scale."""
    if _is_missing(value):
        return MISSING
    try:
        return f"{float(value):.{decimals}f}%"
    except (TypeError, ValueError):
        return MISSING


def fmt_cell(column: str, value: Any) -> str:
    """
    Table cell text.  Exact figures, two decimals for floats, Yes/No for
    flags, N/A for NaN sentinels.
    """
    if _is_missing(value):
        return MISSING

    if isinstance(value, (bool, np.bool_)):
        return "Yes" if value else "No"

    if column.endswith("_rate") or column == "percentage":
        return fmt_percent(value)

    if isinstance(value, Integral):
        return str(int(value))

    if isinstance(value, Real):
        return f"{float(value):,.2f}"

    return str(value)


def fmt_header(column: str) -> str:
    return column.replace("_", " ").title()
