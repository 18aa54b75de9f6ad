"""
Patient record model.

A PatientRecord is one immutable row of the patients table.  Reports work
on a pandas DataFrame built from records (see `records_to_frame`); the
record type is the validation boundary between raw input and that frame.
"""

from dataclasses import dataclass, asdict
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping

import pandas as pd

from hospital_analysis.core.exceptions import InvalidRecordError


# =====================================================
# CANONICAL COLUMNS
# =====================================================

PATIENT_ID = "patient_id"
AGE = "age"
GENDER = "gender"
CONDITION = "condition"
PROCEDURE = "procedure"
COST = "cost"
LENGTH_OF_STAY = "length_of_stay"
READMISSION = "readmission"
OUTCOME = "outcome"
SATISFACTION = "satisfaction"

COLUMNS = (
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


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"


class Outcome(str, Enum):
    RECOVERED = "Recovered"
    STABLE = "Stable"


# Declaration order doubles as sort order in reports
GENDER_ORDER = [g.value for g in Gender]
OUTCOME_ORDER = [o.value for o in Outcome]

_TRUE_TOKENS = {"yes", "y", "true", "t", "1"}
_FALSE_TOKENS = {"no", "n", "false", "f", "0"}

_CENT = Decimal("0.01")


# =====================================================
# FIELD PARSERS
# =====================================================

def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _require(field: str, value: Any) -> Any:
    if _is_missing(value):
        raise InvalidRecordError(field, "missing value")
    return value


def _parse_int(field: str, value: Any, minimum: int | None = None,
               maximum: int | None = None) -> int:
    value = _require(field, value)
    if isinstance(value, bool):
        raise InvalidRecordError(field, f"expected an integer, got {value!r}")

    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidRecordError(field, f"expected an integer, got {value!r}") from None

    if not number.is_finite() or number != number.to_integral_value():
        raise InvalidRecordError(field, f"expected an integer, got {value!r}")

    result = int(number)
    if minimum is not None and result < minimum:
        raise InvalidRecordError(field, f"{result} is below {minimum}")
    if maximum is not None and result > maximum:
        raise InvalidRecordError(field, f"{result} is above {maximum}")
    return result


def _parse_cost(value: Any) -> Decimal:
    value = _require(COST, value)
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidRecordError(COST, f"expected a number, got {value!r}") from None

    if not amount.is_finite():
        raise InvalidRecordError(COST, f"expected a number, got {value!r}")
    if amount < 0:
        raise InvalidRecordError(COST, "cost cannot be negative")

    # DECIMAL(10,2)
    return amount.quantize(_CENT, rounding=ROUND_HALF_UP)


def _parse_text(field: str, value: Any) -> str:
    text = str(_require(field, value)).strip()
    if not text:
        raise InvalidRecordError(field, "missing value")
    return text


def _parse_enum(field: str, enum_cls, value: Any):
    text = _parse_text(field, value).lower()
    for member in enum_cls:
        if member.value.lower() == text:
            return member
    allowed = ", ".join(m.value for m in enum_cls)
    raise InvalidRecordError(field, f"{value!r} is not one of {allowed}")


def _parse_flag(field: str, value: Any) -> bool:
    value = _require(field, value)
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)

    token = str(value).strip().lower()
    if token in _TRUE_TOKENS:
        return True
    if token in _FALSE_TOKENS:
        return False
    raise InvalidRecordError(field, f"expected Yes/No, got {value!r}")


# =====================================================
# RECORD
# =====================================================

@dataclass(frozen=True)
class PatientRecord:
    patient_id: int
    age: int
    gender: Gender
    condition: str
    procedure: str
    cost: Decimal
    length_of_stay: int
    readmission: bool
    outcome: Outcome
    satisfaction: int

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "PatientRecord":
        """
        Build a record from a raw row keyed by canonical column names.

        Raises InvalidRecordError naming the first offending field.
        """
        return cls(
            patient_id=_parse_int(PATIENT_ID, row.get(PATIENT_ID), minimum=0),
            age=_parse_int(AGE, row.get(AGE), minimum=0),
            gender=_parse_enum(GENDER, Gender, row.get(GENDER)),
            condition=_parse_text(CONDITION, row.get(CONDITION)),
            procedure=_parse_text(PROCEDURE, row.get(PROCEDURE)),
            cost=_parse_cost(row.get(COST)),
            length_of_stay=_parse_int(LENGTH_OF_STAY, row.get(LENGTH_OF_STAY), minimum=0),
            readmission=_parse_flag(READMISSION, row.get(READMISSION)),
            outcome=_parse_enum(OUTCOME, Outcome, row.get(OUTCOME)),
            satisfaction=_parse_int(SATISFACTION, row.get(SATISFACTION), minimum=1, maximum=5),
        )

    def to_row(self) -> Dict[str, Any]:
        row = asdict(self)
        row[GENDER] = self.gender.value
        row[OUTCOME] = self.outcome.value
        row[COST] = float(self.cost)
        return row


# =====================================================
# FRAME CONVERSION
# =====================================================

def records_to_frame(records: Iterable[PatientRecord]) -> pd.DataFrame:
    """
    Build the typed report frame.

    gender and outcome become ordered categoricals so every report sorts
    them in declaration order.  cost is held as float64 for aggregation.
    """
    rows = [r.to_row() for r in records]
    df = pd.DataFrame(rows, columns=list(COLUMNS))

    return df.astype({
        PATIENT_ID: "int64",
        AGE: "int64",
        GENDER: pd.CategoricalDtype(GENDER_ORDER, ordered=True),
        CONDITION: "object",
        PROCEDURE: "object",
        COST: "float64",
        LENGTH_OF_STAY: "int64",
        READMISSION: "bool",
        OUTCOME: pd.CategoricalDtype(OUTCOME_ORDER, ordered=True),
        SATISFACTION: "int64",
    })


def frame_to_records(df: pd.DataFrame) -> List[PatientRecord]:
    return [
        PatientRecord.from_mapping(row)
        for row in df[list(COLUMNS)].to_dict(orient="records")
    ]
