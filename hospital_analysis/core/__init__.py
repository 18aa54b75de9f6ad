from .exceptions import (
    HospitalAnalysisError,
    DataLoadError,
    InvalidRecordError,
    UnknownReportError,
)
from .schema import PatientRecord, Gender, Outcome, COLUMNS, records_to_frame

__all__ = [
    "HospitalAnalysisError",
    "DataLoadError",
    "InvalidRecordError",
    "UnknownReportError",
    "PatientRecord",
    "Gender",
    "Outcome",
    "COLUMNS",
    "records_to_frame",
]
