"""Hospital-analysis-specific exceptions."""


class HospitalAnalysisError(Exception):
    """Base class for every error raised by this package."""


class DataLoadError(HospitalAnalysisError):
    """Raised when an input file cannot be used at all.

    Missing files, unsupported formats and missing required columns end
    the run.  Individual bad rows never raise this; they are rejected and
    reported instead.
    """


class InvalidRecordError(HospitalAnalysisError, ValueError):
    """Raised when a single row cannot be turned into a PatientRecord."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class UnknownReportError(HospitalAnalysisError, ValueError):
    """Raised when a report name is not registered."""
