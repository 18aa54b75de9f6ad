"""
Hospital Analysis

Descriptive reports over a flat table of hospital patient records.
"""

from .__version__ import __version__

# Keep package init lightweight: renderers (matplotlib, reportlab) are
# imported explicitly by the orchestrator.

from .core.loader import load_patients, load_frame, LoadResult, RejectedRecord
from .core.schema import PatientRecord, records_to_frame
from .reporting.registry import REPORTS, generate_reports, get_report

__all__ = [
    "__version__",
    "load_patients",
    "load_frame",
    "LoadResult",
    "RejectedRecord",
    "PatientRecord",
    "records_to_frame",
    "REPORTS",
    "generate_reports",
    "get_report",
]
