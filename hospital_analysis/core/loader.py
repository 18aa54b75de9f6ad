"""
Load a patients table from disk into the typed report frame.

Structural problems (missing file, unsupported or unparseable format,
missing columns) raise DataLoadError.  Row-level problems, including CSV
lines with the wrong number of fields, never abort the load: the row is
rejected, logged and returned in LoadResult.rejected.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from zipfile import BadZipFile

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from hospital_analysis.core.cleaner import normalize_columns, summarize_quality
from hospital_analysis.core.column_resolver import resolve_columns
from hospital_analysis.core.exceptions import DataLoadError, InvalidRecordError
from hospital_analysis.core.schema import (
    COLUMNS,
    PATIENT_ID,
    PatientRecord,
    records_to_frame,
)

logger = logging.getLogger(__name__)

SUPPORTED_EXT = (".csv", ".xlsx")


@dataclass(frozen=True)
class RejectedRecord:
    row_number: int          # 1-based data row, header excluded
    patient_id: Optional[Any]
    field: str
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "row_number": self.row_number,
            "patient_id": self.patient_id,
            "field": self.field,
            "reason": self.reason,
        }


@dataclass
class LoadResult:
    frame: pd.DataFrame
    rejected: List[RejectedRecord] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)

    @property
    def record_count(self) -> int:
        return len(self.frame)


# -------------------------------------------------
# READ
# -------------------------------------------------

# Stands in for a CSV line that has more fields than the header
_RAGGED = "\x00ragged"

_UNREADABLE = (
    pd.errors.EmptyDataError,
    pd.errors.ParserError,
    ValueError,
    BadZipFile,
    InvalidFileException,
)


def _parse_csv(path: Path, encoding: str):
    extra_widths: List[int] = []

    def flag_ragged(bad_line):
        extra_widths.append(len(bad_line))
        return [_RAGGED]

    # header=None keeps the header as row 0, so row position == line - 1
    raw = pd.read_csv(
        path,
        header=None,
        dtype=object,
        keep_default_na=False,
        skip_blank_lines=False,
        engine="python",
        on_bad_lines=flag_ragged,
        encoding=encoding,
    )
    return raw, extra_widths


def _split_ragged(raw: pd.DataFrame, extra_widths: List[int]):
    """
    Separate rows whose field count differs from the header.

    Short rows come back padded with None, long rows as the _RAGGED marker.
    Returns (frame indexed by data row number, rejected).
    """
    header = ["" if pd.isna(v) else str(v) for v in raw.iloc[0]]
    body = raw.iloc[1:]

    blank = body.isna().all(axis=1)
    body = body[~blank]

    long_rows = body.iloc[:, 0].eq(_RAGGED)
    short_rows = body.isna().any(axis=1) & ~long_rows
    widths = iter(extra_widths)

    rejected: List[RejectedRecord] = []
    for row_number in body.index[long_rows | short_rows]:
        if long_rows.loc[row_number]:
            seen = next(widths)
        else:
            seen = int(body.loc[row_number].notna().sum())
        rejected.append(
            RejectedRecord(
                int(row_number),
                None,
                "row",
                f"wrong field count: expected {len(header)}, saw {seen} (line {row_number + 1})",
            )
        )

    good = body[~(long_rows | short_rows)]
    frame = pd.DataFrame(good.to_numpy(), columns=header, index=good.index).astype(str)
    return frame, rejected


def _read_csv(path: Path):
    try:
        return _parse_csv(path, "utf-8")
    except UnicodeDecodeError:
        logger.warning("%s is not UTF-8, retrying as latin1", path.name)
        return _parse_csv(path, "latin1")


def read_table(path: str | Path) -> Tuple[pd.DataFrame, List[RejectedRecord]]:
    """
    Read a patients file as raw text columns.

    Returns (frame, rejected): the frame is indexed by 1-based data row
    number; rejected holds CSV lines with the wrong number of fields.
    """
    path = Path(path)
    if not path.exists():
        raise DataLoadError(f"Input file not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXT:
        raise DataLoadError(
            f"Unsupported input type '{suffix}' (expected one of {', '.join(SUPPORTED_EXT)})"
        )

    # Keep raw text; PatientRecord does the typing
    try:
        if suffix == ".csv":
            frame, rejected = _split_ragged(*_read_csv(path))
        else:
            frame = pd.read_excel(path, dtype=str, keep_default_na=False)
            frame.index = pd.RangeIndex(1, len(frame) + 1)
            rejected = []
    except _UNREADABLE as exc:
        raise DataLoadError(f"Could not parse {path.name}: {exc}") from exc

    for item in rejected:
        logger.warning("Skipping row %d: %s", item.row_number, item.reason)

    return frame, rejected


# -------------------------------------------------
# VALIDATE
# -------------------------------------------------

def canonicalize(raw_df: pd.DataFrame) -> pd.DataFrame:
    """
    Rename source columns to canonical names and keep only those.
    Raises DataLoadError listing every canonical column that is missing.
    """
    df = normalize_columns(raw_df)
    mapping = resolve_columns(df)

    missing = [name for name, source in mapping.items() if source is None]
    if missing:
        raise DataLoadError(f"Missing required columns: {', '.join(missing)}")

    renamed = df.rename(columns={source: name for name, source in mapping.items()})
    return renamed[list(COLUMNS)]


def validate_rows(df: pd.DataFrame):
    """
    Convert canonical rows into records.

    Rows are numbered by the frame index.  Returns (records, rejected).
    Later rows that repeat an already accepted patient_id are rejected
    as duplicates.
    """
    records: List[PatientRecord] = []
    rejected: List[RejectedRecord] = []
    seen_ids = set()

    for row_number, row in zip(df.index, df.to_dict(orient="records")):
        row_number = int(row_number)
        raw_id = row.get(PATIENT_ID)
        try:
            record = PatientRecord.from_mapping(row)
        except InvalidRecordError as exc:
            rejected.append(RejectedRecord(row_number, raw_id or None, exc.field, str(exc)))
            continue

        if record.patient_id in seen_ids:
            rejected.append(
                RejectedRecord(
                    row_number,
                    record.patient_id,
                    PATIENT_ID,
                    f"{PATIENT_ID}: duplicate id {record.patient_id}",
                )
            )
            continue

        seen_ids.add(record.patient_id)
        records.append(record)

    for item in rejected:
        logger.warning("Skipping row %d: %s", item.row_number, item.reason)

    return records, rejected


# -------------------------------------------------
# PUBLIC ENTRY
# -------------------------------------------------

def load_frame(
    raw_df: pd.DataFrame,
    read_rejected: Optional[List[RejectedRecord]] = None,
) -> LoadResult:
    """
    Validate an in-memory table (already read) into a LoadResult.

    A default 0-based index is renumbered from 1.  read_rejected holds
    rows the reader already dropped; they join the same rejected list.
    """
    if isinstance(raw_df.index, pd.RangeIndex) and raw_df.index.start == 0:
        raw_df = raw_df.set_axis(pd.RangeIndex(1, len(raw_df) + 1), axis=0)

    canonical = canonicalize(raw_df)
    records, invalid = validate_rows(canonical)
    rejected = sorted([*(read_rejected or []), *invalid], key=lambda r: r.row_number)
    frame = records_to_frame(records)

    logger.info(
        "Loaded %d patient records (%d rejected)", len(frame), len(rejected)
    )

    return LoadResult(
        frame=frame,
        rejected=rejected,
        summary=summarize_quality(canonical, frame, rejected),
    )


def load_patients(path: str | Path) -> LoadResult:
    """Read and validate a patients file (.csv or .xlsx)."""
    logger.info("Reading %s", path)
    raw_df, read_rejected = read_table(path)
    return load_frame(raw_df, read_rejected)
