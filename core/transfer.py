"""
Bulk Transfer Engine

Imports records from a spreadsheet/CSV file through a RecordStore and
exports a store's records to CSV or XLSX.

Import row policy: skip and report. Every row is created on its own;
a row that fails validation is skipped and listed in the result with
its spreadsheet line number, the other rows are stored.
"""
import io
import math
from datetime import date, datetime
from enum import Enum
from pathlib import PurePath

import pandas as pd
from sqlmodel import Session, SQLModel

from core.config import get_settings
from core.errors import FormatError, RecordValidationError
from core.logger import logger
from core.records import RecordStore

IMPORT_FORMATS = ("xls", "xlsx", "csv")
EXPORT_FORMATS = ("csv", "xlsx")

EXCEL_ENGINES = {"xlsx": "openpyxl", "xls": "xlrd"}

MEDIA_TYPES = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


class RowError(SQLModel):
    """Why a row of an import file was skipped"""
    row: int
    errors: list[dict]


class ImportResult(SQLModel):
    """Outcome of an import"""
    imported: int = 0
    skipped: int = 0
    errors: list[RowError] = []


def detect_format(filename: str | None) -> str:
    """
    Format of an import file from its extension.
    Raises FormatError for anything outside IMPORT_FORMATS.
    """
    extension = PurePath(filename or "").suffix.lower().lstrip(".")
    if extension not in IMPORT_FORMATS:
        raise FormatError(
            f"The file must be a file of type: {', '.join(IMPORT_FORMATS)}."
        )
    return extension


def read_rows(data: bytes, file_format: str) -> list[dict]:
    """
    Parse a tabular file into one dict per row.
    Header names are trimmed and lower-cased, empty cells become None.
    """
    buffer = io.BytesIO(data)
    try:
        if file_format == "csv":
            frame = pd.read_csv(
                buffer, dtype=str, keep_default_na=False, encoding="utf-8-sig"
            )
        else:
            frame = pd.read_excel(
                buffer, dtype=object, engine=EXCEL_ENGINES[file_format]
            )
    except pd.errors.EmptyDataError:
        return []
    except Exception as exc:
        raise FormatError(f"Could not read the {file_format} file: {exc}") from exc

    frame.columns = [str(column).strip().lower() for column in frame.columns]
    return [
        {column: _cell(value) for column, value in row.items()}
        for row in frame.to_dict(orient="records")
    ]


def _cell(value):
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if value is pd.NaT:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def import_records(
    session: Session,
    store: RecordStore,
    data: bytes,
    filename: str | None,
) -> ImportResult:
    """
    Create one record per row of the file.
    The format is checked before any row is read.
    """
    file_format = detect_format(filename)
    rows = read_rows(data, file_format)

    if rows and not set(rows[0]) & set(store.schema.names):
        raise FormatError(
            f"The file has none of the expected columns: {', '.join(store.schema.names)}."
        )

    max_rows = get_settings().IMPORT_MAX_ROWS
    result = ImportResult()
    if len(rows) > max_rows:
        result.skipped = len(rows) - max_rows
        result.errors.append(RowError(
            row=max_rows + 2,
            errors=[{"field": "file", "message": f"Import is limited to {max_rows} rows."}],
        ))
        rows = rows[:max_rows]

    # Line 1 of the sheet is the header
    for line, row in enumerate(rows, start=2):
        if all(value is None for value in row.values()):
            continue
        try:
            store.create(session, row)
        except RecordValidationError as exc:
            result.skipped += 1
            result.errors.append(RowError(row=line, errors=exc.errors))
        else:
            result.imported += 1

    logger.info(
        "Imported %d %s records from %s (%d skipped)",
        result.imported, store.label, filename, result.skipped,
    )
    return result


def export_columns(store: RecordStore) -> list[str]:
    return ["id", *store.schema.names]


def export_records(session: Session, store: RecordStore, file_format: str = "csv") -> bytes:
    """
    Serialize every record of the store, oldest first,
    columns in export_columns() order.
    """
    if file_format not in EXPORT_FORMATS:
        raise FormatError(
            f"Export format must be one of: {', '.join(EXPORT_FORMATS)}."
        )

    columns = export_columns(store)
    rows = [
        [_export_value(getattr(record, column)) for column in columns]
        for record in store.all(session)
    ]
    frame = pd.DataFrame(rows, columns=columns, dtype=object)

    if file_format == "csv":
        content = frame.to_csv(index=False).encode("utf-8")
    else:
        buffer = io.BytesIO()
        frame.to_excel(buffer, index=False, engine="openpyxl")
        content = buffer.getvalue()

    logger.info("Exported %d %s records as %s", len(rows), store.label, file_format)
    return content


def _export_value(value):
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value
