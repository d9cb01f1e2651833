# Overview: Service-layer operations for bulk customer import from spreadsheets.

"""
Customer Import

Supports Excel (.xlsx) and CSV uploads. The first row is the header:

    Name | Contact | Outstanding Amount | Due Date | Payment Status

Header matching ignores case and surrounding whitespace. Every data row is
inserted inside one transaction: if any row is malformed or any insert
fails, nothing is written.
"""

from __future__ import annotations

import csv
import io
import logging
import zipfile
from typing import IO, Any

from ..models import Customer
from ..validation import ImportFileError, ValidationError, customer_input_from_payload
from .customer_service import build_customer
from .storage import Storage


logger = logging.getLogger(__name__)


# Spreadsheet header -> POST /customers payload key
COLUMN_MAP = {
    "name": "name",
    "contact": "contact",
    "outstanding amount": "outstandingAmount",
    "due date": "dueDate",
    "payment status": "paymentStatus",
}
REQUIRED_COLUMNS = ("name", "outstanding amount", "due date")

EXCEL_EXTENSIONS = {"xlsx", "xlsm", "xltx", "xltm"}


class ImportRowError(Exception):
    """A data row could not be turned into a customer; the batch is rolled back."""

    def __init__(self, row_number: int, reason: str):
        self.row_number = row_number
        self.reason = reason
        super().__init__(f"Row {row_number}: {reason}")


def _read_excel(stream: IO[bytes]) -> list[list[Any]]:
    from openpyxl import load_workbook
    from openpyxl.utils.exceptions import InvalidFileException

    try:
        wb = load_workbook(stream, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, OSError, KeyError, ValueError) as e:
        raise ImportFileError(f"Unreadable spreadsheet: {e}")
    try:
        return [list(row) for row in wb.active.values]
    finally:
        wb.close()


def _read_csv(stream: IO[bytes]) -> list[list[Any]]:
    try:
        content = stream.read().decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ImportFileError("CSV file must be UTF-8 encoded")
    return [row for row in csv.reader(io.StringIO(content))]


def _cell_text(value: Any) -> Any:
    # Excel stores phone numbers typed as digits as floats
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def _is_blank(values: list[Any]) -> bool:
    return all(v is None or (isinstance(v, str) and not v.strip()) for v in values)


def parse_upload(filename: str, stream: IO[bytes]) -> list[dict[str, Any]]:
    """
    Turn an uploaded file into a list of payload dicts keyed like POST /customers.

    Each dict carries "row_number" (1-based spreadsheet row, header = 1).
    Blank rows are dropped.
    """
    ext = (filename or "").rsplit(".", 1)[-1].lower() if "." in (filename or "") else ""
    if ext in EXCEL_EXTENSIONS:
        table = _read_excel(stream)
    elif ext == "csv":
        table = _read_csv(stream)
    else:
        raise ImportFileError("Unsupported file format; upload an .xlsx or .csv spreadsheet")

    if not table or _is_blank(table[0]):
        raise ImportFileError("Spreadsheet is empty")

    headers = [str(h).strip().lower() if h is not None else "" for h in table[0]]
    missing = [col for col in REQUIRED_COLUMNS if col not in headers]
    if missing:
        raise ImportFileError(f"Missing column(s): {', '.join(c.title() for c in missing)}")

    rows = []
    for offset, values in enumerate(table[1:], start=2):
        if _is_blank(values):
            continue
        payload: dict[str, Any] = {"row_number": offset}
        for idx, header in enumerate(headers):
            key = COLUMN_MAP.get(header)
            if key is None or idx >= len(values):
                continue
            value = values[idx]
            payload[key] = _cell_text(value) if key in ("name", "contact", "paymentStatus") else value
        rows.append(payload)

    if not rows:
        raise ImportFileError("Spreadsheet has no data rows")
    return rows


def import_customers(storage: Storage, rows: list[dict[str, Any]]) -> list[Customer]:
    """
    Insert every row or none.

    Raises ImportRowError for the first malformed row and StorageError when
    the database rejects the batch; both leave the table untouched.
    """
    created = []
    with storage.transaction() as session:
        for idx, row in enumerate(rows, start=1):
            row_number = int(row.get("row_number") or idx)
            try:
                data = customer_input_from_payload(row)
            except ValidationError as e:
                raise ImportRowError(row_number, str(e))
            customer = build_customer(data)
            session.add(customer)
            created.append(customer)
        session.flush()

    logger.info("Imported %d customer(s)", len(created))
    return created
