"""
app/parsers/file_parser.py

Turns a downloaded blob into a header tuple plus ordered data rows.

CSV rules: stdlib ``csv`` reader with a configurable delimiter and
double-quote escaping (quoted fields may hold the delimiter, doubled quotes
and line breaks). Values are trimmed and wholly blank lines are skipped and
never counted. XLSX files are read from their first worksheet with openpyxl.
Legacy XLS has no decoder and is rejected as an unsupported format.
"""

from __future__ import annotations

import csv
import io
import logging
import zipfile
from datetime import date, datetime, time
from pathlib import PurePosixPath
from typing import Any, Iterator

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from app.domain.import_job import ParsedFile, ParsedRow
from app.errors import EmptyFileError, FileLimitExceededError, UnsupportedFormatError

logger = logging.getLogger(__name__)


class FileFormat:
    CSV = "csv"
    XLSX = "xlsx"
    XLS = "xls"

    KNOWN = frozenset({CSV, XLSX, XLS})
    DECODABLE = frozenset({CSV, XLSX})


def resolve_file_format(file_name: str) -> str:
    """
    Map a file name or storage path to a FileFormat value by extension.
    """

    suffix = PurePosixPath(file_name.strip()).suffix.lower().lstrip(".")
    if suffix not in FileFormat.KNOWN:
        raise UnsupportedFormatError(
            f"Unsupported file extension '.{suffix}'. Use CSV or XLSX." if suffix
            else "File has no extension. Use CSV or XLSX.",
            details={"file_name": file_name},
        )
    return suffix


class FileParser:
    """
    Parses CSV and XLSX payloads under size and row limits.
    """

    def __init__(
        self,
        *,
        delimiter: str = ",",
        max_rows: int = 10_000,
        max_file_bytes: int = 10 * 1024 * 1024,
    ) -> None:
        if len(delimiter) != 1 or delimiter in {'"', "\r", "\n"}:
            raise ValueError(f"Invalid CSV delimiter: {delimiter!r}")
        self._delimiter = delimiter
        self._max_rows = max(1, max_rows)
        self._max_file_bytes = max(1, max_file_bytes)

    def parse(self, blob: bytes, *, file_format: str) -> ParsedFile:
        if len(blob) > self._max_file_bytes:
            raise FileLimitExceededError(
                f"File exceeds the maximum size of {self._max_file_bytes} bytes.",
                details={"file_size_bytes": len(blob), "max_file_bytes": self._max_file_bytes},
            )

        if file_format not in FileFormat.DECODABLE:
            raise UnsupportedFormatError(
                f"No decoder available for '{file_format}' files. Use CSV or XLSX.",
                details={"file_format": file_format},
            )

        if file_format == FileFormat.CSV:
            records = self._iter_csv_records(self._decode_text(blob))
        else:
            records = self._iter_xlsx_records(blob)

        return self._build_parsed_file(records)

    def _build_parsed_file(self, records: Iterator[list[str]]) -> ParsedFile:
        header_record = next(records, None)
        if header_record is None:
            raise EmptyFileError("File is empty.")

        headers = tuple(header.strip().lower() for header in header_record)
        rows: list[ParsedRow] = []
        for row_number, values in enumerate(records, start=1):
            if row_number > self._max_rows:
                raise FileLimitExceededError(
                    f"File exceeds the maximum of {self._max_rows} data rows.",
                    details={"max_rows": self._max_rows},
                )
            rows.append(ParsedRow(row_number=row_number, values=tuple(values), headers=headers))

        if not rows:
            raise EmptyFileError("File has a header row but no data rows.")

        logger.debug("Parsed file headers=%s rows=%d", headers, len(rows))
        return ParsedFile(headers=headers, rows=rows)

    @staticmethod
    def _decode_text(blob: bytes) -> str:
        try:
            return blob.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise UnsupportedFormatError(
                "CSV must be UTF-8 encoded.",
                details={"byte_offset": exc.start},
            ) from exc

    def _iter_csv_records(self, text: str) -> Iterator[list[str]]:
        reader = csv.reader(
            io.StringIO(text, newline=""), delimiter=self._delimiter, skipinitialspace=True, strict=True
        )
        try:
            for record in reader:
                values = [value.strip() for value in record]
                if not any(values):
                    continue
                yield values
        except csv.Error as exc:
            raise UnsupportedFormatError(
                f"Invalid CSV format at line {reader.line_num}: {exc}",
                details={"line": reader.line_num},
            ) from exc

    def _iter_xlsx_records(self, blob: bytes) -> Iterator[list[str]]:
        try:
            workbook = load_workbook(io.BytesIO(blob), read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as exc:
            raise UnsupportedFormatError(
                f"File is not a readable XLSX workbook: {exc}",
            ) from exc

        try:
            if not workbook.worksheets:
                return
            sheet = workbook.worksheets[0]
            width: int | None = None
            for raw_values in sheet.iter_rows(values_only=True):
                values = [_cell_to_text(value) for value in raw_values]
                if not any(values):
                    continue
                if width is None:
                    while values and not values[-1]:
                        values.pop()
                    width = len(values)
                else:
                    # Trailing empty cells past the header are layout, not data.
                    while len(values) > width and not values[-1]:
                        values.pop()
                yield values
        finally:
            workbook.close()


def _cell_to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


def parse_file(
    blob: bytes,
    file_format: str,
    delimiter: str = ",",
    *,
    max_rows: int = 10_000,
    max_file_bytes: int = 10 * 1024 * 1024,
) -> ParsedFile:
    """
    Convenience wrapper around FileParser for one-off parsing.
    """

    parser = FileParser(delimiter=delimiter, max_rows=max_rows, max_file_bytes=max_file_bytes)
    return parser.parse(blob, file_format=file_format)
