"""
CSV reading and row extraction for contact imports.
"""

import csv
import io
import re
from pathlib import Path
from typing import Generator

from contact_intake.contacts.validation import RECORD_FIELDS
from contact_intake.shared.exceptions import InputSourceError
from contact_intake.shared.logging import get_logger

logger = get_logger(__name__)

# Header aliases for flexibility
HEADER_ALIASES: dict[str, str] = {
    "firstname": "first_name",
    "forename": "first_name",
    "given_name": "first_name",
    "secondname": "second_name",
    "last_name": "second_name",
    "lastname": "second_name",
    "surname": "second_name",
    "mail": "email",
    "e_mail": "email",
    "email_address": "email",
    "phone": "phone_number",
    "telephone": "phone_number",
    "mobile": "phone_number",
    "postcode": "eircode",
    "postal_code": "eircode",
}


def normalize_header(header: str) -> str:
    """Normalize a CSV header to standard field name.

    Args:
        header: Raw header string.

    Returns:
        Normalized header name.
    """
    h = header.strip().lower()
    h = h.replace(" ", "_")
    h = h.replace("-", "_")
    h = re.sub(r"__+", "_", h)
    return HEADER_ALIASES.get(h, h)


def read_source(path: Path | str) -> bytes:
    """Read the raw bytes of an import file.

    Raises:
        InputSourceError: 404 if the file does not exist, 500 on any other
            read failure.
    """
    path = Path(path)
    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise InputSourceError(f"CSV file not found: {path.name}", status_code=404) from exc
    except OSError as exc:
        logger.error("CSV read error", extra={"path": str(path), "error": str(exc)})
        raise InputSourceError("Error reading CSV file.", status_code=500) from exc


class CSVParser:
    """Parser for contact CSV files."""

    def __init__(
        self,
        delimiter: str = ",",
        encoding: str = "utf-8-sig",
    ) -> None:
        """Initialize CSV parser.

        Args:
            delimiter: CSV field delimiter.
            encoding: File encoding; the default also strips a UTF-8 BOM.
        """
        self.delimiter = delimiter
        self.encoding = encoding

    def parse(
        self,
        content: bytes,
    ) -> Generator[tuple[int, dict[str, str | None]], None, None]:
        """Parse CSV content and yield one record mapping per data row.

        Values are passed through untouched; a column missing from the header
        yields None for that field.

        Args:
            content: Raw CSV file content.

        Yields:
            Tuples of (row_number, record). The header is row 1.

        Raises:
            InputSourceError: If the content cannot be decoded or parsed.
        """
        try:
            text = content.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise InputSourceError(f"File encoding error: {e}", status_code=500) from e

        reader = csv.DictReader(io.StringIO(text, newline=""), delimiter=self.delimiter)

        if reader.fieldnames is None:
            return

        normalized_headers = {normalize_header(h): h for h in reader.fieldnames}
        missing = [f for f in RECORD_FIELDS if f not in normalized_headers]
        if missing:
            logger.warning(
                "CSV is missing contact columns; affected rows will be rejected",
                extra={"missing_headers": missing},
            )

        try:
            for row_number, row in enumerate(reader, start=2):
                yield row_number, {
                    field: row.get(normalized_headers[field]) if field in normalized_headers else None
                    for field in RECORD_FIELDS
                }
        except csv.Error as e:
            raise InputSourceError(f"Malformed CSV: {e}", status_code=500) from e
