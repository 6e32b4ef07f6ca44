"""
Contact service for business logic.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Sequence

from contact_intake.contacts.csv_parser import CSVParser, read_source
from contact_intake.contacts.gateway import StorageGatewayProtocol
from contact_intake.contacts.models import ContactRecord
from contact_intake.contacts.schemas import ContactCreate, ImportResult
from contact_intake.contacts.validation import RECORD_FIELDS, invalid_fields
from contact_intake.shared.exceptions import (
    ImportInterruptedError,
    StorageUnavailableError,
    ValidationError,
)
from contact_intake.shared.logging import get_logger

logger = get_logger(__name__)


class ContactService:
    """Service for contact intake operations."""

    def __init__(
        self,
        gateway: StorageGatewayProtocol,
        csv_path: Path | str = Path("data.csv"),
        parser: CSVParser | None = None,
    ) -> None:
        """Initialize contact service.

        Args:
            gateway: Storage gateway.
            csv_path: File read by import_csv when no path is given.
            parser: Optional CSV parser (for DI).
        """
        self._gateway = gateway
        self._csv_path = Path(csv_path)
        self._parser = parser or CSVParser()

    async def submit(self, data: Mapping[str, Any]) -> ContactRecord:
        """Validate and store a single submitted record.

        Args:
            data: Raw field mapping from a form or JSON body.

        Returns:
            The stored record.

        Raises:
            ValidationError: If any field fails validation. Storage is not touched.
            SchemaError: If the table could not be provisioned.
            StorageUnavailableError: If the insert failed.
        """
        failed = invalid_fields(data)
        if failed:
            logger.info("Submission rejected", extra={"invalid_fields": failed})
            raise ValidationError(fields=failed)

        await self._gateway.ensure_schema()
        return await self._gateway.insert(
            ContactCreate(**{field: data[field] for field in RECORD_FIELDS})
        )

    async def import_csv(self, path: Path | str | None = None) -> ImportResult:
        """Import contacts from a CSV file.

        Every row is validated first; valid rows are then inserted one at a
        time, in file order. Invalid rows are skipped and reported by row
        number. If an insert fails, rows already inserted remain.

        Args:
            path: CSV file; defaults to the configured import path.

        Returns:
            Imported count and rejected row numbers.

        Raises:
            InputSourceError: If the file is missing or unreadable.
            SchemaError: If the table could not be provisioned.
            ImportInterruptedError: If an insert failed partway through.
        """
        source = Path(path) if path is not None else self._csv_path
        content = read_source(source)

        valid_records: list[ContactCreate] = []
        error_rows: list[int] = []
        for row_number, row in self._parser.parse(content):
            if invalid_fields(row):
                error_rows.append(row_number)
            else:
                valid_records.append(ContactCreate(**row))

        await self._gateway.ensure_schema()

        imported = 0
        for record in valid_records:
            try:
                await self._gateway.insert(record)
            except StorageUnavailableError as exc:
                logger.error(
                    "CSV import interrupted",
                    extra={
                        "source": str(source),
                        "imported_count": imported,
                        "remaining": len(valid_records) - imported,
                    },
                )
                raise ImportInterruptedError(imported) from exc
            imported += 1

        result = ImportResult(imported_count=imported, error_rows=error_rows)
        logger.info(
            "CSV import completed",
            extra={
                "source": str(source),
                "imported_count": imported,
                "rejected_count": len(error_rows),
            },
        )
        return result

    async def list_recent(self, limit: int = 10) -> Sequence[ContactRecord]:
        return await self._gateway.list_recent(limit)
