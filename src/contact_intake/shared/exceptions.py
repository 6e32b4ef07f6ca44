"""
Shared exceptions.

Every failure a request can hit is one of these; the application maps each to
an HTTP status at the request boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(eq=False)
class AppError(Exception):
    message: str = "Application error"
    details: Optional[dict[str, Any]] = None

    def __str__(self) -> str:
        return self.message


class ValidationError(AppError):
    """One or more record fields failed their predicate."""

    def __init__(self, message: str = "Invalid data submitted.", fields: list[str] | None = None) -> None:
        super().__init__(message=message, details={"fields": list(fields or [])})

    @property
    def fields(self) -> list[str]:
        return (self.details or {}).get("fields", [])


class StorageError(AppError):
    pass


class StorageUnavailableError(StorageError):
    pass


class ImportInterruptedError(StorageUnavailableError):
    """A batch import stopped partway; earlier rows stay inserted."""

    def __init__(self, imported_count: int) -> None:
        super().__init__(
            message=(
                "Server error during CSV import. "
                f"Imported {imported_count} records before the failure."
            ),
            details={"imported_count": imported_count},
        )

    @property
    def imported_count(self) -> int:
        return (self.details or {}).get("imported_count", 0)


class SchemaError(StorageError):
    pass


class InputSourceError(AppError):
    def __init__(self, message: str = "Error reading CSV file.", status_code: int = 500) -> None:
        super().__init__(message=message, details={"status_code": status_code})

    @property
    def status_code(self) -> int:
        return (self.details or {}).get("status_code", 500)
