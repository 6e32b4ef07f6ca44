"""
Pydantic schemas for contact records.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ContactCreate(BaseModel):
    """A validated record ready to be inserted."""

    first_name: str
    second_name: str
    email: str
    phone_number: str
    eircode: str


class ContactResponse(BaseModel):
    """Schema for a stored contact."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    second_name: str
    email: str
    phone_number: str
    eircode: str
    created_at: datetime | None


class ImportResult(BaseModel):
    """Outcome of a CSV import."""

    imported_count: int = Field(..., ge=0)
    error_rows: list[int] = Field(
        default_factory=list,
        description="Row numbers (header is row 1) that failed validation",
    )

    def summary(self) -> str:
        errors = ", ".join(str(row) for row in self.error_rows) or "None"
        return f"Imported {self.imported_count} records. Errors: {errors}"
