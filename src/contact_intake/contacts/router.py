"""
Contact API router.
"""

from json import JSONDecodeError
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import PlainTextResponse

from contact_intake.contacts.schemas import ContactResponse
from contact_intake.contacts.service import ContactService
from contact_intake.contacts.validation import RECORD_FIELDS
from contact_intake.shared.exceptions import ValidationError
from contact_intake.shared.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["contacts"])


def get_contact_service(request: Request) -> ContactService:
    """Dependency for contact service, built on the app's storage gateway."""
    return ContactService(
        gateway=request.app.state.gateway,
        csv_path=request.app.state.settings.csv_import_path,
    )


async def _read_submission(request: Request) -> dict[str, Any]:
    """Extract the record fields from a URL-encoded, multipart or JSON body."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except (JSONDecodeError, UnicodeDecodeError) as exc:
            raise ValidationError("Invalid data submitted. Malformed JSON body.") from exc
        if not isinstance(body, dict):
            raise ValidationError("Invalid data submitted. Expected a JSON object.")
    else:
        body = await request.form()
    return {field: body.get(field) for field in RECORD_FIELDS}


@router.post(
    "/submit-form",
    response_class=PlainTextResponse,
    status_code=status.HTTP_200_OK,
    summary="Submit a contact record",
)
async def submit_form(
    request: Request,
    service: Annotated[ContactService, Depends(get_contact_service)],
) -> PlainTextResponse:
    """Validate and store one contact.

    Returns:
        200 on success, 400 if any field is invalid, 500 on storage failure.
    """
    data = await _read_submission(request)
    await service.submit(data)
    return PlainTextResponse("Data submitted successfully.")


@router.get(
    "/import-csv",
    response_class=PlainTextResponse,
    summary="Import contacts from the configured CSV file",
)
async def import_csv(
    service: Annotated[ContactService, Depends(get_contact_service)],
) -> PlainTextResponse:
    """Import every valid row of the CSV file.

    Returns:
        Plain-text summary of imported records and rejected row numbers.
    """
    result = await service.import_csv()
    return PlainTextResponse(result.summary())


@router.get(
    "/records",
    response_model=list[ContactResponse],
    summary="List recent contacts",
)
async def list_records(
    service: Annotated[ContactService, Depends(get_contact_service)],
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> list[ContactResponse]:
    records = await service.list_recent(limit)
    return [ContactResponse.model_validate(r) for r in records]
