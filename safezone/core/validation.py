"""Request validation - Pure functions.

Validates inbound payloads with pydantic models and converts failures
into ValidationError with a field-level breakdown.
"""

from typing import Annotated, Any

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from safezone.core.errors import ValidationError


class NotifyRequest(BaseModel):
    """Body of a notify-subscribers request.

    JSON has a single number type, so an integral float such as 4.0 is
    accepted as 4. Booleans, strings and fractional numbers are not.
    """
    report_id: int = Field(gt=0)

    @field_validator("report_id", mode="before")
    @classmethod
    def report_id_must_be_integral(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise PydanticCustomError("int_type", "Input should be a valid integer")
        if isinstance(value, float):
            if not value.is_integer():
                raise PydanticCustomError(
                    "int_from_float",
                    "Input should be a valid integer, got a number with a fractional part",
                )
            return int(value)
        return value


class ScoresRequest(BaseModel):
    """Query of a report-scores request. None means all reports."""
    report_ids: list[Annotated[int, Field(gt=0)]] | None = None


def flatten_errors(exc: PydanticValidationError) -> dict[str, Any]:
    """Flatten pydantic errors into form-level and field-level messages.

    Pure function.

    Args:
        exc: Pydantic validation error

    Returns:
        {"formErrors": [...], "fieldErrors": {field: [messages]}}
    """
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = {}

    for error in exc.errors():
        loc = error.get("loc") or ()
        message = error.get("msg", "Invalid value")
        if not loc:
            form_errors.append(message)
        else:
            field_errors.setdefault(str(loc[0]), []).append(message)

    return {"formErrors": form_errors, "fieldErrors": field_errors}


def form_error(message: str) -> ValidationError:
    """Build a ValidationError that is not tied to a field."""
    return ValidationError({"formErrors": [message], "fieldErrors": {}})


def parse_notify_request(body: Any) -> int:
    """Validate a notify request body and return its report id.

    Pure function.

    Args:
        body: Decoded JSON body

    Returns:
        The validated report id

    Raises:
        ValidationError: If report_id is missing, not an integer, or not positive
    """
    try:
        request = NotifyRequest.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError(flatten_errors(e)) from e

    return request.report_id


def validate_report_id(report_id: Any) -> int:
    """Validate a bare report id. Same rules as parse_notify_request."""
    return parse_notify_request({"report_id": report_id})


def parse_scores_request(raw_ids: str | None) -> list[int] | None:
    """Parse a comma-separated report_ids query parameter.

    Pure function.

    Args:
        raw_ids: Raw parameter value, e.g. "3,7,12"

    Returns:
        List of report ids, or None when the parameter is absent or blank

    Raises:
        ValidationError: If any id is not a positive integer
    """
    if raw_ids is None or not raw_ids.strip():
        return None

    parts = [p.strip() for p in raw_ids.split(",") if p.strip()]

    try:
        request = ScoresRequest.model_validate({"report_ids": parts})
    except PydanticValidationError as e:
        raise ValidationError(flatten_errors(e)) from e

    return request.report_ids
