"""
Concept2 webhook event schemas.

The raw payload is validated into one of two tagged variants before
anything else happens; an unknown `type` is a validation error.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from app.features.concept2.schemas import Concept2Result


class WebhookValidationError(Exception):
    """Malformed webhook payload. Answered with 400, never retried."""
    pass


class AddedResult(Concept2Result):
    """Result carried by a `result-added` event; owner and time are required."""

    user_id: str
    time: int = Field(..., gt=0)


class ResultAdded(BaseModel):
    type: Literal["result-added"]
    result: AddedResult

    model_config = ConfigDict(extra="ignore")


class ResultDeleted(BaseModel):
    type: Literal["result-deleted"]
    result_id: str

    model_config = ConfigDict(extra="ignore")

    @field_validator("result_id", mode="before")
    @classmethod
    def coerce_result_id(cls, v):
        if v is None or v == "":
            raise ValueError("result_id must not be empty")
        if isinstance(v, bool) or not isinstance(v, (str, int)):
            raise ValueError("result_id must be a string or integer")
        return str(v)


WebhookEvent = Annotated[
    Union[ResultAdded, ResultDeleted],
    Field(discriminator="type"),
]

_event_adapter = TypeAdapter(WebhookEvent)


def parse_event(payload) -> ResultAdded | ResultDeleted:
    """
    Validate a decoded JSON body into a webhook event.

    Raises:
        WebhookValidationError: Unknown type, missing or malformed fields
    """
    if not isinstance(payload, dict):
        raise WebhookValidationError("Payload must be a JSON object")
    try:
        return _event_adapter.validate_python(payload)
    except ValidationError as e:
        fields = ", ".join(
            ".".join(str(part) for part in err["loc"]) or "payload"
            for err in e.errors()
        )
        raise WebhookValidationError(f"Invalid webhook payload: {fields}") from e
